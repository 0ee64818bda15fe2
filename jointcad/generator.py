"""
Joint generator - end-to-end pipeline from configuration to mesh files.

Validates the configuration, builds the assembly and its parts, applies
material shrinkage compensation and exports meshes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional
from enum import Enum
import json
import logging
import time

from build123d import Shape

from . import geometry
from .assembly import complete_joint_assembly
from .cache import ComponentCache
from .config import JointConfig
from .constraints import ConstraintValidator, Violation
from .errors import JointError, ValidationViolation
from .geometry import MeshAlgorithm
from .registry import ComponentRegistry, default_registry


logger = logging.getLogger(__name__)

ASSEMBLY_NAME = "joint_assembly"


class GenerationStatus(Enum):
    """Status of joint generation."""
    SUCCESS = "success"
    SUCCESS_WITH_WARNINGS = "success_with_warnings"
    FAILED = "failed"


@dataclass
class GenerationResult:
    """Result of one generation run."""
    status: GenerationStatus
    config: JointConfig
    output_paths: List[Path] = field(default_factory=list)
    violations: List[Violation] = field(default_factory=list)
    error_message: Optional[str] = None
    generation_time_ms: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/serialization."""
        return {
            'status': self.status.value,
            'material': self.config.material.name,
            'config_fingerprint': self.config.fingerprint(),
            'output_paths': [str(p) for p in self.output_paths],
            'violations': [v.to_dict() for v in self.violations],
            'error': self.error_message,
            'generation_time_ms': self.generation_time_ms,
        }


def render_component(
    solid: Shape,
    path: Path,
    cfg: JointConfig,
    algorithm: MeshAlgorithm = MeshAlgorithm.MARCHING_CUBES_OCTREE,
) -> Path:
    """Scale ``solid`` for material shrinkage and export it."""
    scaled = geometry.scale(solid, cfg.material.shrinkage_factor)
    return geometry.render_to_file(scaled, path, cfg.mesh_resolution, algorithm)


def build_parts(
    cfg: JointConfig,
    registry: Optional[ComponentRegistry] = None,
    cache: Optional[ComponentCache] = None,
) -> Dict[str, Shape]:
    """Build every registered part, optionally memoised per configuration."""
    registry = registry or default_registry()
    parts = {}
    fingerprint = cfg.fingerprint()
    for name in registry.list():
        logger.info(f"Building {name}...")
        if cache is None:
            parts[name] = registry.build(name, cfg)
        else:
            parts[name] = cache.get_or_build(
                f"{fingerprint}:{name}", lambda name=name: registry.build(name, cfg)
            )
    return parts


def export_individual_components(
    cfg: JointConfig,
    output_dir: Path,
    registry: Optional[ComponentRegistry] = None,
    algorithm: MeshAlgorithm = MeshAlgorithm.MARCHING_CUBES_OCTREE,
    suffix: str = ".stl",
) -> List[Path]:
    """Export each part separately for manufacturing."""
    parts = build_parts(cfg, registry)
    return _export_all(parts, Path(output_dir), cfg, algorithm, suffix)


def _export_all(
    solids: Dict[str, Shape],
    output_dir: Path,
    cfg: JointConfig,
    algorithm: MeshAlgorithm,
    suffix: str,
) -> List[Path]:
    """Export every solid; on failure remove the files already written."""
    written: List[Path] = []
    try:
        for name, solid in solids.items():
            path = output_dir / f"{name}{suffix}"
            logger.info(f"Rendering {path.name}...")
            written.append(render_component(solid, path, cfg, algorithm))
    except Exception:
        for path in written:
            if path.exists():
                path.unlink()
        raise
    return written


def generate_joint(
    cfg: JointConfig,
    output_dir: Path,
    strict: bool = False,
    parts: bool = True,
    algorithm: MeshAlgorithm = MeshAlgorithm.MARCHING_CUBES_OCTREE,
    validator: Optional[ConstraintValidator] = None,
    registry: Optional[ComponentRegistry] = None,
    cache: Optional[ComponentCache] = None,
    suffix: str = ".stl",
) -> GenerationResult:
    """
    Generate mesh files for one joint.

    Pipeline:
    1. Validate configuration (violations are warnings unless strict)
    2. Build the complete assembly and, if requested, each part
    3. Scale for shrinkage and export

    Everything is built before the first file is written, so a failed
    build leaves no output behind.
    """
    start_time = time.perf_counter()
    validator = validator or ConstraintValidator()
    output_dir = Path(output_dir)

    def elapsed() -> float:
        return (time.perf_counter() - start_time) * 1000

    # Stage 1: Constraint validation
    violations = validator.validate(cfg)
    if violations:
        if strict:
            error = ValidationViolation(violations)
            logger.error(str(error))
            return GenerationResult(
                status=GenerationStatus.FAILED,
                config=cfg,
                violations=violations,
                error_message=str(error),
                generation_time_ms=elapsed(),
            )
        for v in violations:
            logger.warning(f"Constraint violated - {v}")

    # Stage 2: Build geometry
    try:
        logger.info("Building complete assembly...")
        solids = {ASSEMBLY_NAME: complete_joint_assembly(cfg)}
        if parts:
            solids.update(build_parts(cfg, registry, cache))
    except JointError as e:
        logger.error(f"Geometry construction failed: {e}")
        return GenerationResult(
            status=GenerationStatus.FAILED,
            config=cfg,
            violations=violations,
            error_message=f"Geometry construction failed: {e}",
            generation_time_ms=elapsed(),
        )

    # Stage 3: Export
    try:
        output_paths = _export_all(solids, output_dir, cfg, algorithm, suffix)
    except (JointError, ValueError, OSError) as e:
        logger.error(f"Mesh export failed: {e}")
        return GenerationResult(
            status=GenerationStatus.FAILED,
            config=cfg,
            violations=violations,
            error_message=f"Mesh export failed: {e}",
            generation_time_ms=elapsed(),
        )

    status = GenerationStatus.SUCCESS_WITH_WARNINGS if violations else GenerationStatus.SUCCESS
    return GenerationResult(
        status=status,
        config=cfg,
        output_paths=output_paths,
        violations=violations,
        generation_time_ms=elapsed(),
    )


def batch_generate(
    configs: List[JointConfig],
    output_dir: Path,
    name_prefix: str = "joint",
    strict: bool = False,
    parts: bool = False,
    algorithm: MeshAlgorithm = MeshAlgorithm.MARCHING_CUBES_OCTREE,
    suffix: str = ".stl",
) -> List[GenerationResult]:
    """Generate several joints, each into its own subdirectory."""
    results = []
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    cache = ComponentCache()

    for i, cfg in enumerate(configs):
        result = generate_joint(
            cfg,
            output_dir / f"{name_prefix}_{i:04d}",
            strict=strict,
            parts=parts,
            algorithm=algorithm,
            cache=cache,
            suffix=suffix,
        )
        results.append(result)

        logger.info(
            f"[{i+1}/{len(configs)}] {result.status.value} "
            f"({result.generation_time_ms:.1f}ms)"
        )

    success = sum(1 for r in results if r.status != GenerationStatus.FAILED)
    warned = sum(
        1 for r in results
        if r.status == GenerationStatus.SUCCESS_WITH_WARNINGS
    )

    logger.info(
        f"Batch complete: {success}/{len(results)} success "
        f"({warned} with warnings)"
    )

    return results


def save_generation_log(
    results: List[GenerationResult],
    log_path: Path
) -> None:
    """Save generation results to JSON log."""
    log_data = {
        'timestamp': datetime.now().isoformat(),
        'total': len(results),
        'success': sum(1 for r in results if r.status != GenerationStatus.FAILED),
        'results': [r.to_dict() for r in results]
    }

    log_path = Path(log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with open(log_path, 'w', encoding='utf-8') as f:
        json.dump(log_data, f, indent=2, ensure_ascii=False)
