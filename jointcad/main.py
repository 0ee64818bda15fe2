"""
Joint CAD - Parametric Robotic Joint Generator

CLI entry point with these modes:
  (none)            : Build mode - validate, export assembly and parts
  --dump-config     : Write the default (or loaded) config YAML and exit
  --random N        : Random mode - N randomized variants, invalid ones skipped
  --series          : Product line - small/medium/large joints
  --list-components : Print the registered sub-assemblies
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional
import logging

from .config import JointConfig, default_config, get_config_path
from .constraints import ConstraintValidator, manufacturing_constraints
from .errors import JointError
from .generator import (
    GenerationResult,
    GenerationStatus,
    batch_generate,
    generate_joint,
    save_generation_log,
)
from .geometry import MeshAlgorithm
from .registry import default_registry
from .variants import VariantGenerator, filter_valid, random_variant, size_series


logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


def load_config(config_path: Path, material: Optional[str] = None,
                resolution: Optional[int] = None) -> JointConfig:
    """Load YAML config if it exists, otherwise the defaults."""
    if config_path.exists():
        cfg = JointConfig.load(config_path)
        logger.info(f"Loaded config from: {config_path}")
    else:
        cfg = default_config()
        logger.info("Using default configuration")
    if material:
        cfg.material = default_config(material).material
    if resolution:
        cfg.mesh_resolution = resolution
    return cfg


def print_summary(cfg: JointConfig) -> None:
    print(f"  Material: {cfg.material.name} "
          f"(shrinkage: {(cfg.material.shrinkage_factor - 1) * 100:.3f}%)")
    print(f"  Gear Ratio: {cfg.input_teeth}:{cfg.output_teeth} ({cfg.gear_ratio:.2f}:1)")


def report(results: List[GenerationResult], output_dir: Path) -> int:
    success = sum(1 for r in results if r.status != GenerationStatus.FAILED)
    for r in results:
        if r.status == GenerationStatus.FAILED:
            logger.error(f"  -> FAILED: {r.error_message}")
    print(f"  Success: {success}/{len(results)}")
    print(f"  Output: {output_dir}")
    return 0 if success == len(results) else 1


def run_build_mode(args: argparse.Namespace) -> int:
    """Build mode (default): one joint from the config file or defaults."""
    logger.info("=== Build Mode ===")
    cfg = load_config(args.config, args.material, args.resolution)
    print_summary(cfg)
    result = generate_joint(
        cfg,
        args.output_dir,
        strict=args.strict,
        parts=not args.no_parts,
        algorithm=args.algorithm,
        suffix=f".{args.format}",
    )
    if args.plot:
        from .visualizer import plot_stack_layout
        plot_stack_layout(cfg, args.output_dir / "stack_layout.png")

    print(f"\n[Build Complete] {result.status.value}")
    for path in result.output_paths:
        print(f"  - {path}")
    return report([result], args.output_dir)


def run_dump_config(args: argparse.Namespace) -> int:
    cfg = load_config(args.config, args.material, args.resolution)
    cfg.save(args.config)
    print(f"Config saved to: {args.config}")
    return 0


def run_random_mode(args: argparse.Namespace) -> int:
    """Random mode: N randomized variants, filtered by the constraint validator."""
    logger.info("=== Random Mode ===")
    base = load_config(args.config, args.material, args.resolution)

    generator = VariantGenerator(base)
    for i in range(args.random):
        seed = None if args.seed is None else args.seed + i
        generator.add_variation(random_variant(seed))
    configs = filter_valid(generator.generate(), ConstraintValidator(manufacturing_constraints()))
    logger.info(f"{len(configs)}/{args.random} variants passed validation")
    if not configs:
        logger.error("No valid variants generated")
        return 1

    results = batch_generate(
        configs, args.output_dir, name_prefix="random",
        strict=args.strict, parts=not args.no_parts, algorithm=args.algorithm,
        suffix=f".{args.format}",
    )
    save_generation_log(results, args.output_dir / "generation_log.json")
    print(f"\n[Random Generation Complete]")
    return report(results, args.output_dir)


def run_series_mode(args: argparse.Namespace) -> int:
    """Series mode: small/medium/large product line."""
    logger.info("=== Series Mode ===")
    base = load_config(args.config, args.material, args.resolution)

    results = []
    for name, cfg in size_series(base).items():
        print(f"\n{name}:")
        print(f"  Base Diameter: {cfg.base_diameter:.1f} mm")
        print_summary(cfg)
        results.append(generate_joint(
            cfg, args.output_dir / name,
            strict=args.strict, parts=not args.no_parts, algorithm=args.algorithm,
            suffix=f".{args.format}",
        ))
    save_generation_log(results, args.output_dir / "generation_log.json")
    print(f"\n[Series Complete]")
    return report(results, args.output_dir)


def run_list_components(args: argparse.Namespace) -> int:
    for name in default_registry().list():
        print(f"  - {name}")
    return 0


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Parametric Robotic Joint Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  (none)             Build mode: validate config, export assembly + parts
  --dump-config      Write config.yaml and exit
  --random N         Random mode: N randomized variants within valid ranges
  --series           Product line: small/medium/large joints
  --list-components  List registered sub-assemblies

Examples:
  python -m jointcad.main --dump-config      # Write config.yaml
  python -m jointcad.main                    # Build from config.yaml
  python -m jointcad.main --random 5 --seed 1
"""
    )

    parser.add_argument('--config', type=Path, default=get_config_path(),
                        help='Config file path (default: config.yaml)')
    parser.add_argument('--output-dir', type=Path, default=Path('output'),
                        help='Output directory for mesh files (default: output/)')
    parser.add_argument('--material', default=None,
                        help='Override material (PLA, ABS, PETG)')
    parser.add_argument('--dump-config', action='store_true',
                        help='Write the configuration to --config and exit')
    parser.add_argument('--random', type=int, metavar='N', default=0,
                        help='Generate N randomized variants')
    parser.add_argument('--seed', type=int, default=None,
                        help='Base seed for --random')
    parser.add_argument('--series', action='store_true',
                        help='Generate the small/medium/large series')
    parser.add_argument('--list-components', action='store_true',
                        help='List registered components and exit')
    parser.add_argument('--strict', action='store_true',
                        help='Treat constraint violations as fatal')
    parser.add_argument('--no-parts', action='store_true',
                        help='Export only the complete assembly')
    parser.add_argument('--plot', action='store_true',
                        help='Also save a stacking layout diagram')
    parser.add_argument('--resolution', type=int, default=None,
                        help='Mesh resolution override')
    parser.add_argument('--algorithm', type=MeshAlgorithm,
                        default=MeshAlgorithm.MARCHING_CUBES_OCTREE,
                        choices=list(MeshAlgorithm),
                        help='Mesh algorithm (marching-cubes-octree, dual-contour)')
    parser.add_argument('--format', choices=['stl', '3mf'], default='stl',
                        help='Mesh file format (default: stl)')

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    modes = [args.dump_config, bool(args.random), args.series, args.list_components]
    if sum(modes) > 1:
        logger.error("Choose at most one of --dump-config, --random, --series, --list-components")
        return 1

    try:
        if args.list_components:
            return run_list_components(args)
        if args.dump_config:
            return run_dump_config(args)
        if args.random:
            return run_random_mode(args)
        if args.series:
            return run_series_mode(args)
        return run_build_mode(args)
    except JointError as e:
        logger.error(str(e))
        return 1


if __name__ == '__main__':
    sys.exit(main())
