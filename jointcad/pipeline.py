"""
Assembly pipeline - ordered build sequence.

Each step is built, optionally validated, optionally transformed, then all
step results are unioned in list order. The first failing step aborts the
run; nothing is returned for the steps that completed before it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
import logging
import time

from build123d import Shape

from . import geometry
from .assembly import SUB_ASSEMBLIES, stack_layout
from .config import JointConfig
from .errors import EmptyPipelineError, GeometryError, PipelineStepError


logger = logging.getLogger(__name__)


class PipelineState(Enum):
    IDLE = "idle"
    BUILDING = "building"
    VALIDATING = "validating"
    TRANSFORMING = "transforming"
    UNIONING = "unioning"
    DONE = "done"
    FAILED = "failed"


@dataclass
class AssemblyStep:
    """
    One named step of the pipeline.

    ``transform`` is a 4x4 rigid matrix applied after validation.
    ``validate`` receives the built solid and raises to reject it.
    """
    name: str
    build: Callable[[JointConfig], Shape]
    transform: Optional[object] = None
    validate: Optional[Callable[[Shape], None]] = None


class AssemblyPipeline:
    def __init__(self, cfg: JointConfig):
        self.cfg = cfg
        self.steps: List[AssemblyStep] = []
        self.state = PipelineState.IDLE
        self.current_step: Optional[int] = None

    def add_step(self, step: AssemblyStep) -> 'AssemblyPipeline':
        self.steps.append(step)
        return self

    def __len__(self) -> int:
        return len(self.steps)

    def _fail(self, index: int, step: AssemblyStep, phase: str, error: Exception) -> PipelineStepError:
        self.state = PipelineState.FAILED
        logger.error(f"Step {index} ({step.name}) {phase} failed: {error}")
        return PipelineStepError(index, step.name, phase, error)

    def execute(self) -> Shape:
        """Run every step in order and union the results."""
        if not self.steps:
            raise EmptyPipelineError()

        start_time = time.perf_counter()
        components = []
        for i, step in enumerate(self.steps):
            self.current_step = i

            self.state = PipelineState.BUILDING
            try:
                component = step.build(self.cfg)
            except Exception as e:
                raise self._fail(i, step, "build", e) from e

            if step.validate is not None:
                self.state = PipelineState.VALIDATING
                try:
                    step.validate(component)
                except Exception as e:
                    raise self._fail(i, step, "validate", e) from e

            if step.transform is not None:
                self.state = PipelineState.TRANSFORMING
                try:
                    component = geometry.transform(component, step.transform)
                except GeometryError as e:
                    raise self._fail(i, step, "transform", e) from e

            components.append(component)
            logger.debug(f"[{i + 1}/{len(self.steps)}] {step.name} done")

        self.state = PipelineState.UNIONING
        self.current_step = None
        try:
            result = geometry.union(*components)
        except GeometryError:
            self.state = PipelineState.FAILED
            logger.error(f"Union of {len(components)} step results failed")
            raise
        self.state = PipelineState.DONE

        logger.info(
            f"Pipeline complete: {len(self.steps)} steps "
            f"({(time.perf_counter() - start_time) * 1000:.1f}ms)"
        )
        return result


def require_volume(min_volume: float = 0.0) -> Callable[[Shape], None]:
    """Step validator rejecting solids with volume at or below ``min_volume``."""
    def validate(solid: Shape) -> None:
        vol = geometry.volume(solid)
        if vol <= min_volume:
            raise GeometryError(f"volume {vol:.3f} not above {min_volume}")
    return validate


def default_pipeline(cfg: JointConfig) -> AssemblyPipeline:
    """Pipeline reproducing complete_joint_assembly as explicit steps."""
    pipeline = AssemblyPipeline(cfg)
    for name, offset in stack_layout(cfg).items():
        pipeline.add_step(AssemblyStep(
            name=name,
            build=SUB_ASSEMBLIES[name],
            transform=geometry.translation_matrix(z=offset),
            validate=require_volume(),
        ))
    return pipeline
