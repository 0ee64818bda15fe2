"""
Joint CAD - Parametric Robotic Joint Generator
"""

from .config import JointConfig, MaterialConfig, MaterialCatalog, FeatureFlags, STANDARD_MATERIALS, default_config
from .components import ComponentMode
from .assembly import complete_joint_assembly, conditional_joint_assembly, stack_layout, stack_span
from .pipeline import AssemblyPipeline, AssemblyStep, PipelineState, default_pipeline
from .constraints import ConstraintValidator, Constraint, Violation
from .registry import ComponentRegistry, default_registry
from .cache import ComponentCache
from .builder import JointBuilder
from .variants import VariantGenerator, scale_variant, material_variant, gear_ratio_variant, size_series
from .generator import generate_joint, batch_generate, GenerationStatus, GenerationResult
from .errors import (
    JointError, GeometryError, ComponentNotFound, EmptyPipelineError,
    PipelineStepError, NoVariationsError, UnknownMaterialError, ValidationViolation,
)

__version__ = "0.1.0"

__all__ = [
    'JointConfig',
    'MaterialConfig',
    'MaterialCatalog',
    'FeatureFlags',
    'STANDARD_MATERIALS',
    'default_config',
    'ComponentMode',
    'complete_joint_assembly',
    'conditional_joint_assembly',
    'stack_layout',
    'stack_span',
    'AssemblyPipeline',
    'AssemblyStep',
    'PipelineState',
    'default_pipeline',
    'ConstraintValidator',
    'Constraint',
    'Violation',
    'ComponentRegistry',
    'default_registry',
    'ComponentCache',
    'JointBuilder',
    'VariantGenerator',
    'scale_variant',
    'material_variant',
    'gear_ratio_variant',
    'size_series',
    'generate_joint',
    'batch_generate',
    'GenerationStatus',
    'GenerationResult',
    'JointError',
    'GeometryError',
    'ComponentNotFound',
    'EmptyPipelineError',
    'PipelineStepError',
    'NoVariationsError',
    'UnknownMaterialError',
    'ValidationViolation',
]
