"""
Error taxonomy for joint generation.

Component, sub-assembly and pipeline failures propagate immediately with the
failing component or step attached. Constraint violations are data; they are
only raised (as ValidationViolation) when a caller opts into strict mode.
"""

from typing import List, Optional


class JointError(Exception):
    """Base class for all joint generation errors."""


class GeometryError(JointError):
    """Invalid dimension or failed operation inside the geometry kernel."""

    def __init__(self, message: str, component: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.component = component

    def __str__(self) -> str:
        if self.component:
            return f"{self.component}: {self.message}"
        return self.message


class ComponentNotFound(JointError, KeyError):
    """Registry lookup for a name that was never registered."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"component '{self.name}' not found in registry"


class EmptyPipelineError(JointError):
    """Assembly pipeline executed with no steps."""

    def __init__(self):
        super().__init__("pipeline has no steps")


class PipelineStepError(JointError):
    """A pipeline step failed while building or validating."""

    def __init__(self, index: int, step_name: str, phase: str, cause: Exception):
        self.index = index
        self.step_name = step_name
        self.phase = phase
        self.cause = cause
        if phase == "validate":
            message = f"step {index} ({step_name}) validation failed: {cause}"
        else:
            message = f"step {index} ({step_name}) failed: {cause}"
        super().__init__(message)


class NoVariationsError(JointError):
    """Variant generator invoked without any modifiers."""

    def __init__(self):
        super().__init__("no variations defined")


class UnknownMaterialError(JointError, KeyError):
    """Material name missing from the catalog."""

    def __init__(self, name: str, known: Optional[List[str]] = None):
        super().__init__(name)
        self.name = name
        self.known = list(known or [])

    def __str__(self) -> str:
        if self.known:
            return f"unknown material '{self.name}' (known: {', '.join(self.known)})"
        return f"unknown material '{self.name}'"


class ValidationViolation(JointError):
    """Strict-mode stop raised for a non-empty set of constraint violations."""

    def __init__(self, violations: list):
        self.violations = list(violations)
        lines = "\n".join(f"  - {v}" for v in self.violations)
        super().__init__(f"Configuration validation failed:\n{lines}")
