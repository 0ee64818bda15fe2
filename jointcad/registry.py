"""
Component registry for dynamic component management.

Maps names to factories ``(JointConfig) -> Shape`` so sub-assemblies can be
discovered, replaced or extended at runtime. Safe for concurrent use.
"""

from typing import Callable, Dict, List, Optional
import logging

from build123d import Shape

from .assembly import SUB_ASSEMBLIES
from .config import JointConfig
from .errors import ComponentNotFound
from .locking import ReadWriteLock


logger = logging.getLogger(__name__)

ComponentFactory = Callable[[JointConfig], Shape]


class ComponentRegistry:
    """
    Thread-safe name -> factory map.

    Usage:
        registry = default_registry()
        registry.register("custom_bracket", custom_mount_bracket)
        bracket = registry.build("custom_bracket", cfg)
    """

    def __init__(self):
        self._components: Dict[str, ComponentFactory] = {}
        self._lock = ReadWriteLock()

    def register(self, name: str, factory: ComponentFactory) -> None:
        """Add a factory; an existing entry with the same name is replaced."""
        with self._lock.write():
            if name in self._components:
                logger.debug(f"Replacing component factory '{name}'")
            self._components[name] = factory

    def unregister(self, name: str) -> None:
        with self._lock.write():
            if name not in self._components:
                raise ComponentNotFound(name)
            del self._components[name]

    def get(self, name: str) -> Optional[ComponentFactory]:
        with self._lock.read():
            return self._components.get(name)

    def build(self, name: str, cfg: JointConfig) -> Shape:
        """Create a component by name."""
        factory = self.get(name)
        if factory is None:
            raise ComponentNotFound(name)
        return factory(cfg)

    def list(self) -> List[str]:
        """Names of all registered components, sorted."""
        with self._lock.read():
            return sorted(self._components)

    def __contains__(self, name: str) -> bool:
        with self._lock.read():
            return name in self._components

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._components)


def default_registry() -> ComponentRegistry:
    """Registry pre-loaded with the five joint sub-assemblies."""
    registry = ComponentRegistry()
    for name, factory in SUB_ASSEMBLIES.items():
        registry.register(name, factory)
    return registry
