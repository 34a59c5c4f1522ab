import importlib
import logging
import pkgutil
from typing import Any, Callable, Dict, Optional, Type

from planner.core.store import EntityStore


class PluginManager:
    """
    Discovers planner.plugins.<name> packages. For each one it imports
    models (so tables register on Base), calls register_plugin(self) if the
    package defines it, and collects get_router from its api module.
    """

    def __init__(self, plugin_package: str = "planner.plugins"):
        self.stores: Dict[str, Type[EntityStore]] = {}
        self.routers: Dict[str, Callable[[Any], Any]] = {}
        self.plugins = []
        self.logger = logging.getLogger(__name__)
        self.discover_plugins(plugin_package)

    def discover_plugins(self, plugin_package: str = "planner.plugins") -> None:
        """Discover and register all plugins in the specified package"""
        package = importlib.import_module(plugin_package)
        self.logger.info(f"Discovering plugins in package: {plugin_package}")

        for _, name, is_pkg in pkgutil.iter_modules(package.__path__):
            if not is_pkg:
                continue
            module_name = f"{plugin_package}.{name}"
            self.logger.debug(f"Importing module: {module_name}")
            module = importlib.import_module(module_name)
            self._import_optional(f"{module_name}.models")
            if hasattr(module, "register_plugin"):
                module.register_plugin(self)
                self.logger.info(f"Registered plugin: {name}")
            api_module = self._import_optional(f"{module_name}.api")
            if api_module is not None and callable(getattr(api_module, "get_router", None)):
                self.routers[name] = api_module.get_router
            self.plugins.append(name)

    def _import_optional(self, module_name: str) -> Optional[Any]:
        try:
            return importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            if e.name != module_name:
                raise
            return None

    def register_store(self, name: str, store_class: Type[EntityStore]) -> None:
        """Register the store class for one entity kind"""
        self.logger.debug(f"Registering store: {name} -> {store_class.__name__}")
        self.stores[name] = store_class
