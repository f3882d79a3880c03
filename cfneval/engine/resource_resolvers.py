"""
Registry of the resolution strategies per resource type.

The registry maps resource type names (e.g. ``AWS::S3::Bucket``) to a ``ResourceStrategy``. Types without a
registered strategy are answered by the default strategy, which references a resource by its logical id and
supports no attributes. Additional types are added with ``register``, or contributed by plugins in the
``cfneval.resource_resolvers`` namespace.
"""
import logging
import threading
from typing import Any, Dict, Optional

from plux import Plugin, PluginManager

from cfneval import config
from cfneval.constants import RESOURCE_RESOLVER_NAMESPACE
from cfneval.engine.errors import AttributeNotSupportedError
from cfneval.engine.resolving_context import ResolvingContext
from cfneval.engine.resources import builtin_strategies
from cfneval.engine.resources.base import ResourceStrategy
from cfneval.engine.types import Resource

LOG = logging.getLogger(__name__)


def _default_ref(resource_type: str, logical_id: str, resource: Resource, ctx: ResolvingContext) -> Any:
    LOG.debug("No resolver for resource type %s, referencing %s by its logical id", resource_type, logical_id)
    return logical_id


def _default_get_attribute(
    resource_type: str, attribute: str, logical_id: str, resource: Resource, ctx: ResolvingContext
) -> Any:
    LOG.warning("No resolver for resource type %s, cannot resolve %s.%s", resource_type, logical_id, attribute)
    raise AttributeNotSupportedError(resource_type, logical_id, attribute)


DEFAULT_STRATEGY = ResourceStrategy(ref=_default_ref, get_attribute=_default_get_attribute)


class ResourceResolverPlugin(Plugin):
    """
    Base class for plugins contributing the strategy of a resource type. The plugin name is the resource type
    name, e.g. ``Custom::MyResource``.
    """

    namespace = RESOURCE_RESOLVER_NAMESPACE

    def create_strategy(self) -> ResourceStrategy:
        raise NotImplementedError


class ResourceResolverRegistry:
    strategies: Dict[str, ResourceStrategy]
    default: ResourceStrategy

    def __init__(
        self,
        strategies: Dict[str, ResourceStrategy] = None,
        default: ResourceStrategy = None,
        load_plugins: bool = False,
    ):
        self.strategies = dict(strategies or {})
        self.default = default or DEFAULT_STRATEGY
        self._plugins_loaded = not load_plugins
        self._mutex = threading.RLock()

    def register(self, resource_type: str, strategy: ResourceStrategy) -> None:
        if resource_type in self.strategies:
            LOG.debug("Replacing the resolver of resource type %s", resource_type)
        self.strategies[resource_type] = strategy

    def lookup(self, resource_type: str) -> ResourceStrategy:
        if not self._plugins_loaded:
            self.load_plugins()
        return self.strategies.get(resource_type, self.default)

    def is_supported(self, resource_type: str) -> bool:
        return resource_type in self.strategies

    def load_plugins(self, plugin_manager: Optional[PluginManager] = None) -> None:
        """Registers the strategies of all resource resolver plugins, once."""
        with self._mutex:
            if self._plugins_loaded:
                return
            self._plugins_loaded = True
            plugin_manager = plugin_manager or PluginManager(RESOURCE_RESOLVER_NAMESPACE)
            for plugin in plugin_manager.load_all():
                try:
                    strategy = plugin.create_strategy()
                except Exception:
                    LOG.warning(
                        "Failed to load resource resolver plugin %s",
                        plugin.name,
                        exc_info=LOG.isEnabledFor(logging.DEBUG),
                    )
                    continue
                LOG.debug("Registering resource resolver plugin for %s", plugin.name)
                self.register(plugin.name, strategy)


registry = ResourceResolverRegistry(builtin_strategies(), load_plugins=config.LOAD_PLUGINS)


def lookup(resource_type: str) -> ResourceStrategy:
    return registry.lookup(resource_type)


def register(resource_type: str, strategy: ResourceStrategy) -> None:
    registry.register(resource_type, strategy)
