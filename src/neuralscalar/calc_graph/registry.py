import logging
import weakref
from collections import namedtuple

logger = logging.getLogger(__name__)

NeuralBlueprint = namedtuple('NeuralBlueprint', ['input_names', 'net'])


class NameRegistry:
    """
    Maps names to their canonical NeuralScalar and to pending blueprints.

    Canonical entries are weak references: the registry never keeps a
    scalar alive, and a collected scalar simply drops out of the lookup.
    """

    def __init__(self):
        self.canonical = weakref.WeakValueDictionary()
        self.blueprints = {}

    def register_canonical(self, name: str, scalar):
        """Makes ``scalar`` the canonical holder of ``name``, returns the previous one."""
        previous = self.canonical.get(name)
        self.canonical[name] = scalar
        if previous is not None and previous is not scalar:
            logger.debug('"%s" replaces its previous canonical scalar', name)
        return previous

    def lookup_canonical(self, name: str):
        return self.canonical.get(name)

    def register_blueprint(self, name: str, input_names, net):
        self.blueprints[name] = NeuralBlueprint(list(input_names), net)

    def lookup_blueprint(self, name: str):
        return self.blueprints.get(name)

    def clear(self):
        self.canonical.clear()
        self.blueprints.clear()

    def __contains__(self, name):
        return name in self.canonical

    def __repr__(self):
        return f'<NameRegistry canonical={list(self.canonical.keys())} blueprints={list(self.blueprints)}>'


_default_registry = NameRegistry()
_registry_stack = []


def current_registry() -> NameRegistry:
    if not _registry_stack:
        return _default_registry
    return _registry_stack[-1]


def reset_registry():
    """Clears the process-wide registry."""
    _default_registry.clear()


class registry_session:
    """Context manager that scopes a fresh registry for names and blueprints."""

    def __init__(self, registry: NameRegistry = None):
        self.registry = registry if registry is not None else NameRegistry()

    def __enter__(self):
        _registry_stack.append(self.registry)
        return self.registry

    def __exit__(self, exc_type, exc, tb):
        if not _registry_stack or _registry_stack[-1] is not self.registry:
            raise RuntimeError("registry_session stack out of sync.")
        _registry_stack.pop()
