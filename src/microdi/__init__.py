"""Minimal inversion-of-control container.

Associates tokens (classes, strings or ``Symbol`` instances) with resolvers
and resolves them on demand, into attributes, or into constructor arguments.

Exports:
- `Registry`: token to resolver mapping with soft registration, override,
  singleton memoization and constructor argument bindings.
- `registry`: the process-wide `Registry`; the module-level functions
  (`register_resolver`, `resolve`, `construct`, ...) are bound to it.
- `dependency`, `singleton`, `inject_arg`, `map_inject_arg`: class decorators.
- `Inject`, `InjectOnce`, `MapInject`: attribute descriptors.
- `Provider`, `provide`: explicit accessors with a single `get()`.
- `ResolutionError`, `UnregisteredTokenError`: errors raised by resolution.
"""

from ._decorators import (
    Inject,
    InjectOnce,
    MapInject,
    Provider,
    dependency,
    inject_arg,
    map_inject_arg,
    provide,
    singleton,
)
from ._injection import Injector, resolve_arguments
from ._registry import Registry, ResolutionError, Symbol, UnregisteredTokenError, default_registry


registry = default_registry

register_resolver = registry.register_resolver
override_resolver = registry.override_resolver
register_singleton = registry.register_singleton
override_singleton = registry.override_singleton
is_registered = registry.is_registered
resolve = registry.resolve
resolve_and_transform = registry.resolve_and_transform
bind_argument = registry.bind_argument
injectors = registry.injectors
construct = registry.construct


__all__ = [
    "Inject",
    "InjectOnce",
    "Injector",
    "MapInject",
    "Provider",
    "Registry",
    "ResolutionError",
    "Symbol",
    "UnregisteredTokenError",
    "bind_argument",
    "construct",
    "dependency",
    "inject_arg",
    "injectors",
    "is_registered",
    "map_inject_arg",
    "override_resolver",
    "override_singleton",
    "provide",
    "register_resolver",
    "register_singleton",
    "registry",
    "resolve",
    "resolve_and_transform",
    "resolve_arguments",
    "singleton",
]
