"""Declarative registration and injection helpers.

Class decorators register a class (or bind its constructor arguments) when
the class body is executed. Attribute descriptors resolve a dependency when
the attribute is read.

Example:
  @singleton()
  class Database: ...

  @dependency()
  @inject_arg(0, Database)
  @inject_arg(1, "dsn", lambda: settings.dsn)
  class Repository:
      def __init__(self, db: Database, dsn: str): ...

  class Service:
      repo = Inject(Repository)
      name = MapInject(Database, lambda db: db.name, once=True)

"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ._injection import resolve_arguments
from ._registry import Registry, default_registry


if TYPE_CHECKING:
    from collections.abc import Callable

    from ._registry import Resolver, Token

T = TypeVar("T")
C = TypeVar("C", bound=type)


def _registry_or_default(registry: Registry | None) -> Registry:
    return default_registry if registry is None else registry


def dependency(resolver: Resolver | None = None, *, registry: Registry | None = None) -> Callable[[C], C]:
    """Register the decorated class as resolvable.

    Without ``resolver`` the class is built with ``construct``, so bound
    constructor arguments are injected when it is resolved without arguments.
    """

    def decorator(cls: C) -> C:
        target = _registry_or_default(registry)
        target.register_resolver(cls, resolver or partial(target.construct, cls))
        return cls

    return decorator


def singleton(resolver: Resolver | None = None, *, registry: Registry | None = None) -> Callable[[C], C]:
    """Register the decorated class as a singleton, built on first resolution."""

    def decorator(cls: C) -> C:
        target = _registry_or_default(registry)
        target.register_singleton(cls, resolver or partial(target.construct, cls))
        return cls

    return decorator


def inject_arg(index: int, token: Token, *args: Any, registry: Registry | None = None) -> Callable[[C], C]:
    def decorator(cls: C) -> C:
        return _registry_or_default(registry).bind_argument(cls, index, token, *args)

    return decorator


def map_inject_arg(
    index: int,
    token: Token,
    transform: Callable[[Any], Any],
    *args: Any,
    registry: Registry | None = None,
) -> Callable[[C], C]:
    def decorator(cls: C) -> C:
        return _registry_or_default(registry).bind_argument(cls, index, token, *args, transform=transform)

    return decorator


class Provider(Generic[T]):
    """Accessor resolving a token on every ``get()``."""

    def __init__(
        self,
        token: Token,
        *args: Any,
        transform: Callable[[Any], T] | None = None,
        registry: Registry | None = None,
    ) -> None:
        self.token = token
        self.args = args
        self.transform = transform
        self._registry = registry

    def get(self) -> T:
        target = _registry_or_default(self._registry)
        args = resolve_arguments(self.args)
        if self.transform is None:
            return target.resolve(self.token, *args)
        return target.resolve_and_transform(self.token, self.transform, *args)


def provide(
    token: Token,
    *args: Any,
    transform: Callable[[Any], Any] | None = None,
    registry: Registry | None = None,
) -> Provider[Any]:
    return Provider(token, *args, transform=transform, registry=registry)


class Inject(Provider[T]):
    """Attribute resolving ``token`` each time it is read.

    Zero-argument callables among ``args`` are evaluated on every read.
    """

    once = False

    def __init__(self, token: Token, *args: Any, registry: Registry | None = None) -> None:
        super().__init__(token, *args, registry=registry)
        self.name: str | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: object | None, owner: type | None = None) -> Any:
        if obj is None:
            return self

        if not self.once:
            return self.get()

        if self.name is None:
            msg = f"{type(self).__name__}({self.token!r}) must be assigned in a class body to cache its value"
            raise TypeError(msg)
        if not hasattr(obj, "__dict__"):
            msg = f"Cannot cache {self.name!r} on {type(obj).__name__} instances without a __dict__"
            raise TypeError(msg)

        value = self.get()
        # shadows the descriptor for this instance from now on
        obj.__dict__[self.name] = value
        return value


class InjectOnce(Inject[T]):
    """Attribute resolving ``token`` on first read and keeping the value per instance."""

    once = True


class MapInject(Inject[T]):
    """Attribute holding ``transform`` applied to the resolved ``token``."""

    def __init__(
        self,
        token: Token,
        transform: Callable[[Any], T],
        *args: Any,
        once: bool = False,
        registry: Registry | None = None,
    ) -> None:
        super().__init__(token, *args, registry=registry)
        self.transform = transform
        self.once = once
