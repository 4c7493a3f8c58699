from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any, TypeVar, overload

from ._injection import Constructor, Injector, resolve_arguments


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable

    R = TypeVar("R")

    Resolver = Callable[..., Any]
    Token = type[Any] | Hashable

T = TypeVar("T")


class Symbol:
    """Unique opaque name token.

    Two symbols are never equal, even with the same description, so
    independent modules can each own a name without colliding.
    """

    __slots__ = ("description",)

    def __init__(self, description: str = "") -> None:
        self.description = description

    def __repr__(self) -> str:
        return f"Symbol({self.description!r})"


class ResolutionError(RuntimeError):
    pass


class UnregisteredTokenError(ResolutionError, LookupError):
    def __init__(self, token: Token) -> None:
        self.token = token
        super().__init__(f"Trying to resolve unregistered token: {display_token(token)}")


def display_token(token: Token) -> str:
    if inspect.isclass(token):
        return f"{token.__module__}.{token.__qualname__}"
    if isinstance(token, str):
        return token
    return repr(token)


class Registry:
    """Token to resolver mapping.

    - soft registration (first one wins) and override
    - memoized ("singleton") resolvers that rewrite their own entry
    - constructor argument bindings consumed by ``construct``.

    Class tokens are keyed by identity and name tokens (strings, symbols)
    by value, in separate tables. Name tokens must be hashable; an
    unhashable token raises ``TypeError``.
    """

    def __init__(self) -> None:
        self._type_resolvers: dict[type, Resolver] = {}
        self._name_resolvers: dict[Hashable, Resolver] = {}
        self._injectors: dict[type, list[Injector | None]] = {}

    def _table(self, token: Token) -> dict[Any, Resolver]:
        if inspect.isclass(token):
            return self._type_resolvers
        return self._name_resolvers

    def is_registered(self, token: Token) -> bool:
        return token in self._table(token)

    def register_resolver(self, token: Token, resolver: Resolver) -> None:
        """Register ``resolver`` for ``token`` unless one is already registered."""
        table = self._table(token)
        if token in table:
            logger.debug("Token %s is already registered, keeping existing resolver", display_token(token))
            return
        logger.debug("Registering resolver for %s", display_token(token))
        table[token] = resolver

    def override_resolver(self, token: Token, resolver: Resolver) -> None:
        """Register ``resolver`` for ``token``, replacing any existing one."""
        logger.debug("Overriding resolver for %s", display_token(token))
        self._table(token)[token] = resolver

    def register_singleton(self, token: Token, resolver: Resolver) -> None:
        """Register a resolver whose first result is returned on every later resolution.

        The first call's arguments reach ``resolver``; later arguments are ignored.
        """
        if self.is_registered(token):
            logger.debug("Token %s is already registered, keeping existing resolver", display_token(token))
            return
        logger.debug("Registering singleton resolver for %s", display_token(token))
        self._table(token)[token] = self._resolve_once(token, resolver)

    def override_singleton(self, token: Token, resolver: Resolver) -> None:
        self.override_resolver(token, self._resolve_once(token, resolver))

    def _resolve_once(self, token: Token, resolver: Resolver) -> Resolver:
        def resolve_once(*args: Any, **kwargs: Any) -> Any:
            instance = resolver(*args, **kwargs)
            logger.debug("Memoizing instance of %s", display_token(token))
            self.override_resolver(token, lambda *_args, **_kwargs: instance)
            return instance

        return resolve_once

    @overload
    def resolve(self, token: type[T], *args: Any, **kwargs: Any) -> T: ...

    @overload
    def resolve(self, token: Hashable, *args: Any, **kwargs: Any) -> Any: ...

    def resolve(self, token: Token, *args: Any, **kwargs: Any) -> Any:
        """Resolve ``token`` by calling its resolver with the given arguments.

        Raises ``UnregisteredTokenError`` when nothing is registered for ``token``.
        """
        resolver = self._table(token).get(token)
        if resolver is None:
            raise UnregisteredTokenError(token)
        return resolver(*args, **kwargs)

    def resolve_and_transform(self, token: Token, transform: Callable[[Any], R], *args: Any, **kwargs: Any) -> R:
        return transform(self.resolve(token, *args, **kwargs))

    def bind_argument(
        self,
        cls: type[T],
        index: int,
        token: Token,
        *args: Any,
        transform: Callable[[Any], Any] | None = None,
    ) -> type[T]:
        """Bind constructor argument ``index`` of ``cls`` to ``token``.

        ``args`` are passed to the resolver, zero-argument callables among them
        being evaluated at construction time. Returns ``cls``.
        """
        if not inspect.isclass(cls):
            msg = f"Constructor arguments can only be bound on classes, got {cls!r}"
            raise TypeError(msg)
        if index < 0:
            msg = f"Argument position must be non-negative, got {index}"
            raise ValueError(msg)

        slots = self._injectors.get(cls)
        if slots is None:
            slots = [None] * _positional_arity(cls)
            self._injectors[cls] = slots
        if index >= len(slots):
            slots.extend([None] * (index + 1 - len(slots)))

        logger.debug("Binding argument %d of %s to %s", index, cls.__qualname__, display_token(token))
        slots[index] = Injector(token=token, transform=transform, args=tuple(args))
        return cls

    def injectors(self, cls: type) -> tuple[Injector | None, ...]:
        return tuple(self._injectors.get(cls, ()))

    def construct(self, cls: type[T], *args: Any, **kwargs: Any) -> T:
        """Instantiate ``cls``.

        Explicit arguments are used as given. Without them, bound constructor
        arguments are resolved in position order.
        """
        return Constructor(self).construct(cls, *args, **kwargs)


def _positional_arity(cls: type) -> int:
    try:
        params = inspect.signature(cls).parameters.values()
    except (TypeError, ValueError):
        return 0
    return sum(1 for p in params if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD))


default_registry = Registry()
