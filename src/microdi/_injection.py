from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable

    from ._registry import Registry

    T = TypeVar("T")


def resolve_arguments(args: Iterable[Any]) -> list[Any]:
    """Evaluate lazy arguments.

    Any zero-argument callable among ``args`` is called and replaced by its
    result; other values pass through untouched.
    """
    return [arg() if callable(arg) else arg for arg in args]


@dataclass(frozen=True)
class Injector:
    """Binding of one constructor argument to a token."""

    token: type[Any] | Hashable
    transform: Callable[[Any], Any] | None = None
    args: tuple[Any, ...] = ()


class Constructor:
    def __init__(self, resolver: Registry) -> None:
        self._resolver = resolver

    def construct(self, cls: type[T], *args: Any, **kwargs: Any) -> T:
        if args or kwargs:
            return cls(*args, **kwargs)

        slots = self._resolver.injectors(cls)
        if not slots:
            return cls()

        logger.debug("Constructing %s from %d bound arguments", cls.__qualname__, len(slots))
        return cls(*self._materialize_call(cls, slots))

    def _materialize_call(self, cls: type[T], slots: tuple[Injector | None, ...]) -> list[Any]:
        # unbound trailing slots are left to the constructor defaults
        last = max(i for i, slot in enumerate(slots) if slot is not None)
        defaults = _positional_defaults(cls)

        args = []
        for index, slot in enumerate(slots[: last + 1]):
            if slot is None:
                args.append(defaults.get(index))
                continue
            args.append(self._resolve_slot(slot))
        return args

    def _resolve_slot(self, slot: Injector) -> Any:
        args = resolve_arguments(slot.args)
        if slot.transform is None:
            return self._resolver.resolve(slot.token, *args)
        return self._resolver.resolve_and_transform(slot.token, slot.transform, *args)


def _positional_defaults(cls: type) -> dict[int, Any]:
    try:
        params = inspect.signature(cls).parameters.values()
    except (TypeError, ValueError):
        return {}

    positional = [p for p in params if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)]
    return {i: p.default for i, p in enumerate(positional) if p.default is not p.empty}
