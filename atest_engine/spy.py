"""Call interception for methods and functions on live objects."""

import functools
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any, Final, Self

from atest_engine.errors import InvalidTargetError

log = logging.getLogger(__name__)

_ABSENT: Final = object()


@dataclass(frozen=True, slots=True)
class SpyCall:
    """Arguments of a single intercepted call."""

    args: tuple[Any, ...]
    kwargs: dict[str, Any] = field(default_factory=dict)


@dataclass(kw_only=True, eq=False)
class Spy:
    """Interception installed on ``target.name``.

    The target's attribute is replaced by a trampoline that records every
    call and forwards it to the active implementation, which defaults to the
    original callable. Behavior overrides are chainable and only affect
    calls made after them.

    The target is mutated in place until :meth:`restore` is called; use the
    spy as a context manager to restore automatically.
    """

    target: Any
    name: str
    original: Callable[..., Any]
    _owned: Any = field(repr=False)
    _active: Callable[..., Any] = field(init=False, repr=False)
    _history: list[SpyCall] = field(init=False, default_factory=list, repr=False)
    _restored: bool = field(init=False, default=False, repr=False)

    def __post_init__(self) -> None:
        self._active = self.original

    @property
    def call_count(self) -> int:
        """Number of calls recorded so far."""
        return len(self._history)

    @property
    def calls(self) -> Sequence[tuple[Any, ...]]:
        """Positional arguments of every recorded call, in call order."""
        return [call.args for call in self._history]

    @property
    def history(self) -> Sequence[SpyCall]:
        """Full record (positional and keyword arguments) of every call."""
        return list(self._history)

    @property
    def restored(self) -> bool:
        """Whether the original attribute has been put back."""
        return self._restored

    def runs(self, implementation: Callable[..., Any]) -> Self:
        """Forward subsequent calls to ``implementation``."""
        self._active = implementation
        return self

    def returns(self, value: Any) -> Self:
        """Make subsequent calls return ``value``."""

        def constant(*args: Any, **kwargs: Any) -> Any:
            return value

        return self.runs(constant)

    def resolves(self, value: Any) -> Self:
        """Make subsequent calls return an awaitable resolving to ``value``."""

        async def resolved(*args: Any, **kwargs: Any) -> Any:
            return value

        return self.runs(resolved)

    def rejects(self, error: BaseException) -> Self:
        """Make subsequent calls return an awaitable raising ``error``."""

        async def rejected(*args: Any, **kwargs: Any) -> Any:
            raise error

        return self.runs(rejected)

    def calls_through(self) -> Self:
        """Forward subsequent calls to the original callable again."""
        return self.runs(self.original)

    def restore(self) -> None:
        """Put the original attribute back on the target."""
        if self._restored:
            return
        if self._owned is _ABSENT:
            delattr(self.target, self.name)
        else:
            setattr(self.target, self.name, self._owned)
        self._restored = True
        log.debug("Restored %s on %r", self.name, self.target)

    def _record(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        self._history.append(SpyCall(args=args, kwargs=kwargs))
        return self._active(*args, **kwargs)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.restore()


def intercept(target: Any, name: str) -> Spy:
    """Install a spy on ``target.name`` and return its handle.

    Args:
        target: Instance, module or class holding the callable
        name: Attribute name of the callable to intercept

    Returns:
        The spy handle recording calls made through ``target.name``

    Raises:
        InvalidTargetError: If ``target.name`` is missing, not callable or
            cannot be reassigned

    """
    original = getattr(target, name, _ABSENT)
    if original is _ABSENT or not callable(original):
        raise InvalidTargetError(f"{name} is not a function on {target!r}")

    owned = _own_attribute(target, name)
    spy = Spy(target=target, name=name, original=original, _owned=owned)

    @functools.wraps(original)
    def trampoline(*args: Any, **kwargs: Any) -> Any:
        return spy._record(args, kwargs)

    replacement: Any = trampoline
    if isinstance(target, type) and isinstance(owned, staticmethod | classmethod):
        replacement = staticmethod(trampoline)

    try:
        setattr(target, name, replacement)
    except (AttributeError, TypeError) as e:
        raise InvalidTargetError(
            f"{name} cannot be replaced on {target!r}: {e}"
        ) from e
    log.debug("Intercepted %s on %r", name, target)
    return spy


def _own_attribute(target: Any, name: str) -> Any:
    """Return the attribute as stored on ``target`` itself, or ``_ABSENT``."""
    try:
        namespace = vars(target)
    except TypeError:
        return getattr(target, name)
    return namespace.get(name, _ABSENT)
