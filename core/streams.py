"""
Push-based streams used to wire the metronome engine.

Every stream is hot: operators subscribe to their upstream as soon as they are
created, so a derived stream always knows the latest value of its inputs.
Replaying streams hand that latest value to each new subscriber.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")

_MISSING = object()


class Subscription:
    def __init__(self, on_dispose: Optional[Callable[[], None]] = None) -> None:
        self._on_dispose = on_dispose
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        if self._on_dispose is not None:
            self._on_dispose()
            self._on_dispose = None


class CompositeSubscription(Subscription):
    """Disposes everything added to it at once."""

    def __init__(self) -> None:
        super().__init__()
        self._items: List[Subscription] = []

    def add(self, sub: Subscription) -> Subscription:
        if self.disposed:
            sub.dispose()
        else:
            self._items.append(sub)
        return sub

    def dispose(self) -> None:
        if self.disposed:
            return
        super().dispose()
        items, self._items = self._items, []
        for sub in items:
            sub.dispose()


class _Observer:
    __slots__ = ("on_next",)

    def __init__(self, on_next: Callable[[Any], None]) -> None:
        self.on_next = on_next


class Stream(Generic[T]):
    def __init__(self, replay: bool = True) -> None:
        self._replay = replay
        self._observers: List[_Observer] = []
        self._value: Any = _MISSING
        self._upstream = CompositeSubscription()

    # ---------- State ----------
    @property
    def replay(self) -> bool:
        return self._replay

    @property
    def has_value(self) -> bool:
        return self._value is not _MISSING

    @property
    def value(self) -> T:
        if self._value is _MISSING:
            raise LookupError("stream has not emitted yet")
        return self._value

    # ---------- Subscribe / emit ----------
    def subscribe(self, on_next: Callable[[T], None]) -> Subscription:
        obs = _Observer(on_next)
        self._observers.append(obs)
        if self._replay and self.has_value:
            on_next(self._value)
        return Subscription(lambda: self._remove(obs))

    def _remove(self, obs: _Observer) -> None:
        try:
            self._observers.remove(obs)
        except ValueError:
            pass

    def _emit(self, value: T) -> None:
        self._value = value
        for obs in list(self._observers):
            obs.on_next(value)

    def _attach(self, sub: Subscription) -> None:
        self._upstream.add(sub)

    def dispose(self) -> None:
        """Detach from upstream and drop all subscribers."""
        self._upstream.dispose()
        self._observers.clear()

    # ---------- Operators ----------
    def map(self, fn: Callable[[T], U]) -> "Stream[U]":
        out: Stream[U] = Stream(replay=self._replay)
        out._attach(self.subscribe(lambda v: out._emit(fn(v))))
        return out

    def distinct(self) -> "Stream[T]":
        """Distinct-until-changed: drop a value equal to the previous one."""
        out: Stream[T] = Stream(replay=self._replay)

        def forward(v: T) -> None:
            if out.has_value and out._value == v:
                return
            out._emit(v)

        out._attach(self.subscribe(forward))
        return out

    def scan(self, seed: U, fn: Callable[[U, T], U]) -> "Stream[U]":
        """Running accumulation; the seed is the first value of the result."""
        out: Stream[U] = Stream(replay=True)
        out._emit(seed)
        out._attach(self.subscribe(lambda v: out._emit(fn(out._value, v))))
        return out

    @staticmethod
    def combine_latest(*streams: "Stream[Any]", fn: Optional[Callable[..., U]] = None) -> "Stream[U]":
        """Emit once every input has a value, then on each input change."""
        if not streams:
            raise ValueError("combine_latest needs at least one stream")

        out: Stream[U] = Stream(replay=True)
        latest: List[Any] = [_MISSING] * len(streams)

        def on_input(i: int, v: Any) -> None:
            latest[i] = v
            if any(x is _MISSING for x in latest):
                return
            out._emit(fn(*latest) if fn is not None else tuple(latest))

        for i, s in enumerate(streams):
            out._attach(s.subscribe(lambda v, i=i: on_input(i, v)))
        return out


class Subject(Stream[T]):
    def on_next(self, value: T) -> None:
        self._emit(value)

    def bind(self, source: Stream[T]) -> Subscription:
        """Forward every value of ``source`` into this subject."""
        return source.subscribe(self.on_next)


class BehaviorSubject(Subject[T]):
    def __init__(self, value: T) -> None:
        super().__init__(replay=True)
        self._value = value


class PublishSubject(Subject[T]):
    def __init__(self) -> None:
        super().__init__(replay=False)
