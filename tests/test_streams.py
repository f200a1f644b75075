from __future__ import annotations

import pytest

from core.streams import BehaviorSubject, CompositeSubscription, PublishSubject, Stream, Subscription


def collect(stream):
    out = []
    sub = stream.subscribe(out.append)
    return out, sub


def test_behavior_subject_replays_latest_value():
    s = BehaviorSubject(1)
    s.on_next(2)
    out, _ = collect(s)
    s.on_next(3)
    assert out == [2, 3]


def test_publish_subject_does_not_replay():
    s = PublishSubject()
    s.on_next("lost")
    out, _ = collect(s)
    s.on_next("kept")
    assert out == ["kept"]


def test_value_before_first_emission_raises():
    with pytest.raises(LookupError):
        PublishSubject().value


def test_map_keeps_replay_mode():
    s = BehaviorSubject(2)
    doubled = s.map(lambda v: v * 2)
    out, _ = collect(doubled)
    s.on_next(5)
    assert out == [4, 10]

    p = PublishSubject()
    assert p.map(str).replay is False


def test_distinct_suppresses_repeats_only():
    s = BehaviorSubject(1)
    out, _ = collect(s.distinct())
    for v in (1, 1, 2, 2, 1, 3, 3):
        s.on_next(v)
    assert out == [1, 2, 1, 3]


def test_scan_starts_with_seed():
    taps = PublishSubject()
    toggled = taps.scan(False, lambda acc, _: not acc)
    out, _ = collect(toggled)
    taps.on_next(None)
    taps.on_next(None)
    assert out == [False, True, False]


def test_combine_latest_waits_for_every_input():
    a = PublishSubject()
    b = BehaviorSubject("x")
    out, _ = collect(Stream.combine_latest(a, b))
    assert out == []
    a.on_next(1)
    b.on_next("y")
    a.on_next(2)
    assert out == [(1, "x"), (1, "y"), (2, "y")]


def test_combine_latest_with_projection():
    a = BehaviorSubject(2)
    b = BehaviorSubject(3)
    out, _ = collect(Stream.combine_latest(a, b, fn=lambda x, y: x * y))
    b.on_next(4)
    assert out == [6, 8]


def test_combine_latest_requires_inputs():
    with pytest.raises(ValueError):
        Stream.combine_latest()


def test_subscription_dispose_stops_delivery():
    s = BehaviorSubject(0)
    out, sub = collect(s)
    sub.dispose()
    sub.dispose()
    s.on_next(1)
    assert out == [0]
    assert sub.disposed


def test_stream_dispose_detaches_from_upstream():
    s = BehaviorSubject(1)
    m = s.map(lambda v: v + 1)
    out, _ = collect(m)
    m.dispose()
    s.on_next(10)
    assert out == [2]
    assert m.value == 2


def test_composite_subscription_disposes_everything():
    calls = []
    bag = CompositeSubscription()
    bag.add(Subscription(lambda: calls.append("a")))
    bag.add(Subscription(lambda: calls.append("b")))
    bag.dispose()
    assert calls == ["a", "b"]

    # late additions are disposed right away
    bag.add(Subscription(lambda: calls.append("late")))
    assert calls == ["a", "b", "late"]


def test_subject_bind_forwards_values():
    src = BehaviorSubject(1)
    dst = PublishSubject()
    out, _ = collect(dst)
    sub = dst.bind(src)
    src.on_next(2)
    sub.dispose()
    src.on_next(3)
    assert out == [1, 2]
