from __future__ import annotations

import pytest

from podium_events import (
    InvalidListenerOptionsError,
    Podium,
    UnknownEventChannelsError,
    UnknownEventError,
)


class Recorder:
    def __init__(self) -> None:
        self.calls = []

    def __call__(self, *args) -> None:
        self.calls.append(args)


def test_on_returns_emitter_for_chaining() -> None:
    emitter = Podium(["a", "b"])
    assert emitter.on("a", Recorder()).add_listener("b", Recorder()) is emitter
    assert emitter.has_listeners("a")
    assert emitter.has_listeners("b")


def test_subscribe_to_unknown_event() -> None:
    with pytest.raises(UnknownEventError):
        Podium().on("missing", Recorder())


def test_subscribe_with_unknown_option() -> None:
    emitter = Podium("test")
    with pytest.raises(InvalidListenerOptionsError):
        emitter.on({"name": "test", "unknown": True}, Recorder())


def test_subscribe_with_invalid_count() -> None:
    emitter = Podium("test")
    with pytest.raises(InvalidListenerOptionsError):
        emitter.on({"name": "test", "count": 0}, Recorder())


def test_subscribe_channels_must_be_allowed() -> None:
    emitter = Podium({"name": "test", "channels": ["a", "b"]})
    emitter.on({"name": "test", "channels": "a"}, Recorder())

    with pytest.raises(UnknownEventChannelsError) as excinfo:
        emitter.on({"name": "test", "channels": ["a", "c", "d"]}, Recorder())
    assert excinfo.value.channels == ("c", "d")
    assert isinstance(excinfo.value, InvalidListenerOptionsError)


def test_unrestricted_event_accepts_any_listener_channels() -> None:
    emitter = Podium("test")
    emitter.on({"name": "test", "channels": ["x"]}, Recorder())
    assert emitter.has_listeners("test")


def test_context_is_passed_as_receiver() -> None:
    emitter = Podium("test")
    seen = []

    def listener(context, value):
        seen.append((context, value))

    context = {"id": 1}
    emitter.on("test", listener, context)
    emitter.emit("test", "x")
    assert seen == [(context, "x")]


def test_once_with_listener() -> None:
    emitter = Podium("test")
    recorder = Recorder()
    assert emitter.once("test", recorder) is emitter
    emitter.emit("test", 1)
    emitter.emit("test", 2)
    assert recorder.calls == [(1,)]
    assert emitter.has_listeners("test") is False


def test_once_overrides_count() -> None:
    emitter = Podium("test")
    recorder = Recorder()
    emitter.once({"name": "test", "count": 3}, recorder)
    emitter.emit("test", 1)
    emitter.emit("test", 2)
    assert recorder.calls == [(1,)]


def test_once_without_listener_returns_future() -> None:
    emitter = Podium({"name": "test", "spread": True})
    future = emitter.once("test")
    assert not future.done()

    emitter.emit("test", [1, 2, 3])
    emitter.emit("test", [4])
    assert future.result(timeout=0) == [1, 2, 3]


def test_few_collects_argument_lists() -> None:
    emitter = Podium({"name": "test", "tags": True})
    future = emitter.few({"name": "test", "count": 2})

    emitter.emit({"name": "test", "tags": "a"}, 1)
    assert not future.done()
    emitter.emit("test", 2)
    emitter.emit("test", 3)

    assert future.result(timeout=0) == [[1, {"a": True}], [2]]
    assert emitter.has_listeners("test") is False


@pytest.mark.parametrize("criteria", ["test", {"name": "test"}])
def test_few_requires_count(criteria) -> None:
    emitter = Podium("test")
    with pytest.raises(InvalidListenerOptionsError):
        emitter.few(criteria)


def test_few_rejects_zero_count() -> None:
    emitter = Podium("test")
    with pytest.raises(InvalidListenerOptionsError):
        emitter.few({"name": "test", "count": 0})


def test_remove_listener_removes_every_subscription() -> None:
    emitter = Podium("test")
    first = Recorder()
    second = Recorder()
    emitter.on("test", first).on("test", second).on("test", first)

    assert emitter.remove_listener("test", first) is emitter
    emitter.emit("test", 1)
    assert first.calls == []
    assert second.calls == [(1,)]

    emitter.off("test", second)
    assert emitter.has_listeners("test") is False
    emitter.remove_listener("test", second)


def test_remove_listener_matches_bound_methods() -> None:
    emitter = Podium("test")
    recorder = Recorder()
    emitter.on("test", recorder.__call__)
    emitter.remove_listener("test", recorder.__call__)
    assert emitter.has_listeners("test") is False


def test_remove_listener_requires_callable() -> None:
    emitter = Podium("test")
    with pytest.raises(InvalidListenerOptionsError):
        emitter.remove_listener("test", "nope")


def test_remove_all_listeners() -> None:
    emitter = Podium("test")
    emitter.on("test", Recorder()).on("test", Recorder())
    assert emitter.remove_all_listeners("test") is emitter
    assert emitter.has_listeners("test") is False
    emitter.remove_all_listeners("test")
