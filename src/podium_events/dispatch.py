"""Dispatch engine delivering published updates to matching handlers.

A publish call builds one :class:`DispatchPass`. The pass snapshots the
handler tuple of the target event, so listeners that subscribe or unsubscribe
while it runs only affect later passes. ``emit`` and ``gauge`` consume the same
deliveries and differ only in how listener outcomes are reported.
"""

from __future__ import annotations

import asyncio
import copy
import inspect
import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Awaitable, Dict, Iterator, List, Optional, Set, Tuple

from .criteria import Criteria, normalize_criteria
from .exceptions import (
    ListenerInvocationError,
    PodiumError,
    SpreadDataMustBeArrayError,
    UnknownChannelError,
)
from .logging import describe_listener, get_logger, log_event
from .matching import matches_channel, matches_tags
from .registry import EventEntry, EventRegistry, HandlerRecord

LOGGER = get_logger("dispatch")

FULFILLED = "fulfilled"
REJECTED = "rejected"

_BACKGROUND: Set["asyncio.Future[Any]"] = set()


class _Unset:
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"


# Marks an update published without data; listeners are then called with no data argument.
UNSET: Any = _Unset()


def is_payload_generator(data: Any) -> bool:
    """Return True for a plain function or method published as lazy data."""

    return inspect.isfunction(data) or inspect.ismethod(data)


@dataclass(slots=True, frozen=True)
class SettledResult:
    """Outcome of one listener invocation collected by ``gauge``."""

    status: str
    value: Any = None
    reason: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.status == FULFILLED

    @classmethod
    def fulfilled(cls, value: Any) -> "SettledResult":
        return cls(status=FULFILLED, value=value)

    @classmethod
    def rejected(cls, reason: BaseException) -> "SettledResult":
        return cls(status=REJECTED, reason=reason)


class _Payload:
    """Published data, calling a function payload at most once."""

    __slots__ = ("_value", "_pending")

    def __init__(self, data: Any) -> None:
        self._value = data
        self._pending = is_payload_generator(data)

    def resolve(self) -> Any:
        if self._pending:
            self._value = self._value()
            self._pending = False
        return self._value


class DispatchPass:
    """One publish request resolved against the registry."""

    def __init__(self, registry: EventRegistry, criteria: Any, data: Any = UNSET) -> None:
        self.criteria: Criteria = normalize_criteria(criteria)
        self.entry: EventEntry = registry.entry(self.criteria.name)
        self.handlers: Tuple[HandlerRecord, ...] = self.entry.handlers
        self._registry = registry
        self._data = data
        if self.handlers:
            self._validate()

    @property
    def name(self) -> str:
        return self.criteria.name

    def _validate(self) -> None:
        definition = self.entry.definition
        channel = self.criteria.channel
        if channel is not None:
            if not isinstance(channel, str):
                raise PodiumError(f"Channel must be a string, got {type(channel).__name__}")
            if definition.channels and channel not in definition.channels:
                raise UnknownChannelError(self.name, channel)

        if definition.spread and not (
            isinstance(self._data, (list, tuple)) or is_payload_generator(self._data)
        ):
            raise SpreadDataMustBeArrayError(self.name)

    def deliveries(self) -> Iterator[Tuple[HandlerRecord, List[Any]]]:
        """Yield each matching handler with the arguments it should receive."""

        payload = _Payload(self._data)
        criteria = self.criteria
        for handler in self.handlers:
            if not matches_channel(handler.channels, criteria.channel):
                continue
            if not matches_tags(handler.filter, criteria.tags):
                continue

            if handler.count is not None:
                # exhausted by a nested pass
                if handler.count < 1:
                    continue
                handler.count -= 1
                if handler.count < 1:
                    self._registry.remove_handler(self.name, handler)

            data = payload.resolve()
            if data is UNSET:
                args: List[Any] = []
            else:
                if self.entry.flag(handler, "clone"):
                    data = copy.deepcopy(data)
                args = self._arguments(handler, data)

            if self.entry.flag(handler, "tags") and criteria.tags is not None:
                args.append(criteria.tags)

            yield handler, args

    def _arguments(self, handler: HandlerRecord, data: Any) -> List[Any]:
        if self.entry.flag(handler, "spread") and isinstance(data, (list, tuple)):
            return list(data)
        return [data]


def emit(registry: EventRegistry, criteria: Any, data: Any = UNSET) -> None:
    """Deliver an update to every matching handler.

    All handlers run. The first listener failure is raised once the pass is
    complete as :class:`ListenerInvocationError`.
    """

    dispatch = DispatchPass(registry, criteria, data)
    first_error: Optional[Exception] = None
    for handler, args in dispatch.deliveries():
        try:
            result = handler.invoke(args)
        except Exception as exc:
            if first_error is None:
                first_error = exc
            else:
                log_event(
                    LOGGER,
                    "listener_error_dropped",
                    dispatch.name,
                    level=logging.WARNING,
                    listener=describe_listener(handler.listener),
                    error=repr(exc),
                )
            continue

        if inspect.isawaitable(result):
            _schedule(dispatch.name, result)

    if first_error is not None:
        raise ListenerInvocationError(dispatch.name, first_error) from first_error


async def gauge(registry: EventRegistry, criteria: Any, data: Any = UNSET) -> List[SettledResult]:
    """Deliver an update and collect every handler's settled outcome in order."""

    dispatch = DispatchPass(registry, criteria, data)
    results: List[Optional[SettledResult]] = []
    pending: Dict[int, Awaitable[Any]] = {}
    try:
        for handler, args in dispatch.deliveries():
            try:
                value = handler.invoke(args)
            except Exception as exc:
                results.append(SettledResult.rejected(exc))
                continue

            if inspect.isawaitable(value):
                pending[len(results)] = value
                results.append(None)
            else:
                results.append(SettledResult.fulfilled(value))
    except BaseException:
        # the pass itself failed; outcomes already collected are abandoned
        for awaitable in pending.values():
            if inspect.iscoroutine(awaitable):
                awaitable.close()
        raise

    if pending:
        outcomes = await asyncio.gather(*pending.values(), return_exceptions=True)
        for index, outcome in zip(pending, outcomes):
            if isinstance(outcome, BaseException):
                results[index] = SettledResult.rejected(outcome)
            else:
                results[index] = SettledResult.fulfilled(outcome)

    return [result for result in results if result is not None]


def _schedule(name: str, awaitable: Awaitable[Any]) -> None:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        LOGGER.warning("No running event loop for async listener of %s; result discarded", name)
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        return

    task = asyncio.ensure_future(awaitable)
    _BACKGROUND.add(task)
    task.add_done_callback(partial(_finish_background, name))


def _finish_background(name: str, task: "asyncio.Future[Any]") -> None:
    _BACKGROUND.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        LOGGER.error("Async listener for %s failed", name, exc_info=exc)
