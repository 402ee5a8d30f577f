"""Custom exceptions raised by the podium event emitter."""

from __future__ import annotations

from typing import Iterable


class PodiumError(RuntimeError):
    """Base error for all emitter related exceptions."""


class UnknownEventError(PodiumError):
    """Raised when an operation references an unregistered event name."""

    def __init__(self, name: object) -> None:
        self.name = name
        super().__init__(f"Unknown event {name}")


class DuplicateEventError(PodiumError):
    """Raised when a non-shared event name is registered twice."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Event {name} exists")


class InvalidEventOptionsError(PodiumError):
    """Raised when an event definition fails validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidListenerOptionsError(PodiumError):
    """Raised when subscription options fail validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class UnknownEventChannelsError(InvalidListenerOptionsError):
    """Raised when a subscription names channels the event does not allow."""

    def __init__(self, name: str, channels: Iterable[str]) -> None:
        self.name = name
        self.channels = tuple(channels)
        super().__init__(
            f"Unknown event channels {', '.join(self.channels)}",
            field="channels",
        )


class MissingEventNameError(PodiumError):
    """Raised when publish criteria lack an event name."""

    def __init__(self) -> None:
        super().__init__("Criteria must include a name")


class UnknownChannelError(PodiumError):
    """Raised when an update targets a channel the event does not allow."""

    def __init__(self, name: str, channel: object) -> None:
        self.name = name
        self.channel = channel
        super().__init__(f"Unknown {channel} channel")


class SpreadDataMustBeArrayError(PodiumError):
    """Raised when a spread event is emitted with non-sequence data."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Data must be an array for spread event {name}")


class ListenerInvocationError(PodiumError):
    """Raised by emit when a subscribed listener failed during dispatch."""

    def __init__(self, name: str, error: BaseException) -> None:
        self.name = name
        self.error = error
        super().__init__(f"Listener for event {name} failed: {error}")
