"""
Event dispatcher: an explicit table from inbound event name to handler.

A handler receives the session context and a validated payload, mutates the
context, and returns the effects the client should perform. Handlers never
touch the transport or the UI directly, so they run without either.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from pydantic import TypeAdapter, ValidationError

from parley.channels import ChannelDirectory
from parley.errors import DispatchError
from parley.presentation import Effect
from parley.state import DisplayedMessages, SessionState

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """Everything a handler may mutate. Owned by the event-processing task."""
    state: SessionState = field(default_factory=SessionState)
    directory: ChannelDirectory = field(default_factory=ChannelDirectory)
    messages: DisplayedMessages = field(default_factory=DisplayedMessages)


Handler = Callable[[SessionContext, Any], list[Effect]]


class EventSource(Protocol):
    def on(self, event: str, handler: Callable[[Any], None]) -> None: ...


@dataclass(frozen=True)
class _Binding:
    adapter: TypeAdapter
    handler: Handler


class EventDispatcher:
    def __init__(self) -> None:
        self._table: dict[str, _Binding] = {}

    @property
    def events(self) -> list[str]:
        return list(self._table)

    def __contains__(self, event: str) -> bool:
        return event in self._table

    def register(self, event: str, payload_type: Any, handler: Handler) -> None:
        """Bind `handler` to `event`. Binding the same event twice is a programming error."""
        if event in self._table:
            logger.error("Duplicate handler for %s", event)
            raise DispatchError(f"A handler is already registered for {event!r}")
        self._table[event] = _Binding(TypeAdapter(payload_type), handler)

    def handler(self, event: str, payload_type: Any) -> Callable[[Handler], Handler]:
        def decorator(fn: Handler) -> Handler:
            self.register(event, payload_type, fn)
            return fn
        return decorator

    def bind(self, source: EventSource, sink: Callable[[str, Any], None]) -> None:
        """Forward every registered event from `source` to `sink(event, raw_payload)`."""
        for event in self._table:
            source.on(event, lambda raw, _event=event: sink(_event, raw))

    def dispatch(self, context: SessionContext, event: str, raw: Any) -> list[Effect]:
        binding = self._table.get(event)
        if binding is None:
            logger.debug("No handler for %s", event)
            return []
        try:
            payload = binding.adapter.validate_python(raw)
        except ValidationError as e:
            logger.warning("Dropping malformed %s payload: %s", event, e)
            return []
        return binding.handler(context, payload)
