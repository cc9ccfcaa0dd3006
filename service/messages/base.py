"""
Base message type that every feed message variant builds on.

A message is produced synchronously by the parser, then a client asks for
extra properties to be fetched for it. The message tracks what was asked
the first time (properties and interested modules), the client currently
driving it, and a single completion signal for the running fetch.

Lifecycle:
  created --fetch()--> fetching --_resolve()--> succeeded
  fetching --_error()--> failed --cleanup()--> created (retryable)

Only one driver may fetch a given message at a time. A second fetch() while
a signal is still pending is allowed but produces an independent signal;
keeping fetches sequential is the caller's job.
"""

import logging
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Tuple

from messages.completion import CompletionSignal
from messages.errors import FetchError
from messages.once import SetOnce
from models import MessageState
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

logger = logging.getLogger(__name__)


class Message(BaseModel):
    """Base interface for all message variants."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    # Private attributes listed here are serialized when they hold a string.
    DIAGNOSTIC_ATTRS: ClassVar[Tuple[str, ...]] = ()

    raw: str = Field(frozen=True)
    type: str = Field(frozen=True)
    error: Optional[str] = None
    error_message: Optional[str] = None
    error_details: Optional[Any] = None
    retries: int = 0

    _parser: Any = PrivateAttr(None)
    _client: Any = PrivateAttr(None)
    _signal: Optional[CompletionSignal] = PrivateAttr(None)
    _generation: int = PrivateAttr(0)
    _cached: Optional[Dict[str, Any]] = PrivateAttr(None)
    _properties: SetOnce = PrivateAttr(default_factory=SetOnce)
    _interested: SetOnce = PrivateAttr(default_factory=SetOnce)

    def __init__(self, parser: Any, raw: str, type: str, **fields: Any) -> None:  # pylint: disable=redefined-builtin
        super().__init__(raw=raw, type=type, **fields)
        self._parser = parser

    # ── Accessors ────────────────────────────────────────────────────────────

    @property
    def interested(self) -> Optional[List[str]]:
        """Modules interested in the message, or None before the first fetch."""
        return self._interested.get()

    @property
    def requested_properties(self) -> Optional[List[str]]:
        return self._properties.get()

    @property
    def client(self) -> Any:
        """The client that most recently called fetch()."""
        return self._client

    @property
    def parser(self) -> Any:
        return self._parser

    @property
    def cache(self) -> Dict[str, Any]:
        """Scratch space for computed results, dropped on cleanup()."""
        if self._cached is None:
            self._cached = {}
        return self._cached

    @property
    def state(self) -> MessageState:
        if self.error is not None:
            return MessageState.failed
        signal = self._signal
        if signal is None or signal.cancelled():
            return MessageState.created
        if not signal.done():
            return MessageState.fetching
        return MessageState.succeeded

    # ── Fetch protocol ───────────────────────────────────────────────────────

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def fetch(
        self,
        client: Any,
        properties: Optional[Sequence[str]],
        interested: Optional[Sequence[str]],
    ) -> CompletionSignal:
        """
        Starts fetching more details about the message.

        The client is always replaced by the latest caller. Properties and
        interested modules are only stored by the first call, so a retry
        driven by another caller keeps the original intent.
        Must be called from inside a running event loop.
        """
        self._client = client
        self._properties.set(properties)
        self._interested.set(interested)

        if self._signal is not None and not self._signal.done():
            logger.warning(
                "fetch() called on %s message while a fetch is pending; "
                "the earlier signal will not be settled by this message",
                self.type,
            )
        self._signal = CompletionSignal(self._generation, self._is_current)
        return self._signal

    def _resolve(self, value: Any = None) -> bool:
        """Settles the pending fetch successfully. Called by the driving client."""
        if self._signal is None:
            return False
        return self._signal.resolve(value)

    def _error(self, code: Any, message: Optional[str] = None, details: Any = None) -> None:
        """
        Marks the message as errored out and fails the pending fetch, if any.
        Called by whoever implements property fetching.
        """
        self.error = code.value if isinstance(code, Enum) else code
        self.error_message = message
        self.error_details = details
        if self._signal is not None:
            self._signal.reject(FetchError(self.error, message, details))

    def cleanup(self) -> None:
        """
        Cleans up after a failed fetch.

        Interested modules and properties to fetch stay, as they are only
        generated by the client once.
        """
        self._generation += 1
        if self._signal is not None and not self._signal.done():
            self._signal.cancel()
        self._signal = None
        self._client = None
        self._cached = None
        self.error = None
        self.error_message = None
        self.error_details = None
        self.retries += 1

    # ── Serialization ────────────────────────────────────────────────────────

    def serialize(self) -> Dict[str, Any]:
        """
        Plain dict of the message state for logging and transport.

        Contains the declared fields of the variant, except callables and the
        error message/details when there is no error, plus the string-valued
        private attributes listed in DIAGNOSTIC_ATTRS.
        """
        exclude = {name for name in type(self).model_fields if callable(getattr(self, name))}
        if self.error is None:
            exclude.update(("error_message", "error_details"))
        data = self.model_dump(exclude=exclude, warnings=False)

        for name in self.DIAGNOSTIC_ATTRS:
            value = getattr(self, name, None)
            if isinstance(value, str):
                data[name] = value
        return data

    def __repr__(self) -> str:
        return f"<{type(self).__name__} type={self.type!r} state={self.state.value} retries={self.retries}>"
