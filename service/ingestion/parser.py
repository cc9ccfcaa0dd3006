"""
Message factory used by the feed reader.

Classifying a raw line and extracting its fields happens before this point;
the parser only maps the type tag to a message class and builds the message.
"""

import logging
from typing import Any, Dict, Optional, Type

from messages.base import Message
from messages.edit import EditMessage
from messages.log import LogMessage

logger = logging.getLogger(__name__)

_DEFAULT_TYPES: Dict[str, Type[Message]] = {
    "edit": EditMessage,
    "log": LogMessage,
}


class Parser:
    def __init__(self, wiki: Optional[str] = None):
        self.wiki = wiki
        self._types: Dict[str, Type[Message]] = dict(_DEFAULT_TYPES)

    def register(self, type_tag: str, cls: Type[Message]) -> None:
        """Route messages tagged type_tag to cls. Replaces any earlier mapping."""
        self._types[type_tag] = cls

    def create(self, raw: str, type_tag: str, **fields: Any) -> Message:
        """Build the message variant registered for type_tag."""
        cls = self._types.get(type_tag)
        if cls is None:
            logger.debug("No message class for type %r, using base Message", type_tag)
            cls = Message
        return cls(self, raw, type_tag, **fields)
