"""
Abstract base class for all property plugins.

Fetching a new property = new file implementing fetch().
The client calls plugins by property name without knowing their internals.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from ingestion.wiki_api import WikiAPI
from messages.base import Message


class PropertyPlugin(ABC):
    # Property name clients ask for, e.g. "diff_size"
    name: str

    @abstractmethod
    async def fetch(self, message: Message, wiki: WikiAPI) -> Dict[str, Any]:
        """
        Looks the property up for message and returns the message fields to set.
        Must not set the fields itself.

        Raises LookupError when the message or the wiki lacks the data needed.
        """


def require(message: Message, field: str) -> Any:
    """Return a parsed field of message, raising LookupError when it is absent."""
    value = getattr(message, field, None)
    if value is None:
        raise LookupError(f"{message.type} message has no {field}")
    return value
