"""
Dispatch of enriched messages to the modules interested in them.

Each module subscribes with the message types it handles and the properties
it needs. plan() turns the subscriptions into the fetch intent for a message;
dispatch() hands the message to every interested module once it is fetched.
"""

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, List, Tuple

from messages.base import Message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Subscription:
    module: str
    handler: Callable[[Message], Any]
    types: FrozenSet[str]
    properties: Tuple[str, ...] = field(default=())


class Dispatcher:
    def __init__(self) -> None:
        self._subscriptions: Dict[str, Subscription] = {}

    def subscribe(self, module: str, handler: Callable[[Message], Any], types, properties=()) -> None:
        """Register module for the given message types. Re-subscribing replaces the entry."""
        self._subscriptions[module] = Subscription(module, handler, frozenset(types), tuple(properties))

    def unsubscribe(self, module: str) -> None:
        self._subscriptions.pop(module, None)

    def plan(self, message: Message) -> Tuple[List[str], List[str]]:
        """Return (properties, interested modules) for message, in subscription order."""
        properties: List[str] = []
        interested: List[str] = []
        for sub in self._subscriptions.values():
            if message.type not in sub.types:
                continue
            interested.append(sub.module)
            for name in sub.properties:
                if name not in properties:
                    properties.append(name)
        return properties, interested

    async def dispatch(self, message: Message) -> List[str]:
        """
        Call the handler of every module interested in message.

        Returns the modules that handled it. A failing handler is logged and
        does not keep the others from running.
        """
        notified: List[str] = []
        for module in message.interested or ():
            sub = self._subscriptions.get(module)
            if sub is None:
                logger.warning("Module %s is interested in a %s message but not subscribed", module, message.type)
                continue
            try:
                result = sub.handler(message)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:  # pylint: disable=broad-except
                logger.error("Module %s failed to handle %s message: %s", module, message.type, exc)
                continue
            notified.append(module)
        return notified
