"""
Enrichment pipeline for one message: plan → fetch → dispatch.

Orchestrates the stages without knowing the feed reader or any retry
scheduler. The pipeline can be triggered from:
  - The feed reader (every new message)
  - A retry queue (messages that failed earlier)
  - Tests (directly)
"""

import asyncio
import logging
from typing import Iterable, List

from ingestion.client import Client
from ingestion.dispatcher import Dispatcher
from messages.base import Message
from messages.errors import FetchError

logger = logging.getLogger(__name__)


async def process_message(message: Message, client: Client, dispatcher: Dispatcher) -> dict:
    """
    Execute one enrichment attempt for message.

    Returns a summary dict for the caller to log or act on.
    Never raises. A failed attempt leaves the message cleaned up and ready
    for another call; when that happens is up to the caller.
    """
    try:
        properties, interested = dispatcher.plan(message)
        if not (message.interested or interested):
            logger.debug("No module is interested in %s message, skipping", message.type)
            return {"status": "ignored"}

        try:
            await client.enrich(message, properties, interested)
        except FetchError as exc:
            logger.warning("Fetch failed (attempt %d): %s, state=%s", message.retries + 1, exc, message.serialize())
            message.cleanup()
            return {"status": "failed", "error": exc.code, "retries": message.retries}

        notified = await dispatcher.dispatch(message)
        logger.info("Dispatched %s message to %s", message.type, ", ".join(notified) or "nobody")
        return {"status": "success", "notified": notified, "retries": message.retries}

    except Exception as exc:  # pylint: disable=broad-except
        error_msg = str(exc)
        logger.error("Unhandled pipeline error: %s", error_msg)
        return {"status": "failed", "error": error_msg, "retries": message.retries}


async def process_batch(messages: Iterable[Message], client: Client, dispatcher: Dispatcher) -> List[dict]:
    """
    Process distinct messages concurrently. Results come back in input order.

    A message must appear only once: a single message is never fetched by
    two attempts at the same time.
    """
    batch = list(messages)
    if len({id(message) for message in batch}) != len(batch):
        raise ValueError("process_batch() got the same message more than once")
    return await asyncio.gather(*(process_message(message, client, dispatcher) for message in batch))
