"""
Client that fills in requested properties of a message.

Drives the fetch protocol of a message:
  1. message.fetch() registers this client and the fetch intent
  2. every requested property is looked up by its plugin, in order
  3. results land on the message's declared fields
  4. the message is resolved, or marked as errored on the first failure

Plugins run in order and share the message cache, so a property whose
lookup is a by-product of an earlier one costs no extra request.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Sequence

import httpx
from enrichment.base import PropertyPlugin
from enrichment.revisions import DiffSizePlugin, PageSizePlugin
from enrichment.user_info import UserInfoPlugin
from ingestion.wiki_api import WikiAPI, WikiAPIError
from messages.base import Message
from models import ErrorCode

logger = logging.getLogger(__name__)


def default_plugins() -> list:
    return [DiffSizePlugin(), PageSizePlugin(), UserInfoPlugin()]


class Client:
    def __init__(self, plugins: Optional[Iterable[PropertyPlugin]] = None, wiki: Optional[WikiAPI] = None):
        self.plugins: Dict[str, PropertyPlugin] = {
            plugin.name: plugin for plugin in (default_plugins() if plugins is None else plugins)
        }
        self.wiki = wiki or WikiAPI()

    async def aclose(self) -> None:
        await self.wiki.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def enrich(
        self,
        message: Message,
        properties: Optional[Sequence[str]],
        interested: Optional[Sequence[str]],
    ) -> Any:
        """
        Fetch properties for message and wait for the outcome.

        On a retry, the properties and interested modules stored by the first
        fetch win over the arguments. Raises FetchError if the lookup failed.
        """
        signal = message.fetch(self, properties, interested)
        await self._lookup(message)
        return await signal

    async def _lookup(self, message: Message) -> None:
        # pylint: disable=protected-access
        for name in message.requested_properties or ():
            plugin = self.plugins.get(name)
            if plugin is None:
                message._error(ErrorCode.unknown_property, f"No plugin for property {name!r}", {"property": name})
                return

            try:
                values = await plugin.fetch(message, self.wiki)
            except httpx.TimeoutException as exc:
                message._error(ErrorCode.timeout, f"Fetching {name} timed out", {"property": name, "error": str(exc)})
                return
            except httpx.HTTPStatusError as exc:
                message._error(
                    ErrorCode.http_error,
                    f"Fetching {name} failed with HTTP {exc.response.status_code}",
                    {"property": name, "status_code": exc.response.status_code},
                )
                return
            except httpx.HTTPError as exc:
                message._error(ErrorCode.http_error, f"Fetching {name} failed: {exc}", {"property": name})
                return
            except WikiAPIError as exc:
                message._error(ErrorCode.api_error, exc.info, {"property": name, "code": exc.code})
                return
            except LookupError as exc:
                message._error(ErrorCode.missing_data, str(exc), {"property": name})
                return
            except Exception as exc:  # pylint: disable=broad-except
                logger.error("Plugin %s failed on %s message: %r", name, message.type, exc)
                message._error(
                    ErrorCode.plugin_error,
                    f"Fetching {name} failed: {exc}",
                    {"property": name, "error": type(exc).__name__},
                )
                return

            if not isinstance(values, dict):
                message._error(
                    ErrorCode.plugin_error,
                    f"Plugin for {name} returned {type(values).__name__}, expected dict",
                    {"property": name},
                )
                return

            # Check every field first so a rejected result writes nothing
            fields = type(message).model_fields
            rejected = [field for field in values if field not in fields or fields[field].frozen]
            if rejected:
                message._error(
                    ErrorCode.unsupported_property,
                    f"{type(message).__name__} cannot hold {name}",
                    {"property": name, "fields": rejected},
                )
                return
            for field, value in values.items():
                setattr(message, field, value)

        logger.debug("Fetched %s for %s message", message.requested_properties, message.type)
        message._resolve()
