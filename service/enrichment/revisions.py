"""
Revision-based plugins: diff size and page size of an edit.

Both read the same prop=revisions response, so it is stored in the message
cache and fetched once per attempt.
"""

import logging
from typing import Any, Dict

from enrichment.base import PropertyPlugin, require
from ingestion.wiki_api import WikiAPI
from messages.base import Message
from models import Revision

logger = logging.getLogger(__name__)

_CACHE_KEY = "revisions"


async def load_revisions(message: Message, wiki: WikiAPI) -> Dict[int, Revision]:
    """Return {revid: Revision} for the message's new and old revision."""
    cached = message.cache.get(_CACHE_KEY)
    if cached is not None:
        return cached

    revid = require(message, "revid")
    revids = [revid]
    oldid = getattr(message, "oldid", None)
    if oldid:
        revids.insert(0, oldid)

    data = await wiki.query(prop="revisions", revids="|".join(str(r) for r in revids), rvprop="ids|size")
    if data.get("badrevids"):
        raise LookupError(f"Unknown revisions: {', '.join(str(r) for r in data['badrevids'])}")

    revisions: Dict[int, Revision] = {}
    for page in data.get("pages", {}).values():
        for entry in page.get("revisions", []):
            revision = Revision(**entry)
            revisions[revision.revid] = revision

    logger.debug("Loaded %d revisions for %s", len(revisions), revids)
    message.cache[_CACHE_KEY] = revisions
    return revisions


class DiffSizePlugin(PropertyPlugin):
    """Byte delta of an edit. Page creations count from zero."""

    name = "diff_size"

    async def fetch(self, message: Message, wiki: WikiAPI) -> Dict[str, Any]:
        revisions = await load_revisions(message, wiki)
        new = revisions.get(message.revid)
        if new is None:
            raise LookupError(f"Revision {message.revid} not returned by the wiki")

        old_size = 0
        oldid = getattr(message, "oldid", None)
        if oldid:
            old = revisions.get(oldid)
            if old is None:
                raise LookupError(f"Revision {oldid} not returned by the wiki")
            old_size = old.size
        return {"diff_size": new.size - old_size}


class PageSizePlugin(PropertyPlugin):
    """Size of the page after the edit."""

    name = "page_size"

    async def fetch(self, message: Message, wiki: WikiAPI) -> Dict[str, Any]:
        revisions = await load_revisions(message, wiki)
        new = revisions.get(message.revid)
        if new is None:
            raise LookupError(f"Revision {message.revid} not returned by the wiki")
        return {"page_size": new.size}
