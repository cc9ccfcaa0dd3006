"""
User info plugin.

Adds the acting user's edit count and groups, which moderation modules use
to tell new accounts from trusted ones.
"""

from typing import Any, Dict

from enrichment.base import PropertyPlugin, require
from ingestion.wiki_api import WikiAPI
from messages.base import Message
from models import WikiUser


class UserInfoPlugin(PropertyPlugin):
    name = "user_info"

    async def fetch(self, message: Message, wiki: WikiAPI) -> Dict[str, Any]:
        username = require(message, "user")
        data = await wiki.query(list="users", ususers=username, usprop="editcount|groups")
        users = data.get("users", [])
        # Anonymous editors come back as "invalid", deleted accounts as "missing"
        if not users or "missing" in users[0] or "invalid" in users[0]:
            raise LookupError(f"No account for user {username!r}")
        user = WikiUser(**users[0])
        return {"user_edit_count": user.editcount, "user_groups": user.groups}
