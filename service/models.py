"""
Pydantic models and enums: the data contracts for the relay.

Keeping them out of the message and client modules lets plugins, the
client and tests share schemas without circular imports.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes the client stores on a message. Messages never interpret them."""

    timeout = "timeout"
    http_error = "http_error"
    api_error = "api_error"
    missing_data = "missing_data"
    unknown_property = "unknown_property"
    unsupported_property = "unsupported_property"
    plugin_error = "plugin_error"


class MessageState(str, Enum):
    created = "created"
    fetching = "fetching"
    succeeded = "succeeded"
    failed = "failed"


# ── MediaWiki API contracts ──────────────────────────────────────────────────


class Revision(BaseModel):
    """One entry of prop=revisions with rvprop=ids|size."""

    revid: int
    parentid: Optional[int] = None
    size: int


class WikiUser(BaseModel):
    """One entry of list=users with usprop=editcount|groups."""

    name: str
    userid: Optional[int] = None
    editcount: int = 0
    groups: List[str] = []
