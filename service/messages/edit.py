"""Page edit message, e.g. `[[Page]] M https://... * User * (+12) summary`."""

from typing import Any, ClassVar, List, Optional, Tuple

from messages.base import Message
from pydantic import PrivateAttr


class EditMessage(Message):
    DIAGNOSTIC_ATTRS: ClassVar[Tuple[str, ...]] = ("_wiki",)

    title: Optional[str] = None
    user: Optional[str] = None
    revid: Optional[int] = None
    oldid: Optional[int] = None
    summary: Optional[str] = None

    # Filled in by the client
    diff_size: Optional[int] = None
    page_size: Optional[int] = None
    user_edit_count: Optional[int] = None
    user_groups: Optional[List[str]] = None

    _wiki: Optional[str] = PrivateAttr(None)

    def __init__(self, parser: Any, raw: str, type: str = "edit", **fields: Any) -> None:  # pylint: disable=redefined-builtin
        super().__init__(parser, raw, type, **fields)
        self._wiki = getattr(parser, "wiki", None)
