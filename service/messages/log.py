"""Log entry message (blocks, moves, uploads, rights changes...)."""

from typing import Any, List, Optional

from messages.base import Message


class LogMessage(Message):
    title: Optional[str] = None
    user: Optional[str] = None
    log_type: Optional[str] = None
    log_action: Optional[str] = None

    # Filled in by the client
    user_edit_count: Optional[int] = None
    user_groups: Optional[List[str]] = None

    def __init__(self, parser: Any, raw: str, type: str = "log", **fields: Any) -> None:  # pylint: disable=redefined-builtin
        super().__init__(parser, raw, type, **fields)
