"""
Write-once slot.

Used for the fetch intent of a message (requested properties and interested
modules): the first caller decides, later callers are ignored.
"""

from typing import Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")


class SetOnce(Generic[T]):
    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value: Optional[List[T]] = None

    @property
    def is_set(self) -> bool:
        return self._value is not None

    def set(self, value: Optional[Sequence[T]]) -> bool:
        """
        Store a copy of value if nothing was stored yet.

        Returns True when the value was taken. None never counts as a value;
        an empty sequence does.
        """
        if self._value is not None or value is None:
            return False
        self._value = list(value)
        return True

    def get(self) -> Optional[List[T]]:
        return self._value

    def __repr__(self) -> str:
        return f"SetOnce({self._value!r})"
