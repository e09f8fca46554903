"""
User-facing notifications.

Workflows and stores never print; they push a Toast onto a queue and the caller
(the API layer, the demo script) decides how to present it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Toast:
    level: str                 # success / error / info
    message: str

    def to_dict(self) -> dict:
        return {"level": self.level, "message": self.message}


class ToastQueue:
    def __init__(self) -> None:
        self._items: List[Toast] = []

    def push(self, level: str, message: str) -> Toast:
        toast = Toast(level=level, message=message)
        self._items.append(toast)
        return toast

    def success(self, message: str) -> Toast:
        return self.push("success", message)

    def error(self, message: str) -> Toast:
        return self.push("error", message)

    def info(self, message: str) -> Toast:
        return self.push("info", message)

    @property
    def items(self) -> List[Toast]:
        return list(self._items)

    @property
    def last(self) -> Toast | None:
        return self._items[-1] if self._items else None

    def drain(self) -> List[Toast]:
        items, self._items = self._items, []
        return items

    def __len__(self) -> int:
        return len(self._items)
