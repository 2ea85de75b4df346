from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol


class OrderSinkError(Exception):
    """Base class for order persistence errors."""


class OrderSinkMissingError(OrderSinkError):
    def __init__(self, package: str, group: str) -> None:
        super().__init__(
            f"{package} is not installed. Install the optional group:\n"
            f"  pip install -e '.[{group}]'"
        )
        self.package = package


class OrderWriteError(OrderSinkError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Order write failed: {reason}")
        self.reason = reason


@dataclass(frozen=True, slots=True)
class OrderWriteResult:
    document_id: str
    timestamp: datetime | None


class OrderSink(Protocol):
    name: str

    def add_order(self, document: dict[str, Any]) -> OrderWriteResult: ...
