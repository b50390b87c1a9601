"""Uniform operation envelope returned by every command handler."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a checkout or order operation.

    Business-rule failures are values, not exceptions: ``success`` is False and
    ``message`` carries the localized explanation.
    """

    success: bool
    message: str = ""
    data: Any = None

    def to_dict(self) -> dict:
        return {"success": self.success, "message": self.message, "data": self.data}


def ok(message: str = "", data: Any = None) -> OperationResult:
    return OperationResult(success=True, message=message, data=data)


def fail(message: str, data: Any = None) -> OperationResult:
    return OperationResult(success=False, message=message, data=data)
