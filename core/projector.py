from typing import Any

from .actions.base import Operation


class ResultProjector:
    """Shapes a successful execute result into a bare flag or a record."""

    def __init__(self, detailed: bool = False) -> None:
        self.detailed = detailed

    def project(self, operation: Operation, result: Any) -> Any:
        if result is False:
            return False
        if self.detailed or operation.always_detailed:
            return result
        return True
