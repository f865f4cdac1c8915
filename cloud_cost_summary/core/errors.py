"""
Error taxonomy for cost reporting.

Every error is fatal for a run: the CLI reports which step failed and exits.
"""

from typing import Optional


class CostReportError(Exception):
    """Base class for all cost report failures."""

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.step = step

    def for_step(self, step: str) -> "CostReportError":
        """Attach the name of the failing step if none is set yet."""
        if self.step is None:
            self.step = step
        return self

    def __str__(self) -> str:
        return self.message


class ConfigurationError(CostReportError):
    """Configuration or authentication failure."""


class RemoteCallError(CostReportError):
    """Network or API error returned by a cost or forecast query."""


class ResponseShapeError(CostReportError):
    """Provider response is missing the data we queried for."""


class AmountParseError(ResponseShapeError):
    """Provider returned an amount that is not a valid non-negative decimal."""
