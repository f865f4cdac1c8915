"""
Cost provider interface.

A provider answers two questions about a time window: what it cost and
what it is forecast to cost.
"""

from abc import ABC, abstractmethod

from ..config.loader import Granularity
from ..core.amounts import UsageAmount
from ..core.periods import TimeWindow


class CostProvider(ABC):
    """Source of cost and forecast amounts."""

    granularity: Granularity = Granularity.DAILY

    @abstractmethod
    def fetch_cost(self, window: TimeWindow) -> UsageAmount:
        """Total unblended cost over the window.

        Raises:
            CostReportError: If the query fails or the response is unusable
        """

    @abstractmethod
    def fetch_forecast(self, window: TimeWindow) -> UsageAmount:
        """Forecasted unblended cost for the window.

        Raises:
            CostReportError: If the query fails or the response is unusable
        """
