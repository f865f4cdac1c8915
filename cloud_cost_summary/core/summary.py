"""
Cost summary assembly.

Runs the cost queries for one set of billing periods, in order, and
derives the percentage changes. Any failure aborts the whole summary.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, Optional

import structlog

from .amounts import UsageAmount
from .changes import percentage_change
from .errors import CostReportError
from .periods import BillingPeriods, TimeWindow

logger = structlog.get_logger()

STEP_MONTH_TO_DATE = "month-to-date cost"
STEP_SAME_PERIOD = "last month cost for same period"
STEP_LAST_MONTH_TOTAL = "last month's total cost"
STEP_FORECAST = "forecasted cost"


@dataclass(frozen=True)
class UsageWindow:
    """Cost attributed to a time window, as reported in JSON output."""
    window: TimeWindow
    cost: UsageAmount

    def to_dict(self) -> Dict[str, Any]:
        return {
            "usage_start": self.window.start_epoch,
            "usage_end": self.window.end_epoch,
            "usage_cost": _two_places(self.cost.amount),
        }


@dataclass(frozen=True)
class CostSummary:
    """Costs for one run plus the changes derived from them."""
    periods: BillingPeriods
    granularity: str
    month_to_date: UsageAmount
    same_period_last_month: UsageAmount
    last_month_total: UsageAmount
    forecast_remaining: UsageAmount

    @property
    def currency(self) -> str:
        return self.month_to_date.unit

    @property
    def forecast_total(self) -> UsageAmount:
        """Month-to-date spend plus the forecast for the rest of the month."""
        return self.month_to_date + self.forecast_remaining

    @property
    def change_vs_same_period(self) -> Optional[float]:
        return percentage_change(
            self.month_to_date.as_float(),
            self.same_period_last_month.as_float()
        )

    @property
    def change_vs_last_month_total(self) -> Optional[float]:
        return percentage_change(
            self.forecast_total.as_float(),
            self.last_month_total.as_float()
        )

    def to_payload(self) -> Dict[str, Any]:
        """Machine-readable form, wrapped in a top-level "data" key."""
        return {
            "data": {
                "granularity": self.granularity.lower(),
                "currency": self.currency.lower(),
                "month_to_date": UsageWindow(
                    self.periods.month_to_date, self.month_to_date
                ).to_dict(),
                "forecast": UsageWindow(
                    self.periods.forecast, self.forecast_remaining
                ).to_dict(),
                "last_month": UsageWindow(
                    self.periods.last_month, self.last_month_total
                ).to_dict(),
            }
        }


def _two_places(amount: Decimal) -> float:
    return float(amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _run_step(
    step: str,
    query: Callable[[TimeWindow], UsageAmount],
    window: TimeWindow,
    unit: Optional[str] = None
) -> UsageAmount:
    """Run one query, tagging failures with the step name."""
    if window.is_empty:
        # Cost Explorer rejects intervals whose start equals end
        logger.info("empty_window_skipped", step=step, date=str(window.start_date))
        return UsageAmount.zero(unit or "USD")

    try:
        return query(window)
    except CostReportError as e:
        raise e.for_step(step)


def build_cost_summary(provider, periods: BillingPeriods) -> CostSummary:
    """Query every amount needed for a summary, one call at a time.

    Args:
        provider: CostProvider to query
        periods: Billing periods for this run

    Returns:
        CostSummary for the periods

    Raises:
        CostReportError: If any query fails; step names the failing query
    """
    month_to_date = _run_step(STEP_MONTH_TO_DATE, provider.fetch_cost, periods.month_to_date)
    unit = month_to_date.unit

    same_period = _run_step(
        STEP_SAME_PERIOD, provider.fetch_cost, periods.last_month_comparison, unit
    )
    last_month_total = _run_step(
        STEP_LAST_MONTH_TOTAL, provider.fetch_cost, periods.last_month, unit
    )
    forecast = _run_step(STEP_FORECAST, provider.fetch_forecast, periods.forecast, unit)

    for step, amount in (
        (STEP_SAME_PERIOD, same_period),
        (STEP_LAST_MONTH_TOTAL, last_month_total),
        (STEP_FORECAST, forecast),
    ):
        if amount.unit != unit:
            logger.warning("currency_mismatch", step=step, expected=unit, actual=amount.unit)

    return CostSummary(
        periods=periods,
        granularity=provider.granularity.value,
        month_to_date=month_to_date,
        same_period_last_month=same_period,
        last_month_total=last_month_total,
        forecast_remaining=forecast,
    )
