"""
AWS Cost Explorer provider.

Queries GetCostAndUsage and GetCostForecast through boto3. Cost Explorer
takes calendar dates and treats the end date as exclusive.
"""

from decimal import Decimal
from typing import Any, Dict, Optional

import boto3
import structlog
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    NoCredentialsError,
    PartialCredentialsError,
    ProfileNotFound,
)

from ..config.loader import Granularity, ProviderConfig
from ..core.amounts import UsageAmount, parse_amount
from ..core.errors import (
    AmountParseError,
    ConfigurationError,
    RemoteCallError,
    ResponseShapeError,
)
from ..core.periods import TimeWindow
from .base import CostProvider

logger = structlog.get_logger()

COST_METRIC = "UnblendedCost"
FORECAST_METRIC = "UNBLENDED_COST"
DATE_FORMAT = "%Y-%m-%d"


def create_cost_explorer_client(config: ProviderConfig):
    """Build a Cost Explorer client from injected configuration.

    Static keys take precedence; otherwise the named profile or the default
    credential chain is used.

    Raises:
        ConfigurationError: If the profile does not exist
    """
    session_kwargs: Dict[str, Any] = {}
    if config.has_static_credentials:
        session_kwargs["aws_access_key_id"] = config.access_key_id
        session_kwargs["aws_secret_access_key"] = config.secret_access_key
        if config.session_token:
            session_kwargs["aws_session_token"] = config.session_token
    elif config.profile:
        session_kwargs["profile_name"] = config.profile

    try:
        session = boto3.Session(**session_kwargs)
        return session.client("ce", region_name=config.region)
    except ProfileNotFound as e:
        raise ConfigurationError(f"AWS profile not found: {config.profile}") from e
    except BotoCoreError as e:
        raise ConfigurationError(f"Could not create Cost Explorer client: {e}") from e


def _time_period(window: TimeWindow) -> Dict[str, str]:
    return {
        "Start": window.start_date.strftime(DATE_FORMAT),
        "End": window.end_date.strftime(DATE_FORMAT),
    }


class AwsCostExplorerProvider(CostProvider):
    """CostProvider backed by AWS Cost Explorer."""

    def __init__(
        self,
        config: Optional[ProviderConfig] = None,
        granularity: Granularity = Granularity.DAILY,
        client=None
    ):
        self.config = config or ProviderConfig()
        self.granularity = granularity
        self._client = client

    @property
    def client(self):
        """Lazily created boto3 client, reused for every query."""
        if self._client is None:
            self._client = create_cost_explorer_client(self.config)
        return self._client

    def fetch_cost(self, window: TimeWindow) -> UsageAmount:
        """Sum UnblendedCost over every sub-period of the window."""
        time_period = _time_period(window)
        logger.debug("cost_query_started", granularity=self.granularity.value, **time_period)

        request = {
            "TimePeriod": time_period,
            "Granularity": self.granularity.value,
            "Metrics": [COST_METRIC],
        }

        total = Decimal("0")
        unit: Optional[str] = None
        periods_seen = 0
        next_token: Optional[str] = None

        while True:
            if next_token:
                response = self._call("get_cost_and_usage", NextPageToken=next_token, **request)
            else:
                response = self._call("get_cost_and_usage", **request)

            for result in response.get("ResultsByTime", []):
                metric = result.get("Total", {}).get(COST_METRIC)
                if metric is None:
                    raise ResponseShapeError(
                        f"{COST_METRIC} missing for period starting "
                        f"{result.get('TimePeriod', {}).get('Start')}"
                    )
                total += parse_amount(metric.get("Amount"), allow_negative=True).unwrap()
                unit = unit or metric.get("Unit")
                periods_seen += 1

            next_token = response.get("NextPageToken")
            if not next_token:
                break

        if periods_seen == 0:
            raise ResponseShapeError(
                f"No cost results returned for {time_period['Start']} to {time_period['End']}"
            )
        if total < 0:
            raise AmountParseError(f"Total cost is negative: {total}")

        logger.debug("cost_query_completed", periods=periods_seen, amount=str(total), unit=unit)
        return UsageAmount(amount=total, unit=unit or "USD")

    def fetch_forecast(self, window: TimeWindow) -> UsageAmount:
        """Forecasted UnblendedCost for the window as a single total."""
        time_period = _time_period(window)
        logger.debug("forecast_query_started", **time_period)

        response = self._call(
            "get_cost_forecast",
            TimePeriod=time_period,
            Granularity=Granularity.MONTHLY.value,
            Metric=FORECAST_METRIC,
        )

        total = response.get("Total")
        if not total or total.get("Amount") is None:
            raise ResponseShapeError(
                f"No forecast returned for {time_period['Start']} to {time_period['End']}"
            )

        amount = parse_amount(total["Amount"]).unwrap()
        logger.debug("forecast_query_completed", amount=str(amount), unit=total.get("Unit"))
        return UsageAmount(amount=amount, unit=total.get("Unit") or "USD")

    def _call(self, operation: str, **kwargs) -> Dict[str, Any]:
        """Invoke a Cost Explorer operation, mapping botocore failures."""
        try:
            return getattr(self.client, operation)(**kwargs)
        except (NoCredentialsError, PartialCredentialsError) as e:
            raise ConfigurationError(f"AWS credentials unavailable: {e}") from e
        except ClientError as e:
            error = e.response.get("Error", {})
            code = error.get("Code") or "ClientError"
            raise RemoteCallError(f"{code}: {error.get('Message') or e}") from e
        except BotoCoreError as e:
            raise RemoteCallError(str(e)) from e
