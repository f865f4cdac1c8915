"""
Configuration management and loading.

Handles provider credentials and report settings from a YAML file.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

import yaml


DEFAULT_REGION = "us-east-1"


class Granularity(Enum):
    """Sub-period size used when summing cost over a window."""
    DAILY = "DAILY"
    MONTHLY = "MONTHLY"


@dataclass(frozen=True)
class ProviderConfig:
    """Credentials and endpoint settings for the cost provider."""
    region: str = DEFAULT_REGION
    profile: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None

    def __post_init__(self):
        """Validate static credentials come in pairs."""
        if not self.region:
            raise ValueError("region cannot be empty")
        if bool(self.access_key_id) != bool(self.secret_access_key):
            raise ValueError("access_key_id and secret_access_key must be set together")
        if self.session_token and not self.access_key_id:
            raise ValueError("session_token requires access_key_id and secret_access_key")

    @property
    def has_static_credentials(self) -> bool:
        return bool(self.access_key_id)


@dataclass(frozen=True)
class ReportSettings:
    """Settings that shape the cost queries."""
    granularity: Granularity = Granularity.DAILY


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration."""
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    report: ReportSettings = field(default_factory=ReportSettings)

    def with_overrides(
        self,
        region: Optional[str] = None,
        profile: Optional[str] = None,
        granularity: Optional[Granularity] = None
    ) -> "AppConfig":
        """Return a copy with command-line overrides applied."""
        provider = self.provider
        if region:
            provider = replace(provider, region=region)
        if profile:
            provider = replace(provider, profile=profile)

        report = self.report
        if granularity is not None:
            report = replace(report, granularity=granularity)

        return AppConfig(provider=provider, report=report)


def load_config(path: Optional[str] = None) -> AppConfig:
    """Load and validate configuration from a YAML file.

    Strict validation ensures a typo in the config never silently falls
    back to the ambient credential chain.

    Args:
        path: Path to YAML configuration file, or None for defaults

    Returns:
        Validated AppConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    if path is None:
        return AppConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")

    allowed_top_keys = {'provider', 'report'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    provider = _parse_provider_config(raw_config.get('provider') or {})
    report = _parse_report_settings(raw_config.get('report') or {})

    return AppConfig(provider=provider, report=report)


def _parse_provider_config(data: Dict) -> ProviderConfig:
    """Parse and validate the provider section.

    Raises:
        ValueError: If configuration is invalid
    """
    if not isinstance(data, dict):
        raise ValueError("'provider' must be a dictionary")

    allowed_keys = {'region', 'profile', 'access_key_id', 'secret_access_key', 'session_token'}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown keys in provider: {unknown_keys}")

    for key, value in data.items():
        if value is not None and not isinstance(value, str):
            raise ValueError(f"'{key}' in provider must be a string")

    return ProviderConfig(
        region=data.get('region') or DEFAULT_REGION,
        profile=data.get('profile'),
        access_key_id=data.get('access_key_id'),
        secret_access_key=data.get('secret_access_key'),
        session_token=data.get('session_token')
    )


def _parse_report_settings(data: Dict) -> ReportSettings:
    """Parse and validate the report section."""
    if not isinstance(data, dict):
        raise ValueError("'report' must be a dictionary")

    allowed_keys = {'granularity'}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown keys in report: {unknown_keys}")

    if 'granularity' not in data:
        return ReportSettings()

    return ReportSettings(granularity=parse_granularity(data['granularity']))


def parse_granularity(value) -> Granularity:
    """Parse a granularity name case-insensitively.

    Raises:
        ValueError: If the value is not a known granularity
    """
    if not isinstance(value, str):
        raise ValueError("'granularity' must be a string")
    try:
        return Granularity(value.upper())
    except ValueError:
        valid = [g.value.lower() for g in Granularity]
        raise ValueError(f"'granularity' must be one of: {valid}")
