"""
Cost providers for Cloud Cost Summary.

Provides access to cloud cost-management APIs.
"""

from .aws import AwsCostExplorerProvider
from .base import CostProvider

__all__ = ["AwsCostExplorerProvider", "CostProvider"]
