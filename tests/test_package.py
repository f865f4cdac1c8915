"""
Tests for package layout.
"""

import importlib

import pytest


@pytest.mark.parametrize("name", [
    "cloud_cost_summary.cli",
    "cloud_cost_summary.config",
    "cloud_cost_summary.core",
    "cloud_cost_summary.observability",
    "cloud_cost_summary.providers",
])
def test_subpackages_are_documented(name):
    """Test every subpackage imports and carries a module docstring."""
    module = importlib.import_module(name)
    assert module.__doc__ and module.__doc__.strip()
