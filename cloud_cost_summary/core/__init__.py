"""
Core modules for Cloud Cost Summary.

This package contains billing period calculation, amount parsing,
percentage changes and summary assembly.
"""
