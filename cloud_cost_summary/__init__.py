"""
Cloud Cost Summary.

Month-to-date cloud spend compared with last month, with a forecast for
the rest of the month.
"""

__version__ = "0.1.0"
