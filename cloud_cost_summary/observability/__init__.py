"""
Logging setup for Cloud Cost Summary.
"""
