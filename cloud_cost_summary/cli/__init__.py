"""
Command-line interface for Cloud Cost Summary.
"""
