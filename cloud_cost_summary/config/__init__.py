"""
Configuration loading for Cloud Cost Summary.
"""
