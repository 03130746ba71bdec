"""
Shared utilities for the Library API.
"""
