"""
Package version information.
This is kept in a separate file to avoid circular import problems.
"""

__version__ = "0.1.0"
