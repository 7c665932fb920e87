"""
Utilities Module
================

Helper functions and utility classes.
"""

from questlog.utils.helpers import calendar_day, resolve_timezone, utc_now

__all__ = ["calendar_day", "resolve_timezone", "utc_now"]
