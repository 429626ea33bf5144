"""
API routers.
"""

from . import projects, time_entries

__all__ = ["projects", "time_entries"]
