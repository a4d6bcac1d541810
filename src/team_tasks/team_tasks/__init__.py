"""Team Task Manager package.

This package is organized by feature modules (users, teams, tasks,
daily_work, ...) with a thin Flask controller layer over service and
repository layers.
"""

from .main import create_app

__all__ = ["create_app"]
