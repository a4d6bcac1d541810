from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import iso_utc_now
from ..common.responses import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.get(f"{container.settings.api_prefix}/health", endpoint="health")
    def health():
        return ok({"timestamp": iso_utc_now()}, message="Team Task Manager API is running")
