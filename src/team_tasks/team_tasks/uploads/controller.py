from __future__ import annotations

from flask import Flask, send_from_directory

from ..container import Container


def register(app: Flask, container: Container) -> None:
    root = container.files.root.resolve()

    @app.get("/uploads/<path:filename>", endpoint="uploaded_file")
    def uploaded_file(filename: str):
        # send_from_directory refuses paths that escape the root
        return send_from_directory(root, filename)
