from __future__ import annotations

import importlib.metadata


def get_version_string() -> str:
    try:
        return importlib.metadata.version("editorview")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"
