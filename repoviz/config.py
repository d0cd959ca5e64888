"""Configuration paths and analysis defaults."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("REPOVIZ_HOME", str(Path.home() / ".repoviz"))).expanduser()

SUPPORTED_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")
TYPESCRIPT_EXTENSIONS = (".ts", ".tsx")

# Directory names never descended into when collecting source files
SKIP_DIRS = {
    "node_modules", ".git", ".next", ".turbo", ".cache", "dist", "build",
    "out", "coverage", ".venv", "venv", "__pycache__", ".idea", ".vscode",
}

DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVEL_ENV = "REPOVIZ_LOG_LEVEL"
