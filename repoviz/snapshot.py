"""JSON snapshot files of analysis results."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .errors import ValidationError
from .models import AnalysisResult


def dumps(result: AnalysisResult) -> str:
    return json.dumps(result.to_dict(), indent=2)


def loads(text: str) -> AnalysisResult:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Snapshot is not valid JSON: {exc}") from exc
    return AnalysisResult.from_dict(payload)


def default_snapshot_name(now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now(timezone.utc)).isoformat().replace(":", "-")
    return f"snapshot-{stamp}.json"


def save_snapshot(result: AnalysisResult, path: Path) -> Path:
    """Write *result* to *path* (a directory gets a timestamped file name)."""
    if path.is_dir():
        path = path / default_snapshot_name()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps(result), encoding="utf-8")
    return path


def load_snapshot(path: Path) -> AnalysisResult:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValidationError(f"Cannot read snapshot {path}: {exc}") from exc
    return loads(text)
