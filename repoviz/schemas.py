"""Pydantic schemas for snapshot and drift JSON payloads.

These only validate the wire shape; the analysis pipeline works on the
frozen dataclasses in :mod:`repoviz.models`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

# ═══════════════════════════════════════════════════════════════
# Analysis payloads
# ═══════════════════════════════════════════════════════════════


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ExportPayload(_Payload):
    name: str
    kind: Literal["function", "class", "variable", "interface", "type"] = Field(
        ..., validation_alias=AliasChoices("type", "kind"),
    )


class ImportPayload(_Payload):
    source: str
    specifiers: List[str] = Field(default_factory=list)


class ParsedFilePayload(_Payload):
    path: str
    exports: List[ExportPayload] = Field(default_factory=list)
    imports: List[ImportPayload] = Field(default_factory=list)


class DependencyNodePayload(_Payload):
    path: str
    dependencies: List[str] = Field(default_factory=list)


class AnalysisPayload(_Payload):
    files: List[ParsedFilePayload]
    graph: List[DependencyNodePayload]
    diagram: str = Field(..., validation_alias=AliasChoices("mermaid", "diagram"))


# ═══════════════════════════════════════════════════════════════
# Drift payloads
# ═══════════════════════════════════════════════════════════════


def check_change_sides(change_type: str, before: Any, after: Any) -> None:
    """Raise ``ValueError`` unless *before* / *after* fit *change_type*."""
    if change_type == "added" and (after is None or before is not None):
        raise ValueError("Added changes carry only an 'after' snapshot")
    if change_type == "removed" and (before is None or after is not None):
        raise ValueError("Removed changes carry only a 'before' snapshot")
    if change_type == "modified" and (before is None or after is None):
        raise ValueError("Modified changes must have both 'before' and 'after'")


class DependencySnapshotPayload(_Payload):
    dependencies: List[str]


class FileChangePayload(_Payload):
    path: str
    change_type: Literal["added", "removed", "modified"] = Field(
        ..., validation_alias=AliasChoices("changeType", "change_type"),
    )
    before: Optional[DependencySnapshotPayload] = None
    after: Optional[DependencySnapshotPayload] = None

    @model_validator(mode="after")
    def _sides_match_type(self) -> "FileChangePayload":
        check_change_sides(self.change_type, self.before, self.after)
        return self


class DriftPayload(_Payload):
    added: List[str]
    removed: List[str]
    modified: List[str]
    changes: List[FileChangePayload]


# ═══════════════════════════════════════════════════════════════
# Validation entry point
# ═══════════════════════════════════════════════════════════════


def validate_payload(schema: type, payload: Any, what: str) -> Any:
    """Validate *payload* against *schema*, raising repoviz's ``ValidationError``.

    Each pydantic error becomes a ``{"path", "message"}`` entry of the
    error's ``details``, with the location joined by dots.
    """
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid {what} payload", details=_problems(exc)) from exc


def _problems(exc: PydanticValidationError) -> List[Dict[str, str]]:
    return [
        {"path": ".".join(str(part) for part in err["loc"]) or "<root>", "message": err["msg"]}
        for err in exc.errors()
    ]
