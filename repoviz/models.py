"""Core data models shared by the parser, graph builder, renderer and drift detector.

Every model serializes to the JSON shape used by snapshot files via
``to_dict``. ``AnalysisResult.from_dict`` and ``DriftResult.from_dict``
validate a payload against :mod:`repoviz.schemas` before rebuilding it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from .errors import ValidationError
from .schemas import (
    AnalysisPayload,
    DependencySnapshotPayload,
    DriftPayload,
    ParsedFilePayload,
    check_change_sides,
    validate_payload,
)

Language = Literal["typescript", "javascript"]
ExportKind = Literal["function", "class", "variable", "interface", "type"]
ChangeType = Literal["added", "removed", "modified"]

LANGUAGES = ("typescript", "javascript")
EXPORT_KINDS = ("function", "class", "variable", "interface", "type")
CHANGE_TYPES = ("added", "removed", "modified")


# ===================================================================
# Inputs and per-file results
# ===================================================================

@dataclass(frozen=True)
class FileInput:
    """One source file supplied by the caller."""
    path: str
    content: str
    language: Language

    def __post_init__(self) -> None:
        if not self.path:
            raise ValidationError("File path is required")
        if self.language not in LANGUAGES:
            raise ValidationError(
                f"Unsupported language '{self.language}' for {self.path}",
                details={"path": self.path, "allowed": list(LANGUAGES)},
            )


@dataclass(frozen=True)
class ExportInfo:
    name: str
    kind: ExportKind

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.kind}


@dataclass(frozen=True)
class ImportInfo:
    source: str
    specifiers: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "specifiers": list(self.specifiers)}


@dataclass(frozen=True)
class ParsedFile:
    path: str
    exports: List[ExportInfo] = field(default_factory=list)
    imports: List[ImportInfo] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "exports": [e.to_dict() for e in self.exports],
            "imports": [i.to_dict() for i in self.imports],
        }

    @classmethod
    def _from_payload(cls, payload: ParsedFilePayload) -> "ParsedFile":
        return cls(
            path=payload.path,
            exports=[ExportInfo(name=e.name, kind=e.kind) for e in payload.exports],
            imports=[ImportInfo(source=i.source, specifiers=list(i.specifiers)) for i in payload.imports],
        )


# ===================================================================
# Graph and snapshot
# ===================================================================

@dataclass(frozen=True)
class DependencyNode:
    """A file in the dependency graph; ``id`` always equals ``path``."""
    path: str
    dependencies: List[str] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.path

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "path": self.path, "dependencies": list(self.dependencies)}


@dataclass(frozen=True)
class AnalysisResult:
    """Output of one analysis run; persisted and exchanged as a snapshot."""
    files: List[ParsedFile] = field(default_factory=list)
    graph: List[DependencyNode] = field(default_factory=list)
    diagram: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": [f.to_dict() for f in self.files],
            "graph": [n.to_dict() for n in self.graph],
            "mermaid": self.diagram,
        }

    @classmethod
    def from_dict(cls, payload: Any) -> "AnalysisResult":
        """Rebuild a result from its JSON form.

        Raises:
            ValidationError: The payload does not match the snapshot shape;
                ``details`` lists every offending field path.
        """
        parsed: AnalysisPayload = validate_payload(AnalysisPayload, payload, "analysis result")
        return cls(
            files=[ParsedFile._from_payload(f) for f in parsed.files],
            graph=[DependencyNode(path=n.path, dependencies=list(n.dependencies)) for n in parsed.graph],
            diagram=parsed.diagram,
        )


# ===================================================================
# Drift
# ===================================================================

@dataclass(frozen=True)
class DependencySnapshot:
    dependencies: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"dependencies": list(self.dependencies)}


@dataclass(frozen=True)
class FileChange:
    """Change of a single file between two snapshots."""
    path: str
    change_type: ChangeType
    before: Optional[DependencySnapshot] = None
    after: Optional[DependencySnapshot] = None

    def __post_init__(self) -> None:
        if self.change_type not in CHANGE_TYPES:
            raise ValueError(f"Unknown change type: {self.change_type}")
        check_change_sides(self.change_type, self.before, self.after)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"path": self.path, "changeType": self.change_type}
        if self.before is not None:
            payload["before"] = self.before.to_dict()
        if self.after is not None:
            payload["after"] = self.after.to_dict()
        return payload


def _snapshot(payload: Optional[DependencySnapshotPayload]) -> Optional[DependencySnapshot]:
    if payload is None:
        return None
    return DependencySnapshot(dependencies=list(payload.dependencies))


@dataclass(frozen=True)
class DriftResult:
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    changes: List[FileChange] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "added": list(self.added),
            "removed": list(self.removed),
            "modified": list(self.modified),
            "changes": [c.to_dict() for c in self.changes],
        }

    @classmethod
    def from_dict(cls, payload: Any) -> "DriftResult":
        parsed: DriftPayload = validate_payload(DriftPayload, payload, "drift result")
        return cls(
            added=list(parsed.added),
            removed=list(parsed.removed),
            modified=list(parsed.modified),
            changes=[
                FileChange(
                    path=c.path,
                    change_type=c.change_type,
                    before=_snapshot(c.before),
                    after=_snapshot(c.after),
                )
                for c in parsed.changes
            ],
        )
