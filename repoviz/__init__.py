"""repoviz: dependency graphs and drift detection for TypeScript / JavaScript sources."""

from .analyzer import ProjectAnalyzer, analyze_project, detect_drift
from .errors import GrammarUnavailableError, ParseError, RepoVizError, ValidationError
from .models import (
    AnalysisResult,
    DependencyNode,
    DependencySnapshot,
    DriftResult,
    ExportInfo,
    FileChange,
    FileInput,
    ImportInfo,
    ParsedFile,
)

__version__ = "0.1.0"

__all__ = [
    "AnalysisResult",
    "DependencyNode",
    "DependencySnapshot",
    "DriftResult",
    "ExportInfo",
    "FileChange",
    "FileInput",
    "GrammarUnavailableError",
    "ImportInfo",
    "ParseError",
    "ParsedFile",
    "ProjectAnalyzer",
    "RepoVizError",
    "ValidationError",
    "analyze_project",
    "detect_drift",
]
