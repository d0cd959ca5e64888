"""Error types raised by the analysis pipeline."""

from __future__ import annotations

from typing import Any, Dict, Optional


class RepoVizError(Exception):
    """Base class for every error the analysis core reports to its caller."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "error": type(self).__name__,
            "message": self.message,
            "statusCode": self.status_code,
        }
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(RepoVizError):
    """Input does not have the expected shape."""

    status_code = 422


class ParseError(RepoVizError):
    """A source file is not valid syntax for its declared language."""

    def __init__(self, path: str, cause: Any = None) -> None:
        super().__init__(
            f"Failed to parse file: {path}",
            details={"path": path, "cause": str(cause) if cause is not None else None},
        )
        self.path = path
        self.cause = cause


class GrammarUnavailableError(RepoVizError):
    """No tree-sitter grammar could be loaded for a language."""

    def __init__(self, language: str, reason: str = "") -> None:
        message = f"No tree-sitter grammar available for '{language}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, details={"language": language})
        self.language = language
