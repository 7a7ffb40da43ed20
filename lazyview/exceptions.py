"""Custom exceptions for view resolution, compilation and evaluation."""

from pathlib import Path
from typing import Optional


class ViewError(Exception):
    """Base class for every error raised by lazyview."""


class ViewNotFound(ViewError):
    """
    Exception raised when no source file matches a view name and no valid
    compiled artifact exists.

    Attributes:
        name: The original dotted view name (e.g., 'admin.users.index')
        views_dir: Views root that was searched
    """

    def __init__(self, name: str, views_dir: Optional[Path] = None):
        self.name = name
        self.views_dir = views_dir

        parts = [f"View not found: '{name}'"]
        if views_dir is not None:
            parts.append(f"Searched in: {views_dir}")

        super().__init__("\n".join(parts))


class CompileError(ViewError):
    """
    Exception raised when a view source cannot be compiled or a compiled
    artifact cannot be loaded.

    Attributes:
        message: Error description
        source_path: Path to the view source (or artifact) involved
        original_error: The underlying error (e.g., a Jinja2 TemplateSyntaxError)
    """

    def __init__(
        self,
        message: str,
        source_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.source_path = source_path
        self.original_error = original_error

        parts = [message]

        if source_path is not None:
            parts.append(f"\nSource: {source_path}")

        if original_error is not None:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))


class EvaluationError(ViewError):
    """
    Exception raised when executing a view fails at runtime.

    Attributes:
        message: Error description
        path: Path of the artifact (or pass-through source) being executed
        original_error: The exception raised inside the template body
    """

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.path = path
        self.original_error = original_error

        parts = [message]

        if path is not None:
            parts.append(f"\nTemplate: {path}")

        if original_error is not None:
            parts.append(f"\nOriginal error: {type(original_error).__name__}: {original_error}")

        super().__init__("\n".join(parts))
