"""
View Path Resolution

Maps dotted view names to source files under the views root and to compiled
artifact paths under the compiled root.

Examples:
    >>> resolver = PathResolver(Path("views"))
    >>> resolver.normalize("admin.users.index")
    'admin/users/index'
    >>> resolver.compiled_path("admin/users/index")
    PosixPath('views/admin/users/index.compiled.py')
"""

import glob
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Recognized view source extensions, in resolution priority order.
# When several sources share a name, the first extension listed here wins.
VIEW_EXTENSIONS = (
    ".view.jinja",
    ".view.html",
    ".view.js",
    ".view.css",
)

# Served verbatim, never compiled
PASS_THROUGH_EXTENSIONS = frozenset({".view.js", ".view.css"})

COMPILED_VIEW_EXT = ".compiled.py"


@dataclass(frozen=True)
class SourceDescriptor:
    """
    A view source file selected for a view name.

    Attributes:
        source_path: Path to the source file
        extension: Recognized view extension (one of VIEW_EXTENSIONS)
    """

    source_path: Path
    extension: str

    @property
    def requires_compilation(self) -> bool:
        """False for pass-through assets (JS/CSS), True for templates."""
        return self.extension not in PASS_THROUGH_EXTENSIONS


class PathResolver:
    """
    Resolves view names against a views root and a compiled views root.

    The compiled root defaults to the views root. Compiled artifacts living in
    the same tree as sources are never picked up as sources.
    """

    def __init__(self, views_dir: Path, compiled_dir: Optional[Path] = None):
        """
        Args:
            views_dir: Views root directory
            compiled_dir: Compiled views root directory (defaults to views_dir)
        """
        # Path() drops trailing separators
        self.views_dir = Path(views_dir)
        self.compiled_dir = self.views_dir if compiled_dir is None else Path(compiled_dir)

    @staticmethod
    def normalize(name: str) -> str:
        """
        Convert a dotted view name to a relative path form.

        Args:
            name: View name (e.g., 'admin.users.index')

        Returns:
            Name with every '.' replaced by the platform path separator
        """
        return name.replace(".", os.sep)

    def find_source(self, normalized_name: str) -> Optional[SourceDescriptor]:
        """
        Find the source file for a normalized view name.

        Lists '<normalized_name>.*' under the views root and keeps only files whose
        remaining suffix is a recognized view extension. Among several matches the
        extension priority in VIEW_EXTENSIONS decides.

        Args:
            normalized_name: Output of normalize()

        Returns:
            SourceDescriptor, or None if nothing matches
        """
        if not normalized_name or "" in normalized_name.split(os.sep):
            return None

        stem_length = len(Path(normalized_name).name)
        candidates = {}

        for path in self.views_dir.glob(glob.escape(normalized_name) + ".*"):
            extension = path.name[stem_length:]
            if extension in VIEW_EXTENSIONS and path.is_file():
                candidates[extension] = path

        for extension in VIEW_EXTENSIONS:
            if extension in candidates:
                return SourceDescriptor(source_path=candidates[extension], extension=extension)

        return None

    def compiled_path(self, normalized_name: str) -> Path:
        """Path of the compiled artifact for a normalized view name (no I/O)."""
        return self.compiled_dir / f"{normalized_name}{COMPILED_VIEW_EXT}"

    def has_valid_compiled(self, normalized_name: str, cache_enabled: bool) -> bool:
        """
        Check whether a usable compiled artifact exists.

        Existence is the only validity signal; sources are not compared.
        """
        return cache_enabled and self.compiled_path(normalized_name).is_file()

    def iter_compiled(self):
        """Yield every compiled artifact under the compiled root."""
        if not self.compiled_dir.exists():
            return
        yield from sorted(self.compiled_dir.rglob(f"*{COMPILED_VIEW_EXT}"))
