"""
View Rendering Orchestrator

Resolves a dotted view name, makes sure a compiled artifact exists (compiling
it when missing or when the cache is disabled), and evaluates it against the
shared parameters merged with the call parameters.

Example:
    from lazyview import View

    view = View(Path("views"), Path("cache/views"), params={"site": "Lazy"})
    html = view.render("admin.users.index", {"users": users})
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from markupsafe import Markup

from lazyview.compiler import JinjaViewCompiler, ViewCompiler
from lazyview.config import load_view_config
from lazyview.evaluator import Evaluator
from lazyview.exceptions import CompileError, ViewNotFound
from lazyview.logger import (
    _log_info,
    log_cache_hit,
    log_compilation_result,
    log_render_failure,
    log_render_start,
)
from lazyview.parameters import ParameterStore
from lazyview.resolver import PathResolver


class View:
    """
    Renders named views from a views directory with a compiled-artifact cache.

    Attributes:
        enable_cache: When False every render recompiles the view source, ignoring
                      any existing compiled artifact
        compiler: Compiler collaborator (JinjaViewCompiler by default)
        resolver: Path resolution for sources and artifacts
        evaluator: Runs artifacts inside capture scopes
    """

    def __init__(
        self,
        views_dir: Path,
        compiled_dir: Optional[Path] = None,
        params: Optional[Mapping[str, Any]] = None,
        compiler: Optional[ViewCompiler] = None,
        enable_cache: bool = True,
    ):
        """
        Args:
            views_dir: Views root directory
            compiled_dir: Compiled views root (defaults to views_dir)
            params: Initial shared parameters
            compiler: Compiler collaborator (defaults to a JinjaViewCompiler whose
                      includes and layouts resolve under views_dir)
            enable_cache: Reuse existing compiled artifacts
        """
        self.enable_cache = enable_cache
        self.resolver = PathResolver(views_dir, compiled_dir)
        self.compiler = compiler if compiler is not None else JinjaViewCompiler(views_dir=views_dir)
        self.evaluator = Evaluator(self.compiler, helpers={"view": self._render_nested})
        self._params = ParameterStore(params)

    @classmethod
    def from_config(cls, config_path: Optional[Path] = None, compiler: Optional[ViewCompiler] = None):
        """
        Build a View from environment defaults and an optional YAML file.

        Args:
            config_path: YAML config (defaults to VIEW_CONFIG_PATH, if set)
            compiler: Compiler collaborator; a JinjaViewCompiler honoring the
                      configured autoescape flag when omitted
        """
        config = load_view_config(config_path)
        if compiler is None:
            compiler = JinjaViewCompiler(autoescape=config.autoescape, views_dir=config.views_dir)

        return cls(
            views_dir=config.views_dir,
            compiled_dir=config.compiled_dir,
            params=config.params,
            compiler=compiler,
            enable_cache=config.enable_cache,
        )

    # Accessors

    def get_dir(self) -> Path:
        """Get the views root directory."""
        return self.resolver.views_dir

    def get_compiled_dir(self) -> Path:
        """Get the compiled views root directory."""
        return self.resolver.compiled_dir

    def get_params(self) -> Dict[str, Any]:
        """Snapshot of the shared parameters."""
        return self._params.all()

    def has_param(self, name: str) -> bool:
        return self._params.has(name)

    def get_param(self, name: str, default: Any = None) -> Any:
        return self._params.get(name, default)

    def set_param(self, name: str, value: Any) -> None:
        """Set a shared parameter. Shared parameters win over call parameters."""
        self._params.set(name, value)

    # Rendering

    def render(self, name: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Render a view into text.

        Args:
            name: Dotted view name (e.g., 'admin.users.index')
            params: Call parameters; shared parameters with the same name win

        Returns:
            Rendered text

        Raises:
            ViewNotFound: If no source matches and no valid artifact exists
            CompileError: If the source cannot be compiled
            EvaluationError: If the template fails while executing
        """
        normalized = self.resolver.normalize(name)
        log_render_start(name, normalized, self.enable_cache)

        try:
            path = self._resolve_executable(name, normalized)
            return self.evaluator.evaluate(path, self._params.merge(params))
        except Exception as e:
            log_render_failure(name, e)
            raise

    def _resolve_executable(self, name: str, normalized: str) -> Path:
        """Path to evaluate for a view: a compiled artifact or a pass-through source."""
        compiled_path = self.resolver.compiled_path(normalized)

        if self.resolver.has_valid_compiled(normalized, self.enable_cache):
            log_cache_hit(name, compiled_path)
            return compiled_path

        source = self.resolver.find_source(normalized)
        if source is None:
            raise ViewNotFound(name, self.resolver.views_dir)

        if not source.requires_compilation:
            return source.source_path

        result = self.compiler.compile(source.source_path, compiled_path)
        log_compilation_result(name, result)
        return compiled_path

    def _render_nested(self, name: str, **params) -> Markup:
        """Template helper: render another view through this View."""
        return Markup(self.render(name, params))

    # Cache management

    def exists(self, name: str) -> bool:
        """Check whether a view name resolves to a source or a valid artifact."""
        normalized = self.resolver.normalize(name)
        if self.resolver.has_valid_compiled(normalized, self.enable_cache):
            return True
        return self.resolver.find_source(normalized) is not None

    def compile(self, name: str) -> Path:
        """
        Compile a view without rendering it.

        Always compiles, regardless of enable_cache.

        Returns:
            Path to the compiled artifact

        Raises:
            ViewNotFound: If no source matches
            CompileError: If the source is malformed or is a pass-through asset
        """
        normalized = self.resolver.normalize(name)
        source = self.resolver.find_source(normalized)
        if source is None:
            raise ViewNotFound(name, self.resolver.views_dir)

        if not source.requires_compilation:
            raise CompileError(
                f"View '{name}' is a pass-through asset ({source.extension}) and is not compiled",
                source.source_path,
            )

        result = self.compiler.compile(source.source_path, self.resolver.compiled_path(normalized))
        log_compilation_result(name, result)
        return result.compiled_path

    def clear_compiled(self, name: Optional[str] = None) -> int:
        """
        Delete compiled artifacts.

        Args:
            name: Only clear this view's artifact (default: every artifact under
                  the compiled root)

        Returns:
            Number of artifacts removed
        """
        if name is not None:
            targets = [self.resolver.compiled_path(self.resolver.normalize(name))]
        else:
            targets = list(self.resolver.iter_compiled())

        removed = 0
        for artifact in targets:
            if artifact.is_file():
                os.unlink(artifact)
                removed += 1

        _log_info(f"Cleared {removed} compiled view(s) from {self.resolver.compiled_dir}")
        return removed

    def __repr__(self) -> str:
        return (
            f"View(views_dir={str(self.get_dir())!r}, compiled_dir={str(self.get_compiled_dir())!r}, "
            f"enable_cache={self.enable_cache})"
        )
