"""
lazyview - named view rendering with a compiled template cache

Resolves dotted view names to template sources, compiles them once to cached
artifacts, and renders them against shared and per-call parameters.

Architecture:
- Resolution: view name -> source file and compiled artifact path
- Compilation: Jinja2 source -> persisted Python module source
- Parameters: shared parameters, merged under per-call parameters (shared wins)
- Evaluation: exception-safe output capture around template execution
- View: orchestrates the above
"""

from lazyview.compiler import CompilationResult, JinjaViewCompiler, ViewCompiler
from lazyview.config import ViewConfig, load_view_config
from lazyview.evaluator import CaptureStack, Evaluator
from lazyview.exceptions import CompileError, EvaluationError, ViewError, ViewNotFound
from lazyview.parameters import ParameterStore
from lazyview.resolver import PathResolver, SourceDescriptor
from lazyview.view import View

__version__ = "0.1.0"

__all__ = [
    # Orchestrator
    "View",
    # Components
    "PathResolver",
    "SourceDescriptor",
    "ParameterStore",
    "Evaluator",
    "CaptureStack",
    "ViewCompiler",
    "JinjaViewCompiler",
    "CompilationResult",
    # Configuration
    "ViewConfig",
    "load_view_config",
    # Errors
    "ViewError",
    "ViewNotFound",
    "CompileError",
    "EvaluationError",
]
