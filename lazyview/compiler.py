"""
View Compilation Module

Compiles view sources to persisted artifacts and loads artifacts back into
executable templates.

The default compiler uses Jinja2: the template markup is compiled to the Python
module source Jinja2 generates for it, and that source is what gets written to
disk. Loading an artifact executes the stored module source, so cached views are
never re-parsed.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Optional, Protocol

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateSyntaxError

from lazyview.exceptions import CompileError
from lazyview.utils.files import atomic_write_text


@dataclass
class CompilationResult:
    """
    Result of compiling a view source.

    Attributes:
        source_path: View source that was compiled
        compiled_path: Where the artifact was published
        elapsed_time: Seconds spent compiling and writing
    """

    source_path: Path
    compiled_path: Path
    elapsed_time: float = 0.0


class Executable(Protocol):
    """Anything the evaluator can run: yields text chunks for a context mapping."""

    def generate(self, context: Mapping) -> Iterable[str]: ...


class ViewCompiler(Protocol):
    """
    Interface the view pipeline consumes from a compiler.

    compile() must be idempotent and must publish the artifact atomically.
    """

    def compile(self, source_path: Path, compiled_path: Path) -> CompilationResult: ...

    def load(self, compiled_path: Path) -> Executable: ...


def create_environment(autoescape: bool = False, views_dir: Optional[Path] = None) -> Environment:
    """
    Create the Jinja2 environment used to compile and load views.

    With views_dir, {% include %}, {% extends %} and {% import %} resolve file
    names relative to the views root (e.g., "layouts/base.view.jinja"). Those
    templates are parsed by Jinja2 on demand; only the rendered view itself goes
    through the compiled-artifact cache.

    Args:
        autoescape: Escape HTML in variable output
        views_dir: Views root for template inheritance and includes

    Returns:
        Configured Environment
    """
    return Environment(
        loader=FileSystemLoader(str(views_dir)) if views_dir is not None else None,
        # Catches silent failures
        undefined=StrictUndefined,
        autoescape=autoescape,
        # Preserve whitespace exactly as written
        trim_blocks=False,
        lstrip_blocks=False,
        keep_trailing_newline=True,
    )


class JinjaViewCompiler:
    """Compiles views with Jinja2 and persists the generated module source."""

    def __init__(
        self,
        environment: Environment = None,
        autoescape: bool = False,
        views_dir: Optional[Path] = None,
    ):
        """
        Args:
            environment: Jinja2 environment to use. Built with create_environment()
                         when omitted.
            autoescape: Passed to create_environment() when no environment is given
            views_dir: Passed to create_environment() when no environment is given
        """
        self.env = environment or create_environment(autoescape=autoescape, views_dir=views_dir)

    def compile(self, source_path: Path, compiled_path: Path) -> CompilationResult:
        """
        Compile a view source and publish the artifact at compiled_path.

        Args:
            source_path: View source file
            compiled_path: Artifact destination (parents are created)

        Returns:
            CompilationResult

        Raises:
            CompileError: If the source is unreadable or malformed
        """
        source_path = Path(source_path)
        compiled_path = Path(compiled_path)
        start_time = time.time()

        try:
            source = source_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CompileError("Cannot read view source", source_path, e) from e

        try:
            code = self.env.compile(
                source, name=source_path.name, filename=str(source_path), raw=True
            )
        except TemplateSyntaxError as e:
            raise CompileError("Malformed view source", source_path, e) from e

        atomic_write_text(compiled_path, code)

        return CompilationResult(
            source_path=source_path,
            compiled_path=compiled_path,
            elapsed_time=time.time() - start_time,
        )

    def load(self, compiled_path: Path):
        """
        Load a compiled artifact into a Jinja2 Template.

        Args:
            compiled_path: Artifact written by compile()

        Returns:
            jinja2.Template

        Raises:
            CompileError: If the artifact is unreadable or corrupt
        """
        compiled_path = Path(compiled_path)

        try:
            code_source = compiled_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CompileError("Cannot read compiled view", compiled_path, e) from e

        try:
            code = compile(code_source, str(compiled_path), "exec")
            return self.env.template_class.from_code(
                self.env, code, self.env.make_globals(None)
            )
        except Exception as e:
            raise CompileError("Corrupt compiled view", compiled_path, e) from e
