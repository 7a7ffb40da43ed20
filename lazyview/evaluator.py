"""
View Evaluation

Executes a compiled artifact (or a pass-through source) against a parameter
scope and captures its output.

Output goes through a per-thread stack of capture scopes. Each evaluation opens
its own scope, and templates may open nested ones with start_capture() and
end_capture(), or by rendering nested views. Whatever happens inside the
template, the stack is back at its entry depth when evaluate() returns or raises.
"""

import threading
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from markupsafe import Markup

from lazyview.compiler import ViewCompiler
from lazyview.exceptions import EvaluationError, ViewError
from lazyview.logger import _log_debug, _log_warning
from lazyview.resolver import COMPILED_VIEW_EXT


class CaptureStack:
    """Stack of output buffers. Writes always go to the innermost open buffer."""

    def __init__(self):
        self._buffers: List[List[str]] = []

    @property
    def depth(self) -> int:
        return len(self._buffers)

    def open(self) -> int:
        """Open a new capture scope and return the new depth."""
        self._buffers.append([])
        return self.depth

    @property
    def written(self) -> bool:
        """Whether anything, even an empty chunk, was written to the innermost scope."""
        return bool(self._buffers) and bool(self._buffers[-1])

    def write(self, text: str) -> None:
        if not self._buffers:
            raise RuntimeError("No capture scope is open")
        self._buffers[-1].append(text)

    def close(self) -> str:
        """Close the innermost scope and return everything written to it."""
        if not self._buffers:
            raise RuntimeError("No capture scope is open")
        return "".join(self._buffers.pop())

    def flush(self) -> None:
        """Close the innermost scope, appending its content to the enclosing one."""
        content = self.close()
        self.write(content)

    def unwind(self, depth: int) -> int:
        """
        Discard scopes until the stack is back at depth.

        Returns:
            Number of scopes discarded
        """
        discarded = 0
        while len(self._buffers) > depth:
            self._buffers.pop()
            discarded += 1
        return discarded


class PassThroughView:
    """Executable for views served verbatim (JS/CSS assets)."""

    def __init__(self, source_path: Path):
        self.source_path = Path(source_path)

    def generate(self, context: Mapping) -> Iterator[str]:
        yield self.source_path.read_text(encoding="utf-8")


class Evaluator:
    """
    Runs views inside exception-safe capture scopes.

    Attributes:
        compiler: Loads compiled artifacts into executables
        helpers: Names made available to every template, below the parameters
                 (a parameter with the same name hides a helper)
    """

    def __init__(self, compiler: ViewCompiler, helpers: Optional[Dict[str, Any]] = None):
        self.compiler = compiler
        self.helpers: Dict[str, Any] = dict(helpers or {})
        self._local = threading.local()

    def _stack(self) -> CaptureStack:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = self._local.stack = CaptureStack()
        return stack

    @property
    def depth(self) -> int:
        """Capture depth of the calling thread."""
        return self._stack().depth

    def load(self, path: Path):
        """Compiled artifacts go through the compiler, anything else is passed through."""
        path = Path(path)
        if path.name.endswith(COMPILED_VIEW_EXT):
            return self.compiler.load(path)
        return PassThroughView(path)

    def evaluate(self, path: Path, params: Mapping[str, Any]) -> str:
        """
        Execute the view at path and return its complete output.

        Args:
            path: Compiled artifact or pass-through source
            params: Merged parameter scope, bound into the template by name

        Returns:
            Rendered text

        Raises:
            CompileError: If the artifact cannot be loaded
            EvaluationError: If the template body fails
            ViewError: Errors from nested view renders propagate unchanged
        """
        path = Path(path)
        stack = self._stack()
        entry_depth = stack.depth
        floor = stack.open()

        try:
            executable = self.load(path)
            context = {
                **self.helpers,
                **_capture_helpers(stack, floor),
                **params,
            }

            for chunk in executable.generate(context):
                stack.write(chunk)

            leaked = stack.depth - floor
            if leaked:
                _log_warning(f"{path.name}: {leaked} capture scope(s) left open, flushing")
                while stack.depth > floor:
                    stack.flush()

            return stack.close()
        except ViewError:
            raise
        except Exception as e:
            raise EvaluationError("Error while evaluating view", path, e) from e
        finally:
            discarded = stack.unwind(entry_depth)
            if discarded:
                _log_debug(f"Discarded {discarded} capture scope(s) after failure in {path}")


def _capture_helpers(stack: CaptureStack, floor: int) -> Dict[str, Callable]:
    """
    Template-facing capture functions, bound to one evaluation.

    Only output the evaluator streams can be captured. Inside a macro, call block,
    {% filter %} or block-form {% set %}, Jinja2 collects output in its own buffer,
    so nothing reaches the capture scope. Use {{ start_capture() }} as an output
    expression: the empty chunk it emits is what marks the scope as streamed.
    """

    def start_capture() -> str:
        stack.open()
        return ""

    def end_capture() -> Markup:
        if stack.depth <= floor:
            raise RuntimeError("end_capture() called without a matching start_capture()")
        if not stack.written:
            raise RuntimeError(
                "end_capture() saw no streamed output; captures do not work inside "
                "macro, call, filter or set blocks"
            )
        return Markup(stack.close())

    return {"start_capture": start_capture, "end_capture": end_capture}
