"""
View logger.

Logging interface for the view pipeline with automatic [view] prefix. Library
code only emits records; setup_view_logger() attaches sinks for a CLI session.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONTEXT_PREFIX = "[view]"


def setup_view_logger(
    log_dir: Path,
    views_dir: Optional[Path] = None,
    compiled_dir: Optional[Path] = None,
    cache_enabled: Optional[bool] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Send view records to a session log file and to stderr.

    The file sink keeps everything down to DEBUG. The session starts with a
    header recording the view settings that were passed in.

    Args:
        log_dir: Directory for this rendering session
        views_dir: Views root
        compiled_dir: Compiled views root
        cache_enabled: Whether compiled artifacts are reused
        console_level: Minimum level echoed to stderr

    Returns:
        Path to log file

    Example:
        from lazyview.logger import setup_view_logger, _log_info

        log_file = setup_view_logger(log_dir, views_dir=Path("views"))
        _log_info("Rendering...")
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / "view.log"

    logger.remove()
    logger.add(
        log_file, format="{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}", level="DEBUG"
    )
    logger.add(
        sys.stderr,
        format="{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>",
        level=console_level,
        colorize=True,
    )

    settings = {
        "Views directory": views_dir,
        "Compiled directory": compiled_dir,
        "Cache": None if cache_enabled is None else ("on" if cache_enabled else "off"),
    }
    _log_info("=" * 60)
    for key, value in settings.items():
        if value is not None:
            _log_info(f"{key}: {value}")
    _log_info("=" * 60)

    return log_file


# Wrapper functions with automatic [view] prefix


def _log_info(message: str) -> None:
    """Log info message with [view] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [view] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [view] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [view] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level view-specific logging helpers


def log_render_start(view_name: str, normalized_name: str, cache_enabled: bool) -> None:
    """Log start of a render call."""
    _log_debug(f"Rendering {view_name} ({normalized_name}), cache={'on' if cache_enabled else 'off'}")


def log_cache_hit(view_name: str, compiled_path: Path) -> None:
    _log_debug(f"Cache hit for {view_name}: {compiled_path}")


def log_compilation_result(
    view_name: str,
    result,  # CompilationResult
) -> None:
    """
    Log compilation result.

    Args:
        view_name: Dotted view name
        result: CompilationResult from ViewCompiler.compile()
    """
    _log_info(f"Compiled {view_name} ({result.elapsed_time:.3f}s)")
    _log_debug(f"  Source: {result.source_path}")
    _log_debug(f"  Artifact: {result.compiled_path}")


def log_render_failure(view_name: str, error: Exception) -> None:
    """Log a failed render call. The error itself is propagated by the caller."""
    _log_error(f"Failed to render {view_name}: {type(error).__name__}")
    logger.opt(raw=True).debug(f"{error}\n")
