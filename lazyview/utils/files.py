"""File helpers."""

import os
import tempfile
from pathlib import Path


def atomic_write_text(path: Path, content: str, encoding: str = "utf-8") -> Path:
    """
    Write text to a file so that readers never observe a partial file.

    The content goes to a temp file in the destination directory and is then
    published with os.replace (atomic on POSIX and Windows when both paths are
    on the same filesystem). Parent directories are created as needed.

    Args:
        path: Destination file
        content: Text to write
        encoding: Text encoding

    Returns:
        The destination path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent, text=True
    )
    try:
        with os.fdopen(temp_fd, "w", encoding=encoding, newline="") as f:
            f.write(content)

        # Only publish if write succeeded
        os.replace(temp_path, path)
    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise

    return path
