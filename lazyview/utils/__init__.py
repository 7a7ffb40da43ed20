"""
Shared utilities for lazyview.

- Atomic file publication
"""

from lazyview.utils.files import atomic_write_text

__all__ = ["atomic_write_text"]
