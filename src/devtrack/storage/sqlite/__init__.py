"""
Low-level SQLite helpers: value codec, statement builders, schema bootstrap.
"""

from __future__ import annotations

__all__: list[str] = []
