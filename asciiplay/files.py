"""Asynchronous file system checks."""

from __future__ import annotations

import asyncio
from pathlib import Path


async def is_file(file_path: str | Path | None) -> bool:
    """Whether ``file_path`` is an existing regular file."""
    if not file_path:
        return False
    return await asyncio.to_thread(Path(file_path).is_file)


async def is_directory(file_path: str | Path | None) -> bool:
    """Whether ``file_path`` is an existing directory."""
    if not file_path:
        return False
    return await asyncio.to_thread(Path(file_path).is_dir)


__all__ = ["is_file", "is_directory"]
