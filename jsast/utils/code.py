"""Source file discovery."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

DEFAULT_EXTENSIONS = (".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".mts", ".cts")
DEFAULT_EXCLUDES = ("node_modules", ".git")


def _normalize_extension(extension: str) -> str:
    extension = extension.strip().lower()
    return extension if extension.startswith(".") else f".{extension}"


def iter_code_files(
    root: Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    excludes: Iterable[str] = DEFAULT_EXCLUDES,
) -> List[Path]:
    """Return code files beneath ``root``, sorted for a stable scan order.

    Files inside any directory named in ``excludes`` are skipped.
    """

    wanted = {_normalize_extension(extension) for extension in extensions}
    excluded = set(excludes)
    files: List[Path] = []
    for path in root.rglob("*"):
        relative_parts = path.relative_to(root).parts[:-1]
        if excluded.intersection(relative_parts):
            continue
        if path.suffix.lower() in wanted and path.is_file():
            files.append(path)
    return sorted(files)
