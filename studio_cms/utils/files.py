"""Filesystem helpers shared by the JSON-backed stores"""

import shutil
import tempfile
from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """Create a directory (and parents) if missing; returns the path for chaining"""
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write_text(path: Path, content: str) -> None:
    """
    Write text to ``path`` atomically.

    The content goes to a temp file in the same directory, which is then moved
    over the target, so readers never observe a half-written file.

    Raises:
        OSError: If the temp file cannot be written or moved into place
    """
    dir_path = ensure_directory(path.parent)
    with tempfile.NamedTemporaryFile(
        mode="w", dir=str(dir_path), delete=False, encoding="utf-8", suffix=".tmp"
    ) as tf:
        tf.write(content)
        temp_path = Path(tf.name)

    try:
        # Atomic move/replace
        shutil.move(str(temp_path), str(path))
    except OSError:
        # Clean up temp file if move failed
        if temp_path.exists():
            temp_path.unlink()
        raise
