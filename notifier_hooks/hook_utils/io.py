"""
File I/O utilities with graceful error handling.

Includes:
- Atomic text writes (atomic_write_text)
- Safe file operations (safe_read_text, safe_unlink, safe_mtime)
"""
import os
import tempfile
from pathlib import Path

PathLike = str | Path


def atomic_write_text(path: Path, text: str) -> bool:
    """
    Write text atomically using temp file + rename.
    Readers never observe a partially written file.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}_", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(text)
            os.replace(temp_path, path)
            return True
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise
    except (OSError, UnicodeError):
        return False


def safe_read_text(path: PathLike) -> str | None:
    """Read a text file, return None if missing or unreadable."""
    try:
        return Path(path).read_text(encoding='utf-8')
    except (FileNotFoundError, PermissionError, IsADirectoryError, UnicodeDecodeError, OSError):
        return None


def safe_unlink(path: PathLike) -> bool:
    """Remove a file if present. Returns True if a file was removed."""
    try:
        os.unlink(path)
        return True
    except (FileNotFoundError, PermissionError, OSError):
        return False


def safe_mtime(path: PathLike, default: float = 0.0) -> float:
    """Get file modification time safely, return default on error."""
    try:
        return os.path.getmtime(path)
    except (FileNotFoundError, PermissionError, OSError):
        return default
