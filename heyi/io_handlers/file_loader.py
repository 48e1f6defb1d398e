"""
File loader for heyi.
Reads local files given with --file for inclusion as prompt context.
"""
import logging
from pathlib import Path
from typing import Optional

from ..errors import SourceError
from ..utils import format_bytes


logger = logging.getLogger(__name__)


class FileLoader:
    """
    Loads file contents as text.

    Missing, unreadable, or non-regular files raise SourceError naming the
    path exactly as the caller gave it.
    """

    ENCODINGS = ['utf-8', 'cp1252']
    # Maps every byte to a code point, so decoding with it cannot fail
    FALLBACK_ENCODING = 'latin-1'

    def __init__(self, base_dir: Optional[str] = None) -> None:
        """
        Initialize file loader.

        Args:
            base_dir: Base directory for relative paths (defaults to cwd)
        """
        self._base_dir = Path(base_dir) if base_dir else None

    def load(self, path: str) -> str:
        """
        Load a file as text.

        Args:
            path: File path (absolute, relative, or starting with ~)

        Returns:
            The decoded file content

        Raises:
            SourceError: If the file is missing or cannot be read
        """
        file_path = self._resolve_path(path)

        if not file_path.exists():
            raise SourceError(path, "file", "No such file or directory")
        if not file_path.is_file():
            raise SourceError(path, "file", "Not a regular file")

        try:
            data = file_path.read_bytes()
        except PermissionError as e:
            raise SourceError(path, "file", "Permission denied") from e
        except OSError as e:
            raise SourceError(path, "file", e.strerror or str(e)) from e

        content, encoding = self._decode(data)
        logger.debug(f"Read file '{path}' ({format_bytes(len(data))}, {encoding})")
        return content

    def _resolve_path(self, path: str) -> Path:
        """Resolve a path relative to the base directory."""
        p = Path(path).expanduser()
        if p.is_absolute() or self._base_dir is None:
            return p
        return self._base_dir / p

    def _decode(self, data: bytes) -> tuple[str, str]:
        """Decode bytes trying each known encoding in turn, then the fallback."""
        for encoding in self.ENCODINGS:
            try:
                return data.decode(encoding), encoding
            except UnicodeDecodeError:
                continue

        return data.decode(self.FALLBACK_ENCODING), self.FALLBACK_ENCODING
