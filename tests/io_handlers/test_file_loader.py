"""
Tests for FileLoader.
"""

import os
import tempfile
from pathlib import Path

import pytest

from heyi.errors import SourceError
from heyi.io_handlers.file_loader import FileLoader


class TestFileLoader:
    """Test cases for FileLoader."""

    def test_reads_utf8(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "notes.md"
            path.write_text("# Título\nbody", encoding="utf-8")
            assert FileLoader().load(str(path)) == "# Título\nbody"

    def test_content_is_not_trimmed(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "padded.txt"
            path.write_text("\n  text  \n", encoding="utf-8")
            assert FileLoader().load(str(path)) == "\n  text  \n"

    def test_falls_back_to_legacy_encoding(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "legacy.txt"
            path.write_bytes("café".encode("cp1252"))
            assert FileLoader().load(str(path)) == "café"

    def test_bytes_outside_cp1252_use_latin1(self):
        # 0x81 is unassigned in cp1252 and invalid as utf-8 here
        data = b"caf\xe9 \x81"
        assert FileLoader()._decode(data) == ("caf\xe9 \x81", "latin-1")

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "odd.bin"
            path.write_bytes(data)
            assert FileLoader().load(str(path)) == "caf\u00e9 \u0081"

    def test_relative_to_base_dir(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "a.txt").write_text("A", encoding="utf-8")
            assert FileLoader(base_dir=tmpdir).load("a.txt") == "A"

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(SourceError) as exc_info:
                FileLoader(base_dir=tmpdir).load("missing.txt")
        error = exc_info.value
        assert error.source == "missing.txt"
        assert error.kind == "file"
        assert str(error) == "Failed to read file 'missing.txt': No such file or directory"

    def test_directory_is_rejected(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(SourceError, match="Not a regular file"):
                FileLoader().load(tmpdir)

    @pytest.mark.skipif(
        os.name != "posix" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permission bits are not enforced",
    )
    def test_unreadable_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "secret.txt"
            path.write_text("x", encoding="utf-8")
            path.chmod(0)
            try:
                with pytest.raises(SourceError, match="Permission denied"):
                    FileLoader().load(str(path))
            finally:
                path.chmod(0o600)
