"""
File handling utilities for source comparison and project materialization.

Text is read and written without newline translation so that what is
compared is exactly what is on disk.
"""

from contextlib import contextmanager
from pathlib import Path, PurePosixPath
from typing import Iterator, List, Optional, Union

from mirror.errors import LocalFileNotFound, LocalFileReadError, UnsafeSourcePath


class FileHandler:
    """Read and write source files under a local project directory."""

    def __init__(self, encoding: str = 'utf-8'):
        self.encoding = encoding

    def read_file(self, file_path: Union[str, Path]) -> str:
        """
        Read a local source file.

        Raises:
            LocalFileNotFound: if nothing exists at ``file_path``.
            LocalFileReadError: for any other failure (directory, permissions,
                undecodable bytes).
        """
        try:
            with open(file_path, 'r', encoding=self.encoding, newline='') as f:
                return f.read()
        except FileNotFoundError:
            raise LocalFileNotFound(str(file_path))
        except (OSError, UnicodeDecodeError) as e:
            raise LocalFileReadError(str(file_path), e) from e

    def read_existing(self, file_path: Union[str, Path]) -> Optional[str]:
        """Return the file content, or None when the file does not exist."""
        try:
            return self.read_file(file_path)
        except LocalFileNotFound:
            return None

    def write_file(self, file_path: Union[str, Path], content: str) -> None:
        """Write content, creating missing parent directories.

        Directories created here are removed again if the write fails.
        """
        target = Path(file_path)
        with created_parents(target):
            with open(target, 'w', encoding=self.encoding, newline='') as f:
                f.write(content)


def safe_relpath(path_str: str) -> PurePosixPath:
    """Validate a reported path before joining it under an output directory.

    Leading separators are dropped so absolute paths land under the directory.
    """
    p = PurePosixPath(path_str.replace("\\", "/").lstrip("/"))
    if any(part == ".." for part in p.parts) or str(p) in ("", "."):
        raise UnsafeSourcePath(path_str)
    return p


@contextmanager
def created_parents(target: Path) -> Iterator[List[Path]]:
    """Create the missing parent directories of ``target``.

    If the body raises, every directory created here is removed again
    (deepest first, and only while it is still empty).
    """
    missing: List[Path] = []
    parent = target.parent
    while not parent.exists():
        missing.append(parent)
        if parent.parent == parent:
            break
        parent = parent.parent

    created: List[Path] = []
    try:
        for directory in reversed(missing):
            directory.mkdir()
            created.append(directory)
        yield created
    except BaseException:
        for directory in reversed(created):
            try:
                directory.rmdir()
            except OSError:
                break
        raise
