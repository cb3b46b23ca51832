"""
Log Repository - discovers receiver log files under an input path.

Accepts a single file or a directory tree; directories are walked depth-first
with an explicit worklist so deeply nested archives cannot exhaust the stack.
"""

import logging
from pathlib import Path
from typing import Iterator, Optional

from ais_reception.services.record_parser import is_log_file


logger = logging.getLogger(__name__)


class LogRepository:
    """
    Repository of receiver log files.

    Files are listed in depth-first order, entries within a directory sorted
    by name, so runs over the same tree always fold files in the same order.
    """

    def __init__(self, root: Optional[Path] = None):
        """
        Initialize the repository.

        Args:
            root: File or directory to read logs from. If None, must be set later.
        """
        self._root: Optional[Path] = None
        self._files: list[Path] = []

        if root is not None:
            self.set_root(root)

    @property
    def root(self) -> Optional[Path]:
        return self._root

    @property
    def files(self) -> list[Path]:
        return list(self._files)

    def set_root(self, root: Path) -> int:
        """
        Set the input path and scan it.

        Args:
            root: Log file or directory

        Returns:
            Number of log files found

        Raises:
            FileNotFoundError: if the path does not exist
        """
        root = Path(root)
        if not root.exists():
            raise FileNotFoundError(f"Input path does not exist: {root}")
        self._root = root
        return self.scan()

    def scan(self) -> int:
        """Rebuild the file list from the current root."""
        if self._root is None:
            self._files = []
            return 0

        if self._root.is_file():
            # An explicitly named file is read whatever its name
            self._files = [self._root]
        else:
            self._files = list(self.walk(self._root))

        logger.info(f"Found {len(self._files)} log files in {self._root}")
        return len(self._files)

    def walk(self, folder: Path) -> Iterator[Path]:
        """
        Yield log files under a folder, depth-first.

        Args:
            folder: Directory to walk
        """
        stack: list[Path] = sorted(folder.iterdir(), key=lambda p: p.name, reverse=True)
        while stack:
            entry = stack.pop()
            if entry.is_dir() and not entry.is_symlink():
                # Reversed so the first child is popped next
                stack.extend(sorted(entry.iterdir(), key=lambda p: p.name, reverse=True))
            elif entry.is_file() and is_log_file(entry):
                logger.debug(f"Indexed log file: {entry}")
                yield entry

    def relative_name(self, filepath: Path) -> str:
        """Path of a file relative to the root, for progress messages."""
        if self._root is None or self._root.is_file():
            return filepath.name
        try:
            return str(filepath.relative_to(self._root))
        except ValueError:
            return str(filepath)
