"""Filesystem helpers for docupload."""

import logging
import os
import shutil
import stat
import sys
import tempfile
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from docupload.errors import PublishError


class FileSystemService:
    """Encapsulates file and directory side effects."""

    def __init__(self, logger: logging.Logger, console: Console):
        self.logger = logger
        self.console = console

    def set_permissions(self, path: str, mode: int):
        os.chmod(path, mode)
        if sys.platform == "win32":
            return

        actual = stat.S_IMODE(os.stat(path).st_mode)
        if actual != mode:
            raise PublishError(f"Permissions on {path} are {actual:o}, expected {mode:o}.")

    def ensure_private_dir(self, path: str, mode: int):
        existed = os.path.isdir(path)
        os.makedirs(path, mode=mode, exist_ok=True)
        if not existed:
            self.set_permissions(path, mode)

    def create_private_temp_file(self, directory: str, prefix: str, mode: int) -> str:
        fd, temp_path = tempfile.mkstemp(prefix=prefix, dir=directory)
        os.close(fd)
        os.chmod(temp_path, mode)
        return temp_path

    def replace_tree(self, source: str, destination: str):
        """Delete ``destination`` entirely and copy ``source`` in its place."""
        if os.path.islink(destination) or os.path.isfile(destination):
            os.remove(destination)
        elif os.path.isdir(destination):
            shutil.rmtree(destination)
            self.logger.debug("Removed directory: %s", destination)

        shutil.copytree(source, destination, symlinks=True)
        self.logger.debug("Copied %s to %s", source, destination)

    def count_files(self, root: str) -> int:
        return sum(1 for path in Path(root).rglob("*") if path.is_file())

    def cleanup_dir(self, path: str):
        if os.path.exists(path):
            try:
                shutil.rmtree(path)
                self.logger.debug("Removed directory: %s", path)
            except OSError as exc:
                message = f"Warning: Could not remove {path}: {exc}"
                self.console.print(f"[yellow]{escape(message)}[/yellow]")
                self.logger.warning(message)
