"""Filesystem writes for the node bootstrap.

Every path handled here is an absolute node path (``/etc/...``). A
``root`` prefix redirects every write, which is how the CLI ``--root``
option and the tests stage a bootstrap into a scratch directory. Files the
bootstrap only reads are not redirected.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .models import FileWriteError

logger = logging.getLogger("eksbootstrap.bootstrap.filesystem")


class NodeFilesystem:
    """Writes configuration files, optionally below a root directory."""

    def __init__(self, root: Optional[Union[str, Path]] = None):
        self.root = Path(root) if root else None

    def resolve(self, path: Union[str, Path]) -> Path:
        """Map a node path to the location actually written."""
        path = Path(path)
        if self.root is None:
            return path
        return self.root / path.relative_to(path.anchor)

    def write_bytes(self, path: Union[str, Path], data: bytes, mode: int = 0o644) -> Path:
        """Atomically replace a file with ``data``.

        The content goes to a temporary file in the same directory which is
        then renamed over the target, so readers see either the old or the
        new file.

        Raises:
            FileWriteError: If the file cannot be written
        """
        target = self.resolve(path)
        tmp_name = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=str(target.parent))
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, target)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise FileWriteError(f"Failed to write {target}: {e}") from e

        logger.debug(f"Wrote {target}")
        return target

    def write_text(self, path: Union[str, Path], content: str, mode: int = 0o644) -> Path:
        return self.write_bytes(path, content.encode('utf-8'), mode)

    def append_lines(self, path: Union[str, Path], lines: Iterable[str]) -> List[str]:
        """Append lines that the file does not already contain.

        All missing lines go out in a single write.

        Returns:
            list: The lines that were appended

        Raises:
            FileWriteError: If the file cannot be read or written
        """
        target = self.resolve(path)
        try:
            existing = target.read_text(encoding='utf-8') if target.exists() else ''
        except OSError as e:
            raise FileWriteError(f"Failed to read {target}: {e}") from e

        present = set(existing.splitlines())
        missing = [line for line in lines if line not in present]
        if not missing:
            logger.debug(f"{target} already up to date")
            return []

        fragment = '\n'.join(missing) + '\n'
        if existing and not existing.endswith('\n'):
            fragment = '\n' + fragment
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, 'a', encoding='utf-8') as f:
                f.write(fragment)
        except OSError as e:
            raise FileWriteError(f"Failed to append to {target}: {e}") from e

        logger.debug(f"Appended {len(missing)} line(s) to {target}")
        return missing
