"""Local file handles and their display names."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalFile:
    """A file picked for upload.

    ``relative_path`` is set when the file was picked as part of a directory
    and starts with that directory's name (``site/css/main.css``).
    ``full_path`` overrides every other naming rule when non-empty.
    """

    path: Path
    relative_path: str = ""
    full_path: str = ""

    @property
    def name(self) -> str:
        return self.path.name


def derive_name(handle: Any) -> str:
    """Return the display name a handle is uploaded under."""
    full_path = getattr(handle, "full_path", "")
    if full_path:
        return full_path

    relative_path = getattr(handle, "relative_path", "")
    if relative_path:
        # Drop the picked directory itself: "site/css/a.css" -> "css/a.css"
        _, _, inner = relative_path.partition("/")
        if inner:
            return inner

    if isinstance(handle, (str, os.PathLike)):
        return Path(handle).name

    name = getattr(handle, "name", "")
    if isinstance(name, (str, os.PathLike)) and name:
        return Path(name).name
    return ""


def collect_files(paths: Iterable[Path]) -> list[LocalFile]:
    """Expand files and directories into LocalFile handles.

    Directories are walked recursively in sorted order; each file found
    gets a relative_path rooted at the directory name.
    """
    files: list[LocalFile] = []
    for path in paths:
        path = Path(path)
        if path.is_dir():
            root_name = path.name or path.resolve().name
            found = [p for p in sorted(path.rglob("*")) if p.is_file()]
            logger.debug("Found %d files under %s", len(found), path)
            for p in found:
                rel = p.relative_to(path).as_posix()
                files.append(LocalFile(p, relative_path=f"{root_name}/{rel}"))
        else:
            files.append(LocalFile(path))
    return files
