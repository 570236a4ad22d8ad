"""
irtf_records.files.stats

Existence checks and audit metadata for bulk-load source files.

Responsibilities:
- Define the `Filesystem` contract the ingest orchestrator depends on.
- Provide the local-disk implementation.
"""

from __future__ import annotations

import stat as stat_module
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True, slots=True)
class FileStats:
    path: str
    size: int
    modified: str
    created: str
    owner: int
    group: int
    # Octal mode bits, e.g. "0644".
    permissions: str
    lines: int

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


class Filesystem(Protocol):
    def exists(self, path: Path) -> bool: ...

    def stat(self, path: Path) -> FileStats: ...


class LocalFilesystem:
    def exists(self, path: Path) -> bool:
        return Path(path).is_file()

    def stat(self, path: Path) -> FileStats:
        p = Path(path)
        st = p.stat()
        return FileStats(
            path=str(p),
            size=st.st_size,
            modified=datetime.fromtimestamp(st.st_mtime).strftime(_TIME_FORMAT),
            # st_ctime is inode change time on Unix; it is what the upload audit has always recorded.
            created=datetime.fromtimestamp(st.st_ctime).strftime(_TIME_FORMAT),
            owner=st.st_uid,
            group=st.st_gid,
            permissions=format(stat_module.S_IMODE(st.st_mode), "04o"),
            lines=_count_lines(p),
        )


def _count_lines(path: Path) -> int:
    with path.open("rb") as fh:
        return sum(1 for _ in fh)
