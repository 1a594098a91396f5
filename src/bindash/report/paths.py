"""Containment checks for stored file references.

A report's file_path column is data, not code: it is re-validated against the
storage root on every access, not only when the file is written.
"""

import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from bindash.errors import PathRejected


@dataclass(frozen=True)
class StorageConfig:
    root: Path
    reports_subdir: str = "generated/reports"
    chunk_size: int = 8192

    @property
    def reports_dir(self) -> Path:
        return self.root / self.reports_subdir


def resolve_within(root: Path | str, untrusted: str) -> Path:
    """Resolve ``untrusted`` against ``root`` and prove the result stays inside it.

    Leading separators are stripped so absolute-looking input is treated as
    relative. The joined path is canonicalized (symlinks and ``..`` resolved)
    and must exist. Raises PathRejected otherwise.
    """
    try:
        canonical_root = Path(root).resolve(strict=True)
        candidate = (canonical_root / untrusted.lstrip("/\\")).resolve(strict=True)
    except (OSError, ValueError, RuntimeError) as e:
        raise PathRejected() from e

    root_str = str(canonical_root)
    prefix = root_str if root_str.endswith(os.sep) else root_str + os.sep
    candidate_str = str(candidate)
    if candidate_str != root_str and not candidate_str.startswith(prefix):
        raise PathRejected()
    return candidate


def relative_to_root(root: Path | str, path: Path) -> str:
    """Root-relative POSIX reference for ``path``, as stored in the database."""
    rel = path.resolve().relative_to(Path(root).resolve())
    posix = PurePosixPath(*rel.parts)
    if posix.is_absolute() or ".." in posix.parts:
        raise PathRejected()
    return str(posix)
