"""Native extraction of packaged configuration bundles."""

from __future__ import annotations

import tarfile
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol


class ArchiveExtractionError(Exception):
    """Raised when a bundle archive cannot be extracted."""


class ArchiveExtractor(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for archive extraction implementations."""

    def extract(self, archive_path: Path, dest_dir: Path, strip_components: int) -> None: ...


class TarArchiveExtractor:  # pylint: disable=too-few-public-methods
    """Extract tar archives (compression autodetected) like `tar --strip-components`.

    Members whose path is consumed entirely by the stripping are skipped.
    Members that would land outside `dest_dir` are rejected by tarfile's
    ``data`` filter.
    """

    def extract(self, archive_path: Path, dest_dir: Path, strip_components: int) -> None:
        if strip_components < 0:
            raise ValueError("strip_components must not be negative.")
        try:
            with tarfile.open(archive_path, mode="r:*") as archive:
                members = list(_stripped_members(archive, strip_components))
                archive.extractall(dest_dir, members=members, filter="data")
        except (tarfile.TarError, OSError) as exc:
            raise ArchiveExtractionError(
                f"Couldn't extract {archive_path} into {dest_dir}: {exc}"
            ) from exc


def _stripped_members(archive: tarfile.TarFile, strip_components: int) -> Iterator[tarfile.TarInfo]:
    for member in archive:
        name = _strip_path(member.name, strip_components)
        if name is None:
            continue
        if member.islnk():
            linkname = _strip_path(member.linkname, strip_components)
            if linkname is None:
                continue
            yield member.replace(name=name, linkname=linkname, deep=False)
        else:
            yield member.replace(name=name, deep=False)


def _strip_path(raw_name: str, strip_components: int) -> str | None:
    parts = [part for part in raw_name.split("/") if part]
    remaining = parts[strip_components:]
    if not remaining:
        return None
    return "/".join(remaining)
