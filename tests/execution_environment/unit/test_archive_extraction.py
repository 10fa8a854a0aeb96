"""Tar bundle extraction tests."""

from __future__ import annotations

import io
import tarfile
from pathlib import Path

import pytest
from tfc_run_worker.execution_environment.archive_extraction import (
    ArchiveExtractionError,
    TarArchiveExtractor,
)


def _add_file(archive: tarfile.TarFile, name: str, content: bytes) -> None:
    info = tarfile.TarInfo(name)
    info.size = len(content)
    archive.addfile(info, io.BytesIO(content))


def _add_dir(archive: tarfile.TarFile, name: str) -> None:
    info = tarfile.TarInfo(name)
    info.type = tarfile.DIRTYPE
    info.mode = 0o755
    archive.addfile(info)


def _write_bundle(path: Path, entries: dict[str, bytes]) -> Path:
    with tarfile.open(path, mode="w:gz") as archive:
        _add_dir(archive, "config")
        for name, content in entries.items():
            _add_file(archive, name, content)
    return path


def test_extract_strips_top_level_directory(tmp_path: Path) -> None:
    archive = _write_bundle(
        tmp_path / "bundle.tar.gz",
        {
            "config/main.tf": b'resource "null_resource" "x" {}\n',
            "config/modules/net/vars.tf": b"variable region {}\n",
        },
    )
    destination = tmp_path / "tf-config"
    destination.mkdir()

    TarArchiveExtractor().extract(archive, destination, strip_components=1)

    assert (destination / "main.tf").read_bytes() == b'resource "null_resource" "x" {}\n'
    assert (destination / "modules" / "net" / "vars.tf").exists()
    assert not (destination / "config").exists()


def test_extract_without_stripping_keeps_layout(tmp_path: Path) -> None:
    archive = _write_bundle(tmp_path / "bundle.tar.gz", {"config/main.tf": b"x"})
    destination = tmp_path / "out"
    destination.mkdir()

    TarArchiveExtractor().extract(archive, destination, strip_components=0)

    assert (destination / "config" / "main.tf").read_bytes() == b"x"


def test_extract_rejects_entries_escaping_destination(tmp_path: Path) -> None:
    archive = tmp_path / "evil.tar.gz"
    with tarfile.open(archive, mode="w:gz") as bundle:
        _add_file(bundle, "config/../../outside.tf", b"x")
    destination = tmp_path / "dest"
    destination.mkdir()

    with pytest.raises(ArchiveExtractionError):
        TarArchiveExtractor().extract(archive, destination, strip_components=1)

    assert not (tmp_path / "outside.tf").exists()


def test_extract_wraps_unreadable_archives(tmp_path: Path) -> None:
    archive = tmp_path / "broken.tar.gz"
    archive.write_bytes(b"this is not a tarball")

    with pytest.raises(ArchiveExtractionError, match="Couldn't extract"):
        TarArchiveExtractor().extract(archive, tmp_path, strip_components=1)


def test_extract_rejects_negative_strip_components(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        TarArchiveExtractor().extract(tmp_path / "any.tar.gz", tmp_path, strip_components=-1)
