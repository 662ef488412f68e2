"""Integration tests running the plugin over a real output directory."""

import asyncio
import os

import pytest

from zip_artifacts import ZipFilePlugin, ZipOptions
from zip_artifacts.build.directory import DirectoryBuild, load_assets, write_assets
from zip_artifacts.build.compilation import RawSource


def test_load_assets_reads_sorted_relative_paths(output_dir, sample_assets):
    (output_dir / "c.css").write_text("body{}", encoding="utf-8")
    assets = load_assets(str(output_dir))
    assert list(assets) == ["a.js", "c.css", "subdir/b.jpg"]
    assert assets["subdir/b.jpg"].buffer() == sample_assets["subdir/b.jpg"]


def test_load_assets_ignores_listed_paths(output_dir):
    assert list(load_assets(str(output_dir), ignore=["a.js"])) == ["subdir/b.jpg"]


def test_write_assets_creates_directories(tmp_path):
    written = write_assets(str(tmp_path), {"x/y/z.txt": RawSource("hi")}, ["x/y/z.txt"])
    assert written == [str(tmp_path / "x" / "y" / "z.txt")]
    assert (tmp_path / "x" / "y" / "z.txt").read_text(encoding="utf-8") == "hi"


def test_round_trip_through_disk(output_dir, unzip):
    result = asyncio.run(DirectoryBuild(str(output_dir), plugins=[ZipFilePlugin()]).run())

    archive = output_dir / "out.zip"
    assert result.emitted == ["out.zip"]
    assert result.written == [str(archive)]
    entries = unzip(archive.read_bytes())
    assert entries["a.js"] == (output_dir / "a.js").read_bytes()
    assert entries["subdir/b.jpg"] == (output_dir / "subdir" / "b.jpg").read_bytes()


def test_archive_written_outside_output_directory(output_dir, unzip):
    plugin = ZipFilePlugin(ZipOptions(path="../zip", path_prefix="site"))
    asyncio.run(DirectoryBuild(str(output_dir), plugins=[plugin]).run())

    archive = output_dir.parent / "zip" / "zip.zip"
    assert sorted(unzip(archive.read_bytes())) == ["site/a.js", "site/subdir/b.jpg"]


def test_dry_run_writes_nothing(output_dir):
    result = asyncio.run(DirectoryBuild(str(output_dir), plugins=[ZipFilePlugin()]).run(write=False))
    assert result.emitted == ["out.zip"]
    assert result.written == []
    assert not (output_dir / "out.zip").exists()


def test_existing_files_are_not_rewritten(output_dir):
    before = os.stat(output_dir / "a.js").st_mtime_ns
    asyncio.run(DirectoryBuild(str(output_dir), plugins=[ZipFilePlugin()]).run())
    assert os.stat(output_dir / "a.js").st_mtime_ns == before


def test_missing_directory(tmp_path):
    with pytest.raises(NotADirectoryError):
        DirectoryBuild(str(tmp_path / "missing"))
