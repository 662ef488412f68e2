"""Unit tests for the in-memory ZIP writer."""

import io
import zipfile
from datetime import datetime

import pytest

from zip_artifacts.archive.writer import ZipArchiveWriter, validate_metadata_path
from zip_artifacts.options import ArchiveOptions, FileOptions

FIXED = FileOptions(mtime=datetime(2016, 1, 1))


def build(entries, file_options=FIXED, archive_options=None, chunk_size=64 * 1024):
    writer = ZipArchiveWriter(chunk_size=chunk_size)
    for name, data in entries:
        writer.add_buffer(data, name, file_options)
    writer.end(archive_options)
    return b"".join(writer.output_stream())


def infos(data):
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {info.filename: info for info in zf.infolist()}


def test_entries_round_trip(unzip):
    data = build([("a.js", b"const abc = 'xyz';"), ("subdir/b.jpg", bytes(range(256)))])
    assert unzip(data) == {"a.js": b"const abc = 'xyz';", "subdir/b.jpg": bytes(range(256))}


def test_entries_keep_submission_order():
    data = build([("z.txt", b"z"), ("a.txt", b"a"), ("m/n.txt", b"n")])
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        assert zf.namelist() == ["z.txt", "a.txt", "m/n.txt"]


def test_file_options_are_applied():
    options = FileOptions(mtime=datetime(2016, 1, 1), mode=0o100644, compress=False)
    info = infos(build([("a.js", b"x" * 100)], file_options=options))["a.js"]
    assert info.date_time == (2016, 1, 1, 0, 0, 0)
    assert info.external_attr >> 16 == 0o100644
    assert info.compress_type == zipfile.ZIP_STORED
    assert info.create_system == 3


def test_default_file_options():
    before = datetime.now().replace(microsecond=0)
    writer = ZipArchiveWriter()
    writer.add_buffer(b"x" * 100, "a.js")
    writer.end()
    info = infos(b"".join(writer.output_stream()))["a.js"]
    assert info.compress_type == zipfile.ZIP_DEFLATED
    assert info.external_attr >> 16 == 0o100664
    # DOS timestamps have two second resolution
    assert datetime(*info.date_time) >= before.replace(second=before.second - before.second % 2)


def test_timestamps_before_1980_are_clamped():
    info = infos(build([("a.js", b"x")], file_options=FileOptions(mtime=datetime(1970, 1, 1))))["a.js"]
    assert info.date_time == (1980, 1, 1, 0, 0, 0)


def test_force_zip64_adds_extra_fields(unzip):
    plain = build([("a.js", b"abc")])
    per_file = build([("a.js", b"abc")], file_options=FileOptions(mtime=datetime(2016, 1, 1), force_zip64=True))
    per_archive = build([("a.js", b"abc")], archive_options=ArchiveOptions(force_zip64=True))
    assert len(per_file) > len(plain)
    assert len(per_archive) == len(per_file)
    assert unzip(per_file) == unzip(plain) == {"a.js": b"abc"}


def test_archive_comment():
    data = build([("a.js", b"abc")], archive_options=ArchiveOptions(comment="release 1.0"))
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        assert zf.comment == b"release 1.0"


def test_empty_archive_is_valid():
    data = build([])
    assert len(data) == 22
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        assert zf.namelist() == []


def test_output_is_chunked():
    writer = ZipArchiveWriter(chunk_size=10)
    writer.add_buffer(b"abc" * 50, "a.txt", FIXED)
    writer.end()
    chunks = list(writer.output_stream())
    assert len(chunks) > 1
    assert all(len(chunk) <= 10 for chunk in chunks)
    assert b"".join(chunks) == build([("a.txt", b"abc" * 50)])


@pytest.mark.parametrize(
    "path, message",
    [
        ("", "empty"),
        ("a\\b.js", "invalid characters"),
        ("/abs/a.js", "absolute path"),
        ("C:/a.js", "absolute path"),
        ("../a.js", "invalid relative path"),
        ("x/../../a.js", "invalid relative path"),
    ],
)
def test_invalid_entry_paths(path, message):
    with pytest.raises(ValueError, match=message):
        validate_metadata_path(path)
    writer = ZipArchiveWriter()
    with pytest.raises(ValueError):
        writer.add_buffer(b"x", path)


def test_valid_entry_path_is_returned():
    assert validate_metadata_path("release/a..b.js") == "release/a..b.js"


def test_add_after_end_raises():
    writer = ZipArchiveWriter()
    writer.end()
    with pytest.raises(RuntimeError, match="after end"):
        writer.add_buffer(b"x", "a.js")


def test_end_twice_raises():
    writer = ZipArchiveWriter()
    writer.end()
    with pytest.raises(RuntimeError, match="already called"):
        writer.end()


def test_output_before_end_raises():
    writer = ZipArchiveWriter()
    with pytest.raises(RuntimeError, match="requires end"):
        list(writer.output_stream())


def test_text_content_is_rejected():
    writer = ZipArchiveWriter()
    with pytest.raises(TypeError):
        writer.add_buffer("text", "a.js")


def test_chunk_size_must_be_positive():
    with pytest.raises(ValueError):
        ZipArchiveWriter(chunk_size=0)
