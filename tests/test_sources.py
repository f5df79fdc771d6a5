"""Batch file discovery and normalization."""

from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from channel_access.models import InputSource
from channel_access.paths import TemporaryWorkspace
from channel_access.sources import (
    batch_candidates,
    normalize_line,
    normalize_lines,
    resolve_input_source,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  abc123   # comment ", "abc123"),
        ("abc123\n", "abc123"),
        ("\tabc123\t", "abc123"),
        ("# only a comment", ""),
        ("   \t ", ""),
    ],
)
def test_normalize_line(raw, expected):
    assert normalize_line(raw) == expected


def test_normalize_lines_drops_empty_lines():
    lines = ["# header\n", "abc\n", "\n", "   \n", " def # two\n", "#ghi\n"]
    assert normalize_lines(lines) == ["abc", "def"]


def test_positional_ids_win_and_are_verbatim(tmp_path):
    (tmp_path / "download.txt").write_text("ignored\n")
    with TemporaryWorkspace("audio") as workspace:
        source = resolve_input_source(
            ["abc", "not-an-id!"], "audio", "playlist.txt", workspace, str(tmp_path)
        )
    assert source == InputSource(ids=("abc", "not-an-id!"))
    assert source.to_args() == ["--", "abc", "not-an-id!"]


def _resolve_batch(tmp_path, script="audio", playlist="mixtape.txt", stdin=None):
    with TemporaryWorkspace(script) as workspace:
        source = resolve_input_source(
            [], script, playlist, workspace, str(tmp_path), stdin=stdin
        )
        content = Path(source.batch_file).read_text()
    return source, content


def test_mode_named_file_beats_generic_and_playlist(tmp_path):
    (tmp_path / "download.txt").write_text("generic\n")
    (tmp_path / "audio.txt").write_text("moded\n")
    (tmp_path / "mixtape.txt").write_text("playlist\n")

    source, content = _resolve_batch(tmp_path)

    assert source.origin == "audio.txt"
    assert content == "moded\n"


def test_generic_file_beats_playlist(tmp_path):
    (tmp_path / "download.txt").write_text("generic\n")
    (tmp_path / "mixtape.txt").write_text("playlist\n")

    source, content = _resolve_batch(tmp_path)

    assert source.origin == "download.txt"
    assert content == "generic\n"


def test_playlist_used_when_no_conventional_file(tmp_path):
    (tmp_path / "mixtape.txt").write_text("  one # first\n\n# skip\ntwo\n")

    source, content = _resolve_batch(tmp_path)

    assert source.origin == "mixtape.txt"
    assert content == "one\ntwo\n"
    assert source.to_args()[0] == "--batch-file"


def test_directory_named_like_candidate_is_skipped(tmp_path):
    (tmp_path / "audio.txt").mkdir()
    (tmp_path / "download.txt").write_text("generic\n")

    source, _ = _resolve_batch(tmp_path)

    assert source.origin == "download.txt"


def test_standard_input_is_the_fallback(tmp_path):
    stdin = io.StringIO("abc # x\n\n  def  \n")

    source, content = _resolve_batch(tmp_path, stdin=stdin)

    assert source.origin == "-"
    assert content == "abc\ndef\n"


def test_batch_candidates_skip_duplicates():
    assert batch_candidates("download", "download.txt") == ["download.txt"]
    assert batch_candidates("video", "playlist.txt") == ["video.txt", "download.txt", "playlist.txt"]


def test_non_utf8_batch_file_is_used_not_skipped(tmp_path):
    (tmp_path / "download.txt").write_bytes(b"abc123 # caf\xe9 mix\n")

    with TemporaryWorkspace("audio") as workspace:
        source = resolve_input_source(
            [], "audio", "mixtape.txt", workspace, str(tmp_path),
            stdin=io.StringIO("FROM_STDIN\n"),
        )
        content = Path(source.batch_file).read_bytes()

    assert source.origin == "download.txt"
    assert content == b"abc123\n"


def test_undecodable_bytes_survive_into_the_batch_file(tmp_path):
    (tmp_path / "mixtape.txt").write_bytes(b"caf\xe9-mix\n# skip\nabc\n")

    with TemporaryWorkspace("audio") as workspace:
        source = resolve_input_source(
            [], "audio", "mixtape.txt", workspace, str(tmp_path)
        )
        content = Path(source.batch_file).read_bytes()

    assert source.origin == "mixtape.txt"
    assert content == b"caf\xe9-mix\nabc\n"


def test_non_utf8_standard_input_is_read(tmp_path):
    stdin = io.TextIOWrapper(io.BytesIO(b"caf\xe9 # x\nabc\n"), encoding="utf-8")

    with TemporaryWorkspace("audio") as workspace:
        source = resolve_input_source(
            [], "audio", "mixtape.txt", workspace, str(tmp_path), stdin=stdin
        )
        content = Path(source.batch_file).read_bytes()

    assert source.origin == "-"
    assert content == b"caf\xe9\nabc\n"
