"""End-to-end dispatch through ``main`` with a fake downloader."""

from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from channel_access import cli
from channel_access.models import VERSION


class FakeDownloader:
    def __init__(self, status=0):
        self.status = status
        self.calls = []

    def __call__(self, command):
        self.calls.append(list(command))
        return self.status


@pytest.fixture
def fake():
    return FakeDownloader()


def run(tmp_path, argv, fake, prog="video", environ=None, stdin=None, cwd=None):
    env = {"HOME": str(tmp_path)}
    env.update(environ or {})
    stdout = io.StringIO()
    status = cli.main(
        argv,
        environ=env,
        prog=prog,
        cwd=str(cwd or tmp_path),
        stdin=stdin,
        stdout=stdout,
        runner=fake,
    )
    return status, stdout.getvalue()


def test_download_runs_downloader_and_forwards_status(tmp_path):
    fake = FakeDownloader(status=3)

    status, _ = run(tmp_path, ["-t", "Recent", "abc"], fake)

    assert status == 3
    assert len(fake.calls) == 1
    command = fake.calls[0]
    assert command[0] == "yt-dlp"
    assert command[-2:] == ["--", "abc"]
    assert (tmp_path / "Movies" / "Recent").is_dir()


def test_dryrun_never_invokes_downloader(tmp_path, fake, capsys):
    status, _ = run(tmp_path, ["--dryrun", "abc"], fake)

    assert status == 0
    assert fake.calls == []
    err = capsys.readouterr().err
    assert "[debug] yt-dlp --cookies-from-browser chrome" in err
    assert "[debug] script = video" in err
    assert "[debug] output = DEFAULT" in err
    assert not (tmp_path / "Movies").exists()


def test_debug_snapshot_lists_paths(tmp_path, fake, capsys):
    run(
        tmp_path,
        ["-D", "-Q", "--fragments", "4", "--order", "sequential", "--subtitles", "de", "abc"],
        fake,
    )

    err = capsys.readouterr().err
    assert "[debug] output = QUIET" in err
    assert "[debug] fragments = 4" in err
    assert "[debug] order = sequential" in err
    assert "[debug] subtitles = de" in err
    assert "[debug] playlist = playlist.txt" in err
    assert "[debug] dryrun = no" in err
    assert f"[debug] home:{tmp_path / 'Movies'}" in err
    assert "[debug] temp:" in err
    assert len(fake.calls) == 1


def test_batch_from_stdin(tmp_path, fake):
    stdin = io.StringIO("abc # first\n\n def \n")

    run(tmp_path, [], fake, stdin=stdin)

    command = fake.calls[0]
    assert command[-2] == "--batch-file"
    assert command[-1].endswith("source")


def test_workspace_removed_after_download(tmp_path, fake):
    run(tmp_path, [], fake, stdin=io.StringIO("abc\n"))

    batch_file = Path(fake.calls[0][-1])
    assert not batch_file.exists()
    assert not batch_file.parent.exists()


def test_list_formats_forwards_status(tmp_path):
    fake = FakeDownloader(status=2)

    status, _ = run(tmp_path, ["-L", "abc"], fake)

    assert status == 2
    assert fake.calls == [
        ["yt-dlp", "--quiet", "--cookies-from-browser", "chrome", "--list-formats", "--", "abc"]
    ]


def test_javascript_prints_companion_script(tmp_path, fake):
    status, out = run(tmp_path, ["--javascript", "-p", "mixtape.txt"], fake, prog="kimono")

    assert status == 0
    assert fake.calls == []
    assert f'download("{tmp_path / "Music"}/mixtape.txt", urls);' in out


def test_find_ids_prints_matches(tmp_path, fake):
    movies = tmp_path / "Movies"
    movies.mkdir()
    (movies / "talk[ID000000001].mp4").write_text("")

    status, out = run(tmp_path, ["--find-ids", "ID000000001", "ID000000009"], fake, prog="kimono")

    assert status == 0
    assert out.splitlines() == [str(movies / "talk[ID000000001].mp4")]
    assert fake.calls == []


def test_duplicates_prints_files_for_repeated_ids(tmp_path, fake):
    movies = tmp_path / "Movies"
    movies.mkdir()
    (movies / "a[ID000000001].mp4").write_text("")
    (movies / "b[ID000000001].mkv").write_text("")
    (movies / "c[ID000000002].mp4").write_text("")

    status, out = run(tmp_path, ["--duplicates"], fake, prog="kimono")

    assert status == 0
    assert out.splitlines() == [
        str(movies / "a[ID000000001].mp4"),
        str(movies / "b[ID000000001].mkv"),
    ]
    assert fake.calls == []


def test_last_action_flag_wins(tmp_path, fake):
    status, out = run(tmp_path, ["--duplicates", "--javascript"], fake, prog="kimono")

    assert status == 0
    assert "copy into browser developer tools console" in out


@pytest.mark.parametrize(
    "argv, environ",
    [
        (["--bogus"], {}),
        (["--fragments", "zero"], {}),
        ([], {"FRAGMENTS": "zero"}),
        ([], {"SCRIPT": "vidoe"}),
    ],
)
def test_usage_errors_exit_one(tmp_path, fake, capsys, argv, environ):
    status, _ = run(tmp_path, argv, fake, environ=environ)

    assert status == 1
    assert fake.calls == []
    assert "usage:" in capsys.readouterr().err


def test_help_and_version(tmp_path, fake):
    status, out = run(tmp_path, ["-?"], fake)
    assert status == 0
    assert "usage:" in out
    assert "examples:" in out

    status, out = run(tmp_path, ["--version"], fake)
    assert status == 0
    assert out.startswith(f"Version: {VERSION}")


def test_empty_playlist_flag_falls_back_to_default(tmp_path, fake):
    status, out = run(tmp_path, ["--javascript", "-p", ""], fake)

    assert status == 0
    assert "/playlist.txt\", urls);" in out
    assert fake.calls == []


def test_relative_target_created_under_invocation_directory(tmp_path, fake, monkeypatch):
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)

    status, _ = run(tmp_path, ["-t", "./x", "abc"], fake, cwd=tmp_path)

    assert status == 0
    assert (tmp_path / "x").is_dir()
    assert not (elsewhere / "x").exists()
