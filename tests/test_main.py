"""Tests for the command line entry point."""

import logging
import os

import pytest

from knowledge_sync.errors import ConfigurationError
from knowledge_sync.main import main, parse_args

from conftest import git, requires_git


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    for name in ("KNOWLEDGE_SYNC_REPO", "KNOWLEDGE_SYNC_BRANCH", "KNOWLEDGE_SYNC_REMOTE", "KNOWLEDGE_SYNC_GIT"):
        monkeypatch.delenv(name, raising=False)


def test_parse_flags():
    args = parse_args(["-m", "msg", "-f", "--dry-run", "-v"])

    assert args.message == "msg"
    assert args.force is True
    assert args.dry_run is True
    assert args.verbose is True


def test_parse_long_flags():
    args = parse_args(["--message", "msg", "--force", "--verbose", "-C", "/tmp/kb", "--branch", "notes"])

    assert args.message == "msg"
    assert args.repo == "/tmp/kb"
    assert args.branch == "notes"


@pytest.mark.parametrize("argv", [["--unknown"], ["stray"], ["-x"], ["-m"]])
def test_bad_arguments_raise_configuration_error(argv):
    with pytest.raises(ConfigurationError):
        parse_args(argv)


def test_bad_arguments_exit_nonzero(capsys):
    assert main(["--bogus"]) == 2
    assert "ERROR:" in capsys.readouterr().err


def test_help_exits_zero(capsys):
    assert main(["--help"]) == 0
    assert "--dry-run" in capsys.readouterr().out


def test_missing_directory_exits_2(tmp_path, capsys):
    assert main(["-C", str(tmp_path / "missing"), "--force"]) == 2
    assert "Directory not found" in capsys.readouterr().err


def test_not_a_repository_exits_2(tmp_path):
    assert main(["-C", str(tmp_path), "--force"]) == 2


@requires_git
def test_clean_repository_exits_0(git_repo, capsys):
    work, _ = git_repo

    assert main(["-C", str(work), "--force"]) == 0
    assert "No changes to commit" in capsys.readouterr().out


@requires_git
def test_dry_run_end_to_end(git_repo, capsys):
    work, _ = git_repo
    (work / "new.md").write_text("new\n")

    assert main(["-C", str(work), "--dry-run"]) == 0

    out = capsys.readouterr().out
    assert "git add --all" in out
    assert "git push origin main" in out
    assert git(work, "status", "--porcelain") == "?? new.md\n"


@requires_git
def test_declined_prompt_exits_0(git_repo, monkeypatch):
    work, _ = git_repo
    (work / "new.md").write_text("new\n")
    monkeypatch.setattr("builtins.input", lambda prompt: "n")

    assert main(["-C", str(work)]) == 0
    assert git(work, "status", "--porcelain") == "?? new.md\n"


@requires_git
def test_publish_failure_exits_1(git_repo, tmp_path, capsys):
    work, _ = git_repo
    git(work, "remote", "set-url", "origin", str(tmp_path / "gone.git"))
    (work / "new.md").write_text("new\n")

    assert main(["-C", str(work), "--force"]) == 1
    captured = capsys.readouterr()
    assert "publish failed" in captured.err
    assert "Committed locally but not pushed" in captured.out


@requires_git
def test_failure_reported_once_on_stderr(git_repo, tmp_path, capsys, caplog):
    work, _ = git_repo
    git(work, "remote", "set-url", "origin", str(tmp_path / "gone.git"))
    (work / "new.md").write_text("new\n")

    assert main(["-C", str(work), "--force"]) == 1

    captured = capsys.readouterr()
    assert captured.err.count("publish failed") == 1
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


@requires_git
def test_non_utf8_path_syncs(git_repo):
    work, remote = git_repo
    try:
        with open(os.path.join(os.fsencode(str(work)), b"caf\xe9.md"), "wb") as f:
            f.write(b"latin-1 name\n")
    except OSError:
        pytest.skip("filesystem rejects non-UTF-8 file names")

    assert main(["-C", str(work), "--dry-run"]) == 0
    assert main(["-C", str(work), "--force"]) == 0
    assert git(work, "status", "--porcelain") == ""
    assert git(work, "rev-parse", "HEAD") == git(remote, "rev-parse", "main")
