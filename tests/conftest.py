"""Shared fixtures for knowledge-sync tests."""

import io
import shutil
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

import pytest

from knowledge_sync.config import SyncConfig
from knowledge_sync.errors import GitCommandError
from knowledge_sync.integrations.git_client import GitCommand
from knowledge_sync.models.state import StatusEntry
from knowledge_sync.reporter import Reporter


FIXED_NOW = datetime(2024, 5, 1, 9, 30, 0)


class FakeGitClient:
    """In-memory stand-in for GitClient that records every command."""

    def __init__(
        self,
        repo_path: Path,
        branch: str = "main",
        remotes: Iterable[str] = ("origin",),
        entries: Optional[List[StatusEntry]] = None,
        fail_step: Optional[str] = None,
        executable_found: bool = True,
    ):
        self.repo_path = repo_path
        self.executable = "git"
        self.branch = branch
        self.remote_names = list(remotes)
        self.entries = entries or []
        self.fail_step = fail_step
        self.executable_found = executable_found
        self.queries: List[str] = []
        self.calls: List[GitCommand] = []

    @property
    def mutating_calls(self) -> List[GitCommand]:
        return [c for c in self.calls if c.mutating]

    @property
    def steps(self) -> List[str]:
        return [c.step for c in self.mutating_calls]

    def resolve_executable(self):
        return "/usr/bin/git" if self.executable_found else None

    def run(self, command: GitCommand) -> str:
        self.calls.append(command)
        if command.step and command.step == self.fail_step:
            raise GitCommandError(command.argv(), 1, f"simulated {command.step} failure")
        return ""

    def current_branch(self) -> str:
        self.queries.append("branch")
        return self.branch

    def remotes(self) -> List[str]:
        self.queries.append("remotes")
        return list(self.remote_names)

    def status(self) -> List[StatusEntry]:
        self.queries.append("status")
        return list(self.entries)


class ScriptedPrompt:
    """Prompt provider that replays canned answers and records each prompt."""

    def __init__(self, answers: Iterable[str] = ()):
        self._answers = iter(answers)
        self.prompts: List[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return next(self._answers, "")


def entry(code: str, path: str, original_path: Optional[str] = None) -> StatusEntry:
    return StatusEntry(code=code, path=path, original_path=original_path)


@pytest.fixture
def repo_dir(tmp_path):
    """A directory that passes the metadata check (no real git needed)."""
    path = tmp_path / "knowledge"
    (path / ".git").mkdir(parents=True)
    return path


@pytest.fixture
def config(repo_dir):
    return SyncConfig(repo_path=repo_dir)


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def err():
    return io.StringIO()


@pytest.fixture
def reporter(out, err):
    return Reporter(verbose=True, out=out, err=err)


@pytest.fixture
def sample_entries():
    return [
        entry("A ", "notes/new.md"),
        entry("M ", "notes/changed.md"),
        entry(" M", "notes/edited.md"),
        entry("D ", "notes/old.md"),
        entry("??", "drafts/idea.md"),
    ]


# Real repositories

def git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


@pytest.fixture
def git_repo(tmp_path):
    """A working tree on branch main with a bare 'origin' it has pushed to."""
    remote = tmp_path / "origin.git"
    work = tmp_path / "work"
    remote.mkdir()
    work.mkdir()

    git(remote, "init", "--bare", "-q")
    git(work, "init", "-q")
    git(work, "checkout", "-q", "-b", "main")
    git(work, "config", "user.name", "Test User")
    git(work, "config", "user.email", "test@example.com")
    git(work, "config", "commit.gpgsign", "false")
    git(work, "remote", "add", "origin", str(remote))

    (work / "README.md").write_text("# Knowledge\n")
    (work / "obsolete.md").write_text("old\n")
    git(work, "add", "--all")
    git(work, "commit", "-q", "-m", "Initial commit")
    git(work, "push", "-q", "origin", "main")

    return work, remote
