"""
Git command-line client for the local repository being synced.

Every invocation is built as a ``GitCommand`` (a tuple of discrete arguments)
and run without a shell, so commit messages containing quotes or other
shell metacharacters are passed through untouched.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import structlog

from knowledge_sync.errors import GitCommandError
from knowledge_sync.models.state import StatusEntry

logger = structlog.get_logger()


@dataclass(frozen=True)
class GitCommand:
    """A git invocation as discrete arguments (without the executable)."""
    args: Tuple[str, ...]
    step: Optional[str] = None
    mutating: bool = False

    def argv(self, executable: str = "git") -> List[str]:
        return [executable, *self.args]

    def display(self, executable: str = "git") -> str:
        """Human-readable form, for previews and logs only."""
        return " ".join(_quote_for_display(arg) for arg in self.argv(executable))


def _quote_for_display(arg: str) -> str:
    if arg and not any(ch in arg for ch in " \t\n\"'$`\\"):
        return arg
    return '"' + arg.replace("\\", "\\\\").replace('"', '\\"') + '"'


# Command builders

def current_branch_command() -> GitCommand:
    return GitCommand(("branch", "--show-current"))


def remotes_command() -> GitCommand:
    return GitCommand(("remote",))


def status_command() -> GitCommand:
    return GitCommand(("status", "--porcelain=v1", "-z", "--untracked-files=all"))


def stage_all_command() -> GitCommand:
    return GitCommand(("add", "--all"), step="stage", mutating=True)


def commit_command(message: str) -> GitCommand:
    return GitCommand(
        ("commit", "--cleanup=verbatim", "-m", message),
        step="commit",
        mutating=True,
    )


def push_command(remote: str, branch: str) -> GitCommand:
    return GitCommand(("push", remote, branch), step="publish", mutating=True)


def parse_porcelain_z(output: str) -> List[StatusEntry]:
    """
    Parse ``git status --porcelain=v1 -z`` output.

    Records are NUL-terminated ``XY path``. Renames and copies are followed
    by one more NUL-terminated field holding the source path.
    """
    entries: List[StatusEntry] = []
    fields = output.split("\0")
    i = 0
    while i < len(fields):
        record = fields[i]
        i += 1
        if not record:
            continue
        if len(record) < 4 or record[2] != " ":
            raise ValueError(f"Unexpected status record: {record!r}")

        code, path = record[:2], record[3:]
        original_path = None
        if "R" in code or "C" in code:
            if i >= len(fields) or not fields[i]:
                raise ValueError(f"Rename record without source path: {record!r}")
            original_path = fields[i]
            i += 1

        entries.append(StatusEntry(code=code, path=path, original_path=original_path))
    return entries


class GitClient:
    """Runs git commands inside one working tree."""

    def __init__(self, repo_path: Path, executable: str = "git", timeout: int = 120):
        """
        Initialize git client.

        Args:
            repo_path: Working tree root; every command runs with this cwd
            executable: git executable name or path
            timeout: Per-command timeout in seconds
        """
        self.repo_path = Path(repo_path)
        self.executable = executable
        self.timeout = timeout

    def resolve_executable(self) -> Optional[str]:
        """Return the full path of the git executable, or None if not found."""
        return shutil.which(self.executable)

    def run(self, command: GitCommand) -> str:
        """
        Run a command and return its stdout.

        Output is read as bytes and decoded with os.fsdecode, so paths that
        are not valid UTF-8 survive as surrogate escapes and no newline
        translation touches a carriage return inside a path.

        Raises:
            GitCommandError: non-zero exit, timeout, or executable missing
        """
        argv = command.argv(self.executable)
        logger.debug("git_command", args=command.args[:3], mutating=command.mutating)

        try:
            result = subprocess.run(
                argv,
                cwd=str(self.repo_path),
                capture_output=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise GitCommandError(argv, None, str(e)) from e
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(argv, None, f"timed out after {self.timeout}s") from e

        if result.returncode != 0:
            error_msg = (result.stderr or result.stdout).decode("utf-8", errors="replace")
            logger.debug("git_command_failed", args=command.args[:2], returncode=result.returncode, error=error_msg.strip())
            raise GitCommandError(argv, result.returncode, error_msg)

        return os.fsdecode(result.stdout)

    # Queries

    def current_branch(self) -> str:
        return self.run(current_branch_command()).strip()

    def remotes(self) -> List[str]:
        return [line.strip() for line in self.run(remotes_command()).splitlines() if line.strip()]

    def status(self) -> List[StatusEntry]:
        return parse_porcelain_z(self.run(status_command()))
