"""Read-only repository access for history analysis.

:class:`RepositoryClient` is the narrow interface the history walk depends
on. :class:`GitCliClient` implements it with git plumbing commands run
through ``subprocess``; nothing here checks out a commit, switches branch
or writes the index.
"""

from __future__ import annotations

import errno
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence, Union

from ..exceptions import (
    GitNotFoundError,
    RepositoryError,
    RepositoryTimeoutError,
    TransientRepositoryError,
    UnresolvableRefError,
)
from ..logging_config import get_logger
from .models import RepoChange, RepoChangeKind

logger = get_logger(__name__)

INITIAL_COMMIT = "initial"

# Spawn failures that go away once the system has capacity again
_TRANSIENT_ERRNOS = frozenset({errno.EAGAIN, errno.EMFILE, errno.ENFILE, errno.ENOMEM})


class RepositoryClient(ABC):
    """Read-only view of a repository, scoped to one working directory."""

    @abstractmethod
    def status_clean(self) -> bool:
        """True if the working tree has no uncommitted changes."""

    @abstractmethod
    def resolve_commit(self, ref: str) -> str:
        """Resolve ``ref`` to a commit id. ``"initial"`` names the root commit."""

    @abstractmethod
    def head_commit(self) -> str:
        """Commit id of HEAD."""

    @abstractmethod
    def commits_in_range(self, start: str, head: str) -> list[str]:
        """Commits from ``start`` to ``head``, both included, oldest first."""

    @abstractmethod
    def list_files(self, commit: str) -> list[str]:
        """Paths of all files at ``commit`` under the working directory."""

    @abstractmethod
    def changes_between(self, previous: str, commit: str) -> list[RepoChange]:
        """Paths under the working directory changed from ``previous`` to ``commit``."""

    @abstractmethod
    def read_file_at(self, commit: str, path: str) -> bytes:
        """Raw content of ``path`` at ``commit``."""


class GitCliClient(RepositoryClient):
    """Repository client backed by the git command line.

    Every invocation runs with ``timeout_seconds``. Paths are reported
    relative to the repository root with forward slashes. Failures are
    raised, never retried here; see :func:`codeflux.temporal.retry.call_with_retry`.
    """

    def __init__(
        self,
        working_directory: Union[str, Path],
        timeout_seconds: float = 60.0,
        git_executable: str = "git",
    ):
        self.working_directory = str(Path(working_directory).resolve())
        self.timeout_seconds = timeout_seconds
        self.git_executable = git_executable

    def _run(self, operation: str, args: Sequence[str]) -> bytes:
        command = [self.git_executable, *args]
        logger.debug("git %s (%s)", " ".join(args), operation)

        try:
            result = subprocess.run(
                command,
                cwd=self.working_directory,
                capture_output=True,
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError:
            raise GitNotFoundError(self.git_executable)
        except subprocess.TimeoutExpired:
            raise RepositoryTimeoutError(operation, self.timeout_seconds, command)
        except OSError as e:
            if e.errno in _TRANSIENT_ERRNOS:
                raise TransientRepositoryError(operation, f"cannot start git: {e}", command=command)
            raise RepositoryError(operation, f"cannot start git: {e}", command=command)

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace")
            raise RepositoryError(
                operation,
                f"git exited with status {result.returncode}",
                command=command,
                returncode=result.returncode,
                stderr=stderr,
            )
        return result.stdout

    def _run_text(self, operation: str, args: Sequence[str]) -> str:
        return self._run(operation, args).decode("utf-8", errors="replace")

    def status_clean(self) -> bool:
        return not self._run_text("status_clean", ["status", "--porcelain"]).strip()

    def resolve_commit(self, ref: str) -> str:
        if ref == INITIAL_COMMIT:
            out = self._run_text("resolve_commit", ["rev-list", "--max-parents=0", "HEAD"])
            roots = out.split()
            if not roots:
                raise UnresolvableRefError(ref)
            # rev-list lists newest first; the oldest root is the walk's start
            return roots[-1]

        try:
            out = self._run_text("resolve_commit", ["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"])
        except RepositoryError as e:
            if e.returncode is None:
                raise
            raise UnresolvableRefError(ref, stderr=e.stderr)
        commit = out.strip()
        if not commit:
            raise UnresolvableRefError(ref)
        return commit

    def head_commit(self) -> str:
        return self.resolve_commit("HEAD")

    def commits_in_range(self, start: str, head: str) -> list[str]:
        if start == head:
            return [start]
        out = self._run_text("commits_in_range", ["rev-list", "--reverse", f"{start}..{head}"])
        return [start, *out.split()]

    def list_files(self, commit: str) -> list[str]:
        out = self._run_text("list_files", ["ls-tree", "-r", "-z", "--full-name", commit, "--", "."])
        paths: list[str] = []
        for record in out.split("\0"):
            if not record:
                continue
            meta, _, path = record.partition("\t")
            # Skip submodules and anything else that is not a file
            if meta.split()[1:2] == ["blob"]:
                paths.append(path)
        return paths

    def changes_between(self, previous: str, commit: str) -> list[RepoChange]:
        out = self._run_text(
            "changes_between",
            ["diff", "--name-status", "-z", "-M", "--no-ext-diff", previous, commit, "--", "."],
        )
        return parse_name_status(out)

    def read_file_at(self, commit: str, path: str) -> bytes:
        return self._run("read_file_at", ["cat-file", "blob", f"{commit}:{path}"])


def parse_name_status(output: str) -> list[RepoChange]:
    """Parse ``git diff --name-status -z`` output into repository changes.

    Renames carry their old path; copies count as an add of the new path,
    and type changes as a modification.
    """
    tokens = output.split("\0")
    changes: list[RepoChange] = []
    i = 0
    while i < len(tokens):
        status = tokens[i]
        if not status:
            i += 1
            continue
        letter = status[0]

        if letter in ("R", "C"):
            old_path, new_path = tokens[i + 1], tokens[i + 2]
            i += 3
            if letter == "R":
                changes.append(RepoChange(RepoChangeKind.RENAME, new_path, old_path=old_path))
            else:
                changes.append(RepoChange(RepoChangeKind.ADD, new_path))
            continue

        path = tokens[i + 1]
        i += 2
        if letter == "A":
            changes.append(RepoChange(RepoChangeKind.ADD, path))
        elif letter == "D":
            changes.append(RepoChange(RepoChangeKind.DELETE, path))
        elif letter in ("M", "T"):
            changes.append(RepoChange(RepoChangeKind.MODIFY, path))
        else:
            logger.warning("Ignoring change with unknown status %r for %s", status, path)

    return changes
