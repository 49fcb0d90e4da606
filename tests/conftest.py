"""Shared test fixtures for codeflux tests."""

import shutil
import subprocess
import threading
from pathlib import Path

import pytest

from codeflux.exceptions import RepositoryError, UnresolvableRefError
from codeflux.scanning.models import LineGroup
from codeflux.temporal.client import INITIAL_COMMIT, RepositoryClient
from codeflux.temporal.models import RepoChange, RepoChangeKind


def build_groups(*pairs):
    """Build contiguous line groups from ``(LineType, length)`` pairs."""
    result = []
    start = 1
    for line_type, length in pairs:
        result.append(LineGroup(start, length, line_type))
        start += length
    return result


class FakeRepositoryClient(RepositoryClient):
    """In-memory repository: commits, file contents per commit, changes per commit pair.

    Records every ``read_file_at`` call in ``opened_files``.
    """

    def __init__(self, commits, files_at_commit, changes=None, clean=True):
        self.commits = list(commits)
        self.files_at_commit = files_at_commit
        self.changes = changes or {}
        self.clean = clean
        self.opened_files = []
        self.failing_reads = set()
        self._lock = threading.Lock()

    def status_clean(self):
        return self.clean

    def resolve_commit(self, ref):
        if ref == INITIAL_COMMIT:
            if not self.commits:
                raise UnresolvableRefError(ref)
            return self.commits[0]
        if ref == "HEAD":
            return self.head_commit()
        if ref not in self.commits:
            raise UnresolvableRefError(ref)
        return ref

    def head_commit(self):
        if not self.commits:
            raise UnresolvableRefError("HEAD")
        return self.commits[-1]

    def commits_in_range(self, start, head):
        return self.commits[self.commits.index(start) : self.commits.index(head) + 1]

    def list_files(self, commit):
        return list(self.files_at_commit.get(commit, {}))

    def changes_between(self, previous, commit):
        return list(self.changes.get((previous, commit), []))

    def read_file_at(self, commit, path):
        with self._lock:
            self.opened_files.append((commit, path))
        if (commit, path) in self.failing_reads:
            raise RepositoryError("read_file_at", "object not found", returncode=128)
        return self.files_at_commit[commit][path].encode("utf-8")


@pytest.fixture
def three_commit_repo():
    """a.cs added, then commented, then deleted while b.cs is added."""
    return FakeRepositoryClient(
        commits=["c1", "c2", "c3"],
        files_at_commit={
            "c1": {"a.cs": "class A {}\n"},
            "c2": {"a.cs": "class A {}\n// comment\n"},
            "c3": {"b.cs": "class B {}\n"},
        },
        changes={
            ("c1", "c2"): [RepoChange(RepoChangeKind.MODIFY, "a.cs")],
            ("c2", "c3"): [
                RepoChange(RepoChangeKind.DELETE, "a.cs"),
                RepoChange(RepoChangeKind.ADD, "b.cs"),
            ],
        },
    )


# ── Real git repositories ────────────────────────────────────────────────


class GitRepo:
    """Thin helper around a temporary git repository for integration tests."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self.git("init", "-q")
        self.git("config", "user.email", "tests@example.com")
        self.git("config", "user.name", "codeflux tests")
        self.git("config", "commit.gpgsign", "false")

    def git(self, *args) -> str:
        result = subprocess.run(
            ["git", *args], cwd=self.root, capture_output=True, text=True, check=True
        )
        return result.stdout.strip()

    def write(self, path: str, content: str) -> None:
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content.encode("utf-8"))

    def remove(self, path: str) -> None:
        self.git("rm", "-q", path)

    def commit(self, message: str) -> str:
        self.git("add", "-A")
        self.git("commit", "-q", "-m", message)
        return self.git("rev-parse", "HEAD")


@pytest.fixture
def git_repo(tmp_path):
    """Empty git repository in a temporary directory."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    return GitRepo(tmp_path / "repo")


@pytest.fixture
def make_groups():
    """Factory for contiguous line groups: ``make_groups((LineType.CODE, 3), ...)``."""
    return build_groups
