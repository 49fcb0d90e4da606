"""Tests for the git command-line repository client."""

import errno
import subprocess

import pytest

from codeflux.exceptions import (
    GitNotFoundError,
    RepositoryError,
    RepositoryTimeoutError,
    TransientRepositoryError,
    UnresolvableRefError,
)
from codeflux.temporal.client import GitCliClient, parse_name_status
from codeflux.temporal.models import RepoChange, RepoChangeKind


class FakeRun:
    """Stands in for ``subprocess.run`` and records the commands it sees."""

    def __init__(self, stdout=b"", returncode=0, stderr=b"", error=None):
        self.stdout = stdout
        self.returncode = returncode
        self.stderr = stderr
        self.error = error
        self.calls = []

    def __call__(self, command, **kwargs):
        self.calls.append((command, kwargs))
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(command, self.returncode, self.stdout, self.stderr)


@pytest.fixture
def client(tmp_path):
    return GitCliClient(tmp_path, timeout_seconds=7)


def install(monkeypatch, fake):
    monkeypatch.setattr("codeflux.temporal.client.subprocess.run", fake)
    return fake


class TestParseNameStatus:
    def test_basic_statuses(self):
        output = "A\0src/New.cs\0M\0src/Old.cs\0D\0src/Gone.cs\0"
        assert parse_name_status(output) == [
            RepoChange(RepoChangeKind.ADD, "src/New.cs"),
            RepoChange(RepoChangeKind.MODIFY, "src/Old.cs"),
            RepoChange(RepoChangeKind.DELETE, "src/Gone.cs"),
        ]

    def test_rename_carries_old_path(self):
        output = "R087\0src/A.cs\0src/B.cs\0"
        assert parse_name_status(output) == [
            RepoChange(RepoChangeKind.RENAME, "src/B.cs", old_path="src/A.cs")
        ]

    def test_copy_and_type_change(self):
        output = "C100\0a.cs\0b.cs\0T\0link.cs\0"
        assert parse_name_status(output) == [
            RepoChange(RepoChangeKind.ADD, "b.cs"),
            RepoChange(RepoChangeKind.MODIFY, "link.cs"),
        ]

    def test_paths_with_spaces_and_tabs(self):
        output = "M\0dir with space/a\tb.cs\0"
        assert parse_name_status(output)[0].path == "dir with space/a\tb.cs"

    def test_empty_output(self):
        assert parse_name_status("") == []


class TestGitCliClient:
    def test_every_call_has_a_timeout(self, client, monkeypatch):
        fake = install(monkeypatch, FakeRun(stdout=b""))
        client.status_clean()

        command, kwargs = fake.calls[0]
        assert command == ["git", "status", "--porcelain"]
        assert kwargs["timeout"] == 7
        assert kwargs["cwd"] == client.working_directory

    def test_status_clean(self, client, monkeypatch):
        install(monkeypatch, FakeRun(stdout=b""))
        assert client.status_clean()

        install(monkeypatch, FakeRun(stdout=b" M src/A.cs\n"))
        assert not client.status_clean()

    def test_initial_resolves_to_oldest_root(self, client, monkeypatch):
        fake = install(monkeypatch, FakeRun(stdout=b"bbbb\naaaa\n"))
        assert client.resolve_commit("initial") == "aaaa"
        assert fake.calls[0][0] == ["git", "rev-list", "--max-parents=0", "HEAD"]

    def test_unresolvable_ref(self, client, monkeypatch):
        install(monkeypatch, FakeRun(returncode=1, stderr=b""))
        with pytest.raises(UnresolvableRefError) as exc_info:
            client.resolve_commit("no-such-branch")
        assert exc_info.value.ref == "no-such-branch"

    def test_commits_in_range_includes_start(self, client, monkeypatch):
        fake = install(monkeypatch, FakeRun(stdout=b"c2\nc3\n"))
        assert client.commits_in_range("c1", "c3") == ["c1", "c2", "c3"]
        assert fake.calls[0][0] == ["git", "rev-list", "--reverse", "c1..c3"]

    def test_commits_in_range_single_commit(self, client, monkeypatch):
        fake = install(monkeypatch, FakeRun())
        assert client.commits_in_range("c1", "c1") == ["c1"]
        assert fake.calls == []

    def test_list_files_keeps_blobs_only(self, client, monkeypatch):
        stdout = (
            b"100644 blob 1111\tsrc/A.cs\0"
            b"160000 commit 2222\tvendor/lib\0"
            b"100755 blob 3333\tbuild.sh\0"
        )
        fake = install(monkeypatch, FakeRun(stdout=stdout))

        assert client.list_files("c1") == ["src/A.cs", "build.sh"]
        assert fake.calls[0][0] == ["git", "ls-tree", "-r", "-z", "--full-name", "c1", "--", "."]

    def test_changes_between(self, client, monkeypatch):
        fake = install(monkeypatch, FakeRun(stdout=b"M\0a.cs\0"))
        assert client.changes_between("c1", "c2") == [RepoChange(RepoChangeKind.MODIFY, "a.cs")]
        command = fake.calls[0][0]
        assert command[:5] == ["git", "diff", "--name-status", "-z", "-M"]
        assert command[-4:] == ["c1", "c2", "--", "."]

    def test_read_file_at_returns_bytes(self, client, monkeypatch):
        fake = install(monkeypatch, FakeRun(stdout=b"\xef\xbb\xbfclass A {}\n"))
        assert client.read_file_at("c1", "src/A.cs") == b"\xef\xbb\xbfclass A {}\n"
        assert fake.calls[0][0] == ["git", "cat-file", "blob", "c1:src/A.cs"]


class TestGitCliClientErrors:
    def test_nonzero_exit_is_permanent(self, client, monkeypatch):
        install(monkeypatch, FakeRun(returncode=128, stderr=b"fatal: bad object\n"))
        with pytest.raises(RepositoryError) as exc_info:
            client.list_files("deadbeef")

        error = exc_info.value
        assert not isinstance(error, TransientRepositoryError)
        assert error.operation == "list_files"
        assert error.returncode == 128
        assert "bad object" in error.stderr
        assert error.command[:2] == ["git", "ls-tree"]

    def test_timeout(self, client, monkeypatch):
        install(monkeypatch, FakeRun(error=subprocess.TimeoutExpired(["git"], 7)))
        with pytest.raises(RepositoryTimeoutError) as exc_info:
            client.read_file_at("c1", "a.cs")
        assert exc_info.value.timeout == 7
        assert isinstance(exc_info.value, TransientRepositoryError)

    def test_missing_executable(self, tmp_path, monkeypatch):
        install(monkeypatch, FakeRun(error=FileNotFoundError("git-nope")))
        with pytest.raises(GitNotFoundError):
            GitCliClient(tmp_path, git_executable="git-nope").status_clean()

    def test_resource_exhaustion_is_transient(self, client, monkeypatch):
        install(monkeypatch, FakeRun(error=OSError(errno.EAGAIN, "Resource temporarily unavailable")))
        with pytest.raises(TransientRepositoryError):
            client.head_commit()

    def test_other_spawn_errors_are_permanent(self, client, monkeypatch):
        install(monkeypatch, FakeRun(error=PermissionError(errno.EACCES, "Permission denied")))
        with pytest.raises(RepositoryError) as exc_info:
            client.head_commit()
        assert not isinstance(exc_info.value, TransientRepositoryError)
