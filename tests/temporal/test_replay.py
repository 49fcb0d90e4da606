"""Tests for revision-log replay and snapshot diffing."""

import pytest

from codeflux.diff.models import FileAdd, FileDelete, Insert, Modify
from codeflux.scanning.analyzer import analyze_content
from codeflux.scanning.models import FileAnalysis, LineType
from codeflux.temporal.models import FileChangeEntry, RevisionEntry, RevisionLog
from codeflux.temporal.replay import diff_snapshots, replay_revisions


def snapshot(**files):
    return {
        path.replace("_", "/") + ".cs": analyze_content(text, path.replace("_", "/") + ".cs")
        for path, text in files.items()
    }


class TestReplayRevisions:
    def test_empty_log(self):
        assert replay_revisions(RevisionLog()) == {}

    def test_first_entry_only(self):
        a = analyze_content("class A {}\n", "a.cs")
        log = RevisionLog([RevisionEntry("c1", analysis=(a,))])
        assert replay_revisions(log) == {"a.cs": a}

    def test_changes_are_applied_in_order(self):
        a1 = analyze_content("class A {}\n", "a.cs")
        log = RevisionLog(
            [
                RevisionEntry("c1", analysis=(a1,)),
                RevisionEntry(
                    "c2",
                    changes=(FileChangeEntry("a.cs", Modify(edits=(Insert(1, LineType.COMMENT, 1),))),),
                ),
                RevisionEntry(
                    "c3",
                    changes=(
                        FileChangeEntry("a.cs", FileDelete()),
                        FileChangeEntry("b.cs", FileAdd(groups=analyze_content("x;\n", "b.cs").groups)),
                    ),
                ),
            ]
        )

        assert replay_revisions(log, upto=1) == {
            "a.cs": analyze_content("class A {}\n// comment\n", "a.cs")
        }
        assert replay_revisions(log) == {"b.cs": analyze_content("x;\n", "b.cs")}

    def test_upto_out_of_range(self):
        log = RevisionLog([RevisionEntry("c1", analysis=())])
        with pytest.raises(ValueError):
            replay_revisions(log, upto=3)

    def test_log_must_start_with_full_analysis(self):
        log = RevisionLog([RevisionEntry("c1", changes=())])
        with pytest.raises(ValueError, match="no full analysis"):
            replay_revisions(log)


class TestDiffSnapshots:
    def test_added_removed_and_modified(self):
        old = snapshot(a="class A {}\n", b="class B {}\n", c="x;\n")
        new = snapshot(a="class A {}\n\n", c="x;\n", d="// d\n")

        entries = diff_snapshots(old, new)
        kinds = {e.path: type(e.change) for e in entries}
        assert kinds == {"a.cs": Modify, "b.cs": FileDelete, "d.cs": FileAdd}
        assert [e.path for e in entries] == ["a.cs", "b.cs", "d.cs"]

    def test_accepts_iterables(self):
        old = [analyze_content("x;\n", "a.cs")]
        assert diff_snapshots(old, old) == []

    def test_diff_then_replay(self):
        old = snapshot(a="class A {}\n", src_b="if (x)\n  y();\n")
        new = snapshot(src_b="while (x)\n  y(); // z\n\n", c="// new\n")

        log = RevisionLog(
            [
                RevisionEntry("c1", analysis=tuple(old.values())),
                RevisionEntry("c2", changes=tuple(diff_snapshots(old, new))),
            ]
        )
        assert replay_revisions(log, strict=True) == new

    def test_missing_side_counts_as_empty(self):
        entries = diff_snapshots({}, {"e.cs": FileAnalysis("e.cs")})
        assert entries == []
