"""Tests for change classification."""

import pytest

from knowledge_sync.agents.classifier import (
    ChangeClassifierAgent,
    classify_entries,
    classify_entry,
)
from knowledge_sync.models.state import ChangeSummary, SyncState

from conftest import entry


@pytest.mark.parametrize(
    "code,expected",
    [
        ("??", "untracked"),
        ("A ", "added"),
        ("M ", "modified"),
        (" M", "modified"),
        ("D ", "deleted"),
        (" D", "deleted"),
        ("MM", "modified"),
        ("AM", "added"),
        ("AD", "deleted"),
        ("MD", "deleted"),
        ("T ", "modified"),
        ("UU", "modified"),
        (" A", "modified"),
        ("UA", "modified"),
        ("AU", "modified"),
        ("AA", "modified"),
        ("DD", "modified"),
        ("UD", "modified"),
        ("DU", "modified"),
    ],
)
def test_classify_entry(code, expected):
    assert classify_entry(entry(code, "file.md")) == expected


def test_rename_is_modified_under_destination_path():
    records, summary = classify_entries([entry("R ", "new.md", "old.md")])

    assert [(r.path, r.kind) for r in records] == [("new.md", "modified")]
    assert summary == ChangeSummary(modified=1)


def test_copy_counts_as_added():
    assert classify_entry(entry("C ", "copy.md", "source.md")) == "added"


def test_ignored_entries_are_not_counted():
    records, summary = classify_entries([entry("!!", "build/"), entry("??", "a.md")])

    assert [r.path for r in records] == ["a.md"]
    assert summary.total == 1


def test_summary_counts(sample_entries):
    _, summary = classify_entries(sample_entries)

    assert summary == ChangeSummary(added=1, modified=2, deleted=1, untracked=1)
    assert summary.total == len(sample_entries)


def test_each_path_counted_once():
    entries = [entry("MM", "same.md"), entry("??", "same.md"), entry("D ", "gone.md")]

    records, summary = classify_entries(entries)

    assert len(records) == 2
    assert summary.total == 2
    assert {r.path: r.kind for r in records} == {"same.md": "modified", "gone.md": "deleted"}


def test_agent_sets_summary_and_reports(config, reporter, out, sample_entries):
    state = SyncState(config=config, status_entries=sample_entries)

    state = ChangeClassifierAgent(reporter).classify(state)

    assert state.next_action == "synthesize"
    assert state.summary.added == 1
    assert len(state.changes) == 5
    text = out.getvalue()
    assert "Changed files:" in text
    assert "?? drafts/idea.md" in text
    assert "Untracked: 1" in text
