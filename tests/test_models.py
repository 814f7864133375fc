"""Tests for triager.models."""

import pytest

from triager.models import ChangeDecision, Detection, Issue, LabelRequest, LabelResult, Outcome


def test_issue_frozen(bug_issue: Issue) -> None:
    with pytest.raises(Exception):  # ValidationError or TypeError depending on pydantic version
        bug_issue.title = "changed"  # type: ignore[misc]


def test_issue_defaults() -> None:
    issue = Issue(id=1, source_url="https://example.com", title="Test", updated_at="t0")
    assert issue.body == ""
    assert issue.labels == frozenset()
    assert issue.is_pull_request is False


def test_issue_has_label() -> None:
    issue = Issue(id=1, source_url="u", title="t", updated_at="t0", labels=frozenset({"bug"}))
    assert issue.has_label("bug")
    assert not issue.has_label("Bug")


def test_detection_keeps_issue_identity(bug_issue: Issue) -> None:
    detection = Detection(issue=bug_issue, decision=ChangeDecision.NEW)
    assert detection.issue is bug_issue


def test_label_request_str(label_request: LabelRequest) -> None:
    assert "number=42" in str(label_request)
    assert "'bug'" in str(label_request)


class TestLabelResult:
    def test_success_event_type(self) -> None:
        result = LabelResult(outcome=Outcome.SUCCESS, message="ok")
        assert result.succeeded
        assert result.event_type == "IssueLabelAddedSuccess"

    def test_failure_event_type(self) -> None:
        result = LabelResult(outcome=Outcome.FAILURE, message="nope")
        assert not result.succeeded
        assert result.event_type == "IssueLabelAddedFailure"
