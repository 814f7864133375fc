"""Tests for event envelopes."""

import pytest

from triager.events import (
    EMPTY_EVENT,
    LABEL_REQUEST_EVENT,
    Envelope,
    UnknownEventError,
    decode_outcome,
    decode_request,
    outcome_event,
    request_event,
)
from triager.models import LabelRequest, LabelResult, NoOp, Outcome


def test_label_request_envelope(label_request: LabelRequest) -> None:
    event = request_event(label_request)
    assert event.type == LABEL_REQUEST_EVENT
    assert event.source == "issue-inspector"
    assert event.data == {"url": label_request.url, "number": 42, "label": "bug"}
    assert decode_request(event) == label_request


def test_noop_envelope_has_empty_payload() -> None:
    event = request_event(NoOp())
    assert event.type == EMPTY_EVENT
    assert event.data == {}
    assert decode_request(event) == NoOp()


def test_envelope_ids_are_unique() -> None:
    assert request_event(NoOp()).id != request_event(NoOp()).id


def test_decode_wire_payload() -> None:
    event = Envelope.model_validate(
        {
            "id": "abc",
            "source": "elsewhere",
            "type": "AddLabelRequest",
            "data": {"url": "https://api.github.com/repos/o/r", "number": 7, "label": "documentation"},
        }
    )
    assert decode_request(event) == LabelRequest(url="https://api.github.com/repos/o/r", number=7, label="documentation")


def test_unknown_request_type_raises() -> None:
    with pytest.raises(UnknownEventError):
        decode_request(Envelope(source="x", type="RemoveLabelRequest"))


def test_malformed_request_payload_raises() -> None:
    with pytest.raises(UnknownEventError, match="Malformed"):
        decode_request(Envelope(source="x", type=LABEL_REQUEST_EVENT, data={"number": "not-a-number"}))


@pytest.mark.parametrize("outcome", list(Outcome))
def test_outcome_envelope(outcome: Outcome) -> None:
    result = LabelResult(outcome=outcome, message="process completed")
    event = outcome_event(result)
    assert event.source == "issue-labeler"
    assert event.type == result.event_type
    assert decode_outcome(event) == result


def test_unknown_outcome_type_raises() -> None:
    with pytest.raises(UnknownEventError):
        decode_outcome(Envelope(source="x", type="IssueLabelAddedMaybe"))
