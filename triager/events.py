"""Event envelopes exchanged between the inspector and labeler stages.

An envelope carries a type tag plus a JSON payload. Inside the process the
pipeline works with the typed models directly; envelopes are the wire form
handed to outcome sinks and accepted from other producers.
"""

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from triager.models import LabelRequest, LabelResult, NoOp, Outcome

LABEL_REQUEST_EVENT = "AddLabelRequest"
EMPTY_EVENT = "Empty"

INSPECTOR_SOURCE = "issue-inspector"
LABELER_SOURCE = "issue-labeler"


class UnknownEventError(ValueError):
    """Envelope type tag (or payload) that no consumer understands."""


class Envelope(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    source: str
    type: str
    data: dict[str, Any] = {}


def request_event(payload: NoOp | LabelRequest) -> Envelope:
    match payload:
        case LabelRequest():
            return Envelope(
                source=INSPECTOR_SOURCE,
                type=LABEL_REQUEST_EVENT,
                data=payload.model_dump(include={"url", "number", "label"}),
            )
        case NoOp():
            return Envelope(source=INSPECTOR_SOURCE, type=EMPTY_EVENT)


def outcome_event(result: LabelResult) -> Envelope:
    return Envelope(source=LABELER_SOURCE, type=result.event_type, data={"message": result.message})


def decode_request(envelope: Envelope) -> NoOp | LabelRequest:
    """Turn an inspector envelope back into its typed payload."""
    if envelope.type == EMPTY_EVENT:
        return NoOp()
    if envelope.type != LABEL_REQUEST_EVENT:
        raise UnknownEventError(f"Unknown request event type: {envelope.type!r}")
    try:
        return LabelRequest.model_validate(envelope.data)
    except ValidationError as exc:
        raise UnknownEventError(f"Malformed {LABEL_REQUEST_EVENT} payload: {exc}") from exc


def decode_outcome(envelope: Envelope) -> LabelResult:
    outcomes = {
        LabelResult.SUCCESS_EVENT: Outcome.SUCCESS,
        LabelResult.FAILURE_EVENT: Outcome.FAILURE,
    }
    if envelope.type not in outcomes:
        raise UnknownEventError(f"Unknown outcome event type: {envelope.type!r}")
    return LabelResult(outcome=outcomes[envelope.type], message=str(envelope.data.get("message", "")))
