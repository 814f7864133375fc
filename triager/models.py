"""Shared pydantic models — the contract between the pipeline stages."""

from enum import Enum
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict


class Issue(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int  # issue number within the repository
    source_url: str  # repository API url, e.g. https://api.github.com/repos/owner/repo
    title: str
    body: str = ""
    updated_at: str
    labels: frozenset[str] = frozenset()
    is_pull_request: bool = False

    def has_label(self, name: str) -> bool:
        return name in self.labels


class ChangeDecision(str, Enum):
    NEW = "new"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


class Detection(BaseModel):
    """An issue that passed change detection, carried whole past the cache lookup."""

    model_config = ConfigDict(frozen=True)

    issue: Issue
    decision: ChangeDecision


class NoOp(BaseModel):
    """Nothing to do for this issue: unchanged, unmarked, or already labeled."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["noop"] = "noop"


class LabelRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["label-request"] = "label-request"
    url: str  # repository API url
    number: int
    label: str

    def __str__(self) -> str:
        return f"AddLabelRequest(url={self.url!r}, number={self.number}, label={self.label!r})"


class Outcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class LabelResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    SUCCESS_EVENT: ClassVar[str] = "IssueLabelAddedSuccess"
    FAILURE_EVENT: ClassVar[str] = "IssueLabelAddedFailure"

    outcome: Outcome
    message: str

    @property
    def succeeded(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def event_type(self) -> str:
        return self.SUCCESS_EVENT if self.succeeded else self.FAILURE_EVENT
