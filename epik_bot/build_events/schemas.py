"""Pydantic schemas for build lifecycle events.

The local build tool POSTs one of these to ``/api/build-event``. The
``type`` field selects the variant; field names are camelCase on the wire
(``issueNumber``, ``acceptanceCriteria``, ...) and snake_case in Python.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class _BuildEventBase(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    owner: str
    repo: str
    installation_id: int


class BuildStartEvent(_BuildEventBase):
    type: Literal["build_start"] = "build_start"
    issue_number: int = Field(gt=0)
    acceptance_criteria: list[str] = Field(default_factory=list)


class PrCreatedEvent(_BuildEventBase):
    type: Literal["pr_created"] = "pr_created"
    issue_number: int = Field(gt=0)
    pr_number: int = Field(gt=0)
    pr_url: str


class FeatureCompleteEvent(_BuildEventBase):
    type: Literal["feature_complete"] = "feature_complete"
    issue_numbers: list[int]
    total_issues: int = Field(ge=0)


class BuildFailedEvent(_BuildEventBase):
    type: Literal["build_failed"] = "build_failed"
    issue_number: int = Field(gt=0)
    reason: str


BuildEvent = Annotated[
    Union[BuildStartEvent, PrCreatedEvent, FeatureCompleteEvent, BuildFailedEvent],
    Field(discriminator="type"),
]

build_event_adapter: TypeAdapter[BuildEvent] = TypeAdapter(BuildEvent)


def parse_build_event(payload: dict) -> BuildEvent:
    """Validate a raw JSON object into the matching event model.

    Raises:
        pydantic.ValidationError: unknown ``type`` or malformed fields.
    """
    return build_event_adapter.validate_python(payload)


class BuildEventResponse(BaseModel):
    ok: bool
    type: str
