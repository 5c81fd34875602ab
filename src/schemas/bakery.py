"""Dashboard-facing bakery models.

Envelopes and outcomes are tagged unions with a `kind` discriminant, so the
dashboard can tell every variant apart by inspecting a single field. All
models serialise with camelCase aliases.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, Literal, assert_never

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel
from pydantic.json_schema import SkipJsonSchema


ErrorKind = Literal["transport_error", "timeout", "cancelled"]


class DashboardModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SimplifiedEventInstance(DashboardModel):
    """An event with its ingredients already converted to plain JSON."""

    name: str
    provided_ingredients: dict[str, Any] = Field(default_factory=dict)


class SimplifiedFailureReason(DashboardModel):
    reason: str
    interaction_error_message: str | None = None


class SuccessOutcome(DashboardModel):
    kind: Literal["success"] = "success"
    event: SimplifiedEventInstance


class FailureOutcome(DashboardModel):
    kind: Literal["failure"] = "failure"
    failure: SimplifiedFailureReason


class UnresolvedOutcome(DashboardModel):
    """Neither terminal state: not completed yet, or an ambiguous payload."""

    kind: Literal["unresolved"] = "unresolved"
    detail: str | None = None


Outcome = Annotated[
    SuccessOutcome | FailureOutcome | UnresolvedOutcome,
    Field(discriminator="kind"),
]


def project_outcome(
    outcome: SuccessOutcome | FailureOutcome | UnresolvedOutcome,
) -> tuple[SimplifiedFailureReason | None, SimplifiedEventInstance | None]:
    """Split an outcome into the `(failure_reason, success_event)` pair."""
    match outcome:
        case SuccessOutcome(event=event):
            return None, event
        case FailureOutcome(failure=failure):
            return failure, None
        case UnresolvedOutcome():
            return None, None
        case _:
            assert_never(outcome)


class ServiceInformation(DashboardModel):
    """A mutating call that reached the backend and got a decodable answer."""

    kind: Literal["information"] = "information"
    response: Any = None
    request_sent_at: datetime
    duration_in_milliseconds: int = Field(ge=0)
    outcome: Outcome

    @computed_field(alias="failureReason")  # type: ignore[prop-decorator]
    @property
    def failure_reason(self) -> SimplifiedFailureReason | None:
        return project_outcome(self.outcome)[0]

    @computed_field(alias="successEvent")  # type: ignore[prop-decorator]
    @property
    def success_event(self) -> SimplifiedEventInstance | None:
        return project_outcome(self.outcome)[1]


class ServiceError(DashboardModel):
    """A mutating call that failed before a response could be decoded.

    `error` keeps the original exception for in-process callers; it is never
    serialised. `error_type`, `error_message` and `status_code` are its
    serialisable summary.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, arbitrary_types_allowed=True
    )

    kind: Literal["error"] = "error"
    error_kind: ErrorKind = "transport_error"
    request_sent_at: datetime
    duration_in_milliseconds: int = Field(ge=0)
    error_type: str
    error_message: str
    status_code: int | None = None
    error: SkipJsonSchema[BaseException | None] = Field(default=None, exclude=True)


ServiceResult = Annotated[
    ServiceInformation | ServiceError,
    Field(discriminator="kind"),
]


class Recipe(DashboardModel):
    errors: list[str] = Field(default_factory=list)
    name: str
    recipe_created_time: str
    recipe_id: str
    validated: bool = Field(alias="validate")


class RecipeBody(DashboardModel):
    """Recipe detail as returned by the backend; all fields are passed through."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )


class Interaction(DashboardModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    id: str | None = None
    name: str | None = None


class Instance(DashboardModel):
    """A running recipe instance: its ingredients, events and anything else sent."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    ingredients: dict[str, Any] = Field(default_factory=dict)
    events: list[Any] = Field(default_factory=list)


class NameAndValue(DashboardModel):
    name: str
    value: Any = None


class ExecuteInteractionRequest(DashboardModel):
    id: str
    ingredients: list[NameAndValue] = Field(default_factory=list)


class FireEventRequest(DashboardModel):
    name: str
    provided_ingredients: dict[str, Any] = Field(default_factory=dict)


def to_iso8601(moment: datetime) -> str:
    """Render like JavaScript's `Date.toISOString()`: UTC, millis, `Z` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return (
        moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    )
