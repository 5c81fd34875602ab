"""Wire-level shapes returned by the baker HTTP API.

These models mirror the backend JSON closely and are only used at the
decoding boundary. Field names are snake_case in Python and camelCase on the
wire. Unknown fields are ignored so backend additions never break decoding.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


RESULT_SUCCESS = "success"
RESULT_ERROR = "error"


class WireModel(BaseModel):
    """Base for backend payload models."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class TransportEnvelope(WireModel):
    """`{result, body}` wrapper around every baker response.

    `result` is kept as a plain string; a value other than "success" or
    "error" is treated like "error" by the decoders.
    """

    result: str
    body: Any = None

    @property
    def is_success(self) -> bool:
        return self.result == RESULT_SUCCESS


class ErrorBody(WireModel):
    """Body of an envelope whose result is "error"."""

    code: int | str | None = None
    message: str | None = None


class EventInstance(WireModel):
    name: str
    provided_ingredients: dict[str, Any] = Field(default_factory=dict)


class InteractionExecutionSuccess(WireModel):
    """`Right.value` of an interaction execution outcome."""

    result: EventInstance


class InteractionExecutionFailure(WireModel):
    """`Left.value` of an interaction execution outcome.

    `reason` holds a single entry whose key is the failure tag, for example
    `{"InteractionError": {"message": "boom"}}`.
    """

    reason: dict[str, Any]


class ExecuteInteractionBody(WireModel):
    # Raw `{"Left": ...}` / `{"Right": ...}` union, split by the outcome decoder
    outcome: dict[str, Any]


class FireEventBody(WireModel):
    sensory_event_status: str | None = None
    event_names: list[str] = Field(default_factory=list)
    ingredients: dict[str, Any] = Field(default_factory=dict)

    @field_validator("event_names", "ingredients", mode="before")
    @classmethod
    def null_as_empty(cls, v: object, info: ValidationInfo) -> object:
        if v is None:
            return [] if info.field_name == "event_names" else {}
        return v


class CompiledRecipe(WireModel):
    name: str
    recipe_id: str
    errors: list[str] = Field(default_factory=list)


class RecipeRecord(WireModel):
    """One value of the `GET /app/recipes` map."""

    compiled_recipe: CompiledRecipe
    recipe_created_time: datetime
    validated: bool = Field(default=False, alias="validate")
    errors: list[str] | None = None

    @field_validator("recipe_created_time", mode="before")
    @classmethod
    def from_epoch_millis(cls, v: object) -> object:
        """The backend sends epoch milliseconds; ISO strings are accepted too."""
        if isinstance(v, int | float) and not isinstance(v, bool):
            return datetime.fromtimestamp(v / 1000, tz=UTC)
        return v
