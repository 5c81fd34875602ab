"""Classify baker responses into dashboard outcomes.

Both decoders are pure: they never raise, never perform I/O other than
logging, and return the same outcome for the same payload. Anything that
cannot be classified becomes an `UnresolvedOutcome` so the caller sees the
ambiguity instead of a crash.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from schemas.bakery import (
    FailureOutcome,
    SimplifiedEventInstance,
    SimplifiedFailureReason,
    SuccessOutcome,
    UnresolvedOutcome,
)
from schemas.bakery_wire import (
    ErrorBody,
    ExecuteInteractionBody,
    FireEventBody,
    InteractionExecutionFailure,
    InteractionExecutionSuccess,
    TransportEnvelope,
)
from services.baker_conversion import ingredients_to_json


logger = logging.getLogger(__name__)

LEFT = "Left"
RIGHT = "Right"
COMPLETED = "Completed"

DecodedOutcome = SuccessOutcome | FailureOutcome | UnresolvedOutcome


def _unresolved(operation: str, detail: str) -> UnresolvedOutcome:
    logger.warning("Unresolved %s outcome: %s", operation, detail)
    return UnresolvedOutcome(detail=detail)


def _transport_error_failure(body: Any) -> FailureOutcome:
    """Failure for a `{"result": "error"}` envelope.

    The reason starts with "Error" so it can never be mistaken for a
    `Status: ...` reason produced by a non-completed event.
    """
    try:
        error = ErrorBody.model_validate(body)
    except ValidationError:
        error = ErrorBody()
    reason = f"Error: {error.code}" if error.code is not None else "Error"
    message = error.message
    if message is None and isinstance(body, str):
        message = body
    return FailureOutcome(
        failure=SimplifiedFailureReason(
            reason=reason, interaction_error_message=message
        )
    )


def _branch_value(branch: Any) -> Any:
    # Branches arrive as {"value": payload}; tolerate a bare payload as well
    if isinstance(branch, dict) and "value" in branch:
        return branch["value"]
    return branch


def decode_interaction_outcome(envelope: TransportEnvelope) -> DecodedOutcome:
    """Decode the response of `POST /app/interactions/execute`."""
    if not envelope.is_success:
        return _transport_error_failure(envelope.body)

    try:
        body = ExecuteInteractionBody.model_validate(envelope.body)
    except ValidationError:
        return _unresolved("interaction", "response body has no outcome union")

    has_left = LEFT in body.outcome
    has_right = RIGHT in body.outcome
    if has_left == has_right:
        which = "both" if has_left else "neither"
        return _unresolved("interaction", f"outcome has {which} of Left/Right")

    try:
        if has_right:
            success = InteractionExecutionSuccess.model_validate(
                _branch_value(body.outcome[RIGHT])
            )
            return SuccessOutcome(
                event=SimplifiedEventInstance(
                    name=success.result.name,
                    provided_ingredients=ingredients_to_json(
                        success.result.provided_ingredients
                    ),
                )
            )

        failure = InteractionExecutionFailure.model_validate(
            _branch_value(body.outcome[LEFT])
        )
    except ValidationError:
        branch = RIGHT if has_right else LEFT
        return _unresolved("interaction", f"malformed {branch} branch")

    if not failure.reason:
        return _unresolved("interaction", "Left branch carries no reason")
    tag, detail = next(iter(failure.reason.items()))
    message = detail.get("message") if isinstance(detail, dict) else None
    if not isinstance(message, str):
        message = None
    return FailureOutcome(
        failure=SimplifiedFailureReason(reason=tag, interaction_error_message=message)
    )


def decode_fire_event_outcome(envelope: TransportEnvelope) -> DecodedOutcome:
    """Decode the response of `POST /instances/{id}/fire-and-resolve-when-completed`."""
    if not envelope.is_success:
        return _transport_error_failure(envelope.body)

    try:
        body = FireEventBody.model_validate(envelope.body)
    except ValidationError:
        return _unresolved("fire-event", "response body is not an event status")

    status = body.sensory_event_status
    if status is None:
        return _unresolved("fire-event", "sensoryEventStatus missing")

    if status == COMPLETED:
        return SuccessOutcome(
            event=SimplifiedEventInstance(
                name=f"Fired: {','.join(body.event_names)}",
                # Already plain JSON on this endpoint
                provided_ingredients=dict(body.ingredients),
            )
        )

    # Received, FiredButNotCompleted, ... are all reported as failures even
    # though some of them are not permanent.
    return FailureOutcome(
        failure=SimplifiedFailureReason(
            reason=f"Status: {status} ", interaction_error_message=status
        )
    )
