"""Facade over the baker HTTP API used by the dashboard.

Two failure policies apply, one per operation category:

* Mutating calls (execute an interaction, fire an event) always resolve to a
  ServiceResult. A transport failure, timeout or cancellation becomes a
  ServiceError envelope carrying the original exception and the elapsed
  time; a domain failure becomes a failure outcome inside ServiceInformation.
* Retrieval calls project the response body into a dashboard model. On a
  transport failure they follow the configured retrieval policy: "degrade"
  logs and returns an empty value (None, or [] for lists); "raise" raises
  BakeryTransportError.

The service holds no per-call state, so concurrent calls are independent.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Literal, TypeVar
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from core.config import Settings, get_settings
from core.error_handler import StructuredLogger
from core.exceptions import BakeryTransportError
from core.observability import get_tracer
from schemas.bakery import (
    ErrorKind,
    Instance,
    Interaction,
    NameAndValue,
    Recipe,
    RecipeBody,
    ServiceError,
    ServiceInformation,
    UnresolvedOutcome,
    to_iso8601,
)
from schemas.bakery_wire import RecipeRecord, TransportEnvelope
from services.cancellation import CancellationToken, RequestCancelledError
from services.outcome_decoder import (
    DecodedOutcome,
    decode_fire_event_outcome,
    decode_interaction_outcome,
)
from services.timing import RequestTimer


T = TypeVar("T")

logger = logging.getLogger(__name__)
structured_logger = StructuredLogger(__name__)
tracer = get_tracer(__name__)

RetrievalPolicy = Literal["degrade", "raise"]

JSON_HEADERS = {"Content-Type": "application/json"}

# Sentinel for "use the service-wide timeout"
_DEFAULT_TIMEOUT: Any = object()


def _segment(value: str) -> str:
    return quote(value, safe="")


class BakeryService:
    """Reconciles baker responses into dashboard envelopes and models."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        *,
        request_timeout: float | None = None,
        retrieval_policy: RetrievalPolicy = "degrade",
        timer_factory: Callable[[], RequestTimer] = RequestTimer,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._request_timeout = request_timeout
        self._retrieval_policy = retrieval_policy
        self._timer_factory = timer_factory

    @classmethod
    def from_settings(
        cls, client: httpx.AsyncClient, settings: Settings | None = None
    ) -> BakeryService:
        settings = settings or get_settings()
        return cls(
            client,
            settings.BAKERY_API_URL,
            request_timeout=settings.REQUEST_TIMEOUT_SECONDS,
            retrieval_policy=settings.RETRIEVAL_FAILURE_POLICY,
        )

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    async def execute_interaction(
        self,
        interaction_id: str,
        ingredients: list[NameAndValue],
        *,
        timeout: float | None = _DEFAULT_TIMEOUT,
        cancel_token: CancellationToken | None = None,
    ) -> ServiceInformation | ServiceError:
        """Execute a single interaction outside of any recipe."""
        payload = {
            "id": interaction_id,
            "ingredients": [
                ingredient.model_dump(by_alias=True) for ingredient in ingredients
            ],
        }
        return await self._reconcile(
            "execute_interaction",
            "/app/interactions/execute",
            payload,
            decode_interaction_outcome,
            timeout=timeout,
            cancel_token=cancel_token,
        )

    async def fire_event(
        self,
        instance_id: str,
        name: str,
        ingredients: dict[str, Any],
        *,
        timeout: float | None = _DEFAULT_TIMEOUT,
        cancel_token: CancellationToken | None = None,
    ) -> ServiceInformation | ServiceError:
        """Fire a sensory event and wait until the instance has processed it."""
        payload = {"name": name, "providedIngredients": ingredients}
        return await self._reconcile(
            "fire_event",
            f"/instances/{_segment(instance_id)}/fire-and-resolve-when-completed",
            payload,
            decode_fire_event_outcome,
            timeout=timeout,
            cancel_token=cancel_token,
        )

    async def _post_json(self, path: str, payload: dict[str, Any]) -> Any:
        response = await self._client.post(
            self._url(path), json=payload, headers=JSON_HEADERS
        )
        response.raise_for_status()
        return response.json()

    async def _send_bounded(
        self,
        path: str,
        payload: dict[str, Any],
        timeout: float | None,
        cancel_token: CancellationToken | None,
    ) -> Any:
        async with asyncio.timeout(timeout):
            if cancel_token is None:
                return await self._post_json(path, payload)
            return await cancel_token.race(lambda: self._post_json(path, payload))

    async def _reconcile(
        self,
        operation: str,
        path: str,
        payload: dict[str, Any],
        decode: Callable[[TransportEnvelope], DecodedOutcome],
        *,
        timeout: float | None,
        cancel_token: CancellationToken | None,
    ) -> ServiceInformation | ServiceError:
        if timeout is _DEFAULT_TIMEOUT:
            timeout = self._request_timeout

        with tracer.start_as_current_span(f"bakery.{operation}") as span:
            timer = self._timer_factory()
            result: ServiceInformation | ServiceError
            try:
                raw = await self._send_bounded(path, payload, timeout, cancel_token)
                envelope = TransportEnvelope.model_validate(raw)
            except (TimeoutError, httpx.TimeoutException) as exc:
                result = self._channel_error(timer, exc, "timeout")
            except RequestCancelledError as exc:
                result = self._channel_error(timer, exc, "cancelled")
            except (httpx.HTTPError, ValueError) as exc:
                # ValueError covers malformed JSON and pydantic ValidationError
                result = self._channel_error(timer, exc, "transport_error")
            else:
                duration = timer.elapsed_ms()
                result = ServiceInformation(
                    response=raw,
                    request_sent_at=timer.request_sent_at,
                    duration_in_milliseconds=duration,
                    outcome=self._decode_or_unresolved(operation, decode, envelope),
                )

            outcome_kind = (
                result.outcome.kind
                if isinstance(result, ServiceInformation)
                else result.error_kind
            )
            span.set_attribute("bakery.operation", operation)
            span.set_attribute("bakery.outcome", outcome_kind)
            span.set_attribute("bakery.duration_ms", result.duration_in_milliseconds)
            structured_logger.info(
                "Bakery call finished",
                operation=operation,
                outcome=outcome_kind,
                duration_ms=result.duration_in_milliseconds,
            )
            return result

    @staticmethod
    def _decode_or_unresolved(
        operation: str,
        decode: Callable[[TransportEnvelope], DecodedOutcome],
        envelope: TransportEnvelope,
    ) -> DecodedOutcome:
        """Decode the envelope; a payload the decoder chokes on is unresolved."""
        try:
            return decode(envelope)
        except (ValueError, TypeError, AttributeError, KeyError) as exc:
            # ValueError covers pydantic ValidationError
            logger.warning(
                "Could not decode %s response: %s - %s",
                operation,
                type(exc).__name__,
                exc,
            )
            return UnresolvedOutcome(
                detail=f"undecodable response: {type(exc).__name__}"
            )

    @staticmethod
    def _channel_error(
        timer: RequestTimer, exc: BaseException, error_kind: ErrorKind
    ) -> ServiceError:
        status_code = None
        if isinstance(exc, httpx.HTTPStatusError):
            status_code = exc.response.status_code
        logger.warning(
            "http request failed (%s): %s - %s", error_kind, type(exc).__name__, exc
        )
        return ServiceError(
            error_kind=error_kind,
            request_sent_at=timer.request_sent_at,
            duration_in_milliseconds=timer.elapsed_ms(),
            error_type=type(exc).__name__,
            error_message=str(exc) or type(exc).__name__,
            status_code=status_code,
            error=exc,
        )

    # ------------------------------------------------------------------
    # Retrieval operations
    # ------------------------------------------------------------------

    async def _retrieve(
        self,
        operation: str,
        method: str,
        path: str,
        project: Callable[[httpx.Response], T],
        empty: T,
        params: dict[str, str] | None = None,
    ) -> T:
        try:
            response = await self._client.request(
                method, self._url(path), params=params, headers=JSON_HEADERS
            )
            response.raise_for_status()
            return project(response)
        except (httpx.HTTPError, ValueError) as exc:
            if self._retrieval_policy == "raise":
                raise BakeryTransportError(operation, exc) from exc
            logger.warning(
                "http request failed: %s - %s - %s", operation, type(exc).__name__, exc
            )
            return empty

    @staticmethod
    def _success_body(response: httpx.Response) -> Any:
        """Body of a `{result, body}` envelope, or None unless result is success."""
        envelope = TransportEnvelope.model_validate(response.json())
        return envelope.body if envelope.is_success else None

    @classmethod
    def _keyed_values(cls, response: httpx.Response) -> list[Any]:
        """Values of an id-keyed map body; the ids themselves are dropped."""
        body = cls._success_body(response)
        if body is None:
            return []
        if not isinstance(body, dict):
            raise ValueError(f"expected an id-keyed object, got {type(body).__name__}")
        return list(body.values())

    @classmethod
    def _project_each(
        cls,
        operation: str,
        response: httpx.Response,
        project_one: Callable[[Any], T],
    ) -> list[T]:
        """Project every record of a keyed map, skipping the ones that do not fit."""
        projected: list[T] = []
        for record in cls._keyed_values(response):
            try:
                projected.append(project_one(record))
            except ValidationError as exc:
                logger.warning(
                    "Skipping malformed %s record (%d errors)",
                    operation,
                    exc.error_count(),
                )
        return projected

    @classmethod
    def _success_text(cls, response: httpx.Response) -> str | None:
        body = cls._success_body(response)
        if body is not None and not isinstance(body, str):
            raise ValueError(f"expected a string body, got {type(body).__name__}")
        return body

    @staticmethod
    def _plain_text(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text
        if isinstance(data, str):
            return data
        if isinstance(data, dict) and isinstance(data.get("body"), str):
            return data["body"]
        return response.text

    @staticmethod
    def _project_recipe(record: RecipeRecord) -> Recipe:
        errors = record.errors
        if errors is None:
            errors = record.compiled_recipe.errors
        return Recipe(
            errors=errors,
            name=record.compiled_recipe.name,
            recipe_created_time=to_iso8601(record.recipe_created_time),
            recipe_id=record.compiled_recipe.recipe_id,
            validated=record.validated,
        )

    async def get_recipes(self) -> list[Recipe]:
        def project_one(record: Any) -> Recipe:
            return self._project_recipe(RecipeRecord.model_validate(record))

        def project(response: httpx.Response) -> list[Recipe]:
            return self._project_each("get_recipes", response, project_one)

        return await self._retrieve("get_recipes", "GET", "/app/recipes", project, [])

    async def get_recipe(self, recipe_id: str) -> RecipeBody | None:
        def project(response: httpx.Response) -> RecipeBody | None:
            body = self._success_body(response)
            return None if body is None else RecipeBody.model_validate(body)

        return await self._retrieve(
            "get_recipe", "GET", f"/app/recipes/{_segment(recipe_id)}", project, None
        )

    async def get_recipe_visual(self, recipe_id: str) -> str | None:
        return await self._retrieve(
            "get_recipe_visual",
            "GET",
            f"/app/recipes/{_segment(recipe_id)}/visual",
            self._success_text,
            None,
        )

    async def post_bake(self, instance_id: str, recipe_id: str) -> str | None:
        """Bake a new instance of a recipe; returns its graph description."""
        return await self._retrieve(
            "post_bake",
            "POST",
            f"/instances/{_segment(instance_id)}/bake/{_segment(recipe_id)}",
            self._success_text,
            None,
        )

    async def deactivate_recipe(self, recipe_id: str) -> str | None:
        return await self._retrieve(
            "deactivate_recipe",
            "DELETE",
            f"/app/recipes/{_segment(recipe_id)}",
            self._plain_text,
            None,
        )

    async def get_interactions(self) -> list[Interaction]:
        def project(response: httpx.Response) -> list[Interaction]:
            return self._project_each(
                "get_interactions", response, Interaction.model_validate
            )

        return await self._retrieve(
            "get_interactions", "GET", "/app/interactions", project, []
        )

    async def get_instance(self, instance_id: str) -> Instance | None:
        """Instance state, or None when unknown or unreachable."""

        def project(response: httpx.Response) -> Instance | None:
            body = self._success_body(response)
            return None if body is None else Instance.model_validate(body)

        return await self._retrieve(
            "get_instance", "GET", f"/instances/{_segment(instance_id)}", project, None
        )

    async def delete_instance(self, instance_id: str) -> str | None:
        return await self._retrieve(
            "delete_instance",
            "DELETE",
            f"/instances/{_segment(instance_id)}/delete",
            self._plain_text,
            None,
            params={"removeFromIndex": "true"},
        )

    async def get_instance_visual(self, instance_id: str) -> str | None:
        return await self._retrieve(
            "get_instance_visual",
            "GET",
            f"/instances/{_segment(instance_id)}/visual",
            self._success_text,
            None,
        )

