"""
Operation extraction: one typed ``Operation`` record per path/method pair.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final, Iterator, Sequence, Union

from typegen.shared.errors import (
    GenerationError,
    TypeMismatchError,
    UnsupportedConstructError,
)

from .types import Type

if TYPE_CHECKING:
    from .context import GenerationContext

logger = logging.getLogger(__name__)

# HTTP methods supported in OpenAPI path items, in emission order
HTTP_METHODS: Final[tuple[str, ...]] = (
    "delete", "get", "put", "post", "head", "trace", "patch"
)

JSON_MEDIA_TYPE: Final[str] = "application/json"
PLAIN_MEDIA_TYPE: Final[str] = "text/plain"
EVENT_STREAM_MEDIA_TYPE: Final[str] = "text/event-stream"

_SUCCESS_STATUS = re.compile(r"^2(\d\d|XX)$")


@dataclass(frozen=True, slots=True)
class JsonRequest:
    type: Type


RequestKind = JsonRequest


@dataclass(frozen=True, slots=True)
class PlainResponse:
    pass


@dataclass(frozen=True, slots=True)
class JsonResponse:
    type: Type


@dataclass(frozen=True, slots=True)
class EventStreamResponse:
    type: Type


ResponseKind = Union[PlainResponse, JsonResponse, EventStreamResponse]


@dataclass(frozen=True, slots=True)
class Operation:
    """Typed signature of one endpoint."""

    path: str
    method: str
    path_params: dict[str, Type] = field(default_factory=dict)
    query_params: dict[str, Type] = field(default_factory=dict)
    body: RequestKind | None = None
    response: ResponseKind | None = None

    @property
    def location(self) -> str:
        return f"{self.method.upper()} {self.path}"


def select_response(responses: dict[str, Any]) -> tuple[str, Any] | None:
    """Pick the response that describes the operation's result.

    The lowest ``2xx`` status wins (``2XX`` ranks after concrete codes), then
    ``default``. Error statuses are never selected.
    """
    by_status = {str(status): response for status, response in responses.items()}
    success = sorted(
        (status for status in by_status if _SUCCESS_STATUS.match(status)),
        key=lambda status: status.replace("X", "9"),
    )
    if success:
        return success[0], by_status[success[0]]
    if "default" in by_status:
        return "default", by_status["default"]
    return None


def _merge_parameters(
    path_level: Sequence[Any],
    operation_level: Sequence[Any],
) -> list[Any]:
    """Combine path-item and operation parameters; the operation wins per (name, in)."""
    merged: dict[Any, Any] = {}
    for param in list(path_level) + list(operation_level):
        if isinstance(param, dict) and "$ref" not in param:
            key = (param.get("name"), param.get("in"))
        else:
            key = id(param)
        merged[key] = param
    return list(merged.values())


class OperationExtractor:
    """Builds ``Operation`` records using a context's resolver and simplifier."""

    def __init__(self, context: GenerationContext) -> None:
        self.resolver = context.resolver
        self.simplifier = context.simplifier

    def _single_content(self, content: Any, what: str) -> tuple[str, Type]:
        if not isinstance(content, dict) or len(content) != 1:
            count = len(content) if isinstance(content, dict) else 0
            raise UnsupportedConstructError(f"{what} with {count} content types")
        media_type, media = next(iter(content.items()))
        schema = media.get("schema") if isinstance(media, dict) else None
        if schema is None:
            raise UnsupportedConstructError(f"{what} content {media_type!r} without a schema")
        ty = self.simplifier.simplify(self.resolver.resolve_shallow(schema))
        logger.debug("%s %s: %r", what, media_type, ty)
        return media_type, ty

    def _parameters(self, params: list[Any]) -> tuple[dict[str, Type], dict[str, Type]]:
        path_params: dict[str, Type] = {}
        query_params: dict[str, Type] = {}
        for param in params:
            if not isinstance(param, dict) or "$ref" in param:
                raise UnsupportedConstructError("parameter $ref")
            name = param.get("name")
            location = param.get("in")
            if location in ("header", "cookie"):
                raise UnsupportedConstructError(f"{location} parameter {name!r}")
            if location not in ("path", "query"):
                raise UnsupportedConstructError(f"parameter location {location!r}")
            if "content" in param:
                raise UnsupportedConstructError(f"content-based parameter {name!r}")
            if "schema" not in param:
                raise UnsupportedConstructError(f"parameter {name!r} without a schema")

            ty = self.resolver.resolve_shallow(param["schema"])
            logger.debug("%s parameter %s: %r", location, name, ty)
            target = path_params if location == "path" else query_params
            target[name] = ty
        return dict(sorted(path_params.items())), dict(sorted(query_params.items()))

    def _request_body(self, body: Any) -> RequestKind | None:
        if body is None:
            return None
        if not isinstance(body, dict) or "$ref" in body:
            raise UnsupportedConstructError("request body $ref")
        media_type, ty = self._single_content(body.get("content"), "request body")
        if media_type != JSON_MEDIA_TYPE:
            raise UnsupportedConstructError(f"request media type {media_type!r}")
        return JsonRequest(ty)

    def _response(self, responses: Any) -> ResponseKind | None:
        selected = select_response(responses or {})
        if selected is None:
            return None
        status, response = selected
        if not isinstance(response, dict) or "$ref" in response:
            raise UnsupportedConstructError(f"response $ref for status {status}")

        media_type, ty = self._single_content(response.get("content"), f"response {status}")
        if media_type == PLAIN_MEDIA_TYPE:
            if ty is not self.resolver.store.string:
                raise TypeMismatchError("string for text/plain response", repr(ty))
            return PlainResponse()
        if media_type == JSON_MEDIA_TYPE:
            return JsonResponse(ty)
        if media_type == EVENT_STREAM_MEDIA_TYPE:
            return EventStreamResponse(ty)
        raise UnsupportedConstructError(f"response media type {media_type!r}")

    def extract(
        self,
        path: str,
        method: str,
        details: dict[str, Any],
        path_level_params: Sequence[Any] = (),
    ) -> Operation:
        """Build the operation record for one path/method pair."""
        try:
            params = _merge_parameters(path_level_params, details.get("parameters") or [])
            path_params, query_params = self._parameters(params)
            body = self._request_body(details.get("requestBody"))
            response = self._response(details.get("responses"))
        except GenerationError as e:
            if e.location is None:
                e.location = f"{method.upper()} {path}"
            raise

        return Operation(
            path=path,
            method=method,
            path_params=path_params,
            query_params=query_params,
            body=body,
            response=response,
        )


def iter_operations(context: GenerationContext) -> Iterator[Operation]:
    """Yield operations in path order, then method order within a path."""
    extractor = OperationExtractor(context)
    for path, path_item in (context.document.get("paths") or {}).items():
        if not isinstance(path_item, dict) or "$ref" in path_item:
            raise UnsupportedConstructError("path item $ref", path)
        path_level_params = path_item.get("parameters") or []
        for method in HTTP_METHODS:
            details = path_item.get(method)
            if details is None:
                continue
            logger.debug("endpoint %s %s", method.upper(), path)
            yield extractor.extract(path, method, details, path_level_params)


def extract_operations(context: GenerationContext) -> list[Operation]:
    """Extract every operation of the context's document."""
    return list(iter_operations(context))
