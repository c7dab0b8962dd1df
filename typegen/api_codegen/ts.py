"""
TypeScript emitter.

Renders canonical types and operation records into a single client module:
the runtime helpers from ``templates/preamble.ts``, an exported ``api`` map of
callables and one exported type declaration per component schema.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Final

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from typegen.shared.errors import ConfigError, UnsupportedConstructError
from typegen.shared.naming import pluralize, to_lower_camel_case, to_shouty_snake_case

from .context import GenerationContext
from .operations import EventStreamResponse, JsonResponse, Operation, PlainResponse
from .resolver import is_inlined_name
from .types import (
    And,
    Array,
    Boolean,
    Ident,
    Number,
    Object,
    Or,
    Property,
    Reference,
    String,
    Tuple,
    Type,
)

logger = logging.getLogger(__name__)

TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_PATH_PARAM = re.compile(r"\{([^{}]+)\}")


@dataclass
class TemplateContext:
    """Template environment with the client template pre-compiled."""

    template_env: Environment = field(init=False)
    _client_template: Any = field(init=False)

    def __post_init__(self) -> None:
        self.template_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
            auto_reload=False,
        )
        self._client_template = self.template_env.get_template("client.ts.jinja")

    @property
    def client_template(self):
        return self._client_template


@dataclass(frozen=True, slots=True)
class RenderedOperation:
    key: str
    signature: str


@dataclass(frozen=True, slots=True)
class TypeDeclaration:
    name: str
    body: str
    constants_name: str | None = None
    constants: tuple[str, ...] = ()


def string_literal(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def property_key(name: str) -> str:
    """Object key as written in TS; quoted unless it is a plain identifier."""
    return name if _IDENTIFIER.match(name) else string_literal(name)


def _render_member(ty: Type, *, wrap: tuple[type, ...]) -> str:
    rendered = render_type(ty)
    if isinstance(ty.kind, wrap) and len(ty.kind.options) > 1:
        return f"({rendered})"
    return rendered


def render_type(ty: Type) -> str:
    """Render a type as a TypeScript type expression."""
    kind = ty.kind
    if isinstance(kind, Reference):
        return kind.name
    if isinstance(kind, Object):
        if not kind.fields:
            return "{}"
        lines = [
            f"{property_key(name)}{'?' if prop.optional else ''}: {render_type(prop.type)};"
            for name, prop in kind.fields
        ]
        body = "\n".join(lines).replace("\n", "\n  ")
        return f"{{\n  {body}\n}}"
    if isinstance(kind, Array):
        return f"{_render_member(kind.element, wrap=(Or, And))}[]"
    if isinstance(kind, Tuple):
        return f"[{', '.join(render_type(element) for element in kind.elements)}]"
    if isinstance(kind, Or):
        return " | ".join(render_type(option) for option in kind.options)
    if isinstance(kind, And):
        return " & ".join(_render_member(option, wrap=(Or,)) for option in kind.options)
    if isinstance(kind, Number):
        return "number"
    if isinstance(kind, String):
        return "string"
    if isinstance(kind, Boolean):
        return "boolean"
    if isinstance(kind, Ident):
        return string_literal(kind.value)
    raise TypeError(f"Unknown type kind: {kind!r}")


def operation_name(path: str, api_prefix: str | None) -> str:
    """Derive the ``api`` map key from a path template.

    Examples:
        >>> operation_name("/beta/api/webgraph/host/ingoing", "/beta/api")
        'webgraphHostIngoing'
    """
    relative = PurePosixPath(path)
    if api_prefix:
        try:
            relative = relative.relative_to(api_prefix)
        except ValueError:
            raise ConfigError(f"Path is outside the API prefix '{api_prefix}'", path) from None
    segments = [part for part in relative.parts if part not in ("/", ".")]
    return to_lower_camel_case("_".join(segments)) or "index"


def _ensure_unique(base: str, method: str, used: set[str]) -> str:
    """Ensure an operation name is unique by appending the method, then a counter."""
    name = base
    counter = 1
    while name in used:
        name = base + method.capitalize() + (str(counter) if counter > 1 else "")
        counter += 1
    used.add(name)
    return name


def _params_type(context: GenerationContext, params: dict[str, Type]) -> Type | None:
    if not params:
        return None
    return context.store.object({name: Property(ty) for name, ty in params.items()})


def _request_url(op: Operation) -> str:
    def substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in op.path_params:
            return match.group(0)
        access = f"params.{name}" if _IDENTIFIER.match(name) else f"params[{string_literal(name)}]"
        return f"${{encodeURIComponent({access})}}"

    url = _PATH_PARAM.sub(substitute, op.path)
    if op.query_params:
        url += "?${new URLSearchParams(query)}"
    return f"`{url}`"


def render_operation(context: GenerationContext, op: Operation) -> str:
    """Render the arrow function implementing one operation."""
    params = _params_type(context, op.path_params)
    query = _params_type(context, op.query_params)
    body = op.body.type if op.body is not None else None

    arguments = [
        f"{name}: {render_type(ty)}"
        for name, ty in (("params", params), ("query", query), ("body", body))
        if ty is not None
    ]
    arguments.append("options?: ApiOptions")

    method = string_literal(op.method.upper())
    url = _request_url(op)
    body_arg = "body" if body is not None else "undefined"
    response = op.response
    if isinstance(response, PlainResponse):
        request = f"requestPlain({method}, {url}, {body_arg}, options)"
    elif isinstance(response, JsonResponse):
        request = f"requestJson<{render_type(response.type)}>({method}, {url}, {body_arg}, options)"
    elif isinstance(response, EventStreamResponse):
        request = f"sse<{render_type(response.type)}>({method}, {url}, options)"
    else:
        raise UnsupportedConstructError("operation without a success response", op.location)

    return f"({', '.join(arguments)}) => {request}"


def render_operations(context: GenerationContext) -> list[RenderedOperation]:
    used: set[str] = set()
    rendered: list[RenderedOperation] = []
    for op in context.operations():
        base = operation_name(op.path, context.config.api_prefix)
        name = _ensure_unique(base, op.method, used)
        rendered.append(RenderedOperation(property_key(name), render_operation(context, op)))
    return rendered


def render_declarations(context: GenerationContext) -> list[TypeDeclaration]:
    declarations: list[TypeDeclaration] = []
    for name in context.schema_names():
        if is_inlined_name(name):
            logger.info("skipping %s due to '_'", name)
            continue
        ty = context.schema_type(name)
        constants = ty.constants()
        if constants is None:
            declarations.append(TypeDeclaration(name, render_type(ty)))
            continue
        declarations.append(
            TypeDeclaration(
                name,
                render_type(ty),
                constants_name=to_shouty_snake_case(pluralize(name, len(constants))),
                constants=tuple(string_literal(value) for value in constants),
            )
        )
    return declarations


def generate_ts(context: GenerationContext, templates: TemplateContext | None = None) -> str:
    """Render the TypeScript client module for a document."""
    templates = templates or TemplateContext()
    operations = render_operations(context)
    logger.info("wrote %d operations", len(operations))
    declarations = render_declarations(context)
    logger.info("wrote %d types", len(declarations))
    return templates.client_template.render(
        operations=operations,
        declarations=declarations,
    )
