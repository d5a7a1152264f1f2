"""Declared Params Dependency — runs the schema core against a FastAPI request.

Invariants:
    - Path, query and body are collected from starlette's already-parsed request;
      the body is read as JSON or, for urlencoded/multipart requests, as form fields
    - A failing REQUIRED parameter raises ParamValidationError (→ 400 via error_handlers)
    - request.state.raw_params and request.state.declared_params are set on success
    - Schema declarations are compiled ONCE, when the dependency is created

Design Decisions:
    - Callable class over closure: FastAPI caches dependencies by identity, and the
      instance carries its ParamSet for introspection (e.g. docs, tests)
    - strict=True by default: a declaration that cannot compile is a startup bug,
      raised as SchemaDefinitionError at import time rather than a silent 200
    - Non-object JSON bodies contribute no parameters; undecodable JSON is a 400
    - Repeated form fields become lists, the same way repeated query keys do
"""

import json
import logging
from collections.abc import Iterable
from typing import Any

from fastapi import Request

from paramschema.config import Settings, get_settings
from paramschema.core.diagnostics import DiagnosticSink
from paramschema.core.domain_types import DeclaredParams
from paramschema.core.errors import MalformedBodyError, ParamValidationError
from paramschema.core.merge import flatten_query
from paramschema.core.param_set import ParamSet, build_param_set
from paramschema.core.resolve import prepare_params
from paramschema.core.type_descriptors import DEFAULT_REGISTRY, TypeRegistry
from paramschema.infrastructure.observability import LoggingSink

logger = logging.getLogger(__name__)

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class DeclaredParamsDependency:
    """FastAPI dependency returning DeclaredParams for one endpoint schema."""

    def __init__(
        self,
        param_set: ParamSet,
        settings: Settings | None = None,
        sink: DiagnosticSink | None = None,
    ):
        self.param_set = param_set
        self.settings = settings or get_settings()
        self.sink = sink or LoggingSink(logger)

    async def __call__(self, request: Request) -> DeclaredParams:
        prepared = prepare_params(
            self.param_set,
            body=await _read_body(request),
            query=flatten_query(request.query_params.multi_items()),
            path=dict(request.path_params),
            sink=self.sink,
            quiet=self.settings.quiet_validation,
        )
        request.state.raw_params = prepared.parameters
        if not prepared.ok:
            raise ParamValidationError(prepared.result.failure)
        request.state.declared_params = prepared.declared
        return prepared.declared


def declared_params(
    schema: ParamSet | Iterable[Any],
    *,
    named: Iterable[str] = (),
    registry: TypeRegistry = DEFAULT_REGISTRY,
    settings: Settings | None = None,
    sink: DiagnosticSink | None = None,
    strict: bool = True,
) -> DeclaredParamsDependency:
    """Build a dependency from a ParamSet or from raw declarations.

    Usage:
        @router.get("/users/{id}")
        async def show(params: dict = Depends(declared_params(USER_PARAMS, named=["id"]))):
            ...
    """
    settings = settings or get_settings()
    sink = sink or LoggingSink(logger)
    if not isinstance(schema, ParamSet):
        schema = build_param_set(
            schema, registry=registry, sink=sink, named=named,
            reject_required_defaults=settings.reject_required_defaults,
            strict=strict,
        )
    return DeclaredParamsDependency(schema, settings, sink)


async def _read_body(request: Request) -> dict[str, Any]:
    if request.method not in _BODY_METHODS:
        return {}
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_CONTENT_TYPES):
        form = await request.form()
        return flatten_query(form.multi_items())
    if "json" not in content_type:
        return {}
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedBodyError(str(exc)) from exc
    return body if isinstance(body, dict) else {}
