"""API test fixtures — a small FastAPI app wired with declared_params + error handlers.

Invariants:
    - Every test gets a fresh app (no dependency state leaks between tests)
    - Diagnostics captured through a CollectingSink instead of caplog

Design Decisions:
    - httpx AsyncClient over ASGITransport: same client the rest of the suite uses,
      no server process needed
"""

import pytest
from fastapi import Depends, FastAPI, Request
from httpx import ASGITransport, AsyncClient

from paramschema.api.dependencies import declared_params
from paramschema.api.error_handlers import register_error_handlers
from paramschema.config import Settings
from paramschema.core.diagnostics import CollectingSink

USER_QUERY_PARAMS = [
    ("requires", {"name": "id", "type": "Int", "in": "path"}),
    ("optional", {"name": "page", "type": "Int", "in": "query", "default": 1}),
    ("optional", {"name": "tags", "type": "ArrayRef", "in": "query"}),
    ("optional", {"name": "sort", "type": "Str", "in": "query", "regex": r"^(asc|desc)$"}),
]

USER_BODY_PARAMS = [
    ("requires", {"name": "id", "type": "Int", "in": "path"}),
    ("optional", {"name": "page", "type": "Int", "in": "query"}),
    ("requires", {
        "name": "user", "type": "HashRef", "in": "body",
        "encloses": [
            ("requires", {"name": "name", "type": "Str"}),
            ("optional", {"name": "age", "type": "Int"}),
        ],
    }),
]


USER_FORM_PARAMS = [
    ("requires", {"name": "id", "type": "Int", "in": "path"}),
    ("requires", {"name": "nickname", "type": "Str", "in": "formData"}),
    ("optional", {"name": "age", "type": "Int", "in": "formData"}),
    ("optional", {"name": "tags", "type": "ArrayRef", "in": "formData"}),
]


def build_app(sink: CollectingSink, settings: Settings) -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)

    show_params = declared_params(
        USER_QUERY_PARAMS, named=["id"], sink=sink, settings=settings,
    )
    update_params = declared_params(
        USER_BODY_PARAMS, named=["id"], sink=sink, settings=settings,
    )
    profile_params = declared_params(
        USER_FORM_PARAMS, named=["id"], sink=sink, settings=settings,
    )

    @app.get("/users/{id}")
    async def show_user(request: Request, params: dict = Depends(show_params)):
        return {"declared": params, "raw": request.state.raw_params}

    @app.post("/users/{id}")
    async def update_user(params: dict = Depends(update_params)):
        return {"declared": params}

    @app.post("/users/{id}/profile")
    async def update_profile(params: dict = Depends(profile_params)):
        return {"declared": params}

    return app


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
async def client(sink, settings):
    app = build_app(sink, settings)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
