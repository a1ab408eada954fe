"""Startup dependency resolution for the FastAPI lifespan.

Route handlers get their provider clients through ``Depends()``; the
lifespan uses the same mechanism so that the clients are built once per
process by plain ``build_*`` dependency functions, and so that tests can
swap them through ``app.dependency_overrides``.

FastAPI only solves dependencies for requests, so ``inject`` hands it a
synthetic request carrying the application.  See
https://github.com/fastapi/fastapi/discussions/11742 for the approach.
"""

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from functools import partial
from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.dependencies.models import Dependant
from fastapi.dependencies.utils import get_dependant, solve_dependencies

logger = logging.getLogger(__name__)

LIFESPAN_SCOPE_HEADER = (b"x-request-scope", b"lifespan")


def get_app(request: Request) -> FastAPI:
    """Dependency returning the application the lifespan is starting."""
    return request.app


def _startup_request(app: FastAPI) -> Request:
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": "/",
        "raw_path": b"/",
        "root_path": "",
        "query_string": b"",
        "headers": [LIFESPAN_SCOPE_HEADER],
        "client": None,
        "server": None,
        "app": app,
        "state": app.state,
    }
    return Request(scope)


def _dependency_names(dependant: Dependant) -> list[str]:
    return [
        getattr(sub.call, "__name__", repr(sub.call))
        for sub in dependant.dependencies
    ]


async def _resolve(
    app: FastAPI, dependant: Dependant, stack: AsyncExitStack
) -> dict[str, Any]:
    solved = await solve_dependencies(
        request=_startup_request(app),
        dependant=dependant,
        async_exit_stack=stack,
        embed_body_fields=False,
        dependency_overrides_provider=app,
    )
    if solved.errors:
        raise RuntimeError(f"Lifespan dependencies failed validation: {solved.errors}")
    return solved.values


def inject(lifespan: Callable[..., Any]) -> Callable[[FastAPI], Any]:
    """Turn a lifespan generator with ``Depends()`` parameters into a lifespan.

    Usage::

        @inject
        async def lifespan(
            app: FastAPI,
            _store: Annotated[None, Depends(build_vector_store)],
        ):
            yield

    The ``build_*`` generators own their teardown and are unwound in
    reverse order at shutdown.  A dependency that raises aborts startup
    after the ones already built have been torn down.
    """
    body = asynccontextmanager(lifespan)

    @asynccontextmanager
    async def run(app: FastAPI):  # type: ignore[misc]
        dependant = get_dependant(path="/", call=partial(lifespan, app))
        names = _dependency_names(dependant)

        async with AsyncExitStack() as stack:
            try:
                values = await _resolve(app, dependant, stack)
            except Exception:
                logger.exception("Startup failed while building %s", ", ".join(names))
                raise
            logger.debug("Lifespan dependencies ready: %s", ", ".join(names))
            async with body(app, **values):
                yield

    return run
