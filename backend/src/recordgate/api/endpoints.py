"""HTTP endpoints for collection resources.

Maps verbs onto collection operations:

    GET     /{path}            -> find(query params)
    GET     /{path}/{id}       -> find({_id: id}), single record
    POST    /{path}            -> save(body, query params)
    PUT     /{path}[/{id}]     -> save(body, {_id: id})
    DELETE  /{path}[/{id}]     -> remove({_id: id})
"""

import json
import logging
from typing import Any, Callable

from fastapi import APIRouter, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from recordgate.auth.types import Session
from recordgate.errors import RecordGateError
from recordgate.resources.collection import Collection
from recordgate.validation.types import IDENTITY_FIELD, ErrorMap

logger = logging.getLogger(__name__)

SessionGetter = Callable[[Request], Session]


def _query_params(request: Request) -> dict[str, Any]:
    return dict(request.query_params)


async def _read_body(request: Request) -> Any:
    """Parse the JSON body, or None when it is absent or malformed."""
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.debug("Ignoring malformed JSON body on %s", request.url.path)
        return None


def _respond(result: Any) -> Response:
    """Serialize an operation result.

    ErrorMaps become 400 responses; no result becomes 204.
    """
    if result is None:
        return Response(status_code=204)
    if isinstance(result, ErrorMap):
        return JSONResponse({"errors": dict(result)}, status_code=400)
    return JSONResponse(jsonable_encoder(result))


def create_collection_router(
    collection: Collection,
    get_session: SessionGetter,
) -> APIRouter:
    """Create the router for one collection with an injected session getter."""
    router = APIRouter(prefix=collection.path, tags=[collection.name])

    @router.get("")
    async def find_records(request: Request) -> Response:
        result = await collection.find(get_session(request), _query_params(request))
        return _respond(result)

    @router.get("/{record_id}")
    async def find_record(record_id: str, request: Request) -> Response:
        query = {**_query_params(request), IDENTITY_FIELD: record_id}
        result = await collection.find(get_session(request), query)
        if not result:
            return JSONResponse(
                {"message": f"No record with id {record_id}", "status": 404},
                status_code=404,
            )
        record = result[0]
        # A record the get hook flagged is answered like any other ErrorMap
        if isinstance(record.get("errors"), ErrorMap) and len(record) == 1:
            return _respond(record["errors"])
        return _respond(record)

    @router.post("")
    @router.put("")
    async def save_record(request: Request) -> Response:
        body = await _read_body(request)
        result = await collection.save(get_session(request), body, _query_params(request))
        return _respond(result)

    @router.put("/{record_id}")
    async def update_record(record_id: str, request: Request) -> Response:
        body = await _read_body(request)
        query = {**_query_params(request), IDENTITY_FIELD: record_id}
        result = await collection.save(get_session(request), body, query)
        return _respond(result)

    @router.delete("")
    async def remove_by_query(request: Request) -> Response:
        result = await collection.remove(get_session(request), _query_params(request))
        return _respond(result)

    @router.delete("/{record_id}")
    async def remove_record(record_id: str, request: Request) -> Response:
        query = {**_query_params(request), IDENTITY_FIELD: record_id}
        result = await collection.remove(get_session(request), query)
        return _respond(result)

    return router


async def recordgate_error_handler(request: Request, exc: RecordGateError) -> JSONResponse:
    """Map cancellations, precondition and store failures to JSON errors."""
    logger.info("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_dict(), status_code=exc.status)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Faults raised by hooks or stores that are not RecordGateErrors."""
    logger.error("%s %s raised %s: %s", request.method, request.url.path, type(exc).__name__, exc)
    return JSONResponse({"message": "Internal server error", "status": 500}, status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RecordGateError, recordgate_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
