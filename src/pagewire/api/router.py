from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from pagewire.errors import HandlerError, UnknownActionError
from pagewire.runtime import execute_action
from pagewire.schema import ActionInvocation, ActionResponse, PagewireApp, Schema

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pagewire"])


def get_app_definition(request: Request) -> PagewireApp:
    app_def = getattr(request.app.state, "pagewire_app", None)
    if app_def is None:
        raise HTTPException(status_code=500, detail="App not initialized")
    return app_def


def _failure(status_code: int, message: str) -> JSONResponse:
    body = ActionResponse(success=False, error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@router.get("/schema", response_model=Schema)
async def schema(request: Request) -> Schema:
    return get_app_definition(request).schema


@router.post("/action", response_model=ActionResponse)
async def action(request: Request, invocation: ActionInvocation) -> ActionResponse | JSONResponse:
    app_def = get_app_definition(request)
    try:
        updates = await execute_action(app_def, invocation)
    except UnknownActionError as e:
        logger.info("Unknown action requested: %s", e.action_id)
        return _failure(404, str(e))
    except HandlerError as e:
        logger.error("Action '%s' failed: %s", e.action_id, e, exc_info=e.cause)
        return _failure(500, str(e))

    return ActionResponse(success=True, updates=updates)


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
