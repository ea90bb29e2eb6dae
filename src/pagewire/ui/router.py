from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from starlette.datastructures import UploadFile

from pagewire.api.router import get_app_definition
from pagewire.client.renderer import ACTION_FIELD, PageBindings, input_field, render_schema
from pagewire.errors import HandlerError, UnknownActionError
from pagewire.runtime import execute_action
from pagewire.schema import ActionInvocation, PagewireApp

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["ui"])


def _mount(app_def: PagewireApp) -> PageBindings:
    if not app_def.schema.pages:
        raise HTTPException(status_code=404, detail="No page declared")
    return render_schema(app_def.schema)


def _page_title(request: Request, app_def: PagewireApp) -> str:
    config = getattr(request.app.state, "pagewire_config", None)
    configured = getattr(getattr(config, "ui", None), "page_title", None)
    return configured or app_def.schema.pages[0].title


def _render(
    request: Request,
    app_def: PagewireApp,
    bindings: PageBindings,
    *,
    flash: dict[str, Any] | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "page.html",
        {
            "title": _page_title(request, app_def),
            "flash": flash,
            "page_html": bindings.root.to_html(),
            "multipart": bool(bindings.file_input_ids),
        },
        status_code=status_code,
    )


@router.get("/", response_class=HTMLResponse)
async def ui_page(request: Request) -> HTMLResponse:
    app_def = get_app_definition(request)
    return _render(request, app_def, _mount(app_def))


@router.post("/ui/action", response_class=HTMLResponse)
async def ui_action(request: Request) -> HTMLResponse:
    app_def = get_app_definition(request)
    bindings = _mount(app_def)

    form = await request.form()
    action_id = str(form.get(ACTION_FIELD) or "").strip()

    for component_id in bindings.text_input_ids:
        raw = form.get(input_field(component_id))
        bindings.set_input(component_id, raw if isinstance(raw, str) else "")
    for component_id in bindings.file_input_ids:
        raw = form.get(input_field(component_id))
        filename = raw.filename if isinstance(raw, UploadFile) else None
        bindings.select_file(component_id, filename or "")

    invocation = ActionInvocation(id=action_id, inputs=bindings.snapshot_inputs())
    try:
        updates = await execute_action(app_def, invocation)
    except UnknownActionError as e:
        return _render(
            request, app_def, bindings, flash={"message": str(e), "kind": "bad"}, status_code=404
        )
    except HandlerError as e:
        logger.error("Action '%s' failed: %s", e.action_id, e, exc_info=e.cause)
        return _render(
            request, app_def, bindings, flash={"message": str(e), "kind": "bad"}, status_code=500
        )

    errors = bindings.apply(updates)
    flash = None
    if errors:
        flash = {"message": "; ".join(str(e) for e in errors), "kind": "bad"}
    return _render(request, app_def, bindings, flash=flash)
