# routes/editor.py
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.datastructures import FormData, UploadFile

import schemas
from config import Settings, get_settings
from dependencies import get_product_api, get_session, templates
from product_api import ProductAPI
from services.product_editor import ProductEditor
from services.sessions import BrowserSession
from utils import get_logger

logger = get_logger("editor_routes")

router = APIRouter(tags=["Editor"])

ACTION_SUBMIT = "submit"
ACTION_ADD_ATTRIBUTE = "add_attribute"
ACTION_REMOVE_IMAGE = "remove_image"
REMOVE_ATTRIBUTE_PREFIX = "remove_attribute:"

# ---------- helpers ----------

def _render(request: Request, editor: ProductEditor, session: BrowserSession, form_token: str):
    draft = session.draft_images.get(form_token)
    return templates.TemplateResponse(request, "product_form.html", {
        "title": editor.title,
        "editor": editor,
        "errors": editor.errors,
        "form_token": form_token,
        "image_name": draft.filename if draft else None,
        "toasts": session.notifier.drain(),
        "action_url": request.url.path,
    })

async def _uploaded_image(value) -> Optional[schemas.UploadedImage]:
    if not isinstance(value, UploadFile) or not value.filename:
        return None
    content = await value.read()
    return schemas.UploadedImage(filename=value.filename, content_type=value.content_type, content=content)

def _fill_from_form(editor: ProductEditor, form: FormData):
    editor.name = str(form.get("name") or "")
    editor.price = str(form.get("price") or "")
    row_ids = form.getlist("attr_row_id")
    keys = form.getlist("attr_key")
    values = form.getlist("attr_value")
    editor.attributes = [
        schemas.AttributeRow(row_id=str(row_id) or uuid.uuid4().hex, key=str(key), value=str(value))
        for row_id, key, value in zip(row_ids, keys, values)
    ]

def _new_editor(api: ProductAPI, session: BrowserSession, settings: Settings, product_id=None) -> ProductEditor:
    return ProductEditor(api, session.notifier, product_id=product_id,
                         require_image_on_update=settings.require_image_on_update)

async def _handle_post(request: Request, editor: ProductEditor, session: BrowserSession):
    form = await request.form()
    form_token = str(form.get("form_token") or uuid.uuid4().hex)
    action = str(form.get("action") or ACTION_SUBMIT)
    _fill_from_form(editor, form)

    image = await _uploaded_image(form.get("image"))
    if image is not None:
        session.draft_images[form_token] = image

    if action == ACTION_ADD_ATTRIBUTE:
        editor.add_attribute()
    elif action.startswith(REMOVE_ATTRIBUTE_PREFIX):
        editor.remove_attribute_row(action[len(REMOVE_ATTRIBUTE_PREFIX):])
    elif action == ACTION_REMOVE_IMAGE:
        session.draft_images.pop(form_token, None)
    elif action == ACTION_SUBMIT:
        editor.set_image(session.draft_images.get(form_token))
        result = await run_in_threadpool(editor.submit)
        if result.ok:
            session.draft_images.pop(form_token, None)
            return RedirectResponse(url=result.redirect_to or "/", status_code=303)
    else:
        logger.warning("Unknown editor action %r", action)

    return _render(request, editor, session, form_token)

# ---------- pages ----------

@router.get("/create", response_class=HTMLResponse, include_in_schema=False)
def create_page(
    request: Request,
    session: BrowserSession = Depends(get_session),
    api: ProductAPI = Depends(get_product_api),
    settings: Settings = Depends(get_settings),
):
    editor = _new_editor(api, session, settings)
    return _render(request, editor, session, uuid.uuid4().hex)

@router.post("/create", response_class=HTMLResponse, include_in_schema=False)
async def create_submit(
    request: Request,
    session: BrowserSession = Depends(get_session),
    api: ProductAPI = Depends(get_product_api),
    settings: Settings = Depends(get_settings),
):
    editor = _new_editor(api, session, settings)
    return await _handle_post(request, editor, session)

@router.get("/edit/{product_id}", response_class=HTMLResponse, include_in_schema=False)
def edit_page(
    product_id: str,
    request: Request,
    session: BrowserSession = Depends(get_session),
    api: ProductAPI = Depends(get_product_api),
    settings: Settings = Depends(get_settings),
):
    editor = _new_editor(api, session, settings, product_id=product_id)
    editor.load()
    return _render(request, editor, session, uuid.uuid4().hex)

@router.post("/edit/{product_id}", response_class=HTMLResponse, include_in_schema=False)
async def edit_submit(
    product_id: str,
    request: Request,
    session: BrowserSession = Depends(get_session),
    api: ProductAPI = Depends(get_product_api),
    settings: Settings = Depends(get_settings),
):
    editor = _new_editor(api, session, settings, product_id=product_id)
    return await _handle_post(request, editor, session)
