# routes/catalog.py
from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse

from config import Settings, get_settings
from dependencies import get_browser, get_session, templates
from schemas import SortDirection
from services.catalog_browser import CatalogBrowser
from services.sessions import BrowserSession

router = APIRouter(tags=["Catalog"])

# ---------- helpers ----------

def _parse_date(value: str) -> Optional[date]:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid date: {value!r}")

def _view_payload(browser: CatalogBrowser, session: BrowserSession) -> Dict[str, Any]:
    view = browser.view()
    html = templates.get_template("_product_grid.html").render(view=view)
    return {
        "html": html,
        "toasts": session.notifier.drain(),
        "pending": browser.refreshing,
        "loading": view.loading,
        "page": view.page,
        "page_count": view.page_count,
        "total": view.total,
    }

# ---------- page ----------

@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def catalog_page(
    request: Request,
    browser: CatalogBrowser = Depends(get_browser),
    session: BrowserSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    return templates.TemplateResponse(request, "catalog.html", {
        "title": "Products",
        "view": browser.view(),
        "toasts": session.notifier.drain(),
        "debounce_ms": int(settings.search_debounce_seconds * 1000),
    })

# ---------- controls ----------

@router.get("/browser/view")
def browser_view(browser: CatalogBrowser = Depends(get_browser), session: BrowserSession = Depends(get_session)):
    return _view_payload(browser, session)

@router.post("/browser/search")
def browser_search(
    search: str = Form(""),
    browser: CatalogBrowser = Depends(get_browser),
    session: BrowserSession = Depends(get_session),
):
    browser.set_search(search)
    return _view_payload(browser, session)

@router.post("/browser/sort")
def browser_sort(
    sort: str = Form(""),
    browser: CatalogBrowser = Depends(get_browser),
    session: BrowserSession = Depends(get_session),
):
    try:
        direction = SortDirection(sort)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid sort: {sort!r}")
    browser.set_sort(direction)
    return _view_payload(browser, session)

@router.post("/browser/start-date")
def browser_start_date(
    value: str = Form(""),
    browser: CatalogBrowser = Depends(get_browser),
    session: BrowserSession = Depends(get_session),
):
    browser.set_start_date(_parse_date(value))
    return _view_payload(browser, session)

@router.post("/browser/end-date")
def browser_end_date(
    value: str = Form(""),
    browser: CatalogBrowser = Depends(get_browser),
    session: BrowserSession = Depends(get_session),
):
    browser.set_end_date(_parse_date(value))
    return _view_payload(browser, session)

@router.post("/browser/attribute")
def browser_attribute(
    key: str = Form(...),
    value: str = Form(""),
    browser: CatalogBrowser = Depends(get_browser),
    session: BrowserSession = Depends(get_session),
):
    browser.handle_attribute_change(key, value)
    return _view_payload(browser, session)

@router.post("/browser/clear")
def browser_clear(browser: CatalogBrowser = Depends(get_browser), session: BrowserSession = Depends(get_session)):
    browser.handle_clear_filters()
    return _view_payload(browser, session)

@router.post("/browser/previous")
def browser_previous(browser: CatalogBrowser = Depends(get_browser), session: BrowserSession = Depends(get_session)):
    browser.previous_page()
    return _view_payload(browser, session)

@router.post("/browser/next")
def browser_next(browser: CatalogBrowser = Depends(get_browser), session: BrowserSession = Depends(get_session)):
    browser.next_page()
    return _view_payload(browser, session)
