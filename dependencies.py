# dependencies.py
from pathlib import Path

from fastapi import Depends, Request
from fastapi.templating import Jinja2Templates

from config import Settings, get_settings
from product_api import ProductAPI
from services import sessions
from services.catalog_browser import CatalogBrowser

ROOT_DIR = Path(__file__).resolve().parent
SESSION_COOKIE = "catalog_session"

templates = Jinja2Templates(directory=str(ROOT_DIR / "templates"))


# --- Dependencies for FastAPI ---
def get_session(request: Request, settings: Settings = Depends(get_settings)) -> sessions.BrowserSession:
    """
    The browser session for this request. The id is put on request.state by
    the session middleware in main.py.
    """
    sessions.evict_idle(settings.session_idle_seconds)
    return sessions.get_or_create(request.state.session_id)


def get_product_api(
    session: sessions.BrowserSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> ProductAPI:
    return ProductAPI(settings.api_base_url, notifier=session.notifier, timeout=settings.request_timeout_seconds)


def get_browser(
    session: sessions.BrowserSession = Depends(get_session),
    api: ProductAPI = Depends(get_product_api),
    settings: Settings = Depends(get_settings),
) -> CatalogBrowser:
    return sessions.browser_for(
        session,
        lambda notifier: CatalogBrowser(
            api,
            notifier,
            page_size=settings.page_size,
            debounce_seconds=settings.search_debounce_seconds,
        ),
    )
