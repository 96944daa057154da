# main.py
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parent
sys.path.append(str(ROOT_DIR))
load_dotenv()

from config import get_settings
from dependencies import SESSION_COOKIE
from routes import catalog, editor
from services import sessions
from utils import get_logger

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info("Product catalog client using API at %s", settings.api_base_url)
    yield
    sessions.close_all()
    logger.info("All browser sessions closed")


app = FastAPI(title="Product Catalog", lifespan=lifespan)

app.mount("/static", StaticFiles(directory=str(ROOT_DIR / "static")), name="static")


@app.middleware("http")
async def add_session_middleware(request: Request, call_next):
    if request.url.path.startswith("/static/"):
        return await call_next(request)
    session_id = request.cookies.get(SESSION_COOKIE)
    is_new = not session_id
    if is_new:
        session_id = sessions.new_session_id()
    request.state.session_id = session_id
    response = await call_next(request)
    if is_new:
        response.set_cookie(key=SESSION_COOKIE, value=session_id, httponly=True, samesite="lax")
    return response


@app.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok"}


# Routers
app.include_router(catalog.router)
app.include_router(editor.router)
