from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional
import threading
import time
import uuid

from schemas import UploadedImage
from utils import get_logger
from .catalog_browser import CatalogBrowser
from .notifications import Notifier

logger = get_logger("sessions")

@dataclass
class BrowserSession:
    id: str
    notifier: Notifier = field(default_factory=Notifier)
    browser: Optional[CatalogBrowser] = None
    # images picked in the editor, kept across add/remove-row round trips
    draft_images: Dict[str, UploadedImage] = field(default_factory=dict)
    created_at: float = 0.0
    last_seen_at: float = 0.0

    def close(self):
        if self.browser is not None:
            self.browser.close()

# In-memory store
_SESSIONS: Dict[str, BrowserSession] = {}
_LOCK = threading.Lock()

def _now() -> float:
    return time.time()

def new_session_id() -> str:
    return uuid.uuid4().hex

def get_or_create(session_id: str) -> BrowserSession:
    with _LOCK:
        s = _SESSIONS.get(session_id)
        if s is None:
            s = BrowserSession(id=session_id, created_at=_now())
            _SESSIONS[session_id] = s
            logger.debug("session %s created", session_id)
        s.last_seen_at = _now()
        return s

def browser_for(session: BrowserSession, factory: Callable[[Notifier], CatalogBrowser]) -> CatalogBrowser:
    """The session's single catalog browser, created and mounted on first use."""
    with _LOCK:
        created = session.browser is None
        if created:
            session.browser = factory(session.notifier)
        browser = session.browser
    if created:
        browser.mount()
    return browser

def evict_idle(older_than_seconds: int) -> int:
    now = _now()
    with _LOCK:
        stale = [k for k, s in _SESSIONS.items() if (now - s.last_seen_at) >= older_than_seconds]
        removed = [_SESSIONS.pop(k) for k in stale]
    for s in removed:
        s.close()
    if removed:
        logger.info("evicted %d idle session(s)", len(removed))
    return len(removed)

def close_all():
    with _LOCK:
        removed = list(_SESSIONS.values())
        _SESSIONS.clear()
    for s in removed:
        s.close()

def count() -> int:
    with _LOCK:
        return len(_SESSIONS)
