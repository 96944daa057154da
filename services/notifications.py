from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, List
import threading
import time

from utils import get_logger

logger = get_logger("notifications")

SUCCESS = "success"
ERROR = "error"

@dataclass
class Toast:
    level: str
    message: str
    created_at: float = 0.0

class Notifier:
    """User-visible toasts for one browser session."""

    def __init__(self):
        self._toasts: List[Toast] = []
        self._lock = threading.Lock()

    def _push(self, level: str, message: str):
        with self._lock:
            self._toasts.append(Toast(level=level, message=message, created_at=time.time()))

    def success(self, message: str):
        logger.info("toast success: %s", message)
        self._push(SUCCESS, message)

    def error(self, message: str):
        logger.warning("toast error: %s", message)
        self._push(ERROR, message)

    def drain(self) -> List[Dict]:
        with self._lock:
            items, self._toasts = self._toasts, []
        return [asdict(t) for t in items]
