# payload.py
from __future__ import annotations

from typing import Dict, List, Optional, Tuple


class MultipartPayload:
    """
    Named parts for a multipart/form-data request: text fields plus
    at most one file per name.

    Encoding is left to requests (``data=`` / ``files=``).
    """
    def __init__(self):
        self._fields: List[Tuple[str, str]] = []
        self._files: Dict[str, Tuple[str, bytes, Optional[str]]] = {}

    def add_field(self, name: str, value) -> "MultipartPayload":
        self._fields.append((name, str(value)))
        return self

    def add_file(self, name: str, filename: str, content: bytes, content_type: Optional[str] = None) -> "MultipartPayload":
        self._files[name] = (filename, content, content_type)
        return self

    def field(self, name: str) -> Optional[str]:
        for key, value in self._fields:
            if key == name:
                return value
        return None

    def has_file(self, name: str) -> bool:
        return name in self._files

    def fields(self) -> Dict[str, str]:
        return dict(self._fields)

    def files(self) -> Dict[str, Tuple[str, bytes, Optional[str]]]:
        return dict(self._files)

    def part_names(self) -> List[str]:
        return [name for name, _ in self._fields] + list(self._files)
