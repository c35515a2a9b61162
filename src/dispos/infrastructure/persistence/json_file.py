"""Shared file handling for the JSON-backed repositories.

Store failures are translated into the domain's error taxonomy here, so
the retry policy can tell a flaky mount from a corrupt file.
"""

from __future__ import annotations

import errno
import json
from pathlib import Path
from typing import Any

from dispos.domain.exceptions import PersistenceError, TransientError

# errno values that mean "try again later" rather than "this is broken"
_TRANSIENT_ERRNOS = {
    errno.ETIMEDOUT,
    errno.ECONNREFUSED,
    errno.ECONNRESET,
    errno.ECONNABORTED,
    errno.EHOSTUNREACH,
    errno.ENETUNREACH,
    errno.ENETDOWN,
    errno.EAGAIN,
}


class JsonFile:

    def __init__(self, file_path: Path, empty: Any) -> None:
        self._file_path = file_path
        self._empty = empty
        self._ensure_file()

    def load(self) -> Any:
        try:
            text = self._file_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise _translate(exc, f"Failed to read {self._file_path.name}") from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupt data in {self._file_path.name}: {exc}") from exc

    def persist(self, data: Any) -> None:
        try:
            self._file_path.write_text(
                json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            raise _translate(exc, f"Failed to write {self._file_path.name}") from exc

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self.persist(self._empty)


def _translate(exc: OSError, context: str) -> Exception:
    if isinstance(exc, (TimeoutError, ConnectionError)) or exc.errno in _TRANSIENT_ERRNOS:
        return TransientError(f"{context}: connection problem ({exc})")
    return PersistenceError(f"{context}: {exc}")
