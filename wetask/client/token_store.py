from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional, Union

from structlog import get_logger

from wetask.domain.value_objects.token_pair import TokenPair

__all__ = ["TokenStore"]

logger = get_logger(__name__)


class TokenStore:
    """Holds the current session's token pair.

    The pair is kept in memory and, when a ``path`` is given, mirrored to a
    JSON file so the session survives a restart. The file is a convenience:
    any failure to read or write it is logged and otherwise ignored, and the
    in-memory value stays authoritative.

    Readers only ever see a whole pair. ``set`` swaps one immutable
    :class:`TokenPair` for another, so an access token is never observed next
    to a refresh token from a different exchange.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self._path = Path(path).expanduser() if path else None
        self._pair: Optional[TokenPair] = self._load()

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def get(self) -> Optional[TokenPair]:
        return self._pair

    def set(self, pair: TokenPair) -> None:
        self._pair = pair
        self._write(pair)

    def clear(self) -> None:
        self._pair = None
        self._write(None)

    def _load(self) -> Optional[TokenPair]:
        if self._path is None or not self._path.exists():
            return None
        try:
            return TokenPair.model_validate_json(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("token_store_unreadable", path=str(self._path), error=str(exc))
            return None

    def _write(self, pair: Optional[TokenPair]) -> None:
        if self._path is None:
            return
        try:
            if pair is None:
                self._path.unlink(missing_ok=True)
                return
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_name(self._path.name + ".tmp")
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(pair.to_wire(), fh)
            os.replace(tmp_path, self._path)
        except OSError as exc:
            logger.warning("token_store_write_failed", path=str(self._path), error=str(exc))
