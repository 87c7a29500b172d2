from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import ValidationError as PydanticValidationError

from .models import SessionData

logger = logging.getLogger(__name__)


@dataclass
class AuthStore:
    app_name: str = "lms-console"
    filename: str = "session.json"
    base_dir: str | None = None

    def _path(self) -> Path:
        base = Path(self.base_dir) if self.base_dir else Path(user_data_dir(self.app_name, "LMS"))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    def save(self, session: SessionData) -> None:
        path = self._path()
        path.write_text(json.dumps(session.model_dump(), indent=2))
        try:
            path.chmod(0o600)
        except OSError:
            logger.debug("could not restrict permissions on %s", path)

    def load(self) -> SessionData | None:
        path = self._path()
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError:
            logger.warning("discarding unreadable session file %s", path)
            self.clear()
            return None
        try:
            return SessionData(**data)
        except (TypeError, PydanticValidationError):
            logger.warning("discarding invalid session file %s", path)
            self.clear()
            return None

    def clear(self) -> None:
        path = self._path()
        if path.exists():
            path.unlink()
