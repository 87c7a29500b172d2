import json
import logging
from datetime import datetime, timezone

ACTION_LOGGER = "lms_console.actions"


def get_logger(name: str = ACTION_LOGGER) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def log_action(
    logger: logging.Logger,
    module: str,
    action: str,
    actor_role: str | None,
    outcome: str,
    *,
    target: str | None = None,
    detail: str | None = None,
) -> None:
    logger.info(
        json.dumps(
            {
                "ts": datetime.now(timezone.utc).isoformat(),
                "level": "INFO",
                "module": module,
                "action": action,
                "actor_role": actor_role,
                "target": target,
                "outcome": outcome,
                "detail": detail,
            }
        )
    )
