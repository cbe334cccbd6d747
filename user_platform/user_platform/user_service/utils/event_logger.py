"""
Logging setup and authentication event logging.
"""
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request

from ..config import Settings

logger = logging.getLogger(__name__)


ALLOWED_EVENT_TYPES = {
    "login_success",
    "login_failure",
    "user_not_found",
    "token_rejected",
    "user_registered",
    "password_rehashed",
}

FAILURE_EVENT_TYPES = {"login_failure", "user_not_found", "token_rejected"}


def configure_logging(settings: Settings) -> None:
    """
    Configure stdout logging, plus a file handler when LOG_DIR is set.

    Does nothing to a root logger that already has handlers (e.g. under uvicorn or pytest).
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    if settings.LOG_DIR:
        # Continue with stdout only if the directory cannot be created
        try:
            os.makedirs(settings.LOG_DIR, exist_ok=True)
            handlers.append(logging.FileHandler(os.path.join(settings.LOG_DIR, "auth_events.log")))
        except OSError as e:
            print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s:%(message)s",
        handlers=handlers
    )


def client_ip(request: Optional[Request]) -> Optional[str]:
    """Client address of the request, falling back to the first X-Forwarded-For entry."""
    if request is None:
        return None

    ip_address = None
    if request.client:
        ip_address = request.client.host

    forwarded = request.headers.get("x-forwarded-for")
    if not ip_address and forwarded:
        ip_address = forwarded.split(",")[0].strip()

    return ip_address


def log_auth_event(
    event_type: str,
    email: Optional[str],
    request: Optional[Request] = None,
    user_id: Optional[int] = None
) -> None:
    """
    Log an authentication event.

    Args:
        event_type: One of ALLOWED_EVENT_TYPES
        email: Email the event concerns, if known
        request: Incoming request, used for client IP and user agent
        user_id: Id of the stored user, if known

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    user_agent = request.headers.get("user-agent") if request is not None else None

    level = logging.WARNING if event_type in FAILURE_EVENT_TYPES else logging.INFO
    logger.log(
        level,
        "AUTH %s user_id=%s email=%s ip=%s user_agent=%s timestamp=%s",
        event_type, user_id, email, client_ip(request), user_agent,
        datetime.now(timezone.utc).isoformat()
    )
