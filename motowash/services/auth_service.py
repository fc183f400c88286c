# motowash/services/auth_service.py
"""
Authentication boundary for the manager area.
The shared ADMIN_PASSWORD is exchanged for an opaque session token; the core
only ever receives the resulting is_admin boolean.
"""

import secrets
from typing import Optional

from motowash.config import settings
from motowash.utils.logger import get_logger

logger = get_logger(__name__)


class AdminSessions:
    def __init__(self, password: str = settings.ADMIN_PASSWORD):
        self._password = password
        self._tokens: set[str] = set()

    def login(self, password: str) -> Optional[str]:
        """Returns a new session token, or None on a wrong password."""
        if not secrets.compare_digest(password.encode(), self._password.encode()):
            logger.warning("[AUTH] Rejected admin login")
            return None
        token = secrets.token_urlsafe(32)
        self._tokens.add(token)
        logger.info(f"[AUTH] Admin session opened ({len(self._tokens)} active)")
        return token

    def logout(self, token: Optional[str]) -> bool:
        if token and token in self._tokens:
            self._tokens.discard(token)
            logger.info("[AUTH] Admin session closed")
            return True
        return False

    def is_admin(self, token: Optional[str]) -> bool:
        return bool(token) and token in self._tokens
