# motowash/deps.py
"""FastAPI dependencies for the running shop and the admin capability."""

from typing import Optional
from fastapi import Header, Request, Depends
from motowash.services.auth_service import AdminSessions
from motowash.services.shop_session import ShopSession


def get_shop(request: Request) -> ShopSession:
    return request.app.state.shop


def get_admin_sessions(request: Request) -> AdminSessions:
    return request.app.state.admin_sessions


def admin_token(x_admin_token: Optional[str] = Header(default=None)) -> Optional[str]:
    return x_admin_token


def is_admin(token: Optional[str] = Depends(admin_token),
             sessions: AdminSessions = Depends(get_admin_sessions)) -> bool:
    """Capability handed to the core: True only for a live admin session token."""
    return sessions.is_admin(token)
