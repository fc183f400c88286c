# motowash/routers/auth.py
"""Manager login: exchanges the shared password for a session token."""

from fastapi import APIRouter, Depends, HTTPException
from motowash.deps import admin_token, get_admin_sessions
from motowash.schemas.auth import LoginOut, LoginRequest
from motowash.services.auth_service import AdminSessions

router = APIRouter()


@router.post("/auth/login", response_model=LoginOut, summary="Open an admin session")
def login(body: LoginRequest, sessions: AdminSessions = Depends(get_admin_sessions)):
    token = sessions.login(body.password)
    if token is None:
        raise HTTPException(status_code=401, detail="Contraseña incorrecta")
    return LoginOut(token=token)


@router.post("/auth/logout", summary="Close the admin session")
def logout(token: str = Depends(admin_token), sessions: AdminSessions = Depends(get_admin_sessions)):
    return {"status": "closed" if sessions.logout(token) else "no_session"}
