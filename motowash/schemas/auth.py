# motowash/schemas/auth.py
from motowash.schemas.entities import CamelModel


class LoginRequest(CamelModel):
    password: str


class LoginOut(CamelModel):
    token: str      # send back as X-Admin-Token
