from pydantic import BaseModel


class AuthUser(BaseModel):
    id: str
    email: str | None = None


class AuthSession(BaseModel):
    access_token: str
    refresh_token: str
    expires_in: int = 3600
    user: AuthUser


class Credentials(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    user: AuthUser
    message: str
