from pydantic import BaseModel


class RegisterRequest(BaseModel):
    email: str
    password: str
    password_confirm: str


class LoginRequest(BaseModel):
    email: str
    password: str
