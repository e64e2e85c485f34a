from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=320, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(min_length=8, max_length=256)


class LoginResponse(BaseModel):
    subject_id: str
    email: str


class TokenResponse(BaseModel):
    subject_id: str
    access_token: str
    token_type: str = "bearer"


class SessionResponse(BaseModel):
    subject_id: str
