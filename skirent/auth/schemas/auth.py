from pydantic import BaseModel, Field


class AdminLogin(BaseModel):
    """Admin login credentials"""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=200)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
    username: str
    role: str


class TokenVerifyResponse(BaseModel):
    valid: bool
    username: str
    role: str
    expires_at: int  # Unix timestamp
