from datetime import datetime

from pydantic import BaseModel


class UserCreate(BaseModel):
    username: str
    password: str


class UserOut(BaseModel):
    id: int
    username: str
    created_at: datetime
    # Never expose hashed_password


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
