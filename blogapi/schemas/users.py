from pydantic import BaseModel
from typing import Literal, Optional


class AuthIn(BaseModel):
    email: str
    password: str
    type: Literal['signup', 'signin']


class AuthOut(BaseModel):
    email: str


class ActionOkOut(BaseModel):
    ok: bool = True
    message: Optional[str] = None
