from fastapi import APIRouter, Cookie, Depends, Response
from typing import Optional
from ..schemas.users import AuthIn, AuthOut, ActionOkOut
from ..crud import authenticate
from ..auth import SESSION_COOKIE_NAME, ACCESS_TOKEN_EXPIRE_MINUTES, session_token, session_email
from ..core import get_store
from ..errors import Unauthorized

router = APIRouter()


@router.post('', response_model=AuthOut)
async def auth(payload: AuthIn, response: Response, store=Depends(get_store)):
    account = await authenticate(store, payload.email, payload.password, payload.type)

    # identity travels as a signed token, never as the bare email
    response.set_cookie(
        SESSION_COOKIE_NAME,
        session_token(account['email']),
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite='lax',
    )
    return account


@router.get('/session', response_model=AuthOut)
async def current_session(session: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME)):
    email = session_email(session)
    if not email:
        raise Unauthorized('Not signed in')
    return {'email': email}


@router.post('/logout', response_model=ActionOkOut)
async def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {'ok': True}
