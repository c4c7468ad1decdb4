from __future__ import annotations

from fastapi import APIRouter, Cookie, Depends, Header, Response

from palette.core.errors import MissingTokenError
from palette.schemas import LoginRequest, LoginResponse, TokenResponse
from palette.services.session_service import (
    REFRESH_TOKEN_COOKIE_NAME,
    LoginUser,
    bearer_token,
    expire_refresh_cookie,
    login_user,
    set_refresh_cookie,
)
from palette.services.token_service import TokenService
from palette.services.user_service import UserAccountService

router = APIRouter(prefix="/api/v1", tags=["users"])
token_service = TokenService()
user_service = UserAccountService(token_service=token_service)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, response: Response):
    result = user_service.login(payload.email, payload.social_type)
    set_refresh_cookie(response, result.refresh_token)
    return LoginResponse(
        access_token=result.access_token,
        is_registered=result.is_registered,
        social_types=[social.value for social in result.social_types],
    )


@router.get("/logout", status_code=204)
def logout(refresh_token: str | None = Cookie(default=None, alias=REFRESH_TOKEN_COOKIE_NAME)):
    user_service.logout(refresh_token)
    response = Response(status_code=204)
    expire_refresh_cookie(response)
    return response


@router.post("/token", response_model=TokenResponse)
def token(refresh_token: str | None = Cookie(default=None, alias=REFRESH_TOKEN_COOKIE_NAME)):
    if not refresh_token:
        raise MissingTokenError()
    return TokenResponse(access_token=token_service.renew_access_token(refresh_token))


@router.delete("/user", status_code=204)
def delete_user(
    authorization: str | None = Header(default=None),
    refresh_token: str | None = Cookie(default=None, alias=REFRESH_TOKEN_COOKIE_NAME),
):
    user_service.delete_account(bearer_token(authorization), refresh_token)
    response = Response(status_code=204)
    expire_refresh_cookie(response)
    return response


@router.patch("/user/terms", status_code=204)
def agree_terms(user: LoginUser = Depends(login_user)):
    user_service.agree_terms(user.email)
    return Response(status_code=204)
