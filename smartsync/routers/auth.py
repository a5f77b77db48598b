import logging

from fastapi import APIRouter, Depends, Request

from smartsync.deps import get_optional_user_id, remember_token
from smartsync.repositories import UserRepository, get_users
from smartsync.schemas.user import AuthOut, LoginIn, RegisterIn, StatusOut, UserOut
from smartsync.services import credentials

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthOut)
def register(body: RegisterIn, request: Request, users: UserRepository = Depends(get_users)):
    user_id, token = credentials.register(users, body.name, body.email, body.password)
    # cookie channel for same-origin clients, body for the bearer channel
    remember_token(request, token)
    return AuthOut(user_id=user_id, token=token)


@router.post("/login", response_model=AuthOut)
def login(body: LoginIn, request: Request, users: UserRepository = Depends(get_users)):
    user_id, token = credentials.login(users, body.email, body.password)
    remember_token(request, token)
    return AuthOut(user_id=user_id, token=token)


@router.get("/status", response_model=StatusOut, response_model_exclude_unset=True)
def status(request: Request, users: UserRepository = Depends(get_users)):
    user_id = get_optional_user_id(request)
    if user_id is None:
        return StatusOut(is_authenticated=False)
    user = users.get(user_id)
    if user is None:
        logger.info("User not found for token: %s", user_id)
        return StatusOut(is_authenticated=False)
    return StatusOut(is_authenticated=True, user=UserOut.model_validate(user))


@router.post("/logout")
def logout(request: Request):
    # bearer tokens held by the client stay valid; there is no revocation list
    request.session.clear()
    return {"success": True}
