# novara/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException

from novara.api.deps import get_client, http_errors
from novara.domain.schemas import LoginIn, RegisterIn
from novara.services.api_client import ApiClient

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(payload: LoginIn, client: ApiClient = Depends(get_client)):
    """Backend login, the response carries the bearer token for later calls."""
    with http_errors():
        return client.auth.login(payload.model_dump())


@router.post("/register", status_code=201)
def register(payload: RegisterIn, client: ApiClient = Depends(get_client)):
    with http_errors():
        return client.auth.register(payload.model_dump(exclude_none=True))


@router.get("/profile")
def profile(client: ApiClient = Depends(get_client)):
    if not client.token:
        raise HTTPException(status_code=401, detail="Not authorized")
    with http_errors():
        return client.auth.profile()
