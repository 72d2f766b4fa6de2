# novara/api/routers/health.py
from fastapi import APIRouter

from novara.utils.settings import STORE_NAME

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok", "service": STORE_NAME}
