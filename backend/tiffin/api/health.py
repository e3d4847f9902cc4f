from fastapi import APIRouter

from tiffin.config import settings

router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"status": "ok", "service": settings.app_name}
