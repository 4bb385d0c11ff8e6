from fastapi import APIRouter

from ..settings import settings

router = APIRouter(tags=["health"])


@router.get("/api/health")
def health():
	return {"status": "ok"}


@router.get("/info")
def info():
	return {"status": "ok", "gemini_configured": bool(settings.gemini_api_key), "model": settings.gemini_model}
