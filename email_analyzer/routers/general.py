from fastapi import APIRouter, Depends

from email_analyzer.config import APP_NAME, APP_VERSION, Settings, get_settings

router = APIRouter()

@router.get("/", tags=["General"])
def read_root(settings: Settings = Depends(get_settings)):
    return {
        "message": f"Welcome to the {APP_NAME}!",
        "version": APP_VERSION,
        "response_mode": settings.response_mode,
        "endpoints": {
            "analyze": "POST /analyze (EmailBody)",
            "health": "GET /health",
        }
    }

@router.get("/health", tags=["General"])
async def health_check():
    """Liveness probe, no dependency checks"""
    return {"status": "OK"}
