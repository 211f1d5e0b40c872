from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from ...core.config import Settings
from ..deps import get_settings

router = APIRouter(tags=["health"])

@router.get("/health")
def health(s: Settings = Depends(get_settings)):
    env = {
        "hasDatabase": bool(s.DATABASE_URL),
        "hasLlmKey": bool(s.OPENAI_API_KEY),
        "hasGoogleCreds": bool(s.GOOGLE_CREDENTIALS_CONTENT) or Path(s.GOOGLE_CREDENTIALS_PATH).exists(),
    }
    missing = []
    if not s.DATABASE_URL:
        missing.append("DATABASE_URL")
    if s.LLM_PROVIDER.lower() == "openai" and not s.OPENAI_API_KEY:
        missing.append("OPENAI_API_KEY")
    if missing:
        return JSONResponse(
            status_code=500,
            content={"status": "ERROR", "message": "Missing environment variables", "missing": missing},
        )
    return {"status": "OK", "message": f"{s.APP_NAME} is running", "env": env}
