from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from db.database import is_configured

router = APIRouter()


@router.get("/health")
async def health():
    if not is_configured():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"ok": False, "error": "missing_database_url"},
        )
    return {"ok": True}
