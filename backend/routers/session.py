from fastapi import APIRouter, HTTPException, status

from core.session import StaffSession, start_session
from schemas.session import StaffSessionCreate

router = APIRouter()


@router.post("/session", response_model=StaffSession, status_code=status.HTTP_201_CREATED)
async def create_session(payload: StaffSessionCreate):
    """Start a staff session; it expires at the next local midnight of the store."""
    try:
        return start_session(payload.store, payload.shift, payload.staff)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
