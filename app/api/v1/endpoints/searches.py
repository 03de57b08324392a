from typing import Any, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.schemas.search_history import SearchRecordResponse
from app.services.search_history_service import search_history_service

router = APIRouter()


@router.get("", response_model=List[SearchRecordResponse])
async def get_recent_searches(
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
) -> Any:
    """
    Get the most recent route searches.
    """
    return search_history_service.get_recent_searches(db, limit)
