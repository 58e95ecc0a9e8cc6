from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.infrastructure.repositories.stats_repository import StatsRepository
from app.presentation.dependencies import get_db
from app.presentation.schemas.stats_schema import StatsResponse
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stats", tags=["Dashboard"])


@router.get("", response_model=StatsResponse)
def dashboard_stats(db: Session = Depends(get_db)):
    try:
        return StatsRepository(db).fetch_stats()
    except Exception as e:
        logger.error(f"Unexpected error occurred when generating statistics: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="Failed to fetch statistics",
        )
