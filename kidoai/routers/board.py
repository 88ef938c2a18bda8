from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..leaderboard import DEFAULT_LEADERBOARD_LIMIT, get_dashboard_users, get_leaderboard

router = APIRouter(tags=["leaderboard"])


@router.get("/dashboard")
def dashboard(db: Session = Depends(get_db)):
	rows = get_dashboard_users(db)
	return {
		"error": False,
		"message": "Users retrieved",
		"count": len(rows),
		"users": rows,
	}


@router.get("/leaderboard")
def leaderboard(
	limit: int = Query(default=DEFAULT_LEADERBOARD_LIMIT, ge=1, le=100),
	offset: int = Query(default=0, ge=0),
	db: Session = Depends(get_db),
):
	return {"error": False, "leaderboard": get_leaderboard(db, limit=limit, offset=offset)}
