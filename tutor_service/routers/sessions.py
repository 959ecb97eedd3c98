from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from shared.errors import NotFoundError, ValidationError, create_success_response
from shared.models import TutoringMode
from shared.rate_limiter import rate_limit

from ..dependencies import get_session_store
from ..schemas import SessionCreate, SessionFilter, SortField
from ..sessions import SessionStore

sessions_limit = rate_limit("SESSIONS")


def session_filter(
    page: int = Query(1, gt=0),
    limit: int = Query(20, gt=0, le=100),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    mode: Optional[TutoringMode] = Query(None),
    completed: Optional[bool] = Query(None),
    tags: Optional[str] = Query(None),
    unit: Optional[str] = Query(None),
    sort_by: SortField = Query("lastUpdated", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
) -> SessionFilter:
    tag_list = [t.strip() for t in tags.split(",") if t.strip()] if tags else None
    return SessionFilter(
        page=page,
        limit=limit,
        start_date=start_date,
        end_date=end_date,
        mode=mode,
        completed=completed,
        tags=tag_list,
        unit=unit,
        sort_by=sort_by,
        sort_order=sort_order,
    )


def get_router() -> APIRouter:
    router = APIRouter(prefix="/api", tags=["sessions"])

    @router.get("/sessions", dependencies=[Depends(sessions_limit)])
    async def list_sessions(
        filter: SessionFilter = Depends(session_filter),
        include_stats: bool = Query(False, alias="includeStats"),
        store: SessionStore = Depends(get_session_store),
    ):
        page = store.query(filter)
        data = {
            "sessions": [session.model_dump(by_alias=True) for session in page.sessions],
            "pagination": {
                "page": page.page,
                "limit": page.limit,
                "total": page.total,
                "totalPages": page.total_pages,
            },
        }
        if include_stats:
            data["stats"] = store.stats().model_dump(by_alias=True)
        return create_success_response(data)

    @router.post("/sessions", status_code=201, dependencies=[Depends(sessions_limit)])
    async def create_session(body: SessionCreate, store: SessionStore = Depends(get_session_store)):
        session = store.create(body)
        return create_success_response(session.model_dump(by_alias=True))

    @router.delete("/sessions", dependencies=[Depends(sessions_limit)])
    async def delete_session(
        session_id: Optional[str] = Query(None, alias="id"),
        store: SessionStore = Depends(get_session_store),
    ):
        if not session_id:
            raise ValidationError("Session ID is required")
        if not session_id.startswith("session-"):
            raise ValidationError("Invalid session ID format")
        if not store.delete(session_id):
            raise NotFoundError("Session")
        return create_success_response({"message": "Session deleted successfully", "sessionId": session_id})

    return router
