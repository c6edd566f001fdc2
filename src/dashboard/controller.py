from fastapi import APIRouter

from src.database.core import SessionFactory
from src.auth.service import CurrentAdmin
from src.utils.cache import AppCache
from src.dashboard import model, service

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=model.StatsSnapshot)
async def dashboard_stats(
    session_factory: SessionFactory,
    cache: AppCache,
    current_admin: CurrentAdmin,
):
    return await service.get_dashboard_stats(session_factory, cache)
