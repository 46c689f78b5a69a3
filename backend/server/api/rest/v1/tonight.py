from __future__ import annotations

from fastapi import APIRouter, Depends

from application.recommendation.tonight_service import RecommendationState, TonightService
from server.api.rest.dependencies import get_tonight_service
from server.api.rest.errors import catalog_http_error
from server.models.schemas import ErrorOut, MovieOut, TonightResponse

router = APIRouter(prefix="/api/v1", tags=["tonight-v1"])


def _render(service: TonightService) -> TonightResponse:
    snap = service.snapshot()
    return TonightResponse(
        state=snap.state.value,
        is_loading=snap.is_loading,
        recommendations=[
            MovieOut.from_domain(m, in_watchlist=service.is_in_watchlist(m)) for m in snap.recommendations
        ],
        error=ErrorOut.from_error(snap.error),
        generated_at=snap.generated_at,
    )


@router.get("/tonight", response_model=TonightResponse)
async def get_tonight(service: TonightService = Depends(get_tonight_service)) -> TonightResponse:
    """Tonight's picks; the first call computes them."""
    await service.ensure_loaded()
    return _render(service)


@router.post("/tonight/refresh", response_model=TonightResponse)
async def refresh_tonight(service: TonightService = Depends(get_tonight_service)) -> TonightResponse:
    await service.refresh()
    if service.state is RecommendationState.FAILED:
        raise catalog_http_error(service.error)
    return _render(service)
