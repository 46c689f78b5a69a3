from __future__ import annotations

from fastapi import APIRouter, Depends

from application.trailers.trailer_service import TrailerService
from server.api.rest.dependencies import get_trailer_service
from server.models.schemas import TrailersResponse, VideoOut

router = APIRouter(prefix="/api/v1", tags=["movies-v1"])


@router.get("/movies/{movie_id}/trailers", response_model=TrailersResponse)
async def get_trailers(
    movie_id: int,
    service: TrailerService = Depends(get_trailer_service),
) -> TrailersResponse:
    trailers = await service.load_trailers(movie_id)
    return TrailersResponse(movie_id=movie_id, trailers=[VideoOut.from_domain(v) for v in trailers])
