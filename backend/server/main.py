import uvicorn
from fastapi import FastAPI

from config.settings import UVICORN_CONFIG
from server.api.rest.dependencies import shutdown_dependencies
from server.api_router import api_router

app = FastAPI(
    title="Movie Tonight",
    description="Watchlist, tonight's picks, debounced search and discover feeds backed by TMDB",
)

app.include_router(api_router)


@app.on_event("shutdown")
async def shutdown_event():
    """Release the TMDB session and cancel pending searches."""
    await shutdown_dependencies()


if __name__ == "__main__":
    uvicorn.run("server.main:app", **UVICORN_CONFIG)
