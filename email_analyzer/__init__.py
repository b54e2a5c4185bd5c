from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers import analyze, general
from .config import APP_NAME, APP_DESCRIPTION, APP_VERSION
from .dependencies import lifespan

def create_app() -> FastAPI:
    app = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"]
    )

    # Include routers
    app.include_router(general.router)
    app.include_router(analyze.router)

    return app
