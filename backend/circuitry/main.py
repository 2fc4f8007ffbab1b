"""Circuitry — W.I.R.E. practice backend

Slim backend responsibilities:
  1. W.I.R.E. network solving (series/parallel constraint propagation)
  2. Practice problem catalog
  3. Worksheet answer checking
  4. Ohm's-law calculator

Schematic rendering, narration and the 3D view live in the frontend.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from circuitry.config import get_settings
from circuitry.routers import ohms_law, problems, solver
from circuitry.services.catalog import get_catalog

logger = logging.getLogger(__name__)

VERSION = "0.3.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: load the problem catalog so a broken file fails fast."""
    catalog = get_catalog()
    logger.info("%s ready with %d problems", app.title, len(catalog.problems))
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    application = FastAPI(
        title=settings.app_name,
        version=VERSION,
        description=(
            "Circuitry W.I.R.E. solver.\n\n"
            "Solves series/parallel practice circuits for watts, current, "
            "resistance and EMF, serves the practice catalog and checks "
            "worksheet answers."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── Solver (stateless) ───
    application.include_router(solver.router, prefix="/api/solver", tags=["Solver"])

    # ─── Practice catalog + worksheet ───
    application.include_router(
        problems.router, prefix="/api/problems", tags=["Problems"]
    )

    # ─── Ohm's-law calculator ───
    application.include_router(
        ohms_law.router, prefix="/api/ohms-law", tags=["Ohm's Law"]
    )

    @application.get("/health")
    async def health_check():
        return {"status": "ok", "service": "circuitry-wire-solver", "version": VERSION}

    return application


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "circuitry.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        reload=settings.debug,
    )
