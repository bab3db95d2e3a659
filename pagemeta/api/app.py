"""FastAPI application factory.

Routers
-------
All endpoint groups are mounted under their respective path prefix:

    /pages     — metadata, headings, links, images and generic filtering
                 for a single fetched page
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pagemeta.api.routers import pages as pages_router


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="pagemeta API",
        description=(
            "REST interface for pagemeta. Fetches one page per request and "
            "returns its title, meta tags, Open Graph / Twitter card data, "
            "headings, links, images, or selector-based extractions."
        ),
        version="0.1.0",
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(pages_router.router, prefix="/pages", tags=["pages"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn pagemeta.api.app:app --reload
app = create_app()
