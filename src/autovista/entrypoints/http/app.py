import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from autovista.entrypoints.http.exception_handlers import register_exception_handlers
from autovista.entrypoints.http.routes.auth import router as auth_router
from autovista.entrypoints.http.routes.health import router as health_router
from autovista.entrypoints.http.routes.listings import router as listings_router
from autovista.infra import config


def build_app() -> FastAPI:
    logging.basicConfig(
        level=config.log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="AutoVista API",
        description="""
        Marketplace API for vehicles offered for rent or for sale.

        ## Features
        - Browse listings on offer, by type, or by owner (cursor pagination)
        - Search listings by manufacturer and price range
        - Create, edit and delete listings with up to 6 images

        ## Authentication
        Sign in via `/v1/auth/sign-in` and send the token as `Authorization: Bearer <token>`.
        Browsing is public; creating, editing and deleting listings require a session.

        ## Error Handling
        All errors return structured JSON responses with error codes.
        See the error response schemas in the API documentation.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(listings_router, prefix="/v1")
    app.include_router(auth_router, prefix="/v1")

    # Public URLs handed out by the local blob store
    app.mount(
        "/blobs",
        StaticFiles(directory=config.blob_storage_dir(), check_dir=False),
        name="blobs",
    )

    return app


app = build_app()
