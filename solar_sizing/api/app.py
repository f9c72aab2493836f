from __future__ import annotations

from fastapi import FastAPI

from ..config import configure_logging
from .routes import catalog_router, sessions_router, sizing_router


def create_app() -> FastAPI:
    """
    Instantiate the FastAPI application and register routers.

    Creates the main FastAPI application with CORS middleware and
    registers the domain routers:
    - catalog: Appliance, region, panel and inverter catalogs
    - sizing: Ad-hoc sizing, consultations and calculation history
    - sessions: Saved household sessions and their execution

    Returns:
        FastAPI: Configured application instance ready to serve.

    Example:
        ```python
        app = create_app()
        uvicorn.run(app, host="0.0.0.0", port=8000)

        # Or use the pre-created instance
        from solar_sizing.api.app import app
        ```
    """
    configure_logging()
    app = FastAPI(
        title="Solar Sizing API",
        version="0.1.0",
        description="API for sizing household rooftop PV systems.",
    )

    from fastapi.middleware.cors import CORSMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(catalog_router)
    app.include_router(sizing_router)
    app.include_router(sessions_router)

    return app


app = create_app()
