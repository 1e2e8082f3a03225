"""FastAPI application for compiling and demo-running process graphs."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from processgraph.config import Settings, configure_logging
from server.process_routes import router as process_router
from server.run_routes import router as run_router

VERSION = "0.1.0"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API app; settings default to the environment (and .env)."""
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="processgraph API",
        description="Validate, lay out and demo-run process graphs as BPMN diagrams",
        version=VERSION,
    )
    app.state.settings = settings

    # CORS origins come from CORS_ORIGINS; "*" is meant for development only
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # include routes
    app.include_router(process_router, prefix="/api")
    app.include_router(run_router, prefix="/api")

    @app.get("/")
    def root():
        """Health check endpoint."""
        return {
            "status": "ok",
            "version": VERSION,
            "generator": settings.generator.provider,
            "endpoints": {
                "validate": "/api/process/validate",
                "layout": "/api/process/layout",
                "diagram": "/api/process/diagram",
                "generate": "/api/process/generate",
                "demo_run": "/api/runs/demo",
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    configure_logging(app.state.settings.log_level)
    uvicorn.run(app, host="0.0.0.0", port=8000)
