"""
FastAPI server for the planner API. run_api_server(app) blocks in uvicorn.
Central endpoint: GET /api/plugins. Per-plugin routes are mounted from
planner.plugins.<package>.api (get_router(planner_app)) under /api/<package>/.
Docs: http://<host>:<port>/docs
"""
import logging
from typing import Any, Dict, List

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from planner.core.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def create_app(planner_app: Any) -> FastAPI:
    """Create FastAPI app with routes that use the given PlannerApp instance."""
    app = FastAPI(title="Academic Planner API", description="Courses, assignments, grades, study sessions and analytics")

    @app.exception_handler(NotFoundError)
    def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.message})

    @app.exception_handler(ValidationError)
    def handle_validation(request: Request, exc: ValidationError) -> JSONResponse:
        logger.warning(f"Rejected {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=422, content={"detail": exc.message})

    @app.get("/api/plugins")
    def list_plugins() -> List[Dict[str, Any]]:
        """List discovered plugins and whether each owns a store and a router."""
        manager = planner_app.plugin_manager
        return [
            {
                "name": name,
                "store": name in manager.stores,
                "routes": name in manager.routers,
            }
            for name in manager.plugins
        ]

    for name, get_router in planner_app.plugin_manager.routers.items():
        router = get_router(planner_app)
        if router is not None:
            app.include_router(router, prefix=f"/api/{name}")
            logger.debug(f"Mounted API router for plugin {name}")

    return app


def run_api_server(planner_app: Any) -> None:
    """
    Serve the API in the foreground.
    Reads api.host (default 127.0.0.1) and api.port (default 8765) from config.
    """
    api_config = planner_app.config.get_section("api")
    host = api_config.get("host", "127.0.0.1")
    port = int(api_config.get("port", 8765))
    fastapi_app = create_app(planner_app)
    logger.info(f"API server listening at http://{host}:{port} (docs at /docs)")
    uvicorn.run(fastapi_app, host=host, port=port)
