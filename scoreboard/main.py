"""
FastAPI main application
Real-time scoreboard: clients send score commands over a WebSocket and every
connected client receives the updated score.

Routers in scoreboard/api/:
- scores.py: WebSocket endpoint, score snapshot, index page
- health.py: Health check and connection count

Core components are built once per process in the lifespan and reached
through app.state.server.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging

from scoreboard import __version__
from scoreboard.api import health, scores
from scoreboard.config import resolve_config
from scoreboard.models import ServerConfig
from scoreboard.state import build_state


logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    config: ServerConfig = app.state.config
    server = build_state(config)
    app.state.server = server

    if config.simulator.enabled:
        server.simulator.start()
    logger.info(f"✅ Scoreboard ready, WebSocket at {config.ws_path}")

    yield

    await server.simulator.stop()
    logger.info("🛑 Server shutting down")


def create_app(config: Optional[ServerConfig] = None) -> FastAPI:
    """
    Build the application

    Args:
        config: Server configuration (resolved from YAML when omitted)
    """
    if config is None:
        config = resolve_config()
    setup_logging(config.log_level)

    app = FastAPI(
        title="Scoreboard Server",
        description="Real-time two-team score broadcast over WebSockets",
        version=__version__,
        lifespan=lifespan
    )
    app.state.config = config

    # CORS middleware (any origin may connect)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ==================== INCLUDE ROUTERS ====================

    app.include_router(health.router)
    app.include_router(scores.router)
    app.add_api_websocket_route(config.ws_path, scores.websocket_endpoint)

    return app


# ==================== RUN SERVER ====================

def run() -> None:
    import uvicorn

    config = resolve_config()
    app = create_app(config)
    logger.info(f"Server starting on {config.host}:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    run()
