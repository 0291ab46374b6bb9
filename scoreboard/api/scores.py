"""
Scoreboard endpoints: WebSocket upgrade, snapshot read, index page
"""
import logging
import os

from fastapi import APIRouter, Request, WebSocket
from fastapi.responses import HTMLResponse

from scoreboard.core.connection import WebSocketConnection
from scoreboard.state import ServerState


logger = logging.getLogger(__name__)

router = APIRouter(tags=["scores"])


async def websocket_endpoint(websocket: WebSocket):
    """
    Upgrade endpoint (mounted at config.ws_path)

    Client -> server: {"action": "increment" | "decrement" | "reset", "team": "A" | "B"}
    Server -> client: {"scoreA": 0, "scoreB": 0}, once on connect and after every command
    """
    server: ServerState = websocket.app.state.server
    await websocket.accept()
    client = websocket.client.host if websocket.client else "unknown"
    logger.info(f"📥 New client connected from {client}")
    await server.processor.serve(WebSocketConnection(websocket))


@router.get("/api/score")
async def get_score(request: Request):
    """Current score snapshot"""
    server: ServerState = request.app.state.server
    snapshot = await server.scores.snapshot()
    return snapshot.model_dump(by_alias=True)


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Serve the scoreboard HTML page"""
    html_path = request.app.state.server.config.index_path

    if not os.path.exists(html_path):
        return HTMLResponse(
            content=f"<h1>Scoreboard UI not found</h1><p>Please create {html_path}</p>",
            status_code=404
        )

    with open(html_path, "r", encoding="utf-8") as f:
        return HTMLResponse(content=f.read())
