"""
Health check endpoint
"""
from fastapi import APIRouter, Request

from scoreboard import __version__


router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint"""
    server = request.app.state.server
    return {
        "status": "ok",
        "message": "Scoreboard broadcast server",
        "version": __version__,
        "connections": server.hub.count,
        "simulator": server.simulator.running,
    }
