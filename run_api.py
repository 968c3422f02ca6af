"""Run the Crush Orchestrator API server."""

import logging

import uvicorn

from crush_orchestrator.config import Settings

if __name__ == "__main__":
    settings = Settings()
    logging.basicConfig(level=settings.log_level)
    uvicorn.run(
        "crush_orchestrator.api:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
