#!/usr/bin/env python3
import logging
import os

import uvicorn
from app.app import create_app

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

# Create the FastAPI app
app = create_app()


if __name__ == "__main__":
    reload_enabled = os.getenv("WEBSTORE_DEV_MODE", "false").lower() == "true"
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))

    logging.getLogger(__name__).info("Starting WebStore reporting on %s:%s", host, port)
    uvicorn.run("main:app", host=host, port=port, reload=reload_enabled)
