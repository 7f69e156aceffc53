from __future__ import annotations

import logging

from fastapi import FastAPI

from imgedge.config import get_settings
from imgedge.handlers import edge_handler

logging.basicConfig(level=get_settings().log_level.upper())

app = FastAPI(title="imgedge")

app.include_router(edge_handler.router)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}
