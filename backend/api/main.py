"""Inspirational quotes API: FastAPI application."""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api.routers import keywords, qod, quotes, selection

logging.basicConfig(
    level=os.getenv("QUOTES_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="inspirational-quotes", version="0.1.0")

# CORS: allow Next.js dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(keywords.router)
app.include_router(quotes.router)
app.include_router(qod.router)
app.include_router(selection.router)


@app.get("/health")
def health():
    return {"status": "ok"}
