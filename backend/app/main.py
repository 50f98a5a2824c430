from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
import logging

from .api.recipes import router as recipes_router
from .api.websocket import router as ws_router
from .core.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

app = FastAPI(title="kitchen-timeline", version="0.1.0", description="Recipe viewer with a cooking countdown timer")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers BEFORE static files mount
app.include_router(recipes_router)
app.include_router(ws_router)

@app.get("/api/health")
async def health_check():
    return {"status": "ok", "message": "kitchen-timeline API is running", "processes_path": settings.processes_path}

# Serve the built site (this should be LAST)
if settings.static_dir and Path(settings.static_dir).is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
