"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cadence.api.routes import projects, timeline
from cadence.api.websockets import progress
from cadence.mongodb.client import get_mongodb_client

load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize and cleanup resources."""
    yield
    await get_mongodb_client().close()


app = FastAPI(
    title="Cadence API",
    description="Audio-driven scene timeline API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(projects.router, prefix="/api/projects", tags=["projects"])
app.include_router(timeline.router, prefix="/api/projects", tags=["timeline"])
app.include_router(progress.router, prefix="/ws", tags=["websocket"])


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/health/database")
async def database_health_check() -> dict[str, str]:
    """Report whether MongoDB answers a ping."""
    healthy = await get_mongodb_client().ping()
    return {"status": "healthy" if healthy else "unavailable"}
