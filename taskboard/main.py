import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .api import auth, health, pages, tasks
from .config import get_settings
from .db.session import init_db
from .errors import TaskboardError, taskboard_error_handler

STATIC_DIR = Path(__file__).parent / "static"

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup."""
    init_db()
    yield


app = FastAPI(title="Taskboard", version="0.1.0", lifespan=lifespan)

app.add_exception_handler(TaskboardError, taskboard_error_handler)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# Mount routers
app.include_router(auth.router, prefix="/api/v1/auth", tags=["auth"])
app.include_router(tasks.router, prefix="/api/v1/tasks", tags=["tasks"])
app.include_router(pages.router, tags=["pages"])

# Health check endpoints for container probes
app.include_router(health.router, tags=["health"])


def main():
    """Run the application with uvicorn."""
    import uvicorn

    uvicorn.run("taskboard.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
