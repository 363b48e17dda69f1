# app/main.py
import logging

from fastapi import FastAPI
from app.config import settings
from app.database import engine, Base
from app.models import user, project, task as task_model, reference, api_key, message as message_model, performance as performance_model  # noqa: F401 (register tables)
from app.routers import (
    auth, admin, projects, task, references, repository,
    announcements, admin_messages, message, performance, ai,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Whitespace - Team Workspace", version="1.0")

# Include Routers
app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(projects.router)
app.include_router(projects.starters_router)
app.include_router(task.router)
app.include_router(references.router)
app.include_router(repository.router)
app.include_router(announcements.router)
app.include_router(admin_messages.router)
app.include_router(message.router)
app.include_router(performance.router)
app.include_router(ai.router)

# Create DB Tables (use Alembic in prod)
@app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")

@app.get("/")
def read_root():
    return {"message": "Welcome to Whitespace Backend"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
