import logging
from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging import configure_logging
from app.database import engine, Base
from app.models import *  # noqa: F401,F403 - register every table on Base.metadata

from app.routers import project, tasks, budgets, progress_updates, issues, documents

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

RESOURCES = [
    ("/projects", project.router, "Projects"),
    ("/tasks", tasks.router, "Tasks"),
    ("/budgets", budgets.router, "Budgets"),
    ("/progress-updates", progress_updates.router, "Progress Updates"),
    ("/issues", issues.router, "Issues"),
    ("/documents", documents.router, "Documents"),
]

for prefix, resource_router, tag in RESOURCES:
    app.include_router(resource_router, prefix=prefix, tags=[tag])


@app.on_event("startup")
def create_tables():
    logger.info("Creating database tables if not exist...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database ready (%s).", settings.environment)


@app.get("/", response_class=HTMLResponse)
def root():
    """Landing page linking the API docs and each resource collection."""
    links = "".join(
        f'<li><a href="{prefix}">{tag}</a></li>' for prefix, _, tag in RESOURCES
    )
    return f"""
    <html>
        <head><title>{settings.app_name}</title></head>
        <body style="font-family: Arial, sans-serif; margin: 3em;">
            <h1>{settings.app_name}</h1>
            <p>Construction project tracking API.</p>
            <ul>{links}</ul>
            <p><a href="/docs">API documentation</a> &middot; <a href="/health">Health</a></p>
        </body>
    </html>
    """


@app.get("/health")
def health():
    return {"success": True, "message": f"{settings.app_name} is healthy"}
