# main.py
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Load the repo-root .env for the server process as well as for scripts.
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from skillgap.config import allowed_origins, build_sqlalchemy_db_url, settings
from skillgap.database import Base, engine
from skillgap.llm.client import OpenRouterClient, load_llm_config
from skillgap.models import JobDescription, LearningPath, LearningResource, Resume, SkillAnalysis, User  # noqa: F401
from skillgap.routers import auth, health, job_descriptions, learning_paths, learning_resources, resumes, skill_analysis
from skillgap.services.storage import FileStorage


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One client and one storage root per process, shared by all requests.
        llm = OpenRouterClient(load_llm_config(settings))
        if not llm.available:
            logger.warning("OPENROUTER_API_KEY is not set; AI features will use deterministic fallbacks")
        app.state.llm = llm
        app.state.storage = FileStorage(settings.upload_dir)
        yield

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins(settings),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health endpoints (do not depend on API_PREFIX)
    application.include_router(health.router)

    application.include_router(auth.router, prefix=settings.api_prefix)
    application.include_router(resumes.router, prefix=settings.api_prefix)
    application.include_router(job_descriptions.router, prefix=settings.api_prefix)
    application.include_router(skill_analysis.router, prefix=settings.api_prefix)
    application.include_router(learning_paths.router, prefix=settings.api_prefix)
    application.include_router(learning_resources.router, prefix=settings.api_prefix)

    # Shared MySQL schemas are managed outside the app; sqlite is created on demand.
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    return application


app = create_app()
