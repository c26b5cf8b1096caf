"""
FastAPI application entry point for the dialogue runtime.

Responsibilities:
- create the FastAPI app
- construct shared singletons (CacheService, SessionStore, ProfileStore,
  ContextLog, ResponseSynthesisEngine, DialogueController)
- include the webhook / session routes

Run locally with:

    uvicorn runtime.api.server:app --reload
"""

from datetime import timedelta
from typing import Optional

from fastapi import FastAPI

from configs.settings import configure_logging, settings
from core.api.openai_client import OpenAIGenerationOracle
from core.localization.templates import TemplateStore
from core.synthesis.response_engine import GenerationOracle, ResponseSynthesisEngine
from runtime.agents.dialogue_controller import DialogueController
from runtime.store.cache_service import CacheService
from runtime.store.log_store import ContextLog
from runtime.store.profile_store import ProfileStore
from runtime.store.session_store import SessionStore
from . import routes


def build_controller(
    oracle: Optional[GenerationOracle] = None,
    cache: Optional[CacheService] = None,
    persist: Optional[bool] = None,
) -> DialogueController:
    """Wire the stores, the synthesis engine and the controller together."""
    persist = settings.persist if persist is None else persist
    data_dir = str(settings.runtime_data_dir) if persist else None

    # One cache instance, shared by reference.
    cache = cache or CacheService()
    session_store = SessionStore(
        cache=cache,
        ttl=timedelta(hours=settings.session_ttl_hours),
        data_dir=data_dir,
    )
    profile_store = ProfileStore(data_dir=data_dir)
    context_log = ContextLog(data_dir=data_dir)

    engine = ResponseSynthesisEngine(oracle or OpenAIGenerationOracle())

    return DialogueController(
        session_store=session_store,
        profile_store=profile_store,
        context_log=context_log,
        engine=engine,
        templates=TemplateStore(),
    )


def create_app(controller: Optional[DialogueController] = None) -> FastAPI:
    app = FastAPI(title="Health Dialogue Runtime")

    # Initialize the router module with our shared objects, then include it.
    routes.init_routes(controller=controller or build_controller())
    app.include_router(routes.router)
    return app


configure_logging()

app = create_app()
