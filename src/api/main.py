"""
FastAPI backend: contact identity reconciliation.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
from pathlib import Path

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from neo4j import GraphDatabase
from pydantic import BaseModel

from api.settings import STORE_NEO4J, Settings
from contactlink.application import (
    ContactStore,
    IdentityService,
    Inconsistent,
    Invalid,
    StoreError,
)
from contactlink.infrastructure import (
    InMemoryContactStore,
    Neo4jContactStore,
    ensure_contact_constraints,
    phone_normalizer,
)

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=Settings().log_level,
)
logger = logging.getLogger(__name__)

router = APIRouter()


def _get_driver(settings: Settings):
    return GraphDatabase.driver(
        settings.neo4j_uri, auth=(settings.neo4j_user, settings.neo4j_password)
    )


def build_service(store: ContactStore, settings: Settings) -> IdentityService:
    return IdentityService(
        store,
        normalize_phone=phone_normalizer(settings.default_region),
        transitive=settings.transitive_matching,
        strict_consistency=settings.strict_consistency,
    )


def get_service(request: Request) -> IdentityService:
    return request.app.state.service


def create_app(
    settings: Settings | None = None, store: ContactStore | None = None
) -> FastAPI:
    """Build the app. `store` overrides the store named in settings (tests)."""
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.driver = None
        try:
            contact_store = store
            if contact_store is None and settings.store == STORE_NEO4J:
                app.state.driver = _get_driver(settings)
                ensure_contact_constraints(app.state.driver, settings.neo4j_database)
                contact_store = Neo4jContactStore(
                    app.state.driver, database=settings.neo4j_database
                )
                logger.info("Using Neo4j contact store at %s", settings.neo4j_uri)
            elif contact_store is None:
                contact_store = InMemoryContactStore()
                logger.warning("Using in-memory contact store; records are lost on restart")
            app.state.service = build_service(contact_store, settings)
            yield
        finally:
            if getattr(app.state, "driver", None) is not None:
                app.state.driver.close()

    app = FastAPI(title="contactlink API", lifespan=lifespan)
    app.add_exception_handler(StoreError, _store_error_handler)
    app.include_router(router)
    return app


async def _store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    return JSONResponse(status_code=503, content={"detail": "Contact store unavailable"})


# --- REST: health ---


@router.get("/health")
def health():
    return {"status": "ok"}


# --- REST: identify ---


class IdentifyBody(BaseModel):
    email: str | None = None
    phoneNumber: str | int | None = None


@router.post("/identify")
def identify(body: IdentifyBody, request: Request):
    service = get_service(request)
    result = service.identify(body.email, body.phoneNumber)
    if isinstance(result, Invalid):
        raise HTTPException(status_code=400, detail=result.reason)
    if isinstance(result, Inconsistent):
        raise HTTPException(status_code=409, detail=result.reason)
    return {"contact": result.as_dict()}


app = create_app()
