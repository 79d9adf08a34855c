"""ICD-10 Core FastAPI application.

This service is a small, local-first ICD-10-CM engine: exact code lookup with
structural hierarchy, colloquial-text search through synonym/pattern query
expansion, and batch validation with billability checks.

The synonym dictionary is built once per process in the lifespan handler and
shared by every request through ``app.state``.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from icd10_core.clinical.icd10.router import router as icd10_router
from icd10_core.core.config import settings
from icd10_core.db.session import SessionLocal
from icd10_core.services.icd10_state import build_synonym_dictionary


@asynccontextmanager
async def lifespan(app: FastAPI):
    with SessionLocal() as db:
        app.state.synonym_dictionary = build_synonym_dictionary(db)
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="ICD-10 Core",
        version="0.1.0",
        description="ICD-10-CM lookup, search, batch validation and hierarchy APIs.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(icd10_router, prefix="/icd10", tags=["ICD-10"])

    return app


app = create_app()
