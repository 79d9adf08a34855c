"""FastAPI router for ICD-10.

Exposes the four ICD-10 tools (lookup, search, batch validation, hierarchy)
plus catalog statistics.  Request bodies are validated by pydantic before any
store access; domain errors are mapped to HTTP errors here and nowhere else.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from icd10_core.db.session import get_db
from icd10_core.repositories.code_store import CodeStoreRepository
from icd10_core.schemas.icd10_tools import (
    HierarchyRequest,
    HierarchyResponse,
    LookupRequest,
    LookupResponse,
    SearchRequest,
    SearchResponse,
    StatsResponse,
    ValidateBatchRequest,
    ValidationResponse,
)
from icd10_core.services.code_service import HierarchyNotFoundError, ICD10CodeService
from icd10_core.services.icd10_state import get_synonym_dictionary
from icd10_core.services.query_expansion import QueryExpansionEngine
from icd10_core.services.synonym_dictionary import SynonymDictionary

logger = logging.getLogger(__name__)

router = APIRouter()


def get_code_service(
    db: Session = Depends(get_db),
    dictionary: SynonymDictionary = Depends(get_synonym_dictionary),
) -> ICD10CodeService:
    return ICD10CodeService(
        store=CodeStoreRepository(db),
        expansion_engine=QueryExpansionEngine(dictionary),
    )


def _store_failure(tool: str, exc: SQLAlchemyError) -> HTTPException:
    logger.exception("Error executing %s", tool)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Error executing {tool}: {exc.__class__.__name__}",
    )


@router.post("/lookup", response_model=LookupResponse)
def lookup(payload: LookupRequest, service: ICD10CodeService = Depends(get_code_service)) -> LookupResponse:
    try:
        return service.lookup(payload)
    except SQLAlchemyError as exc:
        raise _store_failure("icd10_lookup", exc) from exc


@router.post("/search", response_model=SearchResponse)
def search(payload: SearchRequest, service: ICD10CodeService = Depends(get_code_service)) -> SearchResponse:
    try:
        return service.search(payload)
    except SQLAlchemyError as exc:
        raise _store_failure("icd10_search", exc) from exc


@router.post("/validate-batch", response_model=ValidationResponse)
def validate_batch(
    payload: ValidateBatchRequest,
    service: ICD10CodeService = Depends(get_code_service),
) -> ValidationResponse:
    try:
        return service.validate_batch(payload)
    except SQLAlchemyError as exc:
        raise _store_failure("icd10_validate_batch", exc) from exc


@router.post("/hierarchy", response_model=HierarchyResponse)
def hierarchy(payload: HierarchyRequest, service: ICD10CodeService = Depends(get_code_service)) -> HierarchyResponse:
    try:
        return service.hierarchy(payload)
    except HierarchyNotFoundError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        raise _store_failure("icd10_hierarchy", exc) from exc


@router.get("/stats", response_model=StatsResponse)
def stats(service: ICD10CodeService = Depends(get_code_service)) -> StatsResponse:
    try:
        return service.stats()
    except SQLAlchemyError as exc:
        raise _store_failure("icd10_stats", exc) from exc


@router.get("/{code}", response_model=LookupResponse)
def get_by_code(
    code: str = Path(..., min_length=1, max_length=10),
    service: ICD10CodeService = Depends(get_code_service),
) -> LookupResponse:
    result = lookup(LookupRequest(code=code), service)
    if not result.found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="ICD10 code not found")
    return result
