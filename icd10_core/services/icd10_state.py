from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from fastapi import Request
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from icd10_core.core.config import settings
from icd10_core.models.icd10 import ICD10Code
from icd10_core.repositories.dictionary_repository import DictionaryRepository
from icd10_core.services.synonym_dictionary import SynonymDictionary

logger = logging.getLogger(__name__)


def check_icd10_loaded(session: Session) -> bool:
    """Return True when the ICD-10 catalog has at least one row."""
    try:
        count = session.execute(select(func.count()).select_from(ICD10Code)).scalar_one()
        return bool(count and count > 0)
    except Exception:
        logger.exception("Failed to check ICD10 load state")
        return False


def apply_configured_vocabularies(dictionary: SynonymDictionary, config_path: Optional[str]) -> int:
    """Extend BODYPART/ACTION from the JSON synonym config, if one is set.

    Vocabularies live in memory only, so every process re-applies them.
    """
    if not config_path:
        return 0
    path = Path(config_path)
    if path.suffix.lower() != ".json" or not path.exists():
        return 0

    with open(path, encoding="utf-8") as f:
        config = json.load(f)
    added = dictionary.extend_vocabulary("BODYPART", config.get("body_parts_list") or [])
    added += dictionary.extend_vocabulary("ACTION", config.get("actions_list") or [])
    logger.info("Extended placeholder vocabularies from %s added=%s", path.as_posix(), added)
    return added


def build_synonym_dictionary(session: Session) -> SynonymDictionary:
    """Construct and initialize the process-wide dictionary from the database."""
    dictionary = SynonymDictionary()
    dictionary.initialize(DictionaryRepository(session))
    apply_configured_vocabularies(dictionary, settings.synonym_config_path)
    return dictionary


def get_synonym_dictionary(request: Request) -> SynonymDictionary:
    dictionary = getattr(request.app.state, "synonym_dictionary", None)
    if dictionary is None:
        raise RuntimeError("Synonym dictionary has not been initialized")
    return dictionary
