from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import pandas as pd
from sqlalchemy.orm import Session

from icd10_core.core.config import settings
from icd10_core.db.session import SessionLocal
from icd10_core.repositories.dictionary_repository import DictionaryRepository
from icd10_core.services.synonym_dictionary import SynonymDictionary

logger = logging.getLogger(__name__)

MIN_CONFIG_WEIGHT = 0.1


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _default_config_path() -> Path:
    return Path(__file__).resolve().parents[1] / "data" / "medical_synonyms.json"


@dataclass
class LoadCounts:
    synonyms_added: int = 0
    synonyms_rejected: int = 0
    patterns_added: int = 0
    patterns_rejected: int = 0
    vocabulary_added: int = 0


def position_weight(index: int) -> float:
    """Weight for the ``index``-th synonym listed under a term."""
    return max(MIN_CONFIG_WEIGHT, round(1.0 - 0.1 * index, 2))


def _pick_column(df: pd.DataFrame, candidates: tuple[str, ...]) -> str | None:
    for c in candidates:
        if c in df.columns:
            return c
    return None


def load_synonym_config(dictionary: SynonymDictionary, config: Mapping[str, Any]) -> LoadCounts:
    """Append a JSON-style config (synonyms by category, patterns, vocabularies)."""
    counts = LoadCounts()

    for category, terms in (config.get("synonyms") or {}).items():
        logger.info("Processing category: %s", category)
        for term, synonyms in (terms or {}).items():
            for index, synonym in enumerate(synonyms or []):
                if dictionary.add_synonym(term, synonym, position_weight(index), category):
                    counts.synonyms_added += 1
                else:
                    counts.synonyms_rejected += 1

    for item in config.get("patterns") or []:
        ok = dictionary.add_pattern(
            str(item.get("pattern") or ""),
            str(item.get("expansion") or ""),
            item.get("priority", 0),
        )
        if ok:
            counts.patterns_added += 1
        else:
            counts.patterns_rejected += 1

    counts.vocabulary_added += dictionary.extend_vocabulary("BODYPART", config.get("body_parts_list") or [])
    counts.vocabulary_added += dictionary.extend_vocabulary("ACTION", config.get("actions_list") or [])
    return counts


def load_synonym_csv(dictionary: SynonymDictionary, path: Path) -> LoadCounts:
    """Append ``term,synonym[,weight,context]`` rows; weight defaults to 1.0."""
    df = pd.read_csv(path, dtype=str, encoding="utf-8").fillna("")

    col_term = _pick_column(df, ("term",))
    col_synonym = _pick_column(df, ("synonym",))
    if not col_term or not col_synonym:
        raise ValueError("CSV must include columns: term, synonym")

    col_weight = _pick_column(df, ("weight",))
    col_context = _pick_column(df, ("context", "category"))
    weights = (
        pd.to_numeric(df[col_weight], errors="coerce").fillna(1.0)
        if col_weight
        else pd.Series([1.0] * len(df), dtype=float)
    )

    counts = LoadCounts()
    for position, row in enumerate(df.itertuples(index=False)):
        context = getattr(row, col_context) if col_context else ""
        ok = dictionary.add_synonym(
            getattr(row, col_term),
            getattr(row, col_synonym),
            float(weights.iloc[position]),
            context or None,
        )
        if ok:
            counts.synonyms_added += 1
        else:
            counts.synonyms_rejected += 1
    return counts


def load_synonyms_into_session(db: Session, path: Path) -> LoadCounts:
    dictionary = SynonymDictionary()
    dictionary.initialize(DictionaryRepository(db))

    logger.info("Loading synonyms from %s", path.as_posix())
    if path.suffix.lower() == ".csv":
        counts = load_synonym_csv(dictionary, path)
    else:
        with open(path, encoding="utf-8") as f:
            counts = load_synonym_config(dictionary, json.load(f))

    logger.info(
        "Done. synonyms_added=%s synonyms_rejected=%s patterns_added=%s patterns_rejected=%s vocabulary_added=%s",
        counts.synonyms_added,
        counts.synonyms_rejected,
        counts.patterns_added,
        counts.patterns_rejected,
        counts.vocabulary_added,
    )
    return counts


def load_synonyms(config_path: str | None = None) -> LoadCounts:
    _configure_logging()

    path = Path(config_path or settings.synonym_config_path or _default_config_path())
    if not path.exists():
        raise FileNotFoundError(f"Synonym config not found: {path}")

    db: Session = SessionLocal()
    try:
        return load_synonyms_into_session(db, path)
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Append medical synonyms and search patterns")
    parser.add_argument("config", nargs="?", default=None, help="Path to a JSON config or term,synonym CSV")
    args = parser.parse_args()

    load_synonyms(config_path=args.config)


if __name__ == "__main__":
    main()
