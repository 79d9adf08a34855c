"""Synonym/pattern dictionary used by query expansion.

The dictionary is an explicitly constructed object: the application builds one
instance at startup, calls :meth:`SynonymDictionary.initialize` once, and
hands the same instance to every :class:`QueryExpansionEngine`.  After
initialization it is read-only except for the administrative ``add_*``
operations, which append under an exclusive lock and never modify existing
entries.
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from icd10_core.core.search_config import expansion_config
from icd10_core.data.default_dictionary import DEFAULT_PATTERNS, DEFAULT_SYNONYMS
from icd10_core.repositories.dictionary_repository import DictionaryRepository

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_]+)\}")


@dataclass(frozen=True)
class SynonymEntry:
    term: str
    synonym: str
    weight: float
    context: Optional[str] = None


@dataclass(frozen=True)
class SearchPatternEntry:
    pattern: str
    expansion: str
    priority: int

    @property
    def placeholders(self) -> list[str]:
        names: list[str] = []
        for name in PLACEHOLDER_RE.findall(self.pattern):
            if name not in names:
                names.append(name)
        return names


def normalize_term(value: str) -> str:
    return " ".join((value or "").strip().lower().split())


def normalize_pattern(value: str) -> str:
    """Lower-case a pattern while keeping placeholder names canonical."""
    lowered = normalize_term(value)
    return PLACEHOLDER_RE.sub(lambda m: "{" + m.group(1).upper() + "}", lowered)


def _canonical_placeholders(value: str) -> str:
    return PLACEHOLDER_RE.sub(lambda m: "{" + m.group(1).upper() + "}", value.strip())


class SynonymDictionary:
    def __init__(self, vocabularies: Optional[Mapping[str, Sequence[str]]] = None) -> None:
        source = vocabularies if vocabularies is not None else expansion_config.placeholder_vocabularies
        self._vocabularies: dict[str, list[str]] = {
            name.upper(): [normalize_term(v) for v in values if normalize_term(v)]
            for name, values in source.items()
        }
        self._synonyms: dict[str, list[SynonymEntry]] = {}
        self._patterns: list[SearchPatternEntry] = []
        self._repository: Optional[DictionaryRepository] = None
        self._initialized = False
        self._lock = threading.RLock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def synonym_count(self) -> int:
        return sum(len(entries) for entries in self._synonyms.values())

    @property
    def pattern_count(self) -> int:
        return len(self._patterns)

    def initialize(self, repository: Optional[DictionaryRepository] = None) -> None:
        """Load entries once; seed the base dictionary into an empty store.

        Calling it again is a no-op.  Without a repository the base dictionary
        is kept in memory only.
        """
        with self._lock:
            if self._initialized:
                logger.info("Synonym dictionary already initialized")
                return

            self._repository = repository
            if repository is None:
                for term, synonym, weight, context in DEFAULT_SYNONYMS:
                    self._append_synonym(SynonymEntry(term, synonym, weight, context))
                for pattern, expansion, priority in DEFAULT_PATTERNS:
                    self._append_pattern(SearchPatternEntry(normalize_pattern(pattern), expansion, priority))
            else:
                if repository.count_synonyms() == 0:
                    logger.info(
                        "Seeding base dictionary synonyms=%s patterns=%s",
                        len(DEFAULT_SYNONYMS),
                        len(DEFAULT_PATTERNS),
                    )
                    repository.seed(DEFAULT_SYNONYMS, DEFAULT_PATTERNS)

                for row in repository.list_synonyms():
                    self._append_synonym(
                        SynonymEntry(normalize_term(row.term), normalize_term(row.synonym), float(row.weight), row.context)
                    )
                for row in repository.list_patterns():
                    self._append_pattern(
                        SearchPatternEntry(
                            normalize_pattern(row.pattern),
                            _canonical_placeholders(row.expansion),
                            int(row.priority or 0),
                        )
                    )

            self._initialized = True
            logger.info(
                "Synonym dictionary ready synonyms=%s patterns=%s",
                self.synonym_count,
                self.pattern_count,
            )

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def synonyms_for(self, term: str) -> list[SynonymEntry]:
        """All synonyms keyed by exactly ``term``, highest weight first."""
        entries = self._synonyms.get(normalize_term(term), [])
        return sorted(entries, key=lambda e: -e.weight)

    def patterns_by_priority(self) -> list[SearchPatternEntry]:
        # sorted() is stable: equal priorities keep load order.
        return sorted(self._patterns, key=lambda p: -p.priority)

    def vocabulary(self, name: str) -> list[str]:
        return list(self._vocabularies.get(name.upper(), []))

    # ------------------------------------------------------------------
    # Administrative appends
    # ------------------------------------------------------------------

    def add_synonym(
        self,
        term: str,
        synonym: str,
        weight: float = 1.0,
        context: Optional[str] = None,
    ) -> bool:
        term_n = normalize_term(term)
        synonym_n = normalize_term(synonym)
        if not term_n or not synonym_n:
            logger.warning("Rejected synonym with empty term/synonym: %r -> %r", term, synonym)
            return False
        try:
            weight_f = float(weight)
        except (TypeError, ValueError):
            logger.warning("Rejected synonym %r -> %r with non-numeric weight %r", term, synonym, weight)
            return False
        if not 0.0 < weight_f <= 1.0:
            logger.warning("Rejected synonym %r -> %r with weight %s outside (0, 1]", term, synonym, weight_f)
            return False

        with self._lock:
            if self._repository is not None and not self._repository.add_synonym(term_n, synonym_n, weight_f, context):
                return False
            self._append_synonym(SynonymEntry(term_n, synonym_n, weight_f, context))
        return True

    def add_pattern(self, pattern: str, expansion: str, priority: int = 0) -> bool:
        pattern_n = normalize_pattern(pattern)
        expansion_n = _canonical_placeholders(expansion or "")
        if not pattern_n or not expansion_n:
            logger.warning("Rejected search pattern with empty pattern/expansion: %r", pattern)
            return False
        try:
            priority_i = int(priority)
        except (TypeError, ValueError):
            logger.warning("Rejected search pattern %r with non-integer priority %r", pattern, priority)
            return False

        with self._lock:
            if self._repository is not None and not self._repository.add_pattern(pattern_n, expansion_n, priority_i):
                return False
            self._append_pattern(SearchPatternEntry(pattern_n, expansion_n, priority_i))
        return True

    def extend_vocabulary(self, name: str, values: Sequence[str]) -> int:
        """Append new values to a placeholder vocabulary; returns how many were new."""
        added = 0
        with self._lock:
            vocabulary = self._vocabularies.setdefault(name.upper(), [])
            for value in values:
                v = normalize_term(value)
                if v and v not in vocabulary:
                    vocabulary.append(v)
                    added += 1
        return added

    def _append_synonym(self, entry: SynonymEntry) -> None:
        self._synonyms.setdefault(entry.term, []).append(entry)

    def _append_pattern(self, entry: SearchPatternEntry) -> None:
        self._patterns.append(entry)
