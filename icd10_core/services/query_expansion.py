"""Query expansion: colloquial text to a Code Store search expression.

Two phases, in strict precedence order:

1. **Pattern phase**: phrase patterns (optionally with ``{PLACEHOLDER}``
   tokens bound to a closed vocabulary) are tried by descending priority.  The
   first concretized pattern found inside the query wins and its expansion is
   returned as-is; no per-word expansion happens afterwards.
2. **Term phase**: every token of at least ``min_token_length`` word
   characters is kept, together with all of its synonyms, and the set is
   joined with the store's ``OR`` operator.

The output is opaque to callers; it is only meaningful to
:meth:`CodeStoreRepository.search_ranked`.
"""

from __future__ import annotations

import itertools
import logging
import re
from typing import Iterator, Optional

from icd10_core.core.search_config import ExpansionConfig, expansion_config
from icd10_core.services.synonym_dictionary import SearchPatternEntry, SynonymDictionary

logger = logging.getLogger(__name__)

_NON_WORD_RE = re.compile(r"[^\w]")


def _substitute(template: str, bindings: dict[str, str]) -> str:
    result = template
    for name, value in bindings.items():
        result = result.replace("{" + name + "}", value)
    return result


class QueryExpansionEngine:
    def __init__(
        self,
        dictionary: SynonymDictionary,
        *,
        config: ExpansionConfig = expansion_config,
    ) -> None:
        self.dictionary = dictionary
        self._config = config

    def expand(self, raw_query: str) -> str:
        normalized = (raw_query or "").lower().strip()

        expansion = self._expand_pattern(normalized)
        if expansion is not None:
            logger.debug("query=%r expanded by pattern to %r", normalized, expansion)
            return expansion

        terms = self._expand_terms(normalized)
        if not terms:
            return normalized
        return self._config.or_operator.join(terms)

    def _expand_pattern(self, query: str) -> Optional[str]:
        for entry in self.dictionary.patterns_by_priority():
            for concrete, bindings in self._concretize(entry):
                if concrete and concrete in query:
                    return _substitute(entry.expansion, bindings)
        return None

    def _concretize(self, entry: SearchPatternEntry) -> Iterator[tuple[str, dict[str, str]]]:
        """Yield every concrete form of a pattern with the bindings used."""
        names = entry.placeholders
        if not names:
            yield entry.pattern, {}
            return

        vocabularies = [self.dictionary.vocabulary(name) for name in names]
        if not all(vocabularies):
            # Unknown placeholder: the pattern can never match.
            return

        for values in itertools.product(*vocabularies):
            bindings = dict(zip(names, values))
            yield _substitute(entry.pattern, bindings), bindings

    def _expand_terms(self, query: str) -> list[str]:
        expanded: dict[str, None] = {}
        for word in query.split():
            clean = _NON_WORD_RE.sub("", word)
            if len(clean) < self._config.min_token_length:
                continue

            expanded.setdefault(clean, None)
            for entry in self.dictionary.synonyms_for(clean):
                expanded.setdefault(entry.synonym, None)
        return list(expanded)
