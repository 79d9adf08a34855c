"""ICD-10 hierarchy navigation derived from code strings.

The catalog stores no parent/child edges.  A code's relatives are computed
from its text (a prefix is an ancestor) and the Code Store is asked only
whether the derived candidates exist.  The relation is intentionally
asymmetric: ``children`` is a plain prefix scan over the whole subtree,
whereas ``parents`` walks strip by strip and only reports ancestors that are
stored, so a child's parents do not always contain the code it was found
under.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Iterator

from icd10_core.clinical.icd10.structure import normalize_code
from icd10_core.models.icd10 import ICD10Code
from icd10_core.repositories.code_store import CodeStoreRepository

logger = logging.getLogger(__name__)


class HierarchyDirection(str, enum.Enum):
    CHILDREN = "children"
    PARENTS = "parents"
    SIBLINGS = "siblings"


def strip_one_level(code: str) -> str:
    """Remove one level of specificity from a code string."""
    if code.endswith("."):
        return code[:-1]
    if "." in code:
        return code[: code.rindex(".")]
    return code[:-1]


def ancestor_candidates(code: str) -> Iterator[str]:
    """Successive strips of ``code``, nearest first, down to one character.

    Every strip shortens the string, so the walk always terminates.
    """
    current = normalize_code(code)
    while len(current) > 1:
        current = strip_one_level(current)
        if current:
            yield current


def sibling_prefix(code: str) -> str:
    c = normalize_code(code)
    if "." in c:
        return c[: c.rindex(".")]
    return c[:-1] if len(c) > 1 else c


def is_sibling(code: str, candidate: str) -> bool:
    """Whether ``candidate`` sits at the same level under the same parent.

    Non-decimal codes additionally require equal length, so a 3-character
    category is never a sibling of a 4-character subcategory.
    """
    c = normalize_code(code)
    other = normalize_code(candidate)
    if other == c:
        return False

    prefix = sibling_prefix(c)
    if "." in c:
        return other.startswith(prefix + ".")
    return other.startswith(prefix) and len(other) == len(c)


class HierarchyNavigator:
    def __init__(self, store: CodeStoreRepository) -> None:
        self.store = store
        self._handlers: dict[HierarchyDirection, Callable[[str, int], list[ICD10Code]]] = {
            HierarchyDirection.CHILDREN: self._children,
            HierarchyDirection.PARENTS: self._parents,
            HierarchyDirection.SIBLINGS: self._siblings,
        }

    def navigate(
        self,
        code: str,
        direction: HierarchyDirection | str = HierarchyDirection.CHILDREN,
        max_depth: int = 2,
    ) -> list[ICD10Code]:
        handler = self._handlers[HierarchyDirection(direction)]
        return handler(normalize_code(code), max_depth)

    def _children(self, code: str, max_depth: int) -> list[ICD10Code]:
        # max_depth does not apply: the full subtree is returned.
        return [row for row in self.store.get_by_id_prefix(code) if row.code != code]

    def _parents(self, code: str, max_depth: int) -> list[ICD10Code]:
        parents: list[ICD10Code] = []
        for candidate in ancestor_candidates(code):
            if len(parents) >= max_depth:
                break
            parent = self.store.get_by_exact_id(candidate)
            if parent is not None:
                parents.append(parent)
        return parents

    def _siblings(self, code: str, max_depth: int) -> list[ICD10Code]:
        prefix = sibling_prefix(code)
        scan_prefix = prefix + "." if "." in code else prefix
        return [row for row in self.store.get_by_id_prefix(scan_prefix) if is_sibling(code, row.code)]
