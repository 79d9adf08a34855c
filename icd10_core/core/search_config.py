"""Search configuration for ICD-10 Core.

Centralizes tuning parameters for query expansion, ranked search and hierarchy
navigation.  All values are loaded from environment variables with sensible
defaults so the system works out-of-the-box.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


# ---------------------------------------------------------------------------
# Search tuning
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SearchTuning:
    """Operational limits and thresholds for ranked search."""

    default_limit: int = field(
        default_factory=lambda: _env_int("SEARCH_DEFAULT_LIMIT", 20),
    )
    max_limit: int = field(
        default_factory=lambda: _env_int("SEARCH_MAX_LIMIT", 100),
    )
    # Trigram similarity floor, PostgreSQL only
    similarity_threshold: float = field(
        default_factory=lambda: _env_float("SEARCH_SIMILARITY_THRESHOLD", 0.20),
    )
    # Alternatives of one search expression that are actually matched
    max_alternatives: int = field(
        default_factory=lambda: _env_int("SEARCH_MAX_ALTERNATIVES", 16),
    )


# ---------------------------------------------------------------------------
# Hierarchy tuning
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HierarchyTuning:
    """Depths used by the tool layer when hierarchy is embedded in a lookup."""

    default_max_depth: int = field(
        default_factory=lambda: _env_int("HIERARCHY_DEFAULT_MAX_DEPTH", 2),
    )
    max_depth_limit: int = field(
        default_factory=lambda: _env_int("HIERARCHY_MAX_DEPTH_LIMIT", 5),
    )
    lookup_parent_depth: int = field(
        default_factory=lambda: _env_int("LOOKUP_PARENT_DEPTH", 3),
    )
    lookup_children_depth: int = field(
        default_factory=lambda: _env_int("LOOKUP_CHILDREN_DEPTH", 2),
    )
    lookup_sibling_limit: int = field(
        default_factory=lambda: _env_int("LOOKUP_SIBLING_LIMIT", 10),
    )
    virtual_base_revision_year: int = field(
        default_factory=lambda: _env_int("HIERARCHY_VIRTUAL_REVISION_YEAR", 2024),
    )


# ---------------------------------------------------------------------------
# Query expansion
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExpansionConfig:
    """Placeholder vocabularies and token rules for query expansion.

    Each key of ``placeholder_vocabularies`` is a placeholder name as written
    inside braces in a search pattern (``{BODYPART}``); the value is the closed,
    ordered list of lowercase values substituted for it.
    """

    or_operator: str = " OR "
    min_token_length: int = field(
        default_factory=lambda: _env_int("EXPANSION_MIN_TOKEN_LENGTH", 3),
    )
    placeholder_vocabularies: Dict[str, list[str]] = field(default_factory=lambda: {
        "BODYPART": [
            "arm", "leg", "bone", "head", "chest", "back", "neck",
            "shoulder", "knee", "hip", "ankle", "wrist", "elbow",
        ],
        "ACTION": [
            "walking", "breathing", "swallowing", "sleeping", "eating",
            "urinating", "standing", "sitting",
        ],
    })


# ---------------------------------------------------------------------------
# Singleton instances (importable)
# ---------------------------------------------------------------------------

search_tuning = SearchTuning()
hierarchy_tuning = HierarchyTuning()
expansion_config = ExpansionConfig()
