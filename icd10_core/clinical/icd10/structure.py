"""Structural rules of ICD-10-CM codes.

Everything in this module is derived from the code string alone: category,
subcategory, chapter and inferred billability.  The effective-date window is
applied in SQL by ``icd10_core.repositories.code_store.in_effect_clause``.
No database access happens here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_DIGITS_RE = re.compile(r"\d+")

# Chapter ranges keyed by "<start>-<end>", in catalog order.
ICD10_CHAPTERS: dict[str, str] = {
    "A00-B99": "Certain infectious and parasitic diseases",
    "C00-D49": "Neoplasms",
    "D50-D89": "Diseases of the blood and blood-forming organs and certain disorders involving the immune mechanism",
    "E00-E89": "Endocrine, nutritional and metabolic diseases",
    "F01-F99": "Mental, Behavioral and Neurodevelopmental disorders",
    "G00-G99": "Diseases of the nervous system",
    "H00-H59": "Diseases of the eye and adnexa",
    "H60-H95": "Diseases of the ear and mastoid process",
    "I00-I99": "Diseases of the circulatory system",
    "J00-J99": "Diseases of the respiratory system",
    "K00-K95": "Diseases of the digestive system",
    "L00-L99": "Diseases of the skin and subcutaneous tissue",
    "M00-M99": "Diseases of the musculoskeletal system and connective tissue",
    "N00-N99": "Diseases of the genitourinary system",
    "O00-O9A": "Pregnancy, childbirth and the puerperium",
    "P00-P96": "Certain conditions originating in the perinatal period",
    "Q00-Q99": "Congenital malformations, deformations and chromosomal abnormalities",
    "R00-R99": "Symptoms, signs and abnormal clinical and laboratory findings, not elsewhere classified",
    "S00-T88": "Injury, poisoning and certain other consequences of external causes",
    "V00-Y99": "External causes of morbidity",
    "Z00-Z99": "Factors influencing health status and contact with health services",
}


@dataclass(frozen=True)
class Chapter:
    code: str
    name: str


NO_CHAPTER = Chapter(code="", name="")


def normalize_code(value: str) -> str:
    """Canonical form of a code id: trimmed and upper-cased."""
    return (value or "").strip().upper()


def category_for(code: str) -> str:
    return normalize_code(code)[:3]


def subcategory_for(code: str) -> str:
    c = normalize_code(code)
    return c if "." in c else c[:4]


def code_in_range(code: str, start: str, end: str) -> bool:
    code_char, start_char, end_char = code[:1], start[:1], end[:1]
    if code_char < start_char or code_char > end_char:
        return False

    # Two-character category part, compared in catalog order so that
    # "O9A" sorts after "O99" and "E119" is read as category "E11".
    code_part = code[1:3]
    if code_char == start_char and code_part < start[1:3]:
        return False
    if code_char == end_char and code_part > end[1:3]:
        return False
    return True


def chapter_for(code: str) -> Chapter:
    """Look up the chapter whose range contains ``code``.

    Codes without any digit never belong to a chapter.
    """
    c = normalize_code(code)
    if not c or not _DIGITS_RE.search(c):
        return NO_CHAPTER

    for code_range, name in ICD10_CHAPTERS.items():
        start, end = code_range.split("-")
        if code_in_range(c, start, end):
            return Chapter(code=code_range, name=name)
    return NO_CHAPTER


def infer_billable(code: str) -> bool:
    """Structural billability guess for sources that do not carry the flag.

    The stored ``is_billable`` value is authoritative once a code is loaded.
    """
    c = normalize_code(code)
    if c.endswith("X"):
        return False
    if len(c) == 3:
        return False
    if "." in c:
        return True
    return len(c) >= 4

