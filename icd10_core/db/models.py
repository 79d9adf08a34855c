from icd10_core.db.base import Base

# Import all models here
from icd10_core.models.icd10 import ICD10Code
from icd10_core.models.medical_synonym import MedicalSynonym
from icd10_core.models.search_pattern import SearchPattern

__all__ = ["Base", "ICD10Code", "MedicalSynonym", "SearchPattern"]
