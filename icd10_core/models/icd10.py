"""ICD-10 model import shim.

ICD-10 Core's code model lives in the reusable clinical module.
This shim provides a stable import path (icd10_core.models.icd10.ICD10Code) for:
- Alembic model registration
- seed/loader scripts

Do not import icd10_core.db.models from this module.
"""

from icd10_core.clinical.icd10.models import ICD10Code

__all__ = ["ICD10Code"]
