# Base medical synonym dictionary and phrase patterns.
# Seeded once into an empty medical_synonyms/search_patterns table;
# extend through scripts/load_synonyms.py instead of editing rows in place.

# (term, synonym, weight, context)
DEFAULT_SYNONYMS = [
    # Colloquial to medical mappings
    ("broken", "fracture", 1.0, "injury"),
    ("broken", "fractured", 0.9, "injury"),
    ("heart attack", "myocardial infarction", 1.0, "cardiac"),
    ("heart attack", "mi", 0.8, "cardiac"),
    ("heart attack", "cardiac arrest", 0.7, "cardiac"),
    ("stroke", "cerebrovascular accident", 1.0, "neurological"),
    ("stroke", "cva", 0.9, "neurological"),
    ("high blood pressure", "hypertension", 1.0, "cardiovascular"),
    ("low blood pressure", "hypotension", 1.0, "cardiovascular"),
    ("sugar", "diabetes", 0.8, "endocrine"),
    ("sugar", "glucose", 0.7, "endocrine"),

    # Body part synonyms
    ("kidney", "renal", 1.0, "anatomy"),
    ("kidney", "nephro", 0.9, "anatomy"),
    ("liver", "hepatic", 1.0, "anatomy"),
    ("liver", "hepato", 0.9, "anatomy"),
    ("lung", "pulmonary", 1.0, "anatomy"),
    ("lung", "pneumo", 0.9, "anatomy"),
    ("brain", "cerebral", 1.0, "anatomy"),
    ("brain", "cranial", 0.9, "anatomy"),
    ("stomach", "gastric", 1.0, "anatomy"),
    ("stomach", "gastro", 0.9, "anatomy"),

    # Symptom synonyms
    ("pain", "algia", 0.9, "symptom"),
    ("pain", "ache", 0.8, "symptom"),
    ("fever", "pyrexia", 1.0, "symptom"),
    ("fever", "febrile", 0.9, "symptom"),
    ("headache", "cephalgia", 1.0, "symptom"),
    ("headache", "migraine", 0.7, "symptom"),
    ("throwing up", "vomiting", 1.0, "symptom"),
    ("throwing up", "emesis", 0.9, "symptom"),

    # Common conditions
    ("cancer", "malignant", 0.9, "condition"),
    ("cancer", "neoplasm", 1.0, "condition"),
    ("cancer", "tumor", 0.8, "condition"),
    ("cancer", "carcinoma", 0.9, "condition"),
    ("infection", "infectious", 0.9, "condition"),
    ("infection", "sepsis", 0.7, "condition"),
    ("inflammation", "inflammatory", 1.0, "condition"),
    ("inflammation", "itis", 0.8, "condition"),
]

# (pattern, expansion, priority)
DEFAULT_PATTERNS = [
    ("broken {BODYPART}", "fracture {BODYPART}", 10),
    ("{BODYPART} fracture", "fracture {BODYPART}", 9),
    ("pain in {BODYPART}", "{BODYPART} pain OR {BODYPART} algia", 8),
    ("{BODYPART} pain", "{BODYPART} algia OR painful {BODYPART}", 8),
    ("can't breathe", "dyspnea OR respiratory distress OR shortness of breath", 10),
    ("trouble breathing", "dyspnea OR respiratory distress", 9),
    ("chest pain", "angina OR thoracic pain OR cardiac pain", 9),
]
