"""Tests for synonym/pattern query expansion."""

from icd10_core.services.query_expansion import QueryExpansionEngine
from icd10_core.services.synonym_dictionary import SynonymDictionary


# ============================================================================
# Pattern phase
# ============================================================================


class TestPatternPhase:
    """Test phrase pattern expansion."""

    def test_broken_body_part(self, expansion_engine):
        """Pattern wins over per-word synonyms of 'broken'."""
        assert expansion_engine.expand("broken arm") == "fracture arm"

    def test_query_is_lowercased_first(self, expansion_engine):
        assert expansion_engine.expand("  Broken ARM ") == "fracture arm"

    def test_pattern_matches_inside_longer_query(self, expansion_engine):
        assert expansion_engine.expand("i think i have a broken leg today") == "fracture leg"

    def test_higher_priority_pattern_wins(self, expansion_engine):
        """'chest pain' (9) beats '{BODYPART} pain' (8)."""
        assert expansion_engine.expand("chest pain") == "angina OR thoracic pain OR cardiac pain"

    def test_equal_priority_keeps_load_order(self, expansion_engine):
        assert expansion_engine.expand("pain in knee") == "knee pain OR knee algia"

    def test_placeholder_substituted_in_expansion(self, expansion_engine):
        assert expansion_engine.expand("knee pain") == "knee algia OR painful knee"

    def test_literal_pattern(self, expansion_engine):
        assert expansion_engine.expand("I can't breathe") == (
            "dyspnea OR respiratory distress OR shortness of breath"
        )

    def test_unknown_placeholder_never_matches(self, dictionary):
        dictionary.add_pattern("{ORGAN} failure", "failure {ORGAN}", 50)
        engine = QueryExpansionEngine(dictionary)
        assert engine.expand("liver failure") == "liver OR hepatic OR hepato OR failure"

    def test_added_pattern_placeholder_case_is_canonical(self, dictionary):
        assert dictionary.add_pattern("{bodypart} sprain", "sprain {bodypart}", 5)
        engine = QueryExpansionEngine(dictionary)
        assert engine.expand("ankle sprain") == "sprain ankle"

    def test_extended_vocabulary_is_used(self, dictionary):
        dictionary.extend_vocabulary("BODYPART", ["finger"])
        engine = QueryExpansionEngine(dictionary)
        assert engine.expand("broken finger") == "fracture finger"


# ============================================================================
# Term phase
# ============================================================================


class TestTermPhase:
    """Test per-token synonym expansion."""

    def test_tokens_and_synonyms_joined_with_or(self, expansion_engine):
        assert expansion_engine.expand("kidney infection") == (
            "kidney OR renal OR nephro OR infection OR infectious OR sepsis"
        )

    def test_synonyms_ordered_by_weight(self, dictionary):
        dictionary.add_synonym("fever", "hyperthermia", 0.95)
        engine = QueryExpansionEngine(dictionary)
        assert engine.expand("fever") == "fever OR pyrexia OR hyperthermia OR febrile"

    def test_punctuation_is_stripped(self, expansion_engine):
        assert expansion_engine.expand("fever!!") == "fever OR pyrexia OR febrile"

    def test_short_tokens_are_dropped(self, expansion_engine):
        assert expansion_engine.expand("an ox diabetes") == "diabetes"

    def test_duplicates_removed_keeping_first(self, expansion_engine):
        assert expansion_engine.expand("pain pain ache") == "pain OR algia OR ache"

    def test_fallback_to_normalized_query(self, expansion_engine):
        """Nothing survives tokenization: the lowered query is returned."""
        assert expansion_engine.expand("A B") == "a b"

    def test_empty_query(self, expansion_engine):
        assert expansion_engine.expand("") == ""

    def test_multiword_terms_are_not_matched_by_tokens(self, expansion_engine):
        """'heart attack' is keyed as a phrase, never as single tokens."""
        assert expansion_engine.expand("heart attack") == "heart OR attack"


class TestDeterminism:
    """Test that expansion is a pure function of dictionary state."""

    def test_same_query_same_result(self, expansion_engine):
        first = expansion_engine.expand("stomach pain with fever")
        second = expansion_engine.expand("stomach pain with fever")
        assert first == second

    def test_independent_engines_agree(self):
        a = SynonymDictionary()
        a.initialize()
        b = SynonymDictionary()
        b.initialize()
        query = "sugar problems in the brain"
        assert QueryExpansionEngine(a).expand(query) == QueryExpansionEngine(b).expand(query)
