"""
Tests for the symptom feature encoder
"""
import itertools
import pytest
from app.services.feature_encoder import encode, unknown_symptoms


VOCABULARY = ["gatal", "ruam kulit", "bersin"]


@pytest.mark.unit
class TestFeatureEncoder:
    """Encoding symptom lists into the model's input vector"""

    def test_single_symptom(self):
        assert encode(["bersin"], VOCABULARY) == [0, 0, 1]

    def test_empty_list_is_all_zeros(self):
        assert encode([], VOCABULARY) == [0, 0, 0]

    def test_length_always_matches_vocabulary(self):
        for symptoms in ([], ["gatal"], ["x", "y", "z", "w"], VOCABULARY * 3):
            assert len(encode(symptoms, VOCABULARY)) == len(VOCABULARY)

    def test_order_independent(self):
        symptoms = ["gatal", "bersin", "ruam kulit"]
        expected = encode(symptoms, VOCABULARY)
        for permutation in itertools.permutations(symptoms):
            assert encode(list(permutation), VOCABULARY) == expected

    def test_unknown_symptoms_are_ignored(self):
        assert encode(["pusing", "gatal"], VOCABULARY) == [1, 0, 0]

    def test_duplicates_count_once(self):
        assert encode(["gatal", "gatal", "gatal"], VOCABULARY) == [1, 0, 0]

    def test_match_is_case_sensitive(self):
        assert encode(["Gatal", "BERSIN", " bersin"], VOCABULARY) == [0, 0, 0]

    def test_duplicate_vocabulary_entries_are_each_set(self):
        assert encode(["demam"], ["demam", "batuk", "demam"]) == [1, 0, 1]

    def test_input_is_not_modified(self):
        symptoms = ["bersin", "gatal"]
        encode(symptoms, VOCABULARY)
        assert symptoms == ["bersin", "gatal"]

    def test_unknown_symptoms_reported_once_in_order(self):
        result = unknown_symptoms(["pusing", "gatal", "Gatal", "pusing"], VOCABULARY)
        assert result == ["pusing", "Gatal"]

    def test_no_unknown_symptoms(self):
        assert unknown_symptoms(["gatal", "bersin"], VOCABULARY) == []
