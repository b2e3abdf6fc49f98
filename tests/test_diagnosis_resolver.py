"""
Tests for mapping model probabilities onto the disease vocabulary
"""
import pytest
from app.core.error_handling import VocabularyMismatch
from app.services.diagnosis_resolver import DiseaseProbability, rank, resolve


CLASSES = ["A", "B", "C"]


@pytest.mark.unit
class TestDiagnosisResolver:
    """Selecting the diagnosis from a probability vector"""

    def test_picks_argmax(self):
        result = resolve([0.2, 0.5, 0.3], CLASSES)
        assert result.diagnosis == "B"
        assert result.confidence == 0.5

    def test_tie_goes_to_first_occurrence(self):
        result = resolve([0.4, 0.4, 0.2], CLASSES)
        assert result.diagnosis == "A"
        assert result.confidence == 0.4

    def test_tie_at_the_end(self):
        result = resolve([0.1, 0.45, 0.45], CLASSES)
        assert result.diagnosis == "B"

    def test_last_class_can_win(self):
        assert resolve([0.1, 0.2, 0.7], CLASSES).diagnosis == "C"

    def test_length_mismatch_raises(self):
        with pytest.raises(VocabularyMismatch) as exc_info:
            resolve([0.5, 0.5], CLASSES)
        assert exc_info.value.details == {"probabilities": 2, "classes": 3}

    def test_longer_probability_vector_raises(self):
        with pytest.raises(VocabularyMismatch):
            resolve([0.1, 0.2, 0.3, 0.4], CLASSES)

    def test_empty_inputs_raise(self):
        with pytest.raises(VocabularyMismatch):
            resolve([], [])

    def test_confidence_is_not_normalised(self):
        # Scores that do not sum to 1 and fall outside [0, 1] pass through
        result = resolve([2.5, -1.0, 7.25], CLASSES)
        assert result.diagnosis == "C"
        assert result.confidence == 7.25

    def test_ranking_is_in_vocabulary_order(self):
        result = resolve([0.2, 0.5, 0.3], CLASSES, include_ranking=True)
        assert result.ranking == [
            DiseaseProbability("A", 0.2),
            DiseaseProbability("B", 0.5),
            DiseaseProbability("C", 0.3),
        ]

    def test_ranking_omitted_by_default(self):
        result = resolve([0.2, 0.5, 0.3], CLASSES)
        assert result.ranking is None
        assert result.to_dict() == {"diagnosis": "B", "confidence": 0.5}

    def test_to_dict_with_ranking(self):
        data = resolve([0.2, 0.5, 0.3], CLASSES, include_ranking=True).to_dict()
        assert data["ranking"][1] == {"disease": "B", "probability": 0.5}

    def test_rank_sorts_descending_and_keeps_ties_stable(self):
        ranked = rank([0.3, 0.1, 0.3, 0.3], ["A", "B", "C", "D"])
        assert [item.disease for item in ranked] == ["A", "C", "D", "B"]

    def test_rank_top_k(self):
        ranked = rank([0.2, 0.5, 0.3], CLASSES, top_k=2)
        assert [item.disease for item in ranked] == ["B", "C"]

    def test_rank_checks_lengths(self):
        with pytest.raises(VocabularyMismatch):
            rank([0.2], CLASSES)
