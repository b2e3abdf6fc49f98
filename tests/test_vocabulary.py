"""
Tests for loading and validating the model vocabulary
"""
import json
import pytest
from app.core.error_handling import VocabularyMismatch
from app.core.vocabulary import Vocabulary, load_vocabulary


def write_vocabulary(tmp_path, data) -> str:
    path = tmp_path / "vocabulary.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


VALID = {
    "version": "v1",
    "symptoms": ["gatal", "ruam kulit", "bersin"],
    "diseases": ["Alergi", "Flu Biasa"],
}


@pytest.mark.unit
class TestVocabulary:

    def test_load_keeps_order(self, tmp_path):
        vocabulary = load_vocabulary(write_vocabulary(tmp_path, VALID))
        assert vocabulary.version == "v1"
        assert vocabulary.symptoms == ("gatal", "ruam kulit", "bersin")
        assert vocabulary.diseases == ("Alergi", "Flu Biasa")
        assert vocabulary.input_dim == 3
        assert vocabulary.output_dim == 2

    def test_matching_model_dimensions(self, tmp_path):
        vocabulary = load_vocabulary(write_vocabulary(tmp_path, VALID), input_dim=3, output_dim=2)
        assert vocabulary.input_dim == 3

    def test_input_dimension_mismatch(self, tmp_path):
        with pytest.raises(VocabularyMismatch) as exc_info:
            load_vocabulary(write_vocabulary(tmp_path, VALID), input_dim=4)
        assert exc_info.value.stage == "configuration"

    def test_output_dimension_mismatch(self, tmp_path):
        with pytest.raises(VocabularyMismatch):
            load_vocabulary(write_vocabulary(tmp_path, VALID), output_dim=3)

    def test_missing_field(self, tmp_path):
        with pytest.raises(VocabularyMismatch):
            load_vocabulary(write_vocabulary(tmp_path, {"version": "v1", "symptoms": ["gatal"]}))

    def test_empty_disease_list(self, tmp_path):
        data = dict(VALID, diseases=[])
        with pytest.raises(VocabularyMismatch):
            load_vocabulary(write_vocabulary(tmp_path, data))

    def test_duplicates_are_kept(self):
        vocabulary = Vocabulary.from_dict(
            {"version": "v2", "symptoms": ["demam", "demam"], "diseases": ["Flu Biasa"]}
        ).validate()
        assert vocabulary.symptoms == ("demam", "demam")

    def test_bundled_vocabulary_loads(self):
        vocabulary = load_vocabulary("app/data/vocabulary.json")
        assert "bersin" in vocabulary.symptoms
        assert "Flu Biasa" in vocabulary.diseases
