"""
Vocabulary configuration shared with the prediction model

The symptom list is the model's input feature order and the disease list is
its output class order. Both are positional contracts: the JSON file is
versioned alongside the deployed model and validated once at startup.
"""

import json
import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from app.core.error_handling import VocabularyMismatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Vocabulary:
    """Ordered symptom and disease names for one model version"""
    version: str
    symptoms: Tuple[str, ...]
    diseases: Tuple[str, ...]

    @property
    def input_dim(self) -> int:
        return len(self.symptoms)

    @property
    def output_dim(self) -> int:
        return len(self.diseases)

    @classmethod
    def from_dict(cls, data: dict) -> "Vocabulary":
        try:
            version = str(data["version"])
            symptoms = tuple(str(name) for name in data["symptoms"])
            diseases = tuple(str(name) for name in data["diseases"])
        except (KeyError, TypeError) as e:
            raise VocabularyMismatch(
                f"Vocabulary file is missing a required field: {e}",
                stage="configuration",
            )
        return cls(version=version, symptoms=symptoms, diseases=diseases)

    def validate(self, input_dim: Optional[int] = None, output_dim: Optional[int] = None) -> "Vocabulary":
        """
        Check the vocabulary against the model's expected dimensions

        Args:
            input_dim: Number of input features the model expects, if known
            output_dim: Number of classes the model returns, if known

        Raises:
            VocabularyMismatch: If either list is empty or disagrees with the model
        """
        if not self.symptoms or not self.diseases:
            raise VocabularyMismatch(
                f"Vocabulary {self.version} has an empty symptom or disease list",
                stage="configuration",
            )

        if input_dim is not None and input_dim != self.input_dim:
            raise VocabularyMismatch(
                f"Symptom vocabulary {self.version} has {self.input_dim} entries, model expects {input_dim}",
                stage="configuration",
                details={"vocabulary": self.input_dim, "model": input_dim},
            )

        if output_dim is not None and output_dim != self.output_dim:
            raise VocabularyMismatch(
                f"Disease vocabulary {self.version} has {self.output_dim} entries, model returns {output_dim}",
                stage="configuration",
                details={"vocabulary": self.output_dim, "model": output_dim},
            )

        for kind, names in (("symptom", self.symptoms), ("disease", self.diseases)):
            duplicates = [name for name, count in Counter(names).items() if count > 1]
            if duplicates:
                logger.warning(f"Duplicate {kind} names in vocabulary {self.version}: {duplicates}")

        return self


def load_vocabulary(path: str, input_dim: Optional[int] = None, output_dim: Optional[int] = None) -> Vocabulary:
    """Load and validate a vocabulary JSON file"""
    vocab_path = Path(path)
    if not vocab_path.is_absolute() and not vocab_path.exists():
        # Resolve relative to the project root when not run from it
        vocab_path = Path(__file__).resolve().parents[2] / path

    with open(vocab_path, encoding="utf-8") as f:
        data = json.load(f)

    vocabulary = Vocabulary.from_dict(data).validate(input_dim, output_dim)
    logger.info(
        f"Loaded vocabulary {vocabulary.version}: "
        f"{vocabulary.input_dim} symptoms, {vocabulary.output_dim} diseases"
    )
    return vocabulary
