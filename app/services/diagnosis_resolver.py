"""
Diagnosis Resolver
Maps the classifier's probability vector back onto the disease vocabulary
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from app.core.error_handling import VocabularyMismatch


@dataclass(frozen=True)
class DiseaseProbability:
    disease: str
    probability: float

    def to_dict(self) -> Dict:
        return {"disease": self.disease, "probability": self.probability}


@dataclass(frozen=True)
class DiagnosisResult:
    diagnosis: str
    confidence: float
    ranking: Optional[List[DiseaseProbability]] = field(default=None)
    top: Optional[List[DiseaseProbability]] = field(default=None)
    unknown_symptoms: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        data = {"diagnosis": self.diagnosis, "confidence": self.confidence}
        if self.ranking is not None:
            data["ranking"] = [item.to_dict() for item in self.ranking]
        if self.top is not None:
            data["top"] = [item.to_dict() for item in self.top]
        if self.unknown_symptoms:
            data["unknown_symptoms"] = list(self.unknown_symptoms)
        return data


def _check_lengths(probabilities: Sequence[float], class_vocabulary: Sequence[str]) -> None:
    if len(probabilities) != len(class_vocabulary):
        raise VocabularyMismatch(
            f"Model returned {len(probabilities)} probabilities for "
            f"{len(class_vocabulary)} disease classes",
            details={"probabilities": len(probabilities), "classes": len(class_vocabulary)},
        )


def resolve(
    probabilities: Sequence[float],
    class_vocabulary: Sequence[str],
    include_ranking: bool = False,
) -> DiagnosisResult:
    """
    Pick the most probable disease

    The first maximum wins on ties. The confidence is the raw model output,
    neither renormalised nor clamped.

    Args:
        probabilities: Model output, aligned with class_vocabulary
        class_vocabulary: Disease names in model output order
        include_ranking: Also return every (disease, probability) pair in vocabulary order

    Returns:
        DiagnosisResult

    Raises:
        VocabularyMismatch: If the two sequences differ in length
    """
    _check_lengths(probabilities, class_vocabulary)
    if not probabilities:
        raise VocabularyMismatch("Cannot resolve a diagnosis from an empty probability vector")

    best = 0
    for index in range(1, len(probabilities)):
        if probabilities[index] > probabilities[best]:
            best = index

    ranking = None
    if include_ranking:
        ranking = [
            DiseaseProbability(disease, probability)
            for disease, probability in zip(class_vocabulary, probabilities)
        ]

    return DiagnosisResult(
        diagnosis=class_vocabulary[best],
        confidence=probabilities[best],
        ranking=ranking,
    )


def rank(
    probabilities: Sequence[float],
    class_vocabulary: Sequence[str],
    top_k: Optional[int] = None,
) -> List[DiseaseProbability]:
    """Diseases sorted by probability, highest first; ties keep vocabulary order"""
    _check_lengths(probabilities, class_vocabulary)
    ordered = sorted(
        (DiseaseProbability(disease, probability)
         for disease, probability in zip(class_vocabulary, probabilities)),
        key=lambda item: item.probability,
        reverse=True,
    )
    if top_k is not None:
        ordered = ordered[:top_k]
    return ordered
