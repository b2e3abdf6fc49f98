"""
Feature Encoder
Turns a submitted symptom list into the model's fixed-order 0/1 input vector
"""

from typing import List, Sequence


def encode(symptoms: Sequence[str], vocabulary: Sequence[str]) -> List[int]:
    """
    Encode symptoms against the symptom vocabulary

    Matching is exact and case-sensitive. Unknown names are ignored and
    repeated names have no extra effect.

    Args:
        symptoms: Symptom names as submitted by the client (any order)
        vocabulary: Canonical symptom names in model input order

    Returns:
        One 0/1 value per vocabulary entry
    """
    present = set(symptoms)
    return [1 if name in present else 0 for name in vocabulary]


def unknown_symptoms(symptoms: Sequence[str], vocabulary: Sequence[str]) -> List[str]:
    """Submitted names that match no vocabulary entry, first occurrence order"""
    known = set(vocabulary)
    unknown = []
    for symptom in symptoms:
        if symptom not in known and symptom not in unknown:
            unknown.append(symptom)
    return unknown
