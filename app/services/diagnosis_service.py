"""
Diagnosis Service
Runs the inference pipeline: encode symptoms, call the model, resolve the class.
Also fronts the free-text recommendation call.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from config import settings
from app.core.vocabulary import Vocabulary, load_vocabulary
from app.services.feature_encoder import encode, unknown_symptoms
from app.services.diagnosis_resolver import DiagnosisResult, rank, resolve
from app.services.prediction_client import PredictionClient
from app.services.recommendation_client import RecommendationClient

logger = logging.getLogger(__name__)


class DiagnosisService:
    """
    Symptom-based diagnosis through the external prediction model

    Holds no per-request state; one instance serves concurrent requests.
    """

    def __init__(
        self,
        vocabulary: Vocabulary,
        prediction_client: PredictionClient,
        recommendation_client: Optional[RecommendationClient] = None,
    ):
        self.vocabulary = vocabulary
        self.prediction_client = prediction_client
        self.recommendation_client = recommendation_client

    def encode(self, symptoms: Sequence[str]) -> List[int]:
        return encode(symptoms, self.vocabulary.symptoms)

    def unknown_symptoms(self, symptoms: Sequence[str]) -> List[str]:
        return unknown_symptoms(symptoms, self.vocabulary.symptoms)

    async def predict(self, symptoms: Sequence[str]) -> List[float]:
        """Encode and send to the model; returns the validated probability vector"""
        vector = self.encode(symptoms)
        return await self.prediction_client.predict(vector)

    async def diagnose(
        self,
        symptoms: Sequence[str],
        include_ranking: bool = False,
        top_k: Optional[int] = None,
    ) -> DiagnosisResult:
        """
        Diagnose a symptom list

        Args:
            symptoms: Submitted symptom names
            include_ranking: Attach every disease probability in vocabulary order
            top_k: Attach the k most probable diseases, highest first

        The submitted names missing from the vocabulary are attached as
        unknown_symptoms.

        Raises:
            UpstreamUnavailable, MalformedUpstreamResponse: From the prediction call
            VocabularyMismatch: If the model output does not fit the disease vocabulary
        """
        unknown = self.unknown_symptoms(symptoms)
        if unknown:
            logger.info(f"Ignoring symptoms not in vocabulary {self.vocabulary.version}: {unknown}")

        probabilities = await self.predict(symptoms)
        result = resolve(probabilities, self.vocabulary.diseases, include_ranking=include_ranking)
        top = rank(probabilities, self.vocabulary.diseases, top_k=top_k) if top_k is not None else None
        result = replace(result, top=top, unknown_symptoms=unknown)
        logger.info(f"Diagnosis resolved: {result.diagnosis} ({result.confidence})")
        return result

    async def recommend(self, symptoms: Sequence[str]) -> str:
        if self.recommendation_client is None:
            raise RuntimeError("Recommendation client is not configured")
        return await self.recommendation_client.recommend(symptoms)


_diagnosis_service: Optional[DiagnosisService] = None


def build_diagnosis_service() -> DiagnosisService:
    """Create the service from settings, validating the vocabulary against the model"""
    vocabulary = load_vocabulary(
        settings.VOCABULARY_PATH,
        input_dim=settings.PREDICTION_INPUT_DIM,
        output_dim=settings.PREDICTION_OUTPUT_DIM,
    )
    return DiagnosisService(
        vocabulary=vocabulary,
        prediction_client=PredictionClient(
            endpoint=settings.PREDICTION_ENDPOINT,
            timeout=settings.PREDICTION_TIMEOUT_SECONDS,
            response_field=settings.PREDICTION_RESPONSE_FIELD,
        ),
        recommendation_client=RecommendationClient(
            endpoint=settings.RECOMMENDATION_ENDPOINT,
            api_key=settings.RECOMMENDATION_API_KEY,
            timeout=settings.RECOMMENDATION_TIMEOUT_SECONDS,
        ),
    )


def get_diagnosis_service() -> DiagnosisService:
    """FastAPI dependency returning the process-wide service"""
    global _diagnosis_service
    if _diagnosis_service is None:
        _diagnosis_service = build_diagnosis_service()
    return _diagnosis_service
