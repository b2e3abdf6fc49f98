"""
Health Endpoints
Symptom-based diagnosis and free-text recommendations, both answered by
external model services.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from app.core.auth import bearer_scheme, resolve_user
from app.core.error_handling import UnauthorizedException
from app.models import User
from app.schemas.common import success_response
from app.schemas.health import (
    DiagnosisResponse,
    DiseaseProbabilityResponse,
    RecommendationResponse,
    SymptomsRequest,
)
from app.services import history_service
from app.services.diagnosis_resolver import DiseaseProbability
from app.services.diagnosis_service import DiagnosisService, get_diagnosis_service

router = APIRouter(prefix="/health", tags=["Health"])


def _probabilities(items: Optional[List[DiseaseProbability]]) -> Optional[List[DiseaseProbabilityResponse]]:
    if items is None:
        return None
    return [DiseaseProbabilityResponse(disease=item.disease, probability=item.probability) for item in items]


@router.get("/symptoms")
async def list_symptoms(service: DiagnosisService = Depends(get_diagnosis_service)):
    """Canonical symptom and disease names the model understands"""
    vocabulary = service.vocabulary
    return success_response(
        "Vocabulary fetched successfully",
        {
            "version": vocabulary.version,
            "symptoms": list(vocabulary.symptoms),
            "diseases": list(vocabulary.diseases),
        },
    )


@router.post("/diagnose")
async def diagnose(
    request: SymptomsRequest,
    include_ranking: bool = Query(False, description="Return the probability of every disease"),
    top_k: Optional[int] = Query(None, ge=1, description="Return the k most probable diseases"),
    save_history: bool = Query(False, description="Store the result in the caller's health history"),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    service: DiagnosisService = Depends(get_diagnosis_service),
    db: AsyncSession = Depends(get_db)
):
    """
    Diagnose from a list of symptoms

    Symptoms are matched exactly against the vocabulary; names that match
    nothing are returned in unknownSymptoms. History is only written after
    the model call succeeds. The bearer token is only read when save_history
    is set.

    Raises:
        UpstreamUnavailable: Prediction service unreachable or failing
        MalformedUpstreamResponse: Prediction service answered with an unusable body
        VocabularyMismatch: Model output does not match the disease vocabulary
    """
    current_user: Optional[User] = None
    if save_history:
        current_user = await resolve_user(credentials, db)
        if current_user is None:
            raise UnauthorizedException("Login is required to save health history")

    result = await service.diagnose(request.symptoms, include_ranking=include_ranking, top_k=top_k)

    response = DiagnosisResponse(
        diagnosis=result.diagnosis,
        confidence=result.confidence,
        unknown_symptoms=result.unknown_symptoms,
        ranking=_probabilities(result.ranking),
        top_diagnoses=_probabilities(result.top),
    )

    if save_history:
        response.history_id = await history_service.append(
            db,
            user_id=current_user.user_id,
            symptoms=request.symptoms,
            diagnosis=result.diagnosis,
        )

    return success_response("Diagnosis successful", response)


@router.post("/recommendation")
async def recommendation(
    request: SymptomsRequest,
    service: DiagnosisService = Depends(get_diagnosis_service),
):
    """
    Free-text health recommendation for a list of symptoms

    Raises:
        ValidationError: If no symptom is given
        UpstreamUnavailable, MalformedUpstreamResponse: From the text service
    """
    text = await service.recommend(request.symptoms)
    return success_response(
        "Health recommendation generated successfully",
        RecommendationResponse(recommendation=text),
    )
