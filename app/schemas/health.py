"""
Pydantic schemas for diagnosis, recommendation and health history
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from pydantic import ConfigDict, Field

from config import settings
from app.schemas.common import CamelModel
from app.services.history_service import format_timestamp


class SymptomsRequest(CamelModel):
    symptoms: List[str] = Field(..., description="Symptom names, matched exactly against the vocabulary")


class DiseaseProbabilityResponse(CamelModel):
    disease: str
    probability: float


class DiagnosisResponse(CamelModel):
    diagnosis: str
    confidence: float
    unknown_symptoms: List[str] = Field(default_factory=list)
    ranking: Optional[List[DiseaseProbabilityResponse]] = None
    top_diagnoses: Optional[List[DiseaseProbabilityResponse]] = None
    history_id: Optional[int] = None


class RecommendationResponse(CamelModel):
    recommendation: str


class HistoryCreateRequest(CamelModel):
    user_id: str
    symptoms: Union[List[Any], Dict[str, Any]] = Field(..., description="Stored exactly as submitted")
    diagnosis: str = Field(..., min_length=1, max_length=255)
    timestamp: Optional[datetime] = Field(None, description="Defaults to the time of the request")


class HistoryRecordResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    symptoms: Any
    diagnosis: str
    timestamp: datetime
    timestamp_display: str = ""

    @classmethod
    def from_record(cls, record, tz_name: Optional[str] = None) -> "HistoryRecordResponse":
        response = cls.model_validate(record)
        response.timestamp_display = format_timestamp(record.timestamp, tz_name or settings.DISPLAY_TIMEZONE)
        return response
