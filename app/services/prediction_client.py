"""
Prediction Client
Sends encoded symptom vectors to the external diagnosis model over HTTPS
"""

import logging
import math
from typing import List, Optional, Sequence, Union

import httpx
from pydantic import BaseModel, StrictFloat, StrictInt, ValidationError, field_validator

from app.core.error_handling import MalformedUpstreamResponse, UpstreamUnavailable

logger = logging.getLogger(__name__)


class ProbabilityVector(BaseModel):
    """Validated model output: a non-empty list of finite numbers, returned as floats

    Booleans and numeric strings are rejected rather than coerced.
    """
    values: List[Union[StrictFloat, StrictInt]]

    @field_validator("values", mode="before")
    @classmethod
    def flatten_single_row(cls, value):
        # Batch-style models answer [[p0, p1, ...]] for a single input row
        if isinstance(value, list) and len(value) == 1 and isinstance(value[0], list):
            return value[0]
        return value

    @field_validator("values")
    @classmethod
    def check_values(cls, value: List[Union[float, int]]) -> List[float]:
        if not value:
            raise ValueError("probability array is empty")
        values = [float(v) for v in value]
        if not all(math.isfinite(v) for v in values):
            raise ValueError("probability array contains non-finite values")
        return values


def parse_probabilities(body, field: str = "predictions") -> List[float]:
    """
    Validate a decoded response body and extract the probability vector

    Raises:
        MalformedUpstreamResponse: If the field is missing or not a numeric array
    """
    if not isinstance(body, dict) or field not in body:
        raise MalformedUpstreamResponse(
            f"Prediction response has no '{field}' field",
            details={"expected_field": field},
        )
    try:
        return ProbabilityVector(values=body[field]).values
    except ValidationError as e:
        raise MalformedUpstreamResponse(
            f"Prediction response field '{field}' is not a numeric array",
            cause=e,
            details={"expected_field": field},
        )


class PredictionClient:
    """HTTP client for the diagnosis model endpoint"""

    def __init__(
        self,
        endpoint: str,
        timeout: float = 5.0,
        response_field: str = "predictions",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.response_field = response_field
        # Tests inject httpx.MockTransport here
        self.transport = transport

    async def predict(self, vector: Sequence[Union[int, float]]) -> List[float]:
        """
        Request class probabilities for one feature vector

        Args:
            vector: Encoded symptoms in model input order

        Returns:
            Probability vector in model output order

        Raises:
            UpstreamUnavailable: On transport failure, timeout or non-2xx status
            MalformedUpstreamResponse: On a 2xx body without a usable probability array
        """
        payload = {"data": list(vector)}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.endpoint, json=payload)
                response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error(f"Prediction request to {self.endpoint} timed out after {self.timeout}s")
            raise UpstreamUnavailable("Prediction service timed out", cause=e)
        except httpx.HTTPStatusError as e:
            logger.error(f"Prediction service returned HTTP {e.response.status_code}")
            raise UpstreamUnavailable(
                "Prediction service returned an error",
                cause=e,
                details={"upstream_status": e.response.status_code},
            )
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling prediction service: {e}")
            raise UpstreamUnavailable(cause=e)

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedUpstreamResponse("Prediction response is not valid JSON", cause=e)

        return parse_probabilities(body, self.response_field)
