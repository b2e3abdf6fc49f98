"""
Recommendation Client
Asks the external text-generation service for health advice on a symptom list
"""

import logging
from typing import Optional, Sequence

import httpx

from app.core.error_handling import MalformedUpstreamResponse, UpstreamUnavailable, ValidationError

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Saya mengalami gejala berikut: {symptoms}. "
    "Berikan rekomendasi kesehatan singkat dan langkah yang sebaiknya saya lakukan."
)


def build_prompt(symptoms: Sequence[str]) -> str:
    """
    Phrase the symptom list as a question for the text model

    Raises:
        ValidationError: If no usable symptom is given
    """
    cleaned = [s.strip() for s in symptoms if s and s.strip()]
    if not cleaned:
        raise ValidationError("At least one symptom is required for a recommendation")
    return PROMPT_TEMPLATE.format(symptoms=", ".join(cleaned))


def extract_text(body) -> str:
    """Pull candidates[0].content.parts[0].text out of the response, verbatim"""
    try:
        text = body["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedUpstreamResponse(
            "Recommendation response has no text",
            stage="recommendation",
            cause=e,
        )
    if not isinstance(text, str):
        raise MalformedUpstreamResponse("Recommendation text is not a string", stage="recommendation")
    return text


class RecommendationClient:
    """HTTP client for the recommendation text endpoint"""

    def __init__(
        self,
        endpoint: str,
        api_key: Optional[str] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    async def recommend(self, symptoms: Sequence[str]) -> str:
        """
        Get a free-text recommendation for the given symptoms

        Raises:
            ValidationError: If the symptom list is empty
            UpstreamUnavailable: On transport failure, timeout or non-2xx status
            MalformedUpstreamResponse: If the response holds no text
        """
        payload = {"contents": [{"parts": [{"text": build_prompt(symptoms)}]}]}
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-goog-api-key"] = self.api_key

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.endpoint, json=payload, headers=headers)
                response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error(f"Recommendation request timed out after {self.timeout}s")
            raise UpstreamUnavailable("Recommendation service timed out", stage="recommendation", cause=e)
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling recommendation service: {e}")
            raise UpstreamUnavailable("Recommendation service is unavailable", stage="recommendation", cause=e)

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedUpstreamResponse(
                "Recommendation response is not valid JSON",
                stage="recommendation",
                cause=e,
            )

        return extract_text(body)
