"""
Travel recommendation requester

One request, one free-text answer. Nothing here retries: a failed call is
reported back to the page, which leaves it to the user to try again.
"""
import asyncio
import logging
from typing import Any, Optional

from langchain_core.prompts import ChatPromptTemplate
from langchain_google_genai import ChatGoogleGenerativeAI

from ..config import settings
from ..schemas.request import RecommendationRequest
from ..utils.content_safety import ContentSafetyError, check_content_safety, configure_safety_settings

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Failed to get recommendations"


class RecommendationRequestError(Exception):
    """Raised when the recommendation backend fails or returns nothing usable"""
    def __init__(self, message: str = GENERIC_FAILURE, details: dict = None):
        self.message = message or GENERIC_FAILURE
        self.details = details or {}
        super().__init__(self.message)


class EdgeFunctionBackend:
    """Calls the managed `travel-recommendations` function"""

    def __init__(self, client: Any, function_name: Optional[str] = None):
        self.client = client
        self.function_name = function_name or settings.recommendation_function

    async def generate(self, request: RecommendationRequest) -> str:
        """
        Invoke the function with the request body

        Returns:
            The `recommendations` text from the response

        Raises:
            RecommendationRequestError: On transport errors, an `error` field, or a missing text
        """
        body = request.to_body()
        logger.info(f"📤 Invoking {self.function_name} for {request.destination} ({request.days} days)")

        try:
            data = await asyncio.to_thread(
                self.client.functions.invoke,
                self.function_name,
                invoke_options={"body": body, "responseType": "json"}
            )
        except Exception as e:
            message = getattr(e, "message", None) or str(e)
            logger.error(f"✗ {self.function_name} failed: {type(e).__name__}: {message}")
            raise RecommendationRequestError(message, {"function": self.function_name}) from e

        if not isinstance(data, dict):
            raise RecommendationRequestError(details={"function": self.function_name})

        if data.get("error"):
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            logger.error(f"✗ {self.function_name} returned an error: {message}")
            raise RecommendationRequestError(message, {"function": self.function_name})

        recommendations = data.get("recommendations")
        if not isinstance(recommendations, str) or not recommendations.strip():
            logger.error(f"✗ {self.function_name} returned no recommendations")
            raise RecommendationRequestError(details={"function": self.function_name})

        logger.info(f"📥 Received recommendations ({len(recommendations)} chars)")
        return recommendations


RECOMMENDATION_PROMPT = ChatPromptTemplate.from_messages([
    ("system", """You are an experienced local travel guide who helps travellers find authentic experiences and hidden gems.

Write a day-by-day itinerary in plain text. For each day list:
- Morning, afternoon and evening activities
- Where to eat, favouring local places over chains
- Rough costs in USD

Keep the whole trip within the stated budget, match the travel party, and
finish with a short list of practical tips. Do not use markdown tables."""),
    ("human", """Destination: {destination}
Trip length: {days} days
Total budget: ${budget}
Travelling as: {travel_type}
Interests: {interests}""")
])


class GeminiBackend:
    """Generates recommendations directly with Gemini"""

    def __init__(self, llm: Any = None):
        if llm is None:
            if not settings.gemini_api_key:
                logger.error("❌ GEMINI_API_KEY is not set in environment!")
                raise ValueError("GEMINI_API_KEY environment variable is required for the gemini backend")
            llm = ChatGoogleGenerativeAI(
                model=settings.model_name,
                temperature=settings.model_temperature,
                google_api_key=settings.gemini_api_key,
                safety_settings=configure_safety_settings()
            )
            logger.info(f"✓ LLM configured: {settings.model_name} (temp={settings.model_temperature})")
        self.llm = llm

    @staticmethod
    def build_messages(request: RecommendationRequest):
        return RECOMMENDATION_PROMPT.format_messages(
            destination=request.destination,
            days=request.days,
            budget=f"{request.budget:,.0f}",
            travel_type=request.travel_type.value,
            interests=", ".join(request.interests)
        )

    async def generate(self, request: RecommendationRequest) -> str:
        messages = self.build_messages(request)
        logger.info(f"📤 Sending request to {settings.model_name} for {request.destination}")

        try:
            response = await self.llm.ainvoke(messages)
            check_content_safety(response)
        except ContentSafetyError as e:
            logger.error(f"✗ Recommendation blocked: {e.message}")
            raise RecommendationRequestError(e.message, {"safety_ratings": e.safety_ratings}) from e
        except Exception as e:
            logger.error(f"✗ Gemini call failed: {type(e).__name__}: {str(e)}")
            raise RecommendationRequestError(str(e)) from e

        content = getattr(response, "content", None)
        if isinstance(content, list):
            # Multi-part answers come back as a list of text chunks
            content = "".join(part if isinstance(part, str) else part.get("text", "") for part in content)
        if not content or not content.strip():
            logger.error("❌ Empty response from Gemini")
            raise RecommendationRequestError()

        logger.info(f"📥 Received recommendations ({len(content)} chars)")
        return content


class RecommendationRequester:
    """Single request/response call to the configured recommendation backend"""

    def __init__(self, backend: Any):
        self.backend = backend

    async def request(self, request: RecommendationRequest) -> str:
        """
        Get recommendations for a validated request

        Args:
            request: Destination, budget, travel type, interests and day count

        Returns:
            Free-text recommendations

        Raises:
            RecommendationRequestError: If the backend fails
        """
        return await self.backend.generate(request)


def build_backend(client: Any):
    """Pick the backend named in settings"""
    if settings.recommendation_backend == "gemini":
        return GeminiBackend()
    if settings.recommendation_backend != "edge_function":
        raise ValueError(f"Unknown recommendation backend: {settings.recommendation_backend}")
    return EdgeFunctionBackend(client)
