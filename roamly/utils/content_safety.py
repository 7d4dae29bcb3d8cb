"""Content safety checks for generated recommendations"""
from typing import Any, Dict, List
from langchain_google_genai import HarmBlockThreshold, HarmCategory


class ContentSafetyError(Exception):
    """Raised when generated text fails safety checks"""
    def __init__(self, message: str, safety_ratings: List[Dict] = None):
        self.message = message
        self.safety_ratings = safety_ratings or []
        super().__init__(self.message)


def configure_safety_settings():
    """
    Gemini safety settings

    BLOCK_ONLY_HIGH keeps ordinary travel content (nightlife, local food,
    adventure sports) from being flagged.
    """
    return {
        HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_ONLY_HIGH,
        HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_ONLY_HIGH,
        HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_ONLY_HIGH,
        HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_ONLY_HIGH,
    }


def check_content_safety(response: Any) -> bool:
    """
    Check a LangChain chat response against the model's safety ratings

    Args:
        response: AIMessage returned by ChatGoogleGenerativeAI

    Returns:
        True if safe

    Raises:
        ContentSafetyError: If a rating is MEDIUM or HIGH, or the answer was blocked
    """
    metadata = getattr(response, "response_metadata", None) or {}

    for rating in metadata.get("safety_ratings", []) or []:
        category = rating.get("category", "UNKNOWN")
        probability = rating.get("probability", "UNKNOWN")
        if probability in ("MEDIUM", "HIGH") or rating.get("blocked"):
            raise ContentSafetyError(
                f"Content flagged for {category} with probability {probability}",
                safety_ratings=metadata["safety_ratings"]
            )

    if metadata.get("finish_reason") == "SAFETY":
        raise ContentSafetyError("Content blocked by safety filters")

    return True
