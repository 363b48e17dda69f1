import asyncio
import logging
from abc import ABC, abstractmethod

from app.config import settings

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Abstract base class for AI providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    async def generate(self, prompt: str, model: str | None = None) -> dict:
        """
        Run a single prompt that is expected to answer with a JSON object.

        Returns:
            dict with keys:
                - text (str | None): the generated text
                - provider (str): provider name
                - model (str): model used
                - status: "success" or "failed"
                - error (str | None): error message on failure
        """
        ...


class GeminiProvider(BaseProvider):
    """Provider for Google Gemini API using the official SDK."""

    def __init__(self, api_key: str | None, model: str, timeout: float = 30.0):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "gemini"

    def _result(self, model: str, text: str | None = None, error: str | None = None) -> dict:
        return {
            "text": text,
            "provider": self.name,
            "model": model,
            "status": "failed" if error else "success",
            "error": error,
        }

    async def generate(self, prompt: str, model: str | None = None) -> dict:
        used_model = model or self.model
        if not self.api_key:
            return self._result(used_model, error="GEMINI_API_KEY is not configured")
        try:
            import google.generativeai as genai
            # module-level config; set it before every call
            genai.configure(api_key=self.api_key)

            g_model = genai.GenerativeModel(
                model_name=used_model,
                generation_config={"response_mime_type": "application/json"},
            )
            response = await asyncio.wait_for(
                g_model.generate_content_async(prompt), timeout=self.timeout
            )
            return self._result(used_model, text=response.text)
        except asyncio.TimeoutError:
            logger.warning("Gemini call timed out after %ss", self.timeout)
            return self._result(used_model, error="Timeout")
        except Exception as e:
            logger.exception("Gemini call failed")
            return self._result(used_model, error=str(e))


def get_ai_provider() -> BaseProvider:
    """FastAPI dependency; tests override it with a canned provider."""
    return GeminiProvider(
        api_key=settings.GEMINI_API_KEY,
        model=settings.AI_MODEL,
        timeout=settings.AI_TIMEOUT_SECONDS,
    )
