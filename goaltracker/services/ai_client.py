"""
Client for an OpenAI-compatible chat-completions API.

Used only to attach an optional free-text plan to generated goal plans.
Failures are logged and turned into ``None``; they never reach the caller
as errors.
"""
from typing import Any, Dict, Optional
import httpx
from goaltracker.config import Settings, get_settings
from goaltracker.exceptions import AIServiceError, ServiceUnavailableError
from goaltracker.utils.logger import get_logger

logger = get_logger(__name__)


def build_plan_prompt(goal: str, timeframe: str) -> str:
    return (
        f"Create a step-by-step plan to achieve the goal: \"{goal}\" within the timeframe: "
        f"{timeframe}. Include milestones and rough time estimates."
    )


class AIPlanClient:
    """Thin async HTTP client for plan text generation."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings or get_settings()
        self.base_url = self.settings.OPENAI_BASE_URL.rstrip("/")
        self.model = self.settings.OPENAI_MODEL
        self.client = client or httpx.AsyncClient(timeout=self.settings.AI_REQUEST_TIMEOUT)

        logger.info(f"AI plan client initialized: {self.base_url} ({self.model})")

    async def complete(self, prompt: str) -> str:
        """Send ``prompt`` and return the first completion's text."""
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {"Authorization": f"Bearer {self.settings.OPENAI_API_KEY}"}

        try:
            response = await self.client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers=headers,
            )
        except httpx.RequestError as e:
            raise ServiceUnavailableError(f"AI service unavailable: {e}")

        if response.status_code != 200:
            raise AIServiceError(
                f"AI completion failed: {response.status_code}",
                context={"status_code": response.status_code},
            )

        try:
            data: Dict[str, Any] = response.json()
            return data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise AIServiceError(f"Unexpected AI response format: {e}")

    async def generate_plan_text(self, goal: str, timeframe: str) -> Optional[str]:
        """Return a free-text plan, or ``None`` when the AI service fails."""
        try:
            return await self.complete(build_plan_prompt(goal, timeframe))
        except AIServiceError as e:
            logger.warning(f"AI plan generation failed: {e}")
            return None

    async def close(self):
        await self.client.aclose()
