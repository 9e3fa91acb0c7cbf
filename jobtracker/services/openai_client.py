"""
OpenAI-compatible completion client for resume analysis.

Uses the openai library; any OpenAI-compatible endpoint works via
OPENAI_BASE_URL.

Fallback policy:
- An ordered list of (model, max_attempts) pairs, tried in sequence
- Default: primary model once, then the smaller fallback model once
- The SDK's own retries are switched off, so the policy is the only retry
- No backoff; when every attempt fails, UpstreamError chains the last error
"""
import json
from typing import Any, List, NamedTuple, Optional, Sequence

from openai import OpenAI

from jobtracker.core.config import get_settings, Settings
from jobtracker.core.errors import ParseError, UpstreamError
from jobtracker.core.logger import get_logger
from jobtracker.services.prompt_builder import ANALYSIS_SYSTEM_PROMPT

logger = get_logger(__name__)


class ModelAttempt(NamedTuple):
    model: str
    max_attempts: int = 1


def default_policy(settings: Settings) -> List[ModelAttempt]:
    return [
        ModelAttempt(settings.analysis_primary_model, 1),
        ModelAttempt(settings.analysis_fallback_model, 1),
    ]


class AnalysisClient:
    """
    Wrapper around chat completions with a fixed model fallback policy.
    Holds no per-call state.
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        policy: Optional[Sequence[ModelAttempt]] = None,
        temperature: Optional[float] = None,
    ):
        settings = get_settings()
        self.client = client if client is not None else OpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.openai_timeout_seconds,
            max_retries=0
        )
        self.policy = list(policy) if policy is not None else default_policy(settings)
        if not self.policy:
            raise ValueError("Fallback policy needs at least one model")
        self.temperature = settings.analysis_temperature if temperature is None else temperature

    def _call_api(self, model: str, prompt: str) -> str:
        """
        Single chat completion call.
        Returns raw text response.
        """
        response = self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
                {"role": "user", "content": prompt}
            ],
            temperature=self.temperature
        )
        content = response.choices[0].message.content
        if not content:
            raise ValueError(f"Empty reply from {model}")
        return content

    def analyze(self, prompt: str) -> str:
        """Run the prompt through the policy; first successful reply wins."""
        last_error: Optional[Exception] = None
        for step in self.policy:
            for attempt in range(1, step.max_attempts + 1):
                try:
                    return self._call_api(step.model, prompt)
                except Exception as e:
                    last_error = e
                    logger.warning(
                        "Analysis call to %s failed (attempt %d/%d): %s",
                        step.model, attempt, step.max_attempts, e
                    )
        raise UpstreamError(f"Analysis service unavailable: {last_error}") from last_error

    def test_connection(self) -> bool:
        """Test if the completion API is reachable with the first model"""
        try:
            response = self._call_api(self.policy[0].model, "Reply with exactly: OK")
            return "OK" in response.upper()
        except Exception as e:
            logger.warning("Completion API connection failed: %s", e)
            return False


def _strip_code_fence(text: str) -> str:
    """Models sometimes wrap JSON in markdown code blocks."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if v is not None and str(v).strip()]


def parse_analysis_reply(raw: str) -> dict:
    """
    Parse the model reply into the four analysis fields.

    Raises:
        ParseError (carrying raw) if the reply is not a JSON object
    """
    try:
        data = json.loads(_strip_code_fence(raw))
    except (json.JSONDecodeError, TypeError) as e:
        raise ParseError("Failed to parse AI response", raw=raw) from e

    if not isinstance(data, dict):
        raise ParseError("Failed to parse AI response", raw=raw)

    summary = data.get("summary")
    return {
        "matching_keywords": _string_list(data.get("matchingKeywords")),
        "missing_keywords": _string_list(data.get("missingKeywords")),
        "suggestions": _string_list(data.get("suggestions")),
        "summary": summary.strip() if isinstance(summary, str) else "",
    }


# Singleton instance
_analysis_client: AnalysisClient = None


def get_analysis_client() -> AnalysisClient:
    """Get or create analysis client (singleton pattern)"""
    global _analysis_client
    if _analysis_client is None:
        _analysis_client = AnalysisClient()
    return _analysis_client
