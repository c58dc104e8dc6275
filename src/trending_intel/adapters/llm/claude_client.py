"""Claude API client for trending analysis."""

import asyncio
import json
import re
from typing import Any

import httpx

from trending_intel.config import Settings
from trending_intel.core import (
    AnalysisEngine,
    AnalysisResult,
    CandidateRepo,
    MalformedResponse,
    UpstreamFailure,
)
from trending_intel.core.validation import validate_analysis
from trending_intel.logging_config import get_logger

logger = get_logger(__name__)

_FENCE_OPEN = re.compile(r"^```(?:json)?\n?")
_FENCE_CLOSE = re.compile(r"\n?```$")


class ClaudeClient(AnalysisEngine):
    """Claude API client implementation."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.api_key = settings.anthropic_api_key
        self.model = settings.claude.model
        self.max_tokens = settings.claude.max_tokens
        self.temperature = settings.claude.temperature
        self.base_url = settings.claude.base_url
        self.max_retries = max(1, settings.claude.max_retries)
        self.initial_retry_delay = settings.claude.initial_retry_delay
        self.timeout = settings.claude.timeout

    async def analyze(self, candidates: list[CandidateRepo]) -> tuple[AnalysisResult, int]:
        """Categorize candidates with one completion request.

        Returns:
            Tuple of (validated analysis, prompt + completion tokens)
        """
        system_prompt = self.settings.prompts.analysis.get("system", "")
        prompt = self.build_prompt(candidates)

        data = await self._call_api(prompt=prompt, system=system_prompt)

        text = self._extract_text(data)
        usage = data.get("usage") or {}
        tokens_used = int(usage.get("input_tokens") or 0) + int(usage.get("output_tokens") or 0)

        json_text = self._strip_code_fence(text)
        try:
            payload = json.loads(json_text)
        except json.JSONDecodeError as e:
            preview = json_text[:200] + "..." if len(json_text) > 200 else json_text
            logger.error("Claude returned invalid JSON: %s", preview)
            raise MalformedResponse(f"Analysis is not valid JSON: {e}") from e

        analysis = validate_analysis(payload, self.settings.prompts.categories)
        return analysis, tokens_used

    def build_prompt(self, candidates: list[CandidateRepo]) -> str:
        lines = [
            f"- {repo.full_name} ({repo.language or 'unknown'}, {repo.stars} stars, "
            f"{repo.forks} forks): {repo.description or 'No description'}"
            for repo in candidates
        ]
        template = self.settings.prompts.analysis.get("user", "")
        # The template contains literal JSON braces, so str.format is not usable here
        return template.replace("{repos}", "\n".join(lines))

    def _parse_body(self, response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponse(f"Messages response is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise MalformedResponse("Messages response is not a JSON object")
        return data

    def _extract_text(self, data: dict[str, Any]) -> str:
        for block in data.get("content") or []:
            if isinstance(block, dict) and block.get("type", "text") == "text" and "text" in block:
                return block["text"]
        raise MalformedResponse("Response has no text content")

    def _strip_code_fence(self, text: str) -> str:
        """Remove a surrounding ``` or ```json fence, if present."""
        text = text.strip()
        if text.startswith("```"):
            text = _FENCE_OPEN.sub("", text)
            text = _FENCE_CLOSE.sub("", text)
        return text

    async def _call_api(self, prompt: str, system: str) -> dict[str, Any]:
        """Call Claude API, retrying on rate limits, server errors and network errors."""
        last_exception: Exception | None = None

        for attempt in range(self.max_retries):
            is_last = attempt == self.max_retries - 1
            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(
                        f"{self.base_url}/messages",
                        headers={
                            "x-api-key": self.api_key,
                            "anthropic-version": "2023-06-01",
                            "content-type": "application/json",
                        },
                        json={
                            "model": self.model,
                            "max_tokens": self.max_tokens,
                            "temperature": self.temperature,
                            "system": system,
                            "messages": [
                                {"role": "user", "content": prompt}
                            ],
                        },
                    )
            except httpx.RequestError as e:
                last_exception = e
                if is_last:
                    break
                retry_delay = self.initial_retry_delay * (2 ** attempt)
                logger.warning("Network error (%s), retrying after %.1fs", e, retry_delay)
                await asyncio.sleep(retry_delay)
                continue

            if response.status_code == 200:
                return self._parse_body(response)

            retryable = response.status_code == 429 or response.status_code >= 500
            last_exception = UpstreamFailure(
                "anthropic",
                f"status {response.status_code}: {response.text[:500]}",
                response.status_code,
            )
            if not retryable or is_last:
                break

            retry_delay = self._get_retry_delay(response, attempt)
            logger.warning(
                "Claude API returned %d, retrying after %.1fs (attempt %d/%d)",
                response.status_code, retry_delay, attempt + 1, self.max_retries,
            )
            await asyncio.sleep(retry_delay)

        if isinstance(last_exception, UpstreamFailure):
            raise last_exception
        raise UpstreamFailure("anthropic", f"request failed: {last_exception}") from last_exception

    def _get_retry_delay(self, response: httpx.Response, attempt: int) -> float:
        """Calculate retry delay from response headers or use exponential backoff."""
        retry_after = response.headers.get("retry-after")
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass

        return self.initial_retry_delay * (2 ** attempt)
