"""Chat-completions client used by the judge and the query generator."""

from __future__ import annotations

import httpx

from ..config.settings import AppSettings
from ..utils.errors import JudgeError, MissingConfigurationError
from ..utils.logging import get_logger

logger = get_logger(__name__)


class ChatCompletionClient:
    """Minimal OpenAI chat-completions client over a shared httpx client."""

    def __init__(self, settings: AppSettings, client: httpx.AsyncClient):
        self.config = settings.judge
        self.api_key = settings.get_api_key("openai")
        self.client = client

    async def complete(
        self,
        system: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Send one system + user exchange and return the reply text.

        Raises:
            MissingConfigurationError: If OPENAI_API_KEY is not set
            JudgeError: On transport failure or a non-2xx response
        """
        if not self.api_key:
            raise MissingConfigurationError("OPENAI_API_KEY")

        try:
            response = await self.client.post(
                self.config.base_url,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.api_key}",
                },
                json={
                    "model": self.config.model,
                    "messages": [
                        {"role": "system", "content": system},
                        {"role": "user", "content": prompt},
                    ],
                    "temperature": temperature,
                    "max_tokens": max_tokens,
                },
                timeout=self.config.timeout,
            )
        except httpx.HTTPError as e:
            raise JudgeError.from_exception(
                e, message=f"OpenAI request failed: {str(e) or e.__class__.__name__}"
            ) from e

        if not response.is_success:
            raise JudgeError(
                f"OpenAI API error: {response.status_code} - {response.text}",
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise JudgeError.from_exception(
                e, message="OpenAI API returned malformed JSON"
            ) from e

        # A reply without content is treated as empty text, not a transport error
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            logger.warning("OpenAI reply had no message content")
            return ""
        return content if isinstance(content, str) else ""
