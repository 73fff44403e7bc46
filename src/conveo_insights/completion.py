"""
Thin client for the hosted chat-completion service (OpenAI).

The client makes exactly one attempt per call. Credential rejections
(HTTP 401/403) become `InvalidCredential`; every other failure becomes
`CallFailed`.
"""

import logging
from typing import Any, List, Optional

import httpx
import openai

from .config import Settings, settings as default_settings
from .errors import CallFailed, InvalidCredential
from .prompts import Message, to_openai_messages


logger = logging.getLogger(__name__)

CREDENTIAL_REJECTED = {401, 403}


class CompletionClient:
    def __init__(
        self,
        api_key: str,
        settings: Optional[Settings] = None,
        client: Optional[Any] = None,
    ) -> None:
        self._settings = settings or default_settings
        if client is None:
            client = openai.OpenAI(
                api_key=api_key,
                max_retries=0,
                http_client=httpx.Client(timeout=self._settings.request_timeout),
            )
        self._client = client

    def complete(self, messages: List[Message]) -> str:
        """Send the messages and return the raw text of the first choice."""
        logger.info(
            "Requesting completion: model=%s messages=%d",
            self._settings.openai_model,
            len(messages),
        )
        try:
            completion = self._client.chat.completions.create(
                model=self._settings.openai_model,
                messages=to_openai_messages(messages),
                response_format={"type": "json_object"},
                temperature=self._settings.temperature,
            )
        except openai.OpenAIError as exc:
            raise self._translate(exc) from exc

        choices = getattr(completion, "choices", None) or []
        content = choices[0].message.content if choices else None
        return content if content else "{}"

    def verify_key(self) -> None:
        """Cheap authenticated call used to check a key before saving it."""
        try:
            self._client.models.list()
        except openai.OpenAIError as exc:
            raise self._translate(exc) from exc
        logger.info("API key accepted by completion service")

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self._client.close()

    @staticmethod
    def _translate(exc: Exception) -> Exception:
        status = getattr(exc, "status_code", None)
        if status in CREDENTIAL_REJECTED:
            logger.warning("Completion service rejected the API key (status %s)", status)
            return InvalidCredential()
        logger.error("Completion service call failed: %s", exc)
        return CallFailed()
