"""
Insight workflow: input checks, prompt building, completion call, normalization.

Nothing here holds state between calls. A failed call leaves no partial
result behind; the caller simply gets the exception.
"""

import logging
from typing import Callable, Optional, Union

from .completion import CompletionClient
from .credentials import CredentialProvider
from .errors import CallFailed, EmptyInput
from .insights import InsightResult, normalize_insights
from .prompts import PromptMode, build_messages
from .studies import Study


logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], CompletionClient]


class InsightService:
    def __init__(
        self,
        credentials: CredentialProvider,
        client_factory: ClientFactory = CompletionClient,
    ) -> None:
        self._credentials = credentials
        self._client_factory = client_factory

    def validate_key(self, api_key: Optional[str]) -> str:
        """Check a key against the service and return it stripped."""
        key = (api_key or "").strip()
        if not key:
            raise EmptyInput("Please enter an API key.")
        client = self._client_factory(key)
        try:
            client.verify_key()
        except CallFailed as exc:
            raise CallFailed("Could not check the API key. Please try again.") from exc
        finally:
            client.close()
        return key

    def generate(
        self,
        study: Study,
        snippet: str,
        mode: Union[PromptMode, str] = PromptMode.DEFAULT,
        objective: Optional[str] = None,
    ) -> InsightResult:
        if not snippet or not snippet.strip():
            raise EmptyInput("Please paste an interview snippet.")
        api_key = self._credentials.get_api_key()
        if not api_key:
            raise EmptyInput("Please set your OpenAI key on the home page first.")

        mode = PromptMode(mode)
        messages = build_messages(mode, study.title, study.persona, snippet, objective)
        logger.info("Generating insights for study %s (mode=%s)", study.id, mode.value)

        client = self._client_factory(api_key)
        try:
            raw = client.complete(messages)
        finally:
            client.close()
        result = normalize_insights(raw)
        logger.info("Received summary with %d themes for study %s", len(result.themes), study.id)
        return result
