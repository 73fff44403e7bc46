"""
Credential providers for the completion service.

The API key is handed explicitly to whatever issues the completion request.
A missing or blank key is reported as ``None``; deciding whether that is an
error is up to the caller.
"""

from abc import ABC, abstractmethod
from typing import MutableMapping, Optional


KEY_NAME = "conveo-openai-key"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class CredentialProvider(ABC):
    @abstractmethod
    def get_api_key(self) -> Optional[str]:
        raise NotImplementedError


class StaticCredentialProvider(CredentialProvider):
    def __init__(self, value: Optional[str]) -> None:
        self._value = _clean(value)

    def get_api_key(self) -> Optional[str]:
        return self._value


class KeyStoreCredentialProvider(CredentialProvider):
    """
    Key held in a string key-value store under a fixed name.

    Any mutable mapping works: a plain dict on the server or in tests,
    ``st.session_state`` in the Streamlit UI.
    """

    def __init__(self, store: MutableMapping, key_name: str = KEY_NAME) -> None:
        self._store = store
        self._key_name = key_name

    def get_api_key(self) -> Optional[str]:
        return _clean(self._store.get(self._key_name))

    def save(self, value: Optional[str]) -> None:
        value = _clean(value)
        if value:
            self._store[self._key_name] = value
        else:
            self.clear()

    def clear(self) -> None:
        if self._key_name in self._store:
            del self._store[self._key_name]


class ChainCredentialProvider(CredentialProvider):
    """Ask each provider in turn; the first one holding a key wins."""

    def __init__(self, *providers: CredentialProvider) -> None:
        self._providers = providers

    def get_api_key(self) -> Optional[str]:
        for provider in self._providers:
            key = provider.get_api_key()
            if key:
                return key
        return None
