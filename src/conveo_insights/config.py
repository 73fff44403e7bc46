"""
Configuration utilities for Conveo Insights.

Central place to configure:
- Backend base URL (used by the Streamlit UI)
- OpenAI model and request parameters
- Optional server-side API key
"""

import os
from typing import Optional

from pydantic import BaseModel, Field


class Settings(BaseModel):
    # Base URL where the FastAPI app is running.
    api_base_url: str = Field(
        default_factory=lambda: os.getenv("CONVEO_API_BASE_URL", "http://localhost:8000")
    )

    # Completion service configuration
    openai_model: str = "gpt-4.1-mini"
    temperature: float = 0.2
    request_timeout: float = 60.0

    # Used only when the caller does not send its own key.
    openai_api_key: Optional[str] = Field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))


settings = Settings()
