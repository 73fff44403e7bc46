"""
FastAPI backend for Conveo Insights.

Exposes:
- Study catalog endpoints for the web UI
- API key validation
- Insight generation for a pasted interview snippet
"""

import logging
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .completion import CompletionClient
from .config import Settings, settings
from .credentials import ChainCredentialProvider, StaticCredentialProvider
from .errors import InsightError
from .insights import InsightResult
from .prompts import PromptMode
from .service import ClientFactory, InsightService
from .studies import Study, get_study, list_studies


logger = logging.getLogger(__name__)


class ValidateKeyRequest(BaseModel):
    api_key: str = ""


class ValidateKeyResponse(BaseModel):
    valid: bool
    message: str


class InsightRequest(BaseModel):
    snippet: str = ""
    mode: PromptMode = PromptMode.DEFAULT
    objective: Optional[str] = None


def get_settings() -> Settings:
    return settings


def get_client_factory() -> ClientFactory:
    return CompletionClient


def create_app() -> FastAPI:
    app = FastAPI(title="Conveo Insights", version="0.1.0")

    # Allow local UIs (Streamlit) to talk to the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(InsightError)
    async def insight_error_handler(request: Request, exc: InsightError) -> JSONResponse:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/studies", response_model=List[Study])
    def studies() -> List[Study]:
        return list_studies()

    @app.get("/studies/{study_id}", response_model=Study)
    def study_detail(study_id: str) -> Study:
        return get_study(study_id)

    @app.get("/modes")
    def modes() -> List[str]:
        return [mode.value for mode in PromptMode]

    @app.post("/credentials/validate", response_model=ValidateKeyResponse)
    def validate_key(
        payload: ValidateKeyRequest,
        client_factory: ClientFactory = Depends(get_client_factory),
    ) -> ValidateKeyResponse:
        """
        Check an API key against the completion service. The key is not stored.
        """
        service = InsightService(StaticCredentialProvider(None), client_factory)
        service.validate_key(payload.api_key)
        return ValidateKeyResponse(valid=True, message="API key is valid.")

    @app.post("/studies/{study_id}/insights", response_model=InsightResult)
    def generate_insights(
        study_id: str,
        payload: InsightRequest,
        x_openai_key: Optional[str] = Header(default=None),
        app_settings: Settings = Depends(get_settings),
        client_factory: ClientFactory = Depends(get_client_factory),
    ) -> InsightResult:
        """
        Summarize a snippet for a study. The key comes from the ``X-OpenAI-Key``
        header, falling back to the server's configured key.
        """
        study = get_study(study_id)
        credentials = ChainCredentialProvider(
            StaticCredentialProvider(x_openai_key),
            StaticCredentialProvider(app_settings.openai_api_key),
        )
        service = InsightService(credentials, client_factory)
        return service.generate(study, payload.snippet, payload.mode, payload.objective)

    return app


app = create_app()
