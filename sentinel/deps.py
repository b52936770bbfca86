"""FastAPI dependencies resolving the singletons created at startup."""

from __future__ import annotations

from fastapi import HTTPException, Request
from langchain_core.language_models import BaseChatModel

from sentinel.orchestrator import Orchestrator


def get_orchestrator(request: Request) -> Orchestrator:
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=503, detail="Orchestrator not initialized")
    return orchestrator


def get_llm(request: Request) -> BaseChatModel | None:
    return getattr(request.app.state, "llm", None)
