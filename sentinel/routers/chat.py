"""Operations assistant endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from langchain_core.language_models import BaseChatModel

from sentinel.assistant.chat import answer_question
from sentinel.assistant.models import ChatReply, ChatRequest
from sentinel.deps import get_llm, get_orchestrator
from sentinel.orchestrator import Orchestrator

logger = logging.getLogger("sentinel.assistant")
router = APIRouter(tags=["assistant"])


@router.post("/chat", response_model=ChatReply)
async def chat(
    request: ChatRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
    llm: BaseChatModel | None = Depends(get_llm),
):
    if llm is None:
        raise HTTPException(status_code=503, detail="Assistant unavailable: no LLM configured")
    try:
        reply = await answer_question(
            llm,
            request.message,
            request.history,
            orchestrator.logs.snapshot(),
            orchestrator.alerts.snapshot(),
        )
    except Exception:
        logger.exception("Assistant request failed")
        raise HTTPException(status_code=502, detail="Assistant request failed")
    return ChatReply(reply=reply)
