"""Chat model construction and reply helpers shared by the inference collaborators."""

from __future__ import annotations

from langchain_core.language_models import BaseChatModel

from sentinel.config import Settings


def build_llm(cfg: Settings) -> BaseChatModel | None:
    """Build the configured chat model, or None when no credential is set.

    Raises ValueError for an unknown provider.
    """
    if cfg.llm_provider == "google":
        if not cfg.google_api_key:
            return None
        from langchain_google_genai import ChatGoogleGenerativeAI
        return ChatGoogleGenerativeAI(
            model=cfg.llm_model,
            google_api_key=cfg.google_api_key,
            temperature=cfg.llm_temperature,
        )
    elif cfg.llm_provider == "openai":
        if not cfg.openai_api_key:
            return None
        from langchain_openai import ChatOpenAI
        return ChatOpenAI(
            model=cfg.llm_model,
            api_key=cfg.openai_api_key,
            temperature=cfg.llm_temperature,
        )
    elif cfg.llm_provider == "anthropic":
        if not cfg.anthropic_api_key:
            return None
        from langchain_anthropic import ChatAnthropic
        return ChatAnthropic(
            model=cfg.llm_model,
            api_key=cfg.anthropic_api_key,
            temperature=cfg.llm_temperature,
            max_tokens=4096,
        )
    else:
        raise ValueError(f"Unsupported LLM provider: {cfg.llm_provider}")


def reply_text(response) -> str:
    """Return the model reply with any markdown code fence removed."""
    content = response.content
    if isinstance(content, list):
        content = "".join(
            part.get("text", "") if isinstance(part, dict) else str(part) for part in content
        )
    raw = content.strip()
    if raw.startswith("```"):
        raw = raw.split("\n", 1)[1].rsplit("```", 1)[0]
    return raw.strip()
