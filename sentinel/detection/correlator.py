"""Correlation service — LLM groups problematic logs into candidate incidents."""

from __future__ import annotations

import json
import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import ValidationError

from sentinel.detection.models import AlertDraft
from sentinel.ingestion.models import LogRecord
from sentinel.llm import reply_text

logger = logging.getLogger("sentinel.detection")

_SYSTEM_PROMPT = """\
You are an expert DataOps incident analyst watching a diverse data ecosystem \
(Snowflake, SAP, Salesforce, AWS Glue, Kafka, Informatica, Amazon Connect, Sales System). \
Identify correlations between failures. For example, if Glue fails and then Snowflake \
has missing data, group them into a single incident, or link them.

Create alerts for critical issues. For each alert, list in "related_log_ids" the exact \
"id" strings of the logs that led to it.

Respond ONLY with a JSON array of alerts:
[
  {
    "title": "short incident title",
    "description": "what is failing and how the failures are connected",
    "severity": "low | medium | high | critical",
    "affected_service": "the service where the incident surfaces",
    "suggested_fix": "the most promising remediation",
    "related_log_ids": ["log id", "log id"]
  }
]
"""


async def propose_alerts(llm: BaseChatModel | None, records: list[LogRecord]) -> list[AlertDraft]:
    """Ask the LLM for alert drafts. Never raises; returns [] on any failure."""
    if llm is None:
        logger.warning("Correlation service unavailable: no LLM configured")
        return []
    if not records:
        return []

    payload = [r.model_dump(mode="json", exclude={"raw"}) for r in records]
    try:
        response = await llm.ainvoke([
            SystemMessage(content=_SYSTEM_PROMPT),
            HumanMessage(content=f"Logs:\n{json.dumps(payload)}"),
        ])
        parsed = json.loads(reply_text(response))
    except Exception:
        logger.exception("Alert correlation failed for %d records", len(records))
        return []

    if not isinstance(parsed, list):
        logger.warning("Correlation service returned %s instead of a list", type(parsed).__name__)
        return []

    drafts = []
    for item in parsed:
        try:
            drafts.append(AlertDraft.model_validate(item))
        except ValidationError:
            logger.warning("Skipping malformed alert draft: %s", item)

    logger.info("Correlation proposed %d alerts from %d records", len(drafts), len(records))
    return drafts
