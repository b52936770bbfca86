"""Diagnosis service — LLM performs root-cause analysis and picks a remediation."""

from __future__ import annotations

import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from sentinel.detection.models import Alert
from sentinel.healing.models import Diagnosis
from sentinel.llm import reply_text

logger = logging.getLogger("sentinel.healing")

_SYSTEM_PROMPT = """\
You are an autonomous DataOps agent managing a data platform (Snowflake, AWS Glue, Kafka, \
SAP, Informatica, Salesforce). For the incident you are given:

1. Perform root cause analysis. Consider upstream dependencies (did Kafka lag cause Glue \
to run out of memory? did a Glue failure leave Snowflake stale?).
2. Formulate a self-healing action.
3. Simulate its execution and report whether it succeeded.

Respond ONLY with valid JSON matching this schema:
{
  "narrative": "chain-of-thought analysis of the ecosystem failure",
  "action": "specific remediation, e.g. Scale Glue Workers, Restart Kafka Consumer, Trigger Backfill",
  "succeeded": true
}
"""


async def diagnose(llm: BaseChatModel | None, alert: Alert) -> Diagnosis:
    """Diagnose an alert.

    Unlike the other collaborators this one raises on failure; the healing
    sequence owns the fallback so it is applied in exactly one place.
    """
    if llm is None:
        raise RuntimeError("Diagnosis service unavailable: no LLM configured")

    user_content = (
        f'Alert triggered: "{alert.title}" in service "{alert.affected_service}".\n'
        f"Severity: {alert.severity.value}\n"
        f'Description: "{alert.description}"\n'
        f'Suggested fix from correlation: "{alert.suggested_fix}"'
    )

    response = await llm.ainvoke([
        SystemMessage(content=_SYSTEM_PROMPT),
        HumanMessage(content=user_content),
    ])

    result = Diagnosis.model_validate_json(reply_text(response))
    logger.info(
        "Diagnosis for alert=%s: action=%r succeeded=%s",
        alert.id, result.action, result.succeeded,
    )
    return result
