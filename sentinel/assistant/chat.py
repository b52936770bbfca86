"""Operations assistant — answers questions about system health from store context."""

from __future__ import annotations

import json
import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from sentinel.assistant.models import ChatMessage
from sentinel.detection.models import Alert, AlertStatus
from sentinel.ingestion.models import LogRecord

logger = logging.getLogger("sentinel.assistant")

_RECENT_LOGS = 10

_SYSTEM_PROMPT = """\
You are "DataOps - Chat", an AI Site Reliability Engineer for a complex data ecosystem: \
Snowflake, SAP, Salesforce, Amazon Connect, Sales System, Kafka, Informatica and AWS Glue.

Your capabilities:
1. Answer queries about system health.
2. Explain correlations between failures (e.g. "Glue failed, which left Snowflake stale").
3. Suggest fixes based on the logs.

Always reference specific log entries or services when answering. \
Be professional, concise and technical.

Context:
{context}
"""


def build_chat_context(logs: list[LogRecord], alerts: list[Alert]) -> str:
    open_alerts = [a.model_dump(mode="json") for a in alerts if a.status != AlertStatus.RESOLVED]
    # Every failure is included so the model can correlate across services.
    problems = [r.model_dump(mode="json", exclude={"raw"}) for r in logs if r.is_problem]
    recent = [r.model_dump(mode="json", exclude={"raw"}) for r in logs[-_RECENT_LOGS:]]

    return (
        f"Open alerts: {len(open_alerts)}\n"
        f"Total logs scanned: {len(logs)}\n\n"
        f"OPEN ALERTS (incidents):\n{json.dumps(open_alerts)}\n\n"
        f"ALL DETECTED FAILURES AND WARNINGS:\n{json.dumps(problems)}\n\n"
        f"RECENT SYSTEM ACTIVITY (last {_RECENT_LOGS} events):\n{json.dumps(recent)}"
    )


async def answer_question(
    llm: BaseChatModel,
    question: str,
    history: list[ChatMessage],
    logs: list[LogRecord],
    alerts: list[Alert],
) -> str:
    messages: list[BaseMessage] = [
        SystemMessage(content=_SYSTEM_PROMPT.format(context=build_chat_context(logs, alerts))),
    ]
    for turn in history:
        if turn.role == "user":
            messages.append(HumanMessage(content=turn.text))
        else:
            messages.append(AIMessage(content=turn.text))
    messages.append(HumanMessage(content=question))

    response = await llm.ainvoke(messages)
    logger.info("Assistant answered (%d history turns)", len(history))
    return response.content if isinstance(response.content, str) else str(response.content)
