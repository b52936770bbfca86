"""
Tests for the LLM-backed parser, correlation and diagnosis services.
"""
import json

import pytest
from langchain_core.language_models import FakeListChatModel

from sentinel.assistant.chat import answer_question, build_chat_context
from sentinel.assistant.models import ChatMessage
from sentinel.detection.correlator import propose_alerts
from sentinel.detection.models import Alert, AlertSeverity
from sentinel.healing.diagnosis import diagnose
from sentinel.ingestion.models import LogLevel
from sentinel.ingestion.parser import parse_logs

from conftest import make_log

RAW_LOGS = (
    "2024-03-31T10:00:00Z kafka WARN consumer lag 50000\n"
    "2024-03-31T10:05:00Z glue ERROR Java heap space"
)


def _llm(*responses: str) -> FakeListChatModel:
    return FakeListChatModel(responses=list(responses))


@pytest.mark.asyncio
async def test_parse_logs_builds_records():
    reply = json.dumps([
        {"timestamp": "2024-03-31T10:00:00Z", "service": "Kafka", "level": "warn", "message": "Consumer lag"},
        {"timestamp": "not a date", "service": "AWS Glue", "level": "ERROR", "message": "Heap space"},
    ])
    records = await parse_logs(_llm(reply), RAW_LOGS)

    assert [r.level for r in records] == [LogLevel.WARNING, LogLevel.ERROR]
    assert records[0].timestamp.year == 2024
    assert records[0].raw == RAW_LOGS.split("\n")[0]
    assert records[1].raw == RAW_LOGS.split("\n")[1]
    assert all(r.id.startswith("parsed-") for r in records)
    assert len({r.id for r in records}) == 2


@pytest.mark.asyncio
async def test_parse_logs_accepts_fenced_reply():
    reply = '```json\n[{"service": "SAP", "level": "CRITICAL", "message": "IDoc failed"}]\n```'
    records = await parse_logs(_llm(reply), "SAP IDoc failed")

    assert len(records) == 1
    assert records[0].service == "SAP"


@pytest.mark.asyncio
async def test_parse_logs_skips_invalid_entries():
    reply = json.dumps([{"service": "SAP"}, {"service": "SAP", "level": "ERROR", "message": "ok"}])
    records = await parse_logs(_llm(reply), "a\nb")
    assert [r.message for r in records] == ["ok"]


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", ["not json", '{"service": "SAP"}'])
async def test_parse_logs_degrades_to_empty(reply):
    assert await parse_logs(_llm(reply), RAW_LOGS) == []


@pytest.mark.asyncio
async def test_parse_logs_without_llm():
    assert await parse_logs(None, RAW_LOGS) == []


@pytest.mark.asyncio
async def test_propose_alerts_validates_drafts():
    reply = json.dumps([
        {
            "title": "Glue OOM cascade",
            "description": "Glue failure starved Snowflake",
            "severity": "CRITICAL",
            "affected_service": "Snowflake",
            "suggested_fix": "Scale Glue workers",
            "related_log_ids": ["log-1"],
        },
        {"title": "missing service"},
    ])
    drafts = await propose_alerts(_llm(reply), [make_log("log-1", level=LogLevel.ERROR)])

    assert len(drafts) == 1
    assert drafts[0].severity == AlertSeverity.CRITICAL
    assert drafts[0].related_log_ids == ["log-1"]


@pytest.mark.asyncio
async def test_propose_alerts_degrades_to_empty():
    records = [make_log("log-1", level=LogLevel.ERROR)]
    assert await propose_alerts(_llm("<html>rate limited</html>"), records) == []
    assert await propose_alerts(None, records) == []
    assert await propose_alerts(_llm("[]"), []) == []


@pytest.mark.asyncio
async def test_diagnose_parses_reply():
    alert = Alert(title="Kafka lag", severity="high", affected_service="Kafka")
    reply = '{"narrative": "Consumer stuck", "action": "Restart Kafka Consumer", "succeeded": true}'

    result = await diagnose(_llm(reply), alert)

    assert result.action == "Restart Kafka Consumer"
    assert result.succeeded is True


@pytest.mark.asyncio
async def test_diagnose_raises_on_malformed_reply():
    alert = Alert(title="Kafka lag", severity="high", affected_service="Kafka")
    with pytest.raises(Exception):
        await diagnose(_llm("I could not decide"), alert)
    with pytest.raises(RuntimeError):
        await diagnose(None, alert)


def test_chat_context_includes_problems_and_recent_activity():
    logs = [make_log(f"info-{i}") for i in range(12)]
    logs.insert(0, make_log("err-1", service="SAP", level=LogLevel.ERROR, message="IDoc failed"))
    alerts = [Alert(title="IDoc failure", severity="high", affected_service="SAP")]

    context = build_chat_context(logs, alerts)

    assert "err-1" in context
    assert "IDoc failure" in context
    assert "info-11" in context
    assert "info-0" not in context.split("RECENT SYSTEM ACTIVITY")[1]


@pytest.mark.asyncio
async def test_answer_question_returns_model_text():
    history = [ChatMessage(role="user", text="hi"), ChatMessage(role="model", text="hello")]
    reply = await answer_question(_llm("Glue ran out of memory."), "What failed?", history, [], [])
    assert reply == "Glue ran out of memory."
