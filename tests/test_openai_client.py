import json

import pytest

from jobtracker.core.errors import ParseError, UpstreamError
from jobtracker.services.openai_client import AnalysisClient, ModelAttempt, parse_analysis_reply

REPLY = json.dumps({
    "matchingKeywords": ["Python"],
    "missingKeywords": ["Go"],
    "suggestions": ["Mention Go"],
    "summary": "Decent fit.",
})


def test_primary_model_answers(analysis_client, upstream):
    upstream.completions.replies = [REPLY]

    assert analysis_client.analyze("prompt") == REPLY
    assert [c["model"] for c in upstream.completions.calls] == ["primary-model"]


def test_fallback_used_once_with_same_prompt(analysis_client, upstream):
    upstream.completions.replies = [RuntimeError("quota exceeded"), REPLY]

    assert analysis_client.analyze("the prompt") == REPLY

    calls = upstream.completions.calls
    assert [c["model"] for c in calls] == ["primary-model", "fallback-model"]
    assert calls[0]["messages"] == calls[1]["messages"]
    assert calls[1]["messages"][-1]["content"] == "the prompt"


def test_both_models_fail(analysis_client, upstream):
    upstream.completions.replies = [RuntimeError("quota"), RuntimeError("still down")]

    with pytest.raises(UpstreamError, match="still down"):
        analysis_client.analyze("prompt")
    assert len(upstream.completions.calls) == 2


def test_empty_reply_counts_as_failure(analysis_client, upstream):
    upstream.completions.replies = ["", REPLY]

    assert analysis_client.analyze("prompt") == REPLY
    assert len(upstream.completions.calls) == 2


def test_policy_attempts_are_honoured(upstream):
    client = AnalysisClient(client=upstream, policy=[ModelAttempt("a", 2), ModelAttempt("b", 1)])
    upstream.completions.replies = [RuntimeError("1"), RuntimeError("2"), REPLY]

    assert client.analyze("prompt") == REPLY
    assert [c["model"] for c in upstream.completions.calls] == ["a", "a", "b"]


def test_empty_policy_rejected(upstream):
    with pytest.raises(ValueError):
        AnalysisClient(client=upstream, policy=[])


def test_parse_reply():
    assert parse_analysis_reply(REPLY) == {
        "matching_keywords": ["Python"],
        "missing_keywords": ["Go"],
        "suggestions": ["Mention Go"],
        "summary": "Decent fit.",
    }


def test_parse_reply_strips_code_fence():
    parsed = parse_analysis_reply(f"```json\n{REPLY}\n```")
    assert parsed["summary"] == "Decent fit."


def test_parse_reply_fills_missing_keys():
    parsed = parse_analysis_reply('{"summary": "Short."}')
    assert parsed == {
        "matching_keywords": [],
        "missing_keywords": [],
        "suggestions": [],
        "summary": "Short.",
    }


@pytest.mark.parametrize("raw", ["Sure! Here is your analysis.", "[1, 2, 3]", '{"summary": '])
def test_parse_reply_rejects_non_objects(raw):
    with pytest.raises(ParseError) as info:
        parse_analysis_reply(raw)
    assert info.value.raw == raw
