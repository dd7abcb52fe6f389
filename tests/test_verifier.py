"""Tests del verificador de categorías con OpenAI."""

from unittest.mock import MagicMock, patch

import pytest

from taxonomies.mapping.verifier import (
    OpenAIVerifier,
    build_prompt,
    get_verifier,
    parse_answer,
)


def make_client(content):
    client = MagicMock()
    message = MagicMock(content=content)
    client.chat.completions.create.return_value = MagicMock(choices=[MagicMock(message=message)])
    return client


def test_classify_returns_chosen_id(shoe_categories):
    client = make_client('{"category_id": 502}')
    verifier = OpenAIVerifier(api_key="sk-test", model="gpt-test", client=client)

    assert verifier.classify(shoe_categories, "NAME: Red running shoes") == 502

    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-test"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert "- ID 502: Sports | Shoes | Running shoes" in kwargs["messages"][1]["content"]


def test_classify_without_candidates_skips_api():
    client = make_client('{"category_id": 1}')
    verifier = OpenAIVerifier(api_key="sk-test", client=client)

    assert verifier.classify([], "NAME: Boty") is None
    client.chat.completions.create.assert_not_called()


def test_api_errors_propagate(shoe_categories):
    client = MagicMock()
    client.chat.completions.create.side_effect = RuntimeError("rate limit")
    verifier = OpenAIVerifier(api_key="sk-test", client=client)

    with pytest.raises(RuntimeError):
        verifier.classify(shoe_categories, "NAME: Boty")


@pytest.mark.parametrize("content, expected", [
    ('{"category_id": 12}', 12),
    ('{"category_id": "12"}', 12),
    ('```json\n{"category_id": 7}\n```', 7),
    ('{"category_id": null}', None),
    ('{"category_id": true}', None),
    ('{"category_id": "abc"}', None),
    ('[1, 2]', None),
    ("no es JSON", None),
])
def test_parse_answer(content, expected):
    assert parse_answer(content) == expected


def test_build_prompt_lists_candidates(shoe_categories):
    prompt = build_prompt(shoe_categories, "NAME: Boty")

    assert "NAME: Boty" in prompt
    assert "- ID 501: Sports | Shoes" in prompt


def test_get_verifier_without_key():
    assert get_verifier({"openai_api_key": ""}) is None


def test_get_verifier_with_key():
    with patch("taxonomies.mapping.verifier.openai.OpenAI") as openai_cls:
        verifier = get_verifier({
            "openai_api_key": "sk-test",
            "openai_model": "gpt-4o",
            "ai_timeout": 5,
        })

    assert isinstance(verifier, OpenAIVerifier)
    assert verifier.model == "gpt-4o"
    openai_cls.assert_called_once_with(api_key="sk-test", timeout=5.0, max_retries=1)
