"""Parsing JSON out of model replies."""

import pytest

from pocketcloset.core.exceptions import ExternalServiceError
from pocketcloset.utils.gemini import extract_json, generate_text


def test_plain_object() -> None:
    assert extract_json('{"name": "Look", "garments": ["a"]}') == {"name": "Look", "garments": ["a"]}


def test_plain_array() -> None:
    assert extract_json('[{"name": "A"}, {"name": "B"}]', kind="array") == [{"name": "A"}, {"name": "B"}]


def test_array_wrapped_in_object() -> None:
    assert extract_json('{"outfits": [{"name": "A"}]}', kind="array") == [{"name": "A"}]


def test_fenced_block() -> None:
    text = 'Here you go:\n```json\n{"name": "Look"}\n```\nEnjoy!'

    assert extract_json(text) == {"name": "Look"}


def test_embedded_in_prose_with_brackets_in_strings() -> None:
    text = 'Sure! {"name": "Look {casual}", "garments": ["Tee ]"]} Hope it helps.'

    assert extract_json(text) == {"name": "Look {casual}", "garments": ["Tee ]"]}


def test_array_embedded_in_prose() -> None:
    assert extract_json('Outfits: ["White tee", "Blue jeans"] done', kind="array") == ["White tee", "Blue jeans"]


@pytest.mark.parametrize("text", ["", "no json here", "{broken", "[1, 2"])
def test_unusable_replies(text: str) -> None:
    assert extract_json(text) is None
    assert extract_json(text, kind="array") is None


def test_wrong_shape_is_not_returned() -> None:
    assert extract_json("[1, 2, 3]", kind="object") is None


def test_generate_text_without_key_raises() -> None:
    with pytest.raises(ExternalServiceError):
        generate_text("hello")


def test_generate_text_reads_candidate_text(mocker) -> None:
    mocker.patch("pocketcloset.utils.gemini.settings.GEMINI_API_KEY", "test-key")
    response = mocker.Mock(status_code=200)
    response.json.return_value = {"candidates": [{"content": {"parts": [{"text": '{"ok": true}'}]}}]}
    post = mocker.patch("pocketcloset.utils.gemini.requests.post", return_value=response)

    assert generate_text("hello") == '{"ok": true}'
    assert post.call_args.kwargs["params"] == {"key": "test-key"}
    config = post.call_args.kwargs["json"]["generationConfig"]
    assert config["responseMimeType"] == "application/json"


def test_generate_text_http_error(mocker) -> None:
    mocker.patch("pocketcloset.utils.gemini.settings.GEMINI_API_KEY", "test-key")
    mocker.patch(
        "pocketcloset.utils.gemini.requests.post",
        return_value=mocker.Mock(status_code=429, text="quota"),
    )

    with pytest.raises(ExternalServiceError):
        generate_text("hello")
