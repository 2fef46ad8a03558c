"""Tests for chat payload building and upstream response parsing."""

import pytest

from chatgate.core.modules.chat.models import ChatMessage, InlineImage, Persona, PersonaId
from chatgate.core.modules.chat.utils import attach_image, build_generation_payload, extract_reply, parse_data_url
from chatgate.errors import UpstreamError, ValidationError


@pytest.fixture
def persona():
    return Persona(id=PersonaId.WORMGPT, model="gemini-test", system_prompt="Be technical.", temperature=0.9)


class TestParseDataUrl:
    """Tests for parse_data_url function."""

    def test_png(self):
        image = parse_data_url("data:image/png;base64,iVBORw0KGgo=")
        assert image.mime_type == "image/png"
        assert image.data == "iVBORw0KGgo="

    def test_extra_parameters(self):
        image = parse_data_url("data:image/jpeg;name=photo.jpg;base64,/9j/4AAQ")
        assert image.mime_type == "image/jpeg"
        assert image.data == "/9j/4AAQ"

    @pytest.mark.parametrize("value", ["", "not a url", "data:image/png,abc", "data:;base64,abc", "data:image/png;base64,"])
    def test_malformed_raises(self, value):
        with pytest.raises(ValidationError, match="Invalid image data URL"):
            parse_data_url(value)


class TestAttachImage:
    """Tests for attach_image function."""

    def test_appends_part_to_last_message(self):
        messages = [
            ChatMessage(role="user", parts=[{"text": "hi"}]),
            ChatMessage(role="model", parts=[{"text": "hello"}]),
            ChatMessage(role="user", parts=[{"text": "what is this?"}]),
        ]
        result = attach_image(messages, InlineImage(mime_type="image/png", data="AAAA"))

        assert result[-1].parts == [
            {"text": "what is this?"},
            {"inlineData": {"mimeType": "image/png", "data": "AAAA"}},
        ]
        assert result[:2] == messages[:2]

    def test_does_not_mutate_input(self):
        """Test that the caller's conversation is left untouched."""
        messages = [ChatMessage(role="user", parts=[{"text": "look"}])]
        attach_image(messages, InlineImage(mime_type="image/png", data="AAAA"))
        assert messages[0].parts == [{"text": "look"}]

    def test_last_message_without_parts(self):
        result = attach_image([ChatMessage(role="user")], InlineImage(mime_type="image/gif", data="R0lG"))
        assert result[0].parts == [{"inlineData": {"mimeType": "image/gif", "data": "R0lG"}}]


class TestBuildGenerationPayload:
    """Tests for build_generation_payload function."""

    def test_generation_config(self, persona):
        payload = build_generation_payload([ChatMessage(role="user", parts=[{"text": "hi"}])], persona)
        assert payload["generationConfig"] == {"maxOutputTokens": 4096, "temperature": 0.9, "topP": 0.95, "topK": 40}

    def test_safety_settings_cover_all_categories(self, persona):
        payload = build_generation_payload([ChatMessage(role="user", parts=[{"text": "hi"}])], persona)
        assert {s["category"] for s in payload["safetySettings"]} == {
            "HARM_CATEGORY_HARASSMENT",
            "HARM_CATEGORY_HATE_SPEECH",
            "HARM_CATEGORY_SEXUALLY_EXPLICIT",
            "HARM_CATEGORY_DANGEROUS_CONTENT",
        }
        assert {s["threshold"] for s in payload["safetySettings"]} == {"BLOCK_NONE"}

    def test_contents_and_system_instruction(self, persona):
        payload = build_generation_payload([ChatMessage(role="user", parts=[{"text": "hi"}])], persona)
        assert payload["contents"] == [{"role": "user", "parts": [{"text": "hi"}]}]
        assert payload["systemInstruction"] == {"parts": [{"text": "Be technical."}]}

    def test_extra_message_fields_pass_through(self, persona):
        message = ChatMessage.model_validate({"role": "user", "parts": [{"text": "hi"}], "custom": 1})
        payload = build_generation_payload([message], persona)
        assert payload["contents"][0]["custom"] == 1


class TestExtractReply:
    """Tests for extract_reply function."""

    def test_returns_text_and_finish_reason(self):
        result = {"candidates": [{"content": {"parts": [{"text": "Answer"}]}, "finishReason": "STOP"}]}
        reply = extract_reply(result, "gemini-test")
        assert reply.content == "Answer"
        assert reply.finish_reason == "STOP"
        assert reply.model_used == "gemini-test"

    @pytest.mark.parametrize("result", [{}, {"candidates": []}, {"candidates": None}])
    def test_no_candidate(self, result):
        with pytest.raises(UpstreamError, match="No candidate"):
            extract_reply(result, "m")

    def test_safety_block(self):
        result = {"candidates": [{"content": {"parts": [{"text": "x"}]}, "finishReason": "SAFETY"}]}
        with pytest.raises(UpstreamError, match="safety"):
            extract_reply(result, "m")

    @pytest.mark.parametrize(
        "candidate",
        [
            {"finishReason": "STOP"},
            {"content": {}, "finishReason": "STOP"},
            {"content": {"parts": []}, "finishReason": "STOP"},
            {"content": {"parts": [{"text": ""}]}, "finishReason": "MAX_TOKENS"},
        ],
    )
    def test_empty_text(self, candidate):
        with pytest.raises(UpstreamError, match="Empty AI response"):
            extract_reply({"candidates": [candidate]}, "m")

    @pytest.mark.parametrize(
        "result", [{"candidates": {"a": 1}}, {"candidates": "abc"}, {"candidates": ["x"]}, {"candidates": [None]}]
    )
    def test_malformed_candidates(self, result):
        with pytest.raises(UpstreamError, match="No candidate"):
            extract_reply(result, "m")

    @pytest.mark.parametrize(
        "candidate",
        [
            {"content": "x", "finishReason": "STOP"},
            {"content": {"parts": "x"}, "finishReason": "STOP"},
            {"content": {"parts": {"text": "a"}}, "finishReason": "STOP"},
            {"content": {"parts": ["oops"]}, "finishReason": "STOP"},
            {"content": {"parts": [{"text": 123}]}, "finishReason": "STOP"},
            {"content": {"parts": [{"text": ["a"]}]}, "finishReason": "STOP"},
        ],
    )
    def test_malformed_content(self, candidate):
        with pytest.raises(UpstreamError, match="Empty AI response"):
            extract_reply({"candidates": [candidate]}, "m")

    @pytest.mark.parametrize("finish_reason", [1, {"reason": "STOP"}, ["STOP"]])
    def test_non_string_finish_reason_is_dropped(self, finish_reason):
        result = {"candidates": [{"content": {"parts": [{"text": "Answer"}]}, "finishReason": finish_reason}]}
        reply = extract_reply(result, "m")
        assert reply.content == "Answer"
        assert reply.finish_reason is None
