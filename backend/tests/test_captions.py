"""Tests for caption prompt building, reply parsing and the Gemini client."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from memecraft.exceptions import UpstreamError
from memecraft.services.captions import (
    CaptionConnectionError,
    CaptionResponseError,
    CaptionService,
    build_prompt,
    parse_caption,
)
from tests.helpers import make_response


def gemini_reply(text: str) -> dict:
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": "STOP",
            }
        ]
    }


class TestBuildPrompt:
    def test_includes_topic_and_format(self):
        prompt = build_prompt("Mondays")

        assert "Write a short, witty meme caption about: Mondays." in prompt
        assert "Top: [text]" in prompt
        assert "Bottom: [text]" in prompt
        assert " meme." not in prompt.split("\n")[0]

    def test_includes_template_name(self):
        prompt = build_prompt("Mondays", "Drake Hotline Bling")
        assert "about: Mondays for a Drake Hotline Bling meme." in prompt


class TestParseCaption:
    def test_labeled_lines(self):
        caption = parse_caption("Top: Why is Monday here\nBottom: Send help")

        assert caption.top_text == "Why is Monday here"
        assert caption.bottom_text == "Send help"

    def test_labels_are_case_insensitive(self):
        caption = parse_caption("TOP:   me at 9am  \nbottom:me at 9:05am")

        assert caption.top_text == "me at 9am"
        assert caption.bottom_text == "me at 9:05am"

    def test_prefix_before_label_is_dropped(self):
        caption = parse_caption("1. Top: coffee first\n2. **Bottom:** questions later")

        assert caption.top_text == "coffee first"
        assert caption.bottom_text == "** questions later"

    def test_only_one_label_found(self):
        caption = parse_caption("Here you go!\nBottom: nobody asked")

        assert caption.top_text == ""
        assert caption.bottom_text == "nobody asked"

    def test_later_label_overrides_earlier(self):
        caption = parse_caption("Top: first\nTop: second\nBottom: last")
        assert caption.top_text == "second"

    def test_blank_lines_ignored(self):
        caption = parse_caption("\n\nTop: a\n   \n\nBottom: b\n")
        assert (caption.top_text, caption.bottom_text) == ("a", "b")

    def test_fallback_sentence_split(self):
        caption = parse_caption("Mondays are the worst. Send help.")

        assert caption.top_text == "Mondays are the worst"
        assert caption.bottom_text == "Send help"

    def test_fallback_single_sentence(self):
        caption = parse_caption("Mondays are the worst!")

        assert caption.top_text == "Mondays are the worst"
        assert caption.bottom_text == ""

    def test_fallback_uses_question_and_exclamation_marks(self):
        caption = parse_caption("Is it Friday yet? No! It is Monday.")

        assert caption.top_text == "Is it Friday yet"
        assert caption.bottom_text == "No"

    def test_fallback_when_labels_are_empty(self):
        caption = parse_caption("Top:\nBottom:\nJust vibes. Nothing else.")

        assert caption.top_text == "Top:\nBottom:\nJust vibes"
        assert caption.bottom_text == "Nothing else"

    def test_fallback_with_no_sentences_truncates_to_fifty(self):
        caption = parse_caption("...!?")
        assert caption.top_text == "...!?"[:50]

        caption = parse_caption("")
        assert (caption.top_text, caption.bottom_text) == ("", "")

    def test_quotes_are_stripped(self):
        caption = parse_caption("Top: \"Don't panic\"\nBottom: 'it's fine'")

        assert caption.top_text == "Dont panic"
        assert caption.bottom_text == "its fine"

    def test_original_response_is_kept_raw(self):
        raw = "Top: \"quoted\"\nBottom: text"
        assert parse_caption(raw).original_response == raw


class TestCaptionService:
    @pytest.mark.asyncio
    async def test_generate_caption(self, settings):
        service = CaptionService(settings)
        response = make_response(200, gemini_reply("Top: Why is Monday here\nBottom: Send help"))

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock, return_value=response) as post:
            caption = await service.generate_caption("Mondays", "Drake Hotline Bling")

        assert caption.top_text == "Why is Monday here"
        assert caption.bottom_text == "Send help"
        assert caption.original_response == "Top: Why is Monday here\nBottom: Send help"

        url = post.call_args.args[0]
        assert url == "https://gemini.test/v1beta/models/gemini-1.5-flash:generateContent"
        kwargs = post.call_args.kwargs
        assert kwargs["headers"]["x-goog-api-key"] == "gemini-key"
        prompt = kwargs["json"]["contents"][0]["parts"][0]["text"]
        assert "Mondays for a Drake Hotline Bling meme" in prompt

    @pytest.mark.asyncio
    async def test_joins_multiple_parts(self, settings):
        service = CaptionService(settings)
        data = {"candidates": [{"content": {"parts": [{"text": "Top: a\n"}, {"text": "Bottom: b"}]}}]}

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock, return_value=make_response(200, data)):
            caption = await service.generate_caption("anything")

        assert (caption.top_text, caption.bottom_text) == ("a", "b")

    @pytest.mark.asyncio
    async def test_unparseable_reply_still_succeeds(self, settings):
        service = CaptionService(settings)
        response = make_response(200, gemini_reply("..."))

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock, return_value=response):
            caption = await service.generate_caption("anything")

        assert caption.original_response == "..."

    @pytest.mark.asyncio
    async def test_http_error_status(self, settings):
        service = CaptionService(settings)
        response = make_response(400, {"error": {"message": "API key not valid"}})

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock, return_value=response):
            with pytest.raises(CaptionResponseError, match="status 400"):
                await service.generate_caption("anything")

    @pytest.mark.asyncio
    async def test_blocked_prompt(self, settings):
        service = CaptionService(settings)
        response = make_response(200, {"promptFeedback": {"blockReason": "SAFETY"}})

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock, return_value=response):
            with pytest.raises(CaptionResponseError, match="SAFETY"):
                await service.generate_caption("anything")

    @pytest.mark.asyncio
    async def test_empty_candidate(self, settings):
        service = CaptionService(settings)
        response = make_response(200, {"candidates": [{"content": {"parts": []}, "finishReason": "MAX_TOKENS"}]})

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock, return_value=response):
            with pytest.raises(CaptionResponseError, match="MAX_TOKENS"):
                await service.generate_caption("anything")

    @pytest.mark.asyncio
    async def test_invalid_json(self, settings):
        service = CaptionService(settings)
        response = make_response(200, text="<html>oops</html>")

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock, return_value=response):
            with pytest.raises(CaptionResponseError):
                await service.generate_caption("anything")

    @pytest.mark.asyncio
    async def test_connection_error(self, settings):
        service = CaptionService(settings)

        with patch.object(
            httpx.AsyncClient, "post", new_callable=AsyncMock, side_effect=httpx.ConnectError("refused")
        ):
            with pytest.raises(CaptionConnectionError) as exc_info:
                await service.generate_caption("anything")

        assert isinstance(exc_info.value, UpstreamError)

    @pytest.mark.asyncio
    async def test_timeout(self, settings):
        service = CaptionService(settings)

        with patch.object(
            httpx.AsyncClient, "post", new_callable=AsyncMock, side_effect=httpx.ReadTimeout("slow")
        ):
            with pytest.raises(CaptionConnectionError, match="timed out"):
                await service.generate_caption("anything")
