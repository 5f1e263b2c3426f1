"""Unit tests for the Gemini API key client."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from chainbench.features.llm.errors import LlmApiError
from chainbench.features.llm.gemini_client import GeminiApiKeyClient


def _make_client(
    api_key: str = "test-api-key",
    model: str = "gemini-2.5-flash",
) -> GeminiApiKeyClient:
    """Create a test client."""
    return GeminiApiKeyClient(api_key=api_key, model=model)


def _make_response(status_code: int = 200, text: str = "ok") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    return response


class TestGeminiApiKeyClientGenerateContent:
    """Tests for GeminiApiKeyClient.generate_content."""

    @patch("chainbench.features.llm.gemini_client.httpx.post")
    def test_success_returns_text(self, mock_post: MagicMock) -> None:
        """Should return text from model response."""
        mock_post.return_value = _make_response(text='{"network": "Base"}')

        result = _make_client().generate_content("Classify this")

        assert result == '{"network": "Base"}'

    @patch("chainbench.features.llm.gemini_client.httpx.post")
    def test_request_shape(self, mock_post: MagicMock) -> None:
        """Should send the key header, system instruction and JSON mime type."""
        mock_post.return_value = _make_response()

        _make_client(api_key="my-key-123").generate_content("Test", "Be terse")

        url = mock_post.call_args[0][0]
        kwargs = mock_post.call_args[1]
        assert "gemini-2.5-flash:generateContent" in url
        assert kwargs["headers"]["x-goog-api-key"] == "my-key-123"
        assert kwargs["json"]["systemInstruction"] == {"parts": [{"text": "Be terse"}]}
        assert kwargs["json"]["generationConfig"] == {
            "responseMimeType": "application/json"
        }

    @patch("chainbench.features.llm.gemini_client.httpx.post")
    def test_plain_text_mode(self, mock_post: MagicMock) -> None:
        """Should omit generationConfig when JSON output is off."""
        mock_post.return_value = _make_response()

        GeminiApiKeyClient(api_key="k", json_output=False).generate_content("Test")

        assert "generationConfig" not in mock_post.call_args[1]["json"]

    @patch("chainbench.features.llm.gemini_client.time.sleep")
    @patch("chainbench.features.llm.gemini_client.httpx.post")
    def test_retries_on_429(self, mock_post: MagicMock, mock_sleep: MagicMock) -> None:
        """Should retry rate-limited requests."""
        mock_post.side_effect = [_make_response(429), _make_response(text="done")]

        result = _make_client().generate_content("Test")

        assert result == "done"
        assert mock_post.call_count == 2
        assert mock_sleep.called

    @patch("chainbench.features.llm.gemini_client.httpx.post")
    def test_non_retryable_error(self, mock_post: MagicMock) -> None:
        """Should raise immediately on client errors."""
        mock_post.return_value = _make_response(400)

        with pytest.raises(LlmApiError) as exc_info:
            _make_client().generate_content("Test")

        assert exc_info.value.status_code == 400

    @patch("chainbench.features.llm.gemini_client.httpx.post")
    def test_transport_error(self, mock_post: MagicMock) -> None:
        """Should wrap transport failures."""
        mock_post.side_effect = httpx.ReadTimeout("slow")

        with pytest.raises(LlmApiError, match="request failed"):
            _make_client().generate_content("Test")

    @patch("chainbench.features.llm.gemini_client.httpx.post")
    def test_no_candidates(self, mock_post: MagicMock) -> None:
        """Should raise when the response has no candidates."""
        response = _make_response()
        response.json.return_value = {"candidates": []}
        mock_post.return_value = response

        with pytest.raises(LlmApiError, match="No candidates"):
            _make_client().generate_content("Test")
