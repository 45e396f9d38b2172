"""Tests for the Ollama API client."""

import json

import httpx
import pytest

from autotex.models import GenerationRequest, SamplingParameters
from autotex.ui.api_client import (
    NO_MODELS_MESSAGE,
    SERVER_ERROR_MESSAGE,
    ConnectionState,
    GenerationFailure,
    GenerationSuccess,
    OllamaClient,
)


def _refuse(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("[Errno 111] Connection refused", request=request)


class TestClientInitialization:
    """Test OllamaClient construction."""

    def test_explicit_base_url(self, mock_settings):
        """Test that an explicit base URL wins and loses its trailing slash."""
        client = OllamaClient(base_url="http://gpu-box:11434/", config=mock_settings)

        assert client.base_url == "http://gpu-box:11434"

    def test_base_url_from_settings(self, mock_settings):
        """Test that the base URL defaults to the configured one."""
        client = OllamaClient(config=mock_settings)

        assert client.base_url == "http://ollama.test:11434"
        assert client.health_timeout == 1.0
        assert client.timeout is None


class TestCheckAvailability:
    """Test the model listing call."""

    def test_connected_with_models(self, make_client, recorded_requests):
        """Listing two models yields CONNECTED and exactly those names."""
        client = make_client(
            lambda request: httpx.Response(
                200, json={"models": [{"name": "llama3.2"}, {"name": "mistral"}]}
            )
        )

        result = client.check_availability()

        assert result.state is ConnectionState.CONNECTED
        assert result.models == ["llama3.2", "mistral"]
        assert result.models_listed is True
        assert "Found 2 models: llama3.2, mistral" in result.diagnostic
        assert recorded_requests[0].method == "GET"
        assert recorded_requests[0].url.path == "/api/tags"

    def test_extra_model_fields_are_ignored(self, make_client):
        """Fields beyond name do not break parsing."""
        client = make_client(
            lambda request: httpx.Response(
                200, json={"models": [{"name": "codellama:7b", "size": 3825819519}]}
            )
        )

        assert client.check_availability().models == ["codellama:7b"]

    def test_connected_without_models_array(self, make_client):
        """A body without models is connected but flagged as having no listing."""
        client = make_client(lambda request: httpx.Response(200, json={"status": "ok"}))

        result = client.check_availability()

        assert result.state is ConnectionState.CONNECTED
        assert result.models == []
        assert result.models_listed is False
        assert result.diagnostic == NO_MODELS_MESSAGE

    def test_connected_with_malformed_body(self, make_client):
        """A non-JSON body is treated like a missing models array."""
        client = make_client(lambda request: httpx.Response(200, text="not json"))

        result = client.check_availability()

        assert result.state is ConnectionState.CONNECTED
        assert result.models == []
        assert result.models_listed is False

    def test_connected_with_invalid_models(self, make_client):
        """Entries without a name make the listing unusable, not the connection."""
        client = make_client(lambda request: httpx.Response(200, json={"models": [{"size": 1}]}))

        result = client.check_availability()

        assert result.state is ConnectionState.CONNECTED
        assert result.models_listed is False

    def test_unreachable_server(self, make_client):
        """A transport error means DISCONNECTED with the error detail."""
        client = make_client(_refuse)

        result = client.check_availability()

        assert result.state is ConnectionState.DISCONNECTED
        assert result.models == []
        assert "Connection refused" in result.diagnostic
        assert "Make sure Ollama is installed and running" in result.diagnostic

    def test_non_ok_status(self, make_client):
        """A non-OK listing status means DISCONNECTED with the status."""
        client = make_client(lambda request: httpx.Response(503))

        result = client.check_availability()

        assert result.state is ConnectionState.DISCONNECTED
        assert "HTTP 503: Service Unavailable" in result.diagnostic

    def test_invalid_base_url(self, mock_settings):
        """A base URL httpx cannot parse means DISCONNECTED, not an exception."""
        client = OllamaClient(base_url="http://[::1", config=mock_settings)

        result = client.check_availability()

        assert result.state is ConnectionState.DISCONNECTED
        assert "Invalid port" in result.diagnostic


class TestGenerate:
    """Test the generation call."""

    def _request(self, prompt: str = "A section about derivatives") -> GenerationRequest:
        return GenerationRequest(prompt=prompt, model="llama3.2")

    @pytest.mark.parametrize("prompt", ["", "   ", "\n\t "])
    def test_blank_prompt_is_noop(self, make_client, recorded_requests, prompt):
        """Blank prompts return an empty success without any request."""
        client = make_client(lambda request: httpx.Response(500))

        result = client.generate(self._request(prompt))

        assert result == GenerationSuccess(latex="")
        assert recorded_requests == []

    def test_request_payload(self, make_client, recorded_requests):
        """The request carries model, wrapped prompt, stream=false and options."""
        client = make_client(lambda request: httpx.Response(200, json={"response": "x", "done": True}))

        client.generate(
            GenerationRequest(
                prompt="Integrals of 2x",
                model="mistral",
                options=SamplingParameters(temperature=0.3, top_p=0.9, repeat_penalty=1.1),
            )
        )

        sent = recorded_requests[0]
        body = json.loads(sent.content)
        assert sent.method == "POST"
        assert sent.url.path == "/api/generate"
        assert body["model"] == "mistral"
        assert body["stream"] is False
        assert body["options"] == {"temperature": 0.3, "top_p": 0.9, "repeat_penalty": 1.1}
        assert "Natural language description: Integrals of 2x" in body["prompt"]
        assert body["prompt"].startswith("You are a LaTeX expert.")

    def test_success_trims_response(self, make_client):
        """The response field is trimmed and becomes the LaTeX output."""
        latex = "\\section{Derivatives}\nThe derivative of $x^2$ is $2x$."
        client = make_client(
            lambda request: httpx.Response(200, json={"response": f"\n  {latex}  \n", "done": True})
        )

        result = client.generate(self._request())

        assert result.success
        assert result == GenerationSuccess(latex=latex)

    def test_success_strips_code_fences(self, make_client):
        """Markdown fences around the LaTeX are removed."""
        response = "```latex\n\\section{Intro}\nHello\n```"
        client = make_client(lambda request: httpx.Response(200, json={"response": response}))

        result = client.generate(self._request())

        assert result == GenerationSuccess(latex="\\section{Intro}\nHello")

    def test_missing_response_field(self, make_client):
        """An absent response field yields an empty success."""
        client = make_client(lambda request: httpx.Response(200, json={"done": True}))

        assert client.generate(self._request()) == GenerationSuccess(latex="")

    def test_null_response_field(self, make_client):
        """A null response field is treated like an absent one."""
        client = make_client(lambda request: httpx.Response(200, json={"response": None, "done": True}))

        assert client.generate(self._request()) == GenerationSuccess(latex="")

    def test_model_not_found(self, make_client):
        """404 names the model and advises installing it."""
        client = make_client(lambda request: httpx.Response(404, json={"error": "model not found"}))

        result = client.generate(GenerationRequest(prompt="hi", model="phi3"))

        assert isinstance(result, GenerationFailure)
        assert not result.success
        assert '"phi3" not found' in result.error
        assert "ollama pull phi3" in result.error

    def test_server_error(self, make_client):
        """500 reports a possible loading or internal problem."""
        client = make_client(lambda request: httpx.Response(500))

        assert client.generate(self._request()) == GenerationFailure(error=SERVER_ERROR_MESSAGE)

    @pytest.mark.parametrize("status", [400, 401, 403, 418, 502, 503])
    def test_other_status_includes_code(self, make_client, status):
        """Any other non-OK status is a failure mentioning the numeric status."""
        client = make_client(lambda request: httpx.Response(status))

        result = client.generate(self._request())

        assert isinstance(result, GenerationFailure)
        assert str(status) in result.error

    def test_transport_error(self, make_client):
        """Connection failures become a failure with the underlying message."""
        client = make_client(_refuse)

        result = client.generate(self._request())

        assert isinstance(result, GenerationFailure)
        assert "Connection refused" in result.error

    def test_invalid_base_url(self, mock_settings):
        """A base URL httpx cannot parse is a failure, not an exception."""
        client = OllamaClient(base_url="http://[::1", config=mock_settings)

        result = client.generate(self._request())

        assert isinstance(result, GenerationFailure)
        assert "Invalid port" in result.error

    def test_timeout(self, make_client):
        """Timeouts raised by the transport are reported, not raised."""

        def time_out(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        result = make_client(time_out).generate(self._request())

        assert result == GenerationFailure(error="timed out")

    def test_malformed_body(self, make_client):
        """A non-JSON success body is a failure."""
        client = make_client(lambda request: httpx.Response(200, text="<html>"))

        result = client.generate(self._request())

        assert isinstance(result, GenerationFailure)
        assert result.error.startswith("Malformed response from Ollama")
