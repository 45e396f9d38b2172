"""API client for communicating with a local Ollama server."""

import logging
from dataclasses import dataclass, field
from enum import Enum

import httpx
from pydantic import ValidationError

from autotex.config import Settings, settings
from autotex.llm import build_prompt, strip_code_fences
from autotex.models import GenerationRequest, OllamaGenerateResponse, TagsResponse

logger = logging.getLogger(__name__)

TAGS_PATH = "/api/tags"
GENERATE_PATH = "/api/generate"

NO_MODELS_MESSAGE = "Ollama connected but no models found. Please install a model first."
SERVER_ERROR_MESSAGE = "Ollama server error. The model might be loading or there's an internal issue."


class ConnectionState(str, Enum):
    """Reachability of the Ollama server as last observed."""

    UNKNOWN = "unknown"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


@dataclass
class AvailabilityResult:
    """Outcome of a server availability check."""

    state: ConnectionState
    models: list[str] = field(default_factory=list)
    diagnostic: str = ""
    models_listed: bool = True


@dataclass(frozen=True)
class GenerationSuccess:
    """Generated LaTeX, already cleaned of code fences."""

    latex: str

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class GenerationFailure:
    """Human-readable reason a generation did not produce LaTeX."""

    error: str

    @property
    def success(self) -> bool:
        return False


GenerationResult = GenerationSuccess | GenerationFailure


def _connection_failed(detail: str) -> AvailabilityResult:
    return AvailabilityResult(
        state=ConnectionState.DISCONNECTED,
        diagnostic=f"Ollama connection failed: {detail}. Make sure Ollama is installed and running.",
    )


class OllamaClient:
    """Client for the Ollama model listing and generation endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        config: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the API client.

        Args:
            base_url: Base URL of the Ollama server. If not provided, uses
                OLLAMA_BASE_URL or defaults to http://localhost:11434.
            config: Settings to read timeouts from. Defaults to the global settings.
            transport: Optional httpx transport, mainly for tests.
        """
        self.config = config or settings
        self.base_url = (base_url or self.config.ollama_base_url).rstrip("/")
        self.health_timeout = self.config.ollama_health_timeout
        self.timeout = self.config.ollama_generate_timeout
        self._transport = transport

    def _client(self, timeout: float | None) -> httpx.Client:
        return httpx.Client(timeout=timeout, transport=self._transport)

    def check_availability(self) -> AvailabilityResult:
        """Check whether the server is reachable and list its models.

        Never raises: transport errors and non-OK statuses are reported as
        DISCONNECTED with a diagnostic that includes the underlying error.

        Returns:
            Connection state, model names in listing order and a diagnostic.
        """
        try:
            with self._client(self.health_timeout) as client:
                response = client.get(f"{self.base_url}{TAGS_PATH}")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Ollama connection failed: {e}")
            return _connection_failed(str(e) or type(e).__name__)

        if not response.is_success:
            logger.warning(f"Ollama listing returned HTTP {response.status_code}")
            return _connection_failed(f"HTTP {response.status_code}: {response.reason_phrase}")

        try:
            tags = TagsResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.info(f"Ollama listing body had no usable models array: {e}")
            tags = TagsResponse()

        if tags.models is None:
            return AvailabilityResult(
                state=ConnectionState.CONNECTED,
                diagnostic=NO_MODELS_MESSAGE,
                models_listed=False,
            )

        names = [model.name for model in tags.models]
        logger.info(f"Ollama connected, {len(names)} models available")
        return AvailabilityResult(
            state=ConnectionState.CONNECTED,
            models=names,
            diagnostic=f"Ollama connected successfully. Found {len(names)} models: {', '.join(names)}",
        )

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """Convert a natural-language description into LaTeX.

        A blank prompt is a no-op and returns an empty success without
        touching the network. Otherwise a single non-streaming request is
        made; there is no retry.

        Args:
            request: Prompt, model name and sampling options.

        Returns:
            GenerationSuccess with cleaned LaTeX, or GenerationFailure.
        """
        if not request.prompt.strip():
            return GenerationSuccess(latex="")

        payload = {
            "model": request.model,
            "prompt": build_prompt(request.prompt),
            "stream": False,
            "options": request.options.model_dump(),
        }
        logger.debug(f"Sending generate request to {request.model} ({len(request.prompt)} chars)")

        try:
            with self._client(self.timeout) as client:
                response = client.post(f"{self.base_url}{GENERATE_PATH}", json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Request error during generation: {e}")
            return GenerationFailure(error=str(e) or type(e).__name__)

        if response.status_code == 404:
            return GenerationFailure(
                error=f"Model \"{request.model}\" not found. "
                f"Please install it with 'ollama pull {request.model}'."
            )
        if response.status_code == 500:
            return GenerationFailure(error=SERVER_ERROR_MESSAGE)
        if not response.is_success:
            return GenerationFailure(
                error=f"HTTP error! status: {response.status_code} - {response.reason_phrase}"
            )

        try:
            body = OllamaGenerateResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Malformed generate response: {e}")
            return GenerationFailure(error=f"Malformed response from Ollama: {e}")

        latex = strip_code_fences((body.response or "").strip())
        logger.info(f"Response received. Length: {len(latex)} characters")
        return GenerationSuccess(latex=latex)
