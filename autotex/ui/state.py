"""State management for the Streamlit UI.

Every change goes through :func:`reduce`, which takes the current
:class:`AppState` and an event and returns a new state. Completions of the
availability check and of a conversion are events too, so there is a single
place where results are applied. A completion is applied whenever it
arrives; if two conversions overlap, the last one to finish wins.
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from autotex.config import settings
from autotex.llm import SAMPLE_PROMPT
from autotex.preview.renderer import render
from autotex.ui.api_client import (
    AvailabilityResult,
    ConnectionState,
    GenerationFailure,
    GenerationResult,
)


class Activity(str, Enum):
    """What the UI is currently waiting on."""

    IDLE = "idle"
    CHECKING = "checking"
    CONVERTING = "converting"


class AppState(BaseModel):
    """Everything the page shows."""

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(default="", description="Natural-language input")
    latex_output: str = Field(default="", description="Canonical generated LaTeX")
    connection: ConnectionState = Field(default=ConnectionState.UNKNOWN)
    available_models: list[str] = Field(default_factory=lambda: settings.default_models)
    selected_model: str = Field(default_factory=lambda: settings.ollama_model)
    debug_info: str = Field(default="", description="Last diagnostic message")
    show_preview: bool = Field(default=True)
    activity: Activity = Field(default=Activity.IDLE)

    @property
    def is_connected(self) -> bool:
        return self.connection is ConnectionState.CONNECTED

    @property
    def can_convert(self) -> bool:
        """Whether the convert action should be enabled."""
        return self.is_connected and bool(self.prompt.strip()) and self.activity is not Activity.CONVERTING

    @property
    def rendered_preview(self) -> str:
        """Preview HTML derived from the canonical output."""
        return render(self.latex_output)


@dataclass(frozen=True)
class PromptChanged:
    text: str


@dataclass(frozen=True)
class DemoRequested:
    pass


@dataclass(frozen=True)
class PreviewToggled:
    pass


@dataclass(frozen=True)
class ModelSelected:
    name: str


@dataclass(frozen=True)
class CheckStarted:
    pass


@dataclass(frozen=True)
class CheckCompleted:
    result: AvailabilityResult


@dataclass(frozen=True)
class ConversionStarted:
    pass


@dataclass(frozen=True)
class ConversionCompleted:
    result: GenerationResult


@dataclass(frozen=True)
class DownloadCompleted:
    pass


@dataclass(frozen=True)
class DownloadFailed:
    error: str


Event = (
    PromptChanged
    | DemoRequested
    | PreviewToggled
    | ModelSelected
    | CheckStarted
    | CheckCompleted
    | ConversionStarted
    | ConversionCompleted
    | DownloadCompleted
    | DownloadFailed
)


def _apply_availability(state: AppState, result: AvailabilityResult) -> AppState:
    models = result.models or settings.default_models
    selected = state.selected_model if state.selected_model in models else models[0]
    return state.model_copy(
        update={
            "connection": result.state,
            "available_models": models,
            "selected_model": selected,
            "debug_info": result.diagnostic,
            "activity": Activity.IDLE,
        }
    )


def _apply_generation(state: AppState, result: GenerationResult) -> AppState:
    if isinstance(result, GenerationFailure):
        return state.model_copy(
            update={
                "latex_output": "",
                "debug_info": f"Conversion error: {result.error}",
                "activity": Activity.IDLE,
            }
        )
    return state.model_copy(
        update={
            "latex_output": result.latex,
            "debug_info": f"Conversion successful. Output length: {len(result.latex)} characters",
            "activity": Activity.IDLE,
        }
    )


def reduce(state: AppState, event: Event) -> AppState:
    """Apply one event to the UI state.

    Args:
        state: Current state. Never modified.
        event: What happened.

    Returns:
        The next state.
    """
    if isinstance(event, PromptChanged):
        return state.model_copy(update={"prompt": event.text})
    if isinstance(event, DemoRequested):
        return state.model_copy(update={"prompt": SAMPLE_PROMPT})
    if isinstance(event, PreviewToggled):
        return state.model_copy(update={"show_preview": not state.show_preview})
    if isinstance(event, ModelSelected):
        if event.name not in state.available_models:
            return state
        return state.model_copy(update={"selected_model": event.name})
    if isinstance(event, CheckStarted):
        return state.model_copy(
            update={"activity": Activity.CHECKING, "debug_info": "Checking Ollama connection..."}
        )
    if isinstance(event, CheckCompleted):
        return _apply_availability(state, event.result)
    if isinstance(event, ConversionStarted):
        # Conversion needs a live server and something to convert
        if not state.is_connected or not state.prompt.strip():
            return state
        return state.model_copy(
            update={"activity": Activity.CONVERTING, "debug_info": "Starting conversion..."}
        )
    if isinstance(event, ConversionCompleted):
        return _apply_generation(state, event.result)
    if isinstance(event, DownloadCompleted):
        return state.model_copy(update={"debug_info": "LaTeX file downloaded successfully"})
    if isinstance(event, DownloadFailed):
        return state.model_copy(update={"debug_info": f"Download failed: {event.error}"})
    raise TypeError(f"Unknown event: {event!r}")
