"""UI module for Streamlit web interface."""

from autotex.ui.api_client import (
    AvailabilityResult,
    ConnectionState,
    GenerationFailure,
    GenerationResult,
    GenerationSuccess,
    OllamaClient,
)
from autotex.ui.state import Activity, AppState, reduce
from autotex.ui.utils import create_download_latex, truncate_text

__all__ = [
    "Activity",
    "AppState",
    "AvailabilityResult",
    "ConnectionState",
    "GenerationFailure",
    "GenerationResult",
    "GenerationSuccess",
    "OllamaClient",
    "create_download_latex",
    "reduce",
    "truncate_text",
]
