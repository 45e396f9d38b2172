"""Streamlit web application for natural-language to LaTeX conversion."""

import logging

import streamlit as st
import streamlit.components.v1 as components

from autotex.config import settings
from autotex.llm import SAMPLE_PROMPT, sampling_from_settings
from autotex.models import GenerationRequest
from autotex.preview.mathjax import build_preview_html
from autotex.ui.api_client import (
    AvailabilityResult,
    ConnectionState,
    GenerationFailure,
    OllamaClient,
)
from autotex.ui.state import (
    Activity,
    AppState,
    CheckCompleted,
    CheckStarted,
    ConversionCompleted,
    ConversionStarted,
    DemoRequested,
    DownloadCompleted,
    DownloadFailed,
    Event,
    ModelSelected,
    PreviewToggled,
    PromptChanged,
    reduce,
)
from autotex.ui.utils import LATEX_MIME_TYPE, create_download_latex

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

PROMPT_KEY = "prompt_input"
MODEL_KEY = "model_select"
PREVIEW_KEY = "preview_toggle"

# Page configuration
st.set_page_config(
    page_title="AutoTex",
    page_icon="📐",
    layout="wide",
)

# Initialize API client
api_client = OllamaClient()


def init_session_state():
    """Initialize session state variables."""
    if "app_state" not in st.session_state:
        st.session_state.app_state = AppState()
    if PROMPT_KEY not in st.session_state:
        st.session_state[PROMPT_KEY] = ""


def get_state() -> AppState:
    return st.session_state.app_state


def dispatch(event: Event) -> AppState:
    """Apply an event to the session's state and return the new state."""
    st.session_state.app_state = reduce(get_state(), event)
    return st.session_state.app_state


def check_connection():
    """Check the Ollama server and refresh the model list."""
    dispatch(CheckStarted())
    try:
        result = api_client.check_availability()
    except Exception as e:
        logger.exception("Unexpected error while checking Ollama")
        result = AvailabilityResult(
            state=ConnectionState.DISCONNECTED,
            diagnostic=f"Ollama connection failed: {e}. Make sure Ollama is installed and running.",
        )
    dispatch(CheckCompleted(result))


def convert():
    """Send the current prompt to Ollama and store the generated LaTeX."""
    dispatch(PromptChanged(st.session_state[PROMPT_KEY]))
    state = dispatch(ConversionStarted())
    if state.activity is not Activity.CONVERTING:
        return

    request = GenerationRequest(
        prompt=state.prompt,
        model=state.selected_model,
        options=sampling_from_settings(),
    )
    try:
        with st.spinner("Converting..."):
            result = api_client.generate(request)
    except Exception as e:
        logger.exception("Unexpected error during conversion")
        result = GenerationFailure(error=f"Unexpected error: {e}")
    dispatch(ConversionCompleted(result))


def fill_demo_prompt():
    """Pre-fill the input with the sample description."""
    dispatch(DemoRequested())
    st.session_state[PROMPT_KEY] = SAMPLE_PROMPT


def select_model():
    dispatch(ModelSelected(st.session_state[MODEL_KEY]))


def toggle_preview():
    dispatch(PreviewToggled())


def record_download():
    logger.info("LaTeX document downloaded")
    dispatch(DownloadCompleted())


def render_sidebar():
    """Render sidebar with connection status and model selection."""
    state = get_state()
    with st.sidebar:
        st.title("⚙️ Settings")

        st.subheader("Ollama")
        if state.is_connected:
            st.success("✅ Ollama Connected")
        else:
            st.error("❌ Ollama Disconnected")

        st.selectbox(
            "Model",
            options=state.available_models,
            index=state.available_models.index(state.selected_model),
            key=MODEL_KEY,
            on_change=select_model,
            disabled=not state.is_connected,
        )

        col1, col2 = st.columns(2)
        with col1:
            st.button(
                "🔄 Refresh",
                on_click=check_connection,
                disabled=state.activity is Activity.CHECKING,
            )
        with col2:
            st.button("🧪 Test Conversion", on_click=fill_demo_prompt)

        st.divider()
        st.caption("AutoTex v0.1.0")


def render_debug_info():
    """Render the always-visible diagnostic line."""
    debug_info = get_state().debug_info
    if debug_info:
        st.caption(f"**Debug:** {debug_info}")


def render_input_section():
    """Render natural-language input section."""
    state = get_state()
    st.header("📝 Natural Language Input")

    with st.form("convert_form", border=False):
        st.text_area(
            "Describe what you want in LaTeX",
            key=PROMPT_KEY,
            height=300,
            disabled=not state.is_connected,
            placeholder=(
                "For example: 'Create a title that says Mathematical Analysis, then add a "
                "section about derivatives with the formula for the derivative of x squared'"
            ),
        )
        st.form_submit_button(
            "↵ Convert to LaTeX",
            type="primary",
            on_click=convert,
            disabled=not state.is_connected or state.activity is Activity.CONVERTING,
        )
    st.caption("Or press Ctrl+Enter (Cmd+Enter on Mac)")

    if not state.is_connected:
        st.warning(
            "**Setup Required:** Please make sure Ollama is installed and running on "
            f"{settings.ollama_base_url}. Visit [ollama.ai](https://ollama.ai) to install it, "
            f"then run a model like `ollama run {settings.ollama_model}`."
        )


def render_download_button(latex: str):
    """Render the .tex download button, reporting export failures to the debug line."""
    try:
        document = create_download_latex(latex)
    except Exception as e:
        logger.error(f"Download failed: {e}")
        dispatch(DownloadFailed(str(e)))
        st.button("📥 Download .tex", disabled=True)
        return

    st.download_button(
        label="📥 Download .tex",
        data=document,
        file_name=settings.download_filename,
        mime=LATEX_MIME_TYPE,
        on_click=record_download,
    )


def render_output_section():
    """Render generated LaTeX and its preview."""
    state = get_state()
    st.header("📄 LaTeX Output")

    col1, col2 = st.columns([1, 1])
    with col1:
        st.toggle("Show Preview", value=state.show_preview, key=PREVIEW_KEY, on_change=toggle_preview)
    with col2:
        if state.latex_output.strip():
            render_download_button(state.latex_output)
        else:
            st.button("📥 Download .tex", disabled=True)

    if not state.latex_output:
        st.info('👆 Click "Convert to LaTeX" to generate LaTeX code from your natural language input.')
        return

    st.subheader("LaTeX Code")
    st.code(state.latex_output, language="latex")

    if state.show_preview:
        st.subheader("Preview")
        components.html(
            build_preview_html(state.rendered_preview, settings.mathjax_url),
            height=400,
            scrolling=True,
        )
        st.caption("Mathematical expressions are rendered using MathJax for accurate preview.")


def main():
    """Main application entry point."""
    init_session_state()

    if get_state().connection is ConnectionState.UNKNOWN:
        check_connection()

    st.title("📐 AutoTex")
    st.caption("Convert natural language descriptions into LaTeX formatting using Ollama AI")

    render_sidebar()
    render_debug_info()

    # Main content
    col1, col2 = st.columns([1, 1])

    with col1:
        render_input_section()

    with col2:
        render_output_section()

    st.divider()
    st.caption(
        "For PDF generation, use the downloaded .tex file with a LaTeX compiler like pdflatex."
    )


if __name__ == "__main__":
    main()
