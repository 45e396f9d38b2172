"""Prompt construction and response cleanup for LaTeX generation.

The model is asked for bare LaTeX body markup. Local models still like to
wrap their answer in a Markdown code fence, so the raw response is passed
through :func:`strip_code_fences` before it becomes the canonical output.
"""

import re

from autotex.config import Settings, settings
from autotex.models import SamplingParameters

SYSTEM_INSTRUCTION = """You are a LaTeX expert. Convert the following natural language description into clean, well-formatted LaTeX code. Only return the LaTeX code without any explanations, markdown formatting, or additional text.

Rules:
- Use appropriate document structure (sections, subsections, etc.)
- Format mathematical expressions properly with $ or $$ delimiters
- Use proper LaTeX commands for formatting (\\textbf, \\textit, etc.)
- Include necessary packages if needed (but don't include \\documentclass or \\begin{document})
- Make the output clean and compilable"""

SAMPLE_PROMPT = (
    'Create a document with the title "Mathematical Analysis". '
    'Add a section called "Derivatives" with the formula for the derivative of x squared, '
    "which is 2x. Then add another section about \"Integrals\" with the integral of 2x dx "
    "equals x squared plus C."
)

# Three independent passes; opening and closing fences are not paired.
_TAGGED_OPEN_FENCE = re.compile(r"^```[A-Za-z][\w+-]*[ \t]*\n?", re.MULTILINE)
_BARE_OPEN_FENCE = re.compile(r"^```[ \t]*\n?", re.MULTILINE)
_CLOSE_FENCE = re.compile(r"```[ \t]*$", re.MULTILINE)


def build_prompt(text: str) -> str:
    """Wrap a natural-language description in the LaTeX system instruction.

    Args:
        text: Description written by the user.

    Returns:
        Full prompt for the generate endpoint.
    """
    return f"{SYSTEM_INSTRUCTION}\n\nNatural language description: {text}\n\nLaTeX code:"


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences a model may have put around its LaTeX.

    Opening fences (with or without a language tag such as ``latex``) are
    removed at the start of any line, closing fences at the end of any line.
    Everything between them is left untouched.

    Args:
        text: Raw model response.

    Returns:
        Response without fence markers, trimmed.
    """
    cleaned = _TAGGED_OPEN_FENCE.sub("", text)
    cleaned = _BARE_OPEN_FENCE.sub("", cleaned)
    cleaned = _CLOSE_FENCE.sub("", cleaned)
    return cleaned.strip()


def sampling_from_settings(config: Settings | None = None) -> SamplingParameters:
    """Build the fixed sampling parameters from configuration."""
    config = config or settings
    return SamplingParameters(
        temperature=config.ollama_temperature,
        top_p=config.ollama_top_p,
        repeat_penalty=config.ollama_repeat_penalty,
    )
