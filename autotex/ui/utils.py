"""Utility functions for the Streamlit UI."""

LATEX_MIME_TYPE = "application/x-tex"

DOCUMENT_PREAMBLE = r"""\documentclass{article}
\usepackage[utf8]{inputenc}
\usepackage{amsmath}
\usepackage{amsfonts}
\usepackage{amssymb}
\usepackage{geometry}
\usepackage{graphicx}
\geometry{margin=1in}

\begin{document}
"""

DOCUMENT_POSTAMBLE = r"""
\end{document}"""


def create_download_latex(latex: str) -> str:
    """Create a complete LaTeX document for download.

    Args:
        latex: Canonical generated LaTeX body, used verbatim.

    Returns:
        Compilable document source.

    Raises:
        ValueError: If there is nothing to export.
    """
    if not latex.strip():
        raise ValueError("No LaTeX output to export")
    return f"{DOCUMENT_PREAMBLE}\n{latex}\n{DOCUMENT_POSTAMBLE}"


def truncate_text(text: str, max_length: int = 100) -> str:
    """Truncate text to max length with ellipsis.

    Args:
        text: Text to truncate.
        max_length: Maximum length before truncation.

    Returns:
        Truncated text with ellipsis if needed.
    """
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."
