"""LaTeX to HTML preview by ordered regex substitution.

This is not a LaTeX parser. A fixed list of rules is applied one after the
other over the whole text, so order matters: the generic ``\\\\`` break rule
runs only after the title, sectioning and inline rules, and blank-line
collapsing runs last. Anything no rule matches passes through as-is.

Math spans are shielded from every rule and put back unchanged at the end;
typesetting them is left to MathJax in the browser.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class RenderRule:
    """A single named substitution step."""

    name: str
    pattern: re.Pattern[str]
    replacement: str

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


def _rule(name: str, pattern: str, replacement: str, flags: int = 0) -> RenderRule:
    return RenderRule(name=name, pattern=re.compile(pattern, flags), replacement=replacement)


# A bare command name must not run into further letters (\par vs \paragraph).
_END = r"(?![A-Za-z])"

RULES: tuple[RenderRule, ...] = (
    # Document wrappers
    _rule("documentclass", r"\\documentclass(\[[^\]]*\])?\{[^}]+\}", ""),
    _rule("usepackage", r"\\usepackage(\[[^\]]*\])?\{[^}]+\}", ""),
    _rule("begin_document", r"\\begin\{document\}", ""),
    _rule("end_document", r"\\end\{document\}", ""),
    # Title block
    _rule("title", r"\\title\{([^}]+)\}", r'<h1 class="text-2xl font-bold text-center mb-4">\1</h1>'),
    _rule("author", r"\\author\{([^}]+)\}", r'<h5 class="text-center italic mb-2">\1</h5>'),
    _rule("date", r"\\date\{([^}]+)\}", r'<h6 class="text-center text-sm text-gray-600 mb-4">\1</h6>'),
    _rule("maketitle", r"\\maketitle" + _END, ""),
    # Sectioning
    _rule(
        "section",
        r"\\section\{([^}]+)\}",
        r'<h2 class="text-xl font-semibold mt-6 mb-3 pb-2 border-b border-gray-300">\1</h2>',
    ),
    _rule("subsection", r"\\subsection\{([^}]+)\}", r'<h3 class="text-lg font-medium mt-4 mb-2">\1</h3>'),
    _rule("subsubsection", r"\\subsubsection\{([^}]+)\}", r'<h4 class="text-base font-medium mt-3 mb-2">\1</h4>'),
    # Inline emphasis
    _rule("textbf", r"\\textbf\{([^}]+)\}", r"<strong>\1</strong>"),
    _rule("textit", r"\\textit\{([^}]+)\}", r"<em>\1</em>"),
    _rule("emph", r"\\emph\{([^}]+)\}", r"<em>\1</em>"),
    _rule("underline", r"\\underline\{([^}]+)\}", r"<u>\1</u>"),
    # Breaks, after everything above has consumed its own backslashes
    _rule("line_end_break", r"\\\\$", "<br>", re.MULTILINE),
    _rule("break", r"\\\\", "<br>"),
    _rule("newline", r"\\newline" + _END, "<br>"),
    _rule("par", r"\\par" + _END, "<br><br>"),
    # Lists; \item is never closed, just like in LaTeX
    _rule("begin_itemize", r"\\begin\{itemize\}", '<ul class="list-disc ml-6 my-2">'),
    _rule("end_itemize", r"\\end\{itemize\}", "</ul>"),
    _rule("begin_enumerate", r"\\begin\{enumerate\}", '<ol class="list-decimal ml-6 my-2">'),
    _rule("end_enumerate", r"\\end\{enumerate\}", "</ol>"),
    _rule("item", r"\\item" + _END, '<li class="mb-1">'),
    # Blank lines
    _rule("blank_lines", r"\n\s*\n", "<br><br>"),
)

# Display delimiters first so $$...$$ is not read as two inline spans.
# Inline $...$ never crosses a blank line.
_MATH_SPAN = re.compile(
    r"\$\$.+?\$\$"
    r"|\\\[.+?\\\]"
    r"|\\\(.+?\\\)"
    r"|(?<!\\)\$(?:\\.|[^$\\\n]|\n(?!\s*\n))+?\$",
    re.DOTALL,
)
_PLACEHOLDER = "\x00{}\x00"
_PLACEHOLDER_RE = re.compile("\x00(\\d+)\x00")


def _shield_math(text: str) -> tuple[str, list[str]]:
    spans: list[str] = []

    def stash(match: re.Match[str]) -> str:
        spans.append(match.group(0))
        return _PLACEHOLDER.format(len(spans) - 1)

    return _MATH_SPAN.sub(stash, text), spans


def _restore_math(text: str, spans: list[str]) -> str:
    def unstash(match: re.Match[str]) -> str:
        index = int(match.group(1))
        return spans[index] if index < len(spans) else match.group(0)

    return _PLACEHOLDER_RE.sub(unstash, text)


def render(latex: str, rules: tuple[RenderRule, ...] = RULES) -> str:
    """Render a LaTeX body as preview HTML.

    Args:
        latex: LaTeX markup, usually the canonical generated output.
        rules: Substitution rules in application order.

    Returns:
        HTML-ish structured text for display. Empty input gives empty output.
    """
    if not latex:
        return ""

    text, spans = _shield_math(latex)
    for rule in rules:
        text = rule.apply(text)
    return _restore_math(text, spans).strip()
