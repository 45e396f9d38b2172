"""Standalone HTML page that shows the preview and typesets math with MathJax."""

import json
from html import escape

MATHJAX_CONFIG = {
    "tex": {
        "inlineMath": [["$", "$"], ["\\(", "\\)"]],
        "displayMath": [["$$", "$$"], ["\\[", "\\]"]],
        "processEscapes": True,
        "processEnvironments": True,
        "tags": "ams",
    },
    "options": {
        "ignoreHtmlClass": "tex2jax_ignore",
        "processHtmlClass": "tex2jax_process",
    },
}

PREVIEW_ELEMENT_ID = "preview"

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<style>
  body {{ font-family: sans-serif; font-size: 14px; line-height: 1.6; color: #334155; margin: 0; }}
  #{element_id} {{ padding: 1rem; }}
  h1 {{ text-align: center; }}
  h2 {{ border-bottom: 1px solid #d1d5db; padding-bottom: 0.25rem; }}
</style>
<script>
window.MathJax = {config};
window.MathJax.startup = {{
  ready: () => {{
    MathJax.startup.defaultReady();
    MathJax.startup.promise
      .then(() => MathJax.typesetPromise([document.getElementById("{element_id}")]))
      .catch((err) => console.error("MathJax rendering error:", err));
  }}
}};
</script>
<script src="{script_url}" async></script>
</head>
<body>
<div id="{element_id}" class="tex2jax_process">{body}</div>
</body>
</html>
"""


def build_preview_html(body_html: str, mathjax_url: str) -> str:
    """Wrap rendered preview HTML in a page that loads and runs MathJax.

    A MathJax failure is only logged to the browser console; the rendered
    HTML stays visible either way.

    Args:
        body_html: Output of :func:`autotex.preview.renderer.render`.
        mathjax_url: Address of the MathJax ``tex-mml-chtml`` bundle.

    Returns:
        Complete HTML document.
    """
    return _PAGE_TEMPLATE.format(
        element_id=PREVIEW_ELEMENT_ID,
        config=json.dumps(MATHJAX_CONFIG),
        script_url=escape(mathjax_url, quote=True),
        body=body_html,
    )
