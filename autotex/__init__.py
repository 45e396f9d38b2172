"""AutoTex: natural language to LaTeX with a local Ollama model."""

__version__ = "0.1.0"
