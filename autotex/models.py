"""Request and response models for the Ollama HTTP API."""

from pydantic import BaseModel, Field


class SamplingParameters(BaseModel):
    """Sampling options sent with every generation request."""

    temperature: float = Field(default=0.3, description="Sampling temperature")
    top_p: float = Field(default=0.9, description="Nucleus sampling probability")
    repeat_penalty: float = Field(default=1.1, description="Penalty for repeated tokens")


class GenerationRequest(BaseModel):
    """One conversion of a natural-language description into LaTeX."""

    prompt: str = Field(description="Natural-language description written by the user")
    model: str = Field(description="Ollama model name to generate with")
    options: SamplingParameters = Field(default_factory=SamplingParameters)


class ModelDescriptor(BaseModel):
    """A locally installed model as reported by /api/tags."""

    name: str = Field(description="Model name including tag, e.g. llama3.2:latest")


class TagsResponse(BaseModel):
    """Body of GET /api/tags.

    ``models`` is optional: a body without a usable models array still means
    the server answered, it just has nothing to offer.
    """

    models: list[ModelDescriptor] | None = Field(default=None, description="Installed models")


class OllamaGenerateResponse(BaseModel):
    """Body of a non-streaming POST /api/generate."""

    response: str | None = Field(default="", description="Generated text")
    done: bool = Field(default=False, description="Whether generation finished")
