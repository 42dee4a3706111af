"""LLM-backed email generation services."""

from .composer import EmailComposer, GenerationError, MissingCredentialError
from .llm import Completion, LLMClient, LLMError, OpenAIChatClient, build_llm_client

__all__ = [
    "Completion",
    "EmailComposer",
    "GenerationError",
    "LLMClient",
    "LLMError",
    "MissingCredentialError",
    "OpenAIChatClient",
    "build_llm_client",
]
