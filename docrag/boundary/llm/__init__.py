"""
Generation backends.

- OllamaClient: local Ollama server over HTTP (default)
- ChatModelBackend: adapter for any LangChain chat model
"""

from docrag.boundary.llm.base import GenerationBackend
from docrag.boundary.llm.chat_model_backend import ChatModelBackend
from docrag.boundary.llm.ollama_client import OllamaClient

__all__ = ["GenerationBackend", "ChatModelBackend", "OllamaClient"]
