"""Ollama client wrapper and integration layer.

This package provides the async client wrapper used for every model request.
"""

from toolrelay.ollama.client import OllamaClient

__all__ = ["OllamaClient"]
