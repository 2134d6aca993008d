"""Async Ollama client wrapper.

This module provides an async wrapper around the ollama.AsyncClient for
communicating with the Ollama API. The client is created once at startup and
shared by every agent loop.
"""

import logging
from typing import Any

import ollama

logger = logging.getLogger(__name__)


class OllamaClient:
    """Async client for interacting with the Ollama API.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(self, host: str) -> None:
        """Initialize the Ollama client.

        Args:
            host: The Ollama server URL
        """
        self.host = host
        self._client = ollama.AsyncClient(host=host)
        logger.info(f"OllamaClient initialized with host: {host}")

    async def check_connection(self) -> bool:
        """Check if the Ollama server is reachable.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            # Try to list models as a connectivity check
            await self._client.list()
            logger.debug("Ollama connection check: successful")
            return True
        except Exception as e:
            logger.warning(f"Ollama connection check failed: {e}")
            return False

    async def chat(
        self,
        model: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        options: dict[str, Any] | None = None,
        format: str | dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Request a single (non-streaming) chat completion.

        Args:
            model: The model name to use for the chat
            messages: List of message dicts in Ollama format
            tools: Optional function tools the model may call
            options: Optional model parameters (temperature, etc.)
            format: Optional "json" or a JSON schema constraining the output

        Returns:
            dict: The response, with the assistant message under "message":
                  {"message": {"role": ..., "content": ..., "tool_calls": [...]}}

        Raises:
            Exception: If the Ollama API request fails
        """
        logger.debug(
            f"Chat request: model={model}, messages={len(messages)}, "
            f"tools={len(tools or [])}, format={'set' if format else 'none'}"
        )
        try:
            response = await self._client.chat(
                model=model,
                messages=messages,
                tools=tools,
                stream=False,
                options=options,
                format=format,
            )
        except Exception as e:
            logger.error(f"Chat request failed: {e}")
            raise

        if hasattr(response, "model_dump"):
            return response.model_dump()
        if isinstance(response, dict):
            return response
        return vars(response)

    async def close(self) -> None:
        """Close the client and clean up resources.

        ollama.AsyncClient uses httpx internally which handles cleanup, so
        there is nothing to release yet.
        """
        logger.debug("OllamaClient closed")
