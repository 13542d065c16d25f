"""
Azure OpenAI client management.

Provides the default text-generation backend for requirement extraction. The
client is created lazily with a short timeout and a single SDK-level retry, so
a slow or overloaded deployment degrades to rule-based parsing quickly.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
sys.path.insert(0, str(Path(__file__).parents[3]))

import httpx
from openai import AzureOpenAI, OpenAIError
from config.settings import settings

from ..core.exceptions import TextGenerationError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a precise job requirement parser that returns only valid JSON."


class AzureOpenAIClient:
    """
    Singleton class for managing the Azure OpenAI client.

    Implements ``generate(prompt) -> str`` so it can be injected wherever a
    text generator is expected.
    """

    _instance = None
    _sync_client = None

    def __new__(cls):
        """Ensures that only one instance of the class is created (Singleton pattern)."""
        if cls._instance is None:
            cls._instance = super(AzureOpenAIClient, cls).__new__(cls)
        return cls._instance

    @property
    def is_configured(self) -> bool:
        return settings.azure_openai.is_configured

    def get_sync_client(self) -> Optional[AzureOpenAI]:
        """
        Creates and returns a synchronous client for Azure OpenAI services.

        Returns:
            AzureOpenAI: the client, or None when credentials are missing or
            construction fails.
        """
        if self._sync_client is None:
            if not self.is_configured:
                logger.warning("Azure OpenAI API key, endpoint and chat deployment are required")
                return None

            timeout = httpx.Timeout(settings.azure_openai.request_timeout, connect=min(3.0, settings.azure_openai.request_timeout))
            try:
                self._sync_client = AzureOpenAI(
                    api_key=settings.azure_openai.api_key,
                    api_version=settings.azure_openai.api_version,
                    azure_endpoint=settings.azure_openai.endpoint,
                    timeout=timeout,
                    max_retries=settings.azure_openai.max_retries
                )
                logger.info("Synchronous Azure OpenAI client created successfully")
            except TypeError as e:
                if "proxies" not in str(e):
                    logger.error(f"Failed to create synchronous Azure OpenAI client: {e}")
                    return None
                # Older SDKs pass `proxies` to newer httpx; hand over our own client instead
                logger.warning(f"Proxies parameter issue: {e}. Trying alternative initialization...")
                try:
                    self._sync_client = AzureOpenAI(
                        api_key=settings.azure_openai.api_key,
                        api_version=settings.azure_openai.api_version,
                        azure_endpoint=settings.azure_openai.endpoint,
                        max_retries=settings.azure_openai.max_retries,
                        http_client=httpx.Client(timeout=timeout)
                    )
                    logger.info("Synchronous Azure OpenAI client created with custom http client")
                except (TypeError, OpenAIError) as e2:
                    logger.error(f"Failed alternative Azure OpenAI client creation: {e2}")
                    self._sync_client = None
            except OpenAIError as e:
                logger.error(f"Failed to create synchronous Azure OpenAI client: {e}")
                self._sync_client = None

        return self._sync_client

    def get_chat_deployment(self) -> Optional[str]:
        """Get the chat deployment name."""
        return settings.azure_openai.chat_deployment

    def generate(self, prompt: str) -> str:
        """
        Run a single chat completion and return the message text.

        Raises:
            TextGenerationError: if the client is unavailable, the request
                fails after the configured retry, or the reply is empty.
        """
        client = self.get_sync_client()
        if client is None:
            raise TextGenerationError("Azure OpenAI client is not configured", provider="azure_openai")

        try:
            response = client.chat.completions.create(
                model=self.get_chat_deployment(),
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt}
                ],
                max_tokens=600,
                temperature=0.1
            )
        except OpenAIError as e:
            raise TextGenerationError(f"Azure OpenAI request failed: {e}", provider="azure_openai", cause=e) from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise TextGenerationError("Azure OpenAI returned an empty response", provider="azure_openai")
        return content


# Global client instance
azure_client = AzureOpenAIClient()
