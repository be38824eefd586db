"""NexusMail LLM Integration"""
from .providers.base import BaseLLMProvider, LLMMessage, LLMResponse
from .providers.ollama import OllamaProvider

__all__ = ['BaseLLMProvider', 'LLMMessage', 'LLMResponse', 'OllamaProvider']
