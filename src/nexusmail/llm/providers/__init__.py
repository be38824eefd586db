"""LLM Providers"""
from .base import BaseLLMProvider, LLMMessage, LLMResponse
from .ollama import OllamaProvider

__all__ = ['BaseLLMProvider', 'LLMMessage', 'LLMResponse', 'OllamaProvider']
