from __future__ import annotations  # Re-export llm_gateway public API

from .llm_gateway import ChatModel, HttpClient, HttpResponse, LlmGatewayError, complete, interviewer_model

__all__ = ["ChatModel", "HttpClient", "HttpResponse", "LlmGatewayError", "complete", "interviewer_model"]
