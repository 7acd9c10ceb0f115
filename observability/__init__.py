"""Observability utilities for the interview evaluation pipeline."""
from .logger import log_event

__all__ = ["log_event"]
