"""Configuration package for the interview evaluation services."""
from .registry import INTERVIEWER_KEY, bind_model, get_model, is_bound
from .routes import LlmRoute, interviewer_route
from .settings import RoleLevel, Settings, settings

__all__ = [
    "INTERVIEWER_KEY",
    "bind_model",
    "get_model",
    "is_bound",
    "LlmRoute",
    "interviewer_route",
    "RoleLevel",
    "Settings",
    "settings",
]
