"""DTO validation package for the gateway's inbound surfaces."""

from .chat import Role, TurnDTO, GenerationParameters, ChatBodyDTO

__all__ = [
    "Role",
    "TurnDTO",
    "GenerationParameters",
    "ChatBodyDTO",
]
