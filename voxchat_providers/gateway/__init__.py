"""Completion gateway public surface."""

from .completion_gateway import CompletionGateway

__all__ = ["CompletionGateway"]
