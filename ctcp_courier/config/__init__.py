"""Configuration package exports."""

from .model import CtcpSettings

__all__ = ["CtcpSettings"]
