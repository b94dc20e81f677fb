"""CTCP codec, dispatch and rate-limited reply delivery for IRC clients."""

__version__ = "0.1.0"

__all__ = ["__version__"]
