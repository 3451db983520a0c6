"""Exception types raised by the scheduling and extraction core."""

from __future__ import annotations


class AgentdaError(Exception):
    """Base class for all errors raised by the agenda core."""


class ConfigurationError(AgentdaError, ValueError):
    """A slot query (or other configuration) is invalid.

    Raised before any work is done; callers should surface it immediately
    and never retry.
    """


class ParseError(AgentdaError, ValueError):
    """Generated text could not be parsed into the expected structure."""
