# Error taxonomy and centralized user-facing error handling.

import logging
from typing import Optional

import streamlit as st

logger = logging.getLogger(__name__)


class VocabError(Exception):
    """Base class for errors surfaced to the learner."""


class ValidationError(VocabError):
    """Caller-supplied parameters are structurally invalid (empty list, oversized sample)."""


class ConfigError(VocabError):
    """Required AI endpoint configuration is missing."""


class SessionStateError(VocabError):
    """A session transition was requested in a phase that does not allow it."""


class FormatError(VocabError):
    """The AI replied, but the reply could not be coerced into article + translation."""


class UpstreamError(VocabError):
    """The generation endpoint was unreachable, timed out, or returned a non-success status."""

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        base = super().__str__()
        if self.status is not None:
            base = f"{base} (HTTP {self.status})"
        if self.body:
            base = f"{base}: {self.body[:300]}"
        return base


class ErrorHandler:
    """Centralized error handling for consistent user feedback."""

    @staticmethod
    def handle(error: Exception, context: str, show_user: bool = True) -> None:
        """Log an unexpected error with traceback and optionally show it in the UI."""
        logger.error("%s: %s", context, error, exc_info=True)
        if show_user:
            st.error(f"❌ {context}: {str(error)}")

    @staticmethod
    def handle_expected(error: VocabError, context: str = "") -> None:
        """Show a known learner-facing error without a traceback."""
        logger.warning("%s: %s", context or type(error).__name__, error)
        if isinstance(error, (ValidationError, SessionStateError)):
            st.warning(f"⚠️ {error}")
        else:
            st.error(f"❌ {context + '：' if context else ''}{error}")
