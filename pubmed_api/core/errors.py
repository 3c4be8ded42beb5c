from __future__ import annotations

from typing import Optional


class ArticleError(Exception):
    """Base class for errors surfaced by the article store and service.

    ``message`` is safe to return to API callers. The chained ``__cause__``
    and ``operation``/``key`` are for server-side logs only.
    """

    kind = "internal"

    def __init__(self, message: str, *, operation: Optional[str] = None, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.key = key

    def log_context(self) -> dict:
        ctx = {"kind": self.kind}
        if self.operation:
            ctx["operation"] = self.operation
        if self.key is not None:
            ctx["key"] = self.key
        return ctx


class NotFound(ArticleError):
    kind = "not_found"


class InvalidArgument(ArticleError):
    kind = "invalid_argument"


class Internal(ArticleError):
    kind = "internal"


class Cancelled(ArticleError):
    kind = "cancelled"


class LoadError(Internal):
    """Bulk load failed; nothing from the batch was stored."""
