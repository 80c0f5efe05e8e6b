"""Failure taxonomy for remote reconciliation.

Every class here is terminal for the call that raised it: nothing in pipesync
retries. Reconcilers attach the operation name and entity id to an error as it
travels outwards; the class itself is never changed on the way.
"""

from __future__ import annotations

from typing import Self

PREVIEW_LENGTH = 200


class PipesyncError(RuntimeError):
    """Base class for errors raised while talking to the remote service."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        entity_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.entity_id = entity_id

    def with_context(self, operation: str, entity_id: str | None = None) -> Self:
        """Attach operation/entity context; the innermost context is kept."""

        if self.operation is None:
            self.operation = operation
            if self.entity_id is None:
                self.entity_id = entity_id
        else:
            suffix = f" [{entity_id}]" if entity_id else ""
            self.add_note(f"while running {operation}{suffix}")
        return self

    def __str__(self) -> str:
        if self.operation is None:
            return self.message
        suffix = f" [{self.entity_id}]" if self.entity_id else ""
        return f"{self.operation} failed{suffix}: {self.message}"


class TransportError(PipesyncError):
    """The request never produced an HTTP response."""


class OperationCancelledError(TransportError):
    """The caller's deadline elapsed and the in-flight request was aborted."""


class HTTPStatusError(PipesyncError):
    """The endpoint answered with a status outside the 2xx range."""

    def __init__(
        self,
        status_code: int,
        *,
        content_type: str | None,
        body: str,
        operation: str | None = None,
        entity_id: str | None = None,
    ) -> None:
        super().__init__(
            f"graphql http status {status_code} (content-type={content_type or ''}): {body}",
            operation=operation,
            entity_id=entity_id,
        )
        self.status_code = status_code
        self.content_type = content_type
        self.body = body


class DecodeError(PipesyncError):
    """The response body could not be decoded into the expected shape."""

    def __init__(
        self,
        reason: str,
        *,
        preview: str | None = None,
        operation: str | None = None,
        entity_id: str | None = None,
    ) -> None:
        message = reason if preview is None else f"{reason}. Response preview: {preview}"
        super().__init__(message, operation=operation, entity_id=entity_id)
        self.reason = reason
        self.preview = preview


class ApplicationError(PipesyncError):
    """The service reported an application-level failure."""

    def __init__(
        self,
        message: str,
        *,
        details: object = None,
        operation: str | None = None,
        entity_id: str | None = None,
    ) -> None:
        super().__init__(message, operation=operation, entity_id=entity_id)
        self.details = details


class ChainResolutionError(PipesyncError):
    """An intermediate lookup of a multi-step sequence returned nothing usable."""

    def __init__(
        self,
        step: str,
        message: str,
        *,
        operation: str | None = None,
        entity_id: str | None = None,
    ) -> None:
        super().__init__(f"{step}: {message}", operation=operation, entity_id=entity_id)
        self.step = step


class EntityNotFoundError(PipesyncError):
    """An explicit lookup by id found nothing."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind} with id {entity_id} not found", entity_id=entity_id)
        self.kind = kind


def preview_body(body: str, *, limit: int = PREVIEW_LENGTH) -> str:
    """Return a bounded preview of a raw response body."""

    if len(body) > limit:
        return body[:limit] + "..."
    return body


__all__ = [
    "ApplicationError",
    "ChainResolutionError",
    "DecodeError",
    "EntityNotFoundError",
    "HTTPStatusError",
    "OperationCancelledError",
    "PipesyncError",
    "TransportError",
    "preview_body",
]
