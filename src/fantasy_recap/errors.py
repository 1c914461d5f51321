"""Error taxonomy shared by the recap pipeline and its collaborators."""

from __future__ import annotations

from typing import Sequence


class RecapError(Exception):
    """Base class for failures the pipeline reports to its caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StructuralParseError(RecapError):
    """A required path is missing (or malformed) in a provider document."""

    status_code = 400

    def __init__(self, path: Sequence[str], message: str | None = None):
        self.path = tuple(path)
        dotted = ".".join(self.path) or "<document>"
        super().__init__(message or f"missing required path {dotted}")


class MissingCredentialError(RecapError):
    status_code = 500


class GenerationError(RecapError):
    """A single text-generation call failed; recovered locally by the runner."""

    status_code = 502


class UnauthorizedError(RecapError):
    status_code = 401


class ProviderError(RecapError):
    """Upstream HTTP failure other than an authorization problem."""

    status_code = 502

    def __init__(self, message: str, *, upstream_status: int | None = None):
        super().__init__(message)
        self.upstream_status = upstream_status
