"""Exception definitions for Spider Boxes"""

from __future__ import annotations

from typing import Iterable


class SpiderBoxesException(Exception):
    """Base exception for all Spider Boxes errors.

    All custom exceptions in Spider Boxes inherit from this class.
    Use this as a catch-all when you don't need to handle specific
    exception types.
    """

    pass


class ConfigException(SpiderBoxesException):
    """Raised when configuration validation or loading fails.

    Use this exception when:
    - The configuration file cannot be found
    - The TOML syntax is invalid
    - Configuration validation fails (missing required fields, invalid values)
    """

    pass


class NotFoundError(SpiderBoxesException):
    """Raised when a type definition, instance or override record is absent."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class ValidationFailedError(SpiderBoxesException):
    """Raised when required fields or constraints are violated.

    Carries every collected message together with the names of the fields
    that failed, so callers can surface each error next to its field.
    """

    def __init__(self, messages: Iterable[str], fields: Iterable[str] = ()):
        self.messages = list(messages)
        self.fields = list(fields)
        super().__init__("; ".join(self.messages) or "Validation failed")


class DuplicateRegistrationError(SpiderBoxesException):
    """Raised by the REST layer when a type id is already registered.

    Registries themselves report duplicates by returning ``False``.
    """

    pass


class StoreUnavailableError(SpiderBoxesException):
    """Raised when a storage collaborator fails.

    Not retried: the error is propagated to the caller as-is.
    """

    pass
