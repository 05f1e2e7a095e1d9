"""Enumeration type definitions"""

from enum import Enum


class Namespace(str, Enum):
    """Independent type catalogs and instance stores"""

    FIELD = "field"
    COMPONENT = "component"
    SECTION = "section"


class StorageBackend(str, Enum):
    DB = "db"
    MEMORY = "memory"


class MediaState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    NOT_FOUND = "not_found"


class Context(str, Enum):
    """Known context tags offered by the base ``context`` descriptor.

    Instances may carry any other tag; this list only feeds the select options.
    """

    DEFAULT = "default"
    REVIEW = "review"
    PRODUCT = "product"
    POST = "post"
    PAGE = "page"
    USER = "user"
    COMMENT = "comment"
    TERM = "term"
    SETTINGS = "settings"
    CHECKOUT = "checkout"
    REGISTRATION = "registration"
