"""Literal example request."""

from .request import RequestEntity


class SavedEntry(RequestEntity):
    """A concrete request as saved in a collection, with literal values."""
