"""Exceptions raised by the converter.

Mapping problems (unsupported mime types, protocols or parameter types) are
not errors: the offending piece is left out of the output.
"""


class ConverterError(Exception):
    """Base class for all converter failures."""


class ParseError(ConverterError):
    """The source document could not be parsed."""


class UnsupportedFormatError(ConverterError):
    """A format, variant or output serialization is not supported."""
