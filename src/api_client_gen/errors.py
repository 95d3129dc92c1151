"""Exceptions raised by the generator."""


class SchemaError(Exception):
    """The schema could not be fetched or parsed; nothing can be generated."""


class FormatError(Exception):
    """Emitted source is not valid Python and could not be re-formatted."""
