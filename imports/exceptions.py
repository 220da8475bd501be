"""Errors raised while reading and dispatching bulk imports."""


class ImportPayloadError(Exception):
    """The upload cannot be turned into rows."""


class PayloadTooLarge(ImportPayloadError):
    def __init__(self, size, limit):
        self.size = size
        self.limit = limit
        super().__init__(f"Payload of {size} bytes exceeds the {limit} byte import limit")


class UnknownImportTarget(ImportPayloadError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown import target '{name}'")


class RowValidationError(ValueError):
    """A single row cannot be shaped into a record. Reported, never raised out of an import."""
