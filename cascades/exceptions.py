"""
Cascade exceptions.

Raised by cascade steps and the aggregate primitives they call. The runner
catches these at the step boundary, so none of them reach the request that
created the trigger record.
"""


class CascadeError(Exception):
    """Base class for failures while applying a cascade step."""


class RelatedAggregateMissing(CascadeError):
    """The aggregate a trigger record points at no longer exists."""

    def __init__(self, model_name, pk):
        self.model_name = model_name
        self.pk = pk
        super().__init__(f"{model_name} {pk} not found")


class InsufficientStock(CascadeError):
    """A decrement was refused because it would take stock below zero."""

    def __init__(self, item_id, requested):
        self.item_id = item_id
        self.requested = requested
        super().__init__(
            f"Inventory item {item_id} has less than {requested} in stock"
        )
