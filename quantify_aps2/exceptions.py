# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""Exceptions raised while compiling sequences for the APS2."""


class CompilationError(ValueError):
    """Base class for all errors that abort a compilation."""


class UnsupportedConstructError(CompilationError):
    """Exception thrown if an input has no mapping to APS2 instructions."""


class RangeViolationError(CompilationError):
    """
    Exception thrown if a value is outside one of the fixed hardware bounds.

    Parameters
    ----------
    quantity
        Description of the value that is out of range.
    value
        The offending value.
    limit
        The largest value allowed by the hardware.
    minimum
        The smallest value allowed by the hardware.
    """

    def __init__(self, quantity: str, value: int, limit: int, minimum: int = 0) -> None:
        self.quantity = quantity
        self.value = value
        self.limit = limit
        self.minimum = minimum
        super().__init__(
            f"{quantity} of {value} is outside the hardware range "
            f"[{minimum}, {limit}]."
        )


class InvalidChannelMapError(CompilationError):
    """Exception thrown if the channel map does not assign anything to encode."""
