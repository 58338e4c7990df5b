# tuiedit/utils/errors.py
"""Exception types shared across tuiedit packages."""


class TuieditError(Exception):
    """Base class for recoverable editor errors."""
