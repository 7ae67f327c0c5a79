#!/usr/bin/env python3
"""
Errors
======
Exceptions raised by the chain. Both concrete errors also inherit from the
builtin that best describes them, so callers catching ``ValueError`` or
``LookupError`` keep working.
"""


class MarkovError(Exception):
    """Base class for all markovtext errors."""


class EmptyModel(MarkovError, LookupError):
    """Raised when there is nothing to sample from."""


class InvalidOrder(MarkovError, ValueError):
    """Raised when a chain is constructed with an order below 1."""

    def __init__(self, order):
        self.order = order
        super().__init__(f"Chain order must be a positive integer, got {order!r}")


__all__ = ['MarkovError', 'EmptyModel', 'InvalidOrder']
