"""Base error kinds raised by every service.

``ValidationError`` covers caller-correctable preconditions such as blank
input or unknown references.  It is always raised before any state is
touched.

``BusinessError`` covers domain rule violations on otherwise valid input,
for example insufficient stock.  Services guarantee that nothing is
committed when one is raised.

Module-level exceptions (``ProductNotFound``, ``InsufficientStock``, ...)
subclass one of the two so callers may catch either granularity.
"""

from __future__ import annotations


class ValidationError(Exception):
    """A precondition of the requested operation does not hold."""


class BusinessError(Exception):
    """A domain rule forbids the requested operation."""
