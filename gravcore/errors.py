#!/usr/bin/env python3
"""
Exceptions raised by the engine.

Both derive from ValueError so hosts that already guard numeric input with
``except ValueError`` keep working.
"""


class InvalidBodyError(ValueError):
    """A body was given a mass that is not strictly positive and finite."""


class DegenerateOrbitError(ValueError):
    """Requested preview parameters do not describe a bound elliptical orbit."""
