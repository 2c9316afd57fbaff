"""Expect component - comparisons as scenario constraints."""

from .component import ExpectComponent, ExpectConstraint

__all__ = ["ExpectComponent", "ExpectConstraint"]
