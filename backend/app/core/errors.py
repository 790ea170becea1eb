"""
Input errors raised while reading collected API responses.

Both kinds surface as UNKNOWN findings; neither leaves a rule check.
"""
from __future__ import annotations


class CheckInputError(Exception):
    """A cached API response cannot back a pass/fail verdict."""


class FetchError(CheckInputError):
    """The upstream listing or metric query failed, or was never collected."""


class DataUnavailable(CheckInputError):
    """The query succeeded but returned no usable records."""
