"""Domain package.

This package contains the representation model threaded through the
conversion pipeline: numeric base and denomination tags, the options
record and the errors raised for unusable tags or missing rates.
"""
