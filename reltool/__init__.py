"""reltool: merge a release candidate and draft its GitHub release."""

__version__ = "0.3.0"
