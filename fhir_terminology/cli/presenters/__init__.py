"""Rich presenters for CLI output."""

from .expansion import ExpansionPresenter
from .validation import ValidationPresenter

__all__ = [
    "ExpansionPresenter",
    "ValidationPresenter",
]
