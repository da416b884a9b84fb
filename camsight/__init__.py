"""Camera pipeline decoder selection and diagnostics."""

from .config import VERSION

__all__ = ["VERSION"]
