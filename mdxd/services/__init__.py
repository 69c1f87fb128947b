"""Services for mdxd."""

from .build_service import BuildOutcome
from .build_service import BuildService

__all__ = ["BuildOutcome", "BuildService"]
