"""Rule set comparison."""

from rulesync.diff.engine import compare
from rulesync.diff.models import DiffResult

__all__ = ["DiffResult", "compare"]
