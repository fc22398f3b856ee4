"""JSON reporter for scripts and log pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from rulesync.reconciler import Outcome


def to_dict(outcome: Outcome) -> Dict[str, Any]:
    """Convert an Outcome to a JSON-serialisable dict."""
    diff = outcome.diff
    changes: Dict[str, List[Dict[str, str]]] = {"added": [], "updated": [], "deleted": []}
    if diff is not None:
        for change, keys in (
            ("added", diff.added),
            ("updated", diff.updated),
            ("deleted", diff.deleted),
        ):
            changes[change] = [{"group": k.group, "rule": k.rule} for k in sorted(keys)]

    return {
        "version": "1.0",
        "outcome": outcome.kind.value,
        "dry_run": outcome.dry_run,
        **({"reason": outcome.reason} if outcome.reason else {}),
        "total_changes": diff.total if diff is not None else 0,
        "changes": changes,
        "rejected": [{"rule": r.name, "reason": r.reason} for r in outcome.rejected],
        **({"reload_error": outcome.reload_error} if outcome.reload_error else {}),
        "duration_ms": outcome.duration_ms,
    }


def render(outcome: Outcome) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(outcome), indent=2)
