"""
Per-user state — history, usage counters and workflow files (YAML).
"""

from cleat.core.persistence.history import MAX_ENTRIES, HistoryEntry, HistoryStore
from cleat.core.persistence.stats import StatsStore
from cleat.core.persistence.workflows import (
    delete_workflow,
    load_workflows,
    merge_workflows,
    project_workflows_path,
    save_workflow,
    user_workflows_path,
)

__all__ = [
    "HistoryEntry",
    "HistoryStore",
    "MAX_ENTRIES",
    "StatsStore",
    "delete_workflow",
    "load_workflows",
    "merge_workflows",
    "project_workflows_path",
    "save_workflow",
    "user_workflows_path",
]
