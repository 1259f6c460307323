from cleat.core.config.loader import (
    CONFIG_FILENAMES,
    find_project_file,
    find_project_root,
    load_project,
    project_id,
)

__all__ = [
    "CONFIG_FILENAMES",
    "find_project_file",
    "find_project_root",
    "load_project",
    "project_id",
]
