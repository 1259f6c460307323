"""
Domain models — Pydantic types for the project description.

    from cleat.core.models import Project, Service, ModuleConfig, Workflow
"""

from cleat.core.models.module import (
    MODULE_TAGS,
    PACKAGE_MANAGERS,
    GoModule,
    ModuleConfig,
    NpmModule,
    PythonModule,
    RubyModule,
)
from cleat.core.models.project import (
    LATEST_VERSION,
    SUPPORTED_VERSIONS,
    CloudConfig,
    IacConfig,
    Project,
    Workflow,
    slugify,
)
from cleat.core.models.service import DEFAULT_SERVICE, Service

__all__ = [
    # module.py
    "GoModule",
    "MODULE_TAGS",
    "ModuleConfig",
    "NpmModule",
    "PACKAGE_MANAGERS",
    "PythonModule",
    "RubyModule",
    # project.py
    "CloudConfig",
    "IacConfig",
    "LATEST_VERSION",
    "Project",
    "SUPPORTED_VERSIONS",
    "Workflow",
    "slugify",
    # service.py
    "DEFAULT_SERVICE",
    "Service",
]
