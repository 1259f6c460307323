"""
Auto-detection — the ordered chain of detectors run by the loader.

Each detector takes ``(base_dir, project)`` and may only add to the
project. The order matters: the compose detector fixes service
directories before the framework detectors look inside them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from cleat.core.detection import cloud, compose, django, environments, golang, iac, npm, ruby
from cleat.core.models.project import Project

logger = logging.getLogger(__name__)

Detector = Callable[[Path, Project], None]

DETECTORS: list[tuple[str, Detector]] = [
    ("environments", environments.detect),
    ("compose", compose.detect),
    ("django", django.detect),
    ("ruby", ruby.detect),
    ("npm", npm.detect),
    ("go", golang.detect),
    ("cloud", cloud.detect),
    ("iac", iac.detect),
]

FRAMEWORK_DETECTORS = (django.detect, ruby.detect, npm.detect, golang.detect)


def detect_all(base_dir: Path, project: Project) -> Project:
    """Run every detector in order against ``project`` (mutated in place).

    Services the cloud detector adds from an ``app.yaml`` folder come after
    the framework detectors, so those get a second pass over just them.
    """
    for name, detector in DETECTORS:
        logger.debug("Running %s detector in %s", name, base_dir)
        known = len(project.services)
        detector(base_dir, project)
        added = project.services[known:]
        if name == "cloud" and added:
            for framework in FRAMEWORK_DETECTORS:
                framework(base_dir, project, services=added)
    return project
