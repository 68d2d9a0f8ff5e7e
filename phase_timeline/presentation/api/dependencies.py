from typing import Annotated

from fastapi import Depends, Path

from phase_timeline.application.services.timeline_registry import (
    TimelineRegistry, TimelineRun)
from phase_timeline.domain.exceptions import ValidationException
from phase_timeline.infrastructure.config.settings import Settings, get_settings
from phase_timeline.shared.utils.sanitization import validate_phase_name

# Global registry instance (singleton), initialized on app startup
_timeline_registry: TimelineRegistry | None = None


def get_timeline_registry() -> TimelineRegistry:
    """
    Timeline registry dependency (singleton)

    Created lazily from settings if startup has not set one.
    """
    global _timeline_registry
    if _timeline_registry is None:
        _timeline_registry = TimelineRegistry(max_runs=get_settings().max_timeline_runs)
    return _timeline_registry


def set_timeline_registry(registry: TimelineRegistry | None) -> None:
    """Set the global timeline registry (called on startup and in tests)"""
    global _timeline_registry
    _timeline_registry = registry


def get_timeline_run(
    run_id: Annotated[str, Path(description="Workflow run id")],
    registry: Annotated[TimelineRegistry, Depends(get_timeline_registry)],
) -> TimelineRun:
    """Resolve a run id; unknown ids raise TimelineRunNotFoundError (404)"""
    return registry.get(run_id)


def get_phase_name(
    name: Annotated[str, Path(description="Phase name")],
    settings: Annotated[Settings, Depends(get_settings)],
) -> str:
    """Validate a phase name taken from the URL"""
    try:
        return validate_phase_name(name, settings.max_phase_name_length)
    except ValueError as e:
        raise ValidationException(str(e), field="name") from e
