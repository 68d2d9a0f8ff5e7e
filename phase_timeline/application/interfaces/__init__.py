"""
Application interfaces (ports).

These protocols define contracts that infrastructure must implement.
"""

from phase_timeline.application.interfaces.display import IDisplaySurface

__all__ = [
    "IDisplaySurface",
]
