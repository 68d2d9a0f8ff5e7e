from phase_timeline.shared.utils.datetime import utc_now
from phase_timeline.shared.utils.generators import generate_run_id
from phase_timeline.shared.utils.sanitization import (PhaseNameSanitizer,
                                                      validate_phase_name)

__all__ = [
    "generate_run_id",
    "utc_now",
    "PhaseNameSanitizer",
    "validate_phase_name",
]
