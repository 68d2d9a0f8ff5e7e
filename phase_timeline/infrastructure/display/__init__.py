from phase_timeline.infrastructure.display.log_display import (BufferDisplay,
                                                               LoggingDisplay,
                                                               render_view_lines)

__all__ = ["BufferDisplay", "LoggingDisplay", "render_view_lines"]
