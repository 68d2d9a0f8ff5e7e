"""
Middleware layer for the phase timeline service.

This package contains middleware components for per-request timing and
the cross-origin headers that let browsers read it.
"""
