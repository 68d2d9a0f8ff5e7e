"""
Infrastructure layer.

Configuration and concrete display surfaces for the application ports.
"""
