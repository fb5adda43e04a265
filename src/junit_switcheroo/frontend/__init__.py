"""
Front ends producing ``junit_switcheroo.core.tree`` models.
"""

from junit_switcheroo.frontend.java import JavaFrontend

__all__ = ["JavaFrontend"]
