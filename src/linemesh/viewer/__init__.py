"""Viewer module for previewing render buffers."""

from .viewer import Viewer, fit_camera, look_at, render_buffer, show_buffer

__all__ = ["Viewer", "fit_camera", "look_at", "render_buffer", "show_buffer"]
