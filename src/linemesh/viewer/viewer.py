"""Preview render buffers with trimesh or render them offscreen with pyrender."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

import numpy as np

from ..core.buffer import RenderBuffer

if TYPE_CHECKING:
    import trimesh
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)


def look_at(cam_pos: NDArray[np.float64], target: NDArray[np.float64]) -> NDArray[np.float64]:
    """Build a 4x4 camera pose at cam_pos looking at target with +Y up."""
    up = np.array([0.0, 1.0, 0.0])

    forward = target - cam_pos
    forward = forward / np.linalg.norm(forward)
    right = np.cross(forward, up)
    if np.linalg.norm(right) < 1e-9:
        # Looking straight up or down, pick any horizontal right vector
        right = np.array([1.0, 0.0, 0.0])
    right = right / np.linalg.norm(right)
    up = np.cross(right, forward)

    pose = np.eye(4)
    pose[:3, 0] = right
    pose[:3, 1] = up
    pose[:3, 2] = -forward  # Camera looks down -Z
    pose[:3, 3] = cam_pos
    return pose


def fit_camera(buffer: RenderBuffer, fov: float) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Camera position and target that frame the whole buffer from +Z.

    Args:
        buffer: Buffer to frame
        fov: Vertical field of view in degrees

    Returns:
        (camera position, target)
    """
    bounds = buffer.bounds
    if bounds is None:
        return np.array([0.0, 0.0, 1000.0]), np.zeros(3)

    center = (bounds[0] + bounds[1]) / 2
    radius = max(np.linalg.norm(bounds[1] - bounds[0]) / 2, 1e-3)
    distance = radius / np.tan(np.radians(fov) / 2) + radius
    return center + np.array([0.0, 0.0, distance]), center


class Viewer:
    """Interactive preview of one or more buffers.

    Uses trimesh's built-in viewer (pyglet-based). Each buffer becomes a
    Path3D whose edges carry the mean color of their endpoints.
    """

    def __init__(self, buffers: Sequence[RenderBuffer], names: Sequence[str] | None = None) -> None:
        """Initialize the viewer.

        Args:
            buffers: Buffers to display
            names: Optional geometry names, one per buffer
        """
        import trimesh as tm

        self._scene = tm.Scene()
        for i, buffer in enumerate(buffers):
            if buffer.is_empty:
                continue
            name = names[i] if names is not None else f"mesh_{i}"
            self._scene.add_geometry(buffer.to_trimesh(), node_name=name, geom_name=name)

    def show(self, **kwargs) -> None:
        """Display the scene in an interactive window.

        Args:
            **kwargs: Additional arguments passed to trimesh.Scene.show()
        """
        if len(self._scene.geometry) == 0:
            logger.warning("No geometry to display")
            return
        self._scene.show(**kwargs)

    @property
    def scene(self) -> trimesh.Scene:
        """Get the underlying trimesh Scene."""
        return self._scene


def render_buffer(
    buffer: RenderBuffer,
    width: int = 1920,
    height: int = 1080,
    fov: float = 45.0,
    camera: NDArray[np.float64] | None = None,
    target: NDArray[np.float64] | None = None,
) -> NDArray[np.uint8]:
    """Render a buffer offscreen on a black background.

    Args:
        buffer: Buffer to draw as line segments
        width, height: Image size in pixels
        fov: Vertical field of view in degrees
        camera: Camera position (default: fit to the buffer bounds)
        target: Look-at point (default: center of the buffer)

    Returns:
        HxWx3 uint8 RGB image
    """
    import pyrender

    fit_pos, fit_target = fit_camera(buffer, fov)
    cam_pos = np.asarray(camera, dtype=np.float64) if camera is not None else fit_pos
    look = np.asarray(target, dtype=np.float64) if target is not None else fit_target

    scene = pyrender.Scene(bg_color=[0.0, 0.0, 0.0, 1.0], ambient_light=[1.0, 1.0, 1.0])
    if not buffer.is_empty:
        scene.add(buffer.to_pyrender())

    near = 1.0
    far = max(np.linalg.norm(cam_pos - look) * 4, 6000.0)
    pr_camera = pyrender.PerspectiveCamera(yfov=np.radians(fov), znear=near, zfar=far)
    scene.add(pr_camera, pose=look_at(cam_pos, look))

    renderer = pyrender.OffscreenRenderer(width, height)
    try:
        color, _ = renderer.render(scene, flags=pyrender.RenderFlags.FLAT)
    finally:
        renderer.delete()
    return color


def show_buffer(buffer: RenderBuffer, **kwargs) -> None:
    """Convenience function to quickly display a single buffer."""
    Viewer([buffer]).show(**kwargs)
