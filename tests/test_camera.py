import math

import numpy as np
import pytest

from xbengine.camera import Camera, OrthographicCamera, ProjectionType, SceneCamera
from xbengine.mathutil import ortho, perspective, rotate


def test_camera_default_projection_is_identity():
    assert np.allclose(Camera().projection, np.identity(4))


def test_camera_keeps_given_projection():
    proj = ortho(-1, 1, -1, 1, -1, 1)
    assert np.allclose(Camera(proj).projection, proj)


def test_orthographic_camera_projection():
    cam = OrthographicCamera(-2.0, 2.0, -1.0, 1.0)
    assert np.allclose(cam.projection_matrix, ortho(-2.0, 2.0, -1.0, 1.0, -1.0, 1.0))
    assert np.allclose(cam.view_matrix, np.identity(4))
    assert np.allclose(cam.view_projection_matrix, cam.projection_matrix)


def test_set_position_moves_point_to_origin():
    cam = OrthographicCamera(-2.0, 2.0, -1.0, 1.0)
    cam.position = (1.0, 2.0, 0.0)
    assert np.allclose(cam.position, [1.0, 2.0, 0.0])
    assert np.allclose(cam.view_matrix @ np.array([1.0, 2.0, 0.0, 1.0]), [0.0, 0.0, 0.0, 1.0])
    assert np.allclose(cam.view_projection_matrix, cam.projection_matrix @ cam.view_matrix)


def test_set_rotation_inverts_rotation():
    cam = OrthographicCamera(-1.0, 1.0, -1.0, 1.0)
    cam.rotation = 90.0
    assert cam.rotation == 90.0
    assert np.allclose(cam.view_matrix @ rotate(math.radians(90.0), (0, 0, 1)), np.identity(4))


def test_set_projection_keeps_view():
    cam = OrthographicCamera(-1.0, 1.0, -1.0, 1.0)
    cam.position = (3.0, 0.0, 0.0)
    view = cam.view_matrix.copy()
    cam.set_projection(-4.0, 4.0, -2.0, 2.0)
    assert np.allclose(cam.view_matrix, view)
    assert np.allclose(cam.projection_matrix, ortho(-4.0, 4.0, -2.0, 2.0, -1.0, 1.0))
    assert np.allclose(cam.view_projection_matrix, cam.projection_matrix @ view)


def _corner_maps_to_edge(cam: SceneCamera) -> bool:
    half_h = cam.orthographic_size / 2
    half_w = half_h * cam.aspect_ratio
    clip = cam.projection @ np.array([half_w, half_h, 0.0, 1.0])
    return np.allclose(clip[[0, 1, 3]], [1.0, 1.0, 1.0])


def test_scene_camera_defaults():
    cam = SceneCamera()
    assert cam.projection_type is ProjectionType.ORTHOGRAPHIC
    assert cam.orthographic_size == 10.0
    assert cam.perspective_fov == pytest.approx(math.radians(45.0))
    assert _corner_maps_to_edge(cam)


def test_scene_camera_viewport_size():
    cam = SceneCamera()
    cam.set_viewport_size(1600, 800)
    assert cam.aspect_ratio == pytest.approx(2.0)
    assert _corner_maps_to_edge(cam)


def test_scene_camera_zero_height_raises():
    with pytest.raises(ValueError):
        SceneCamera().set_viewport_size(100, 0)


def test_scene_camera_perspective():
    cam = SceneCamera()
    cam.set_viewport_size(1600, 800)
    cam.set_perspective(0.8, 0.5, 50.0)
    assert cam.projection_type is ProjectionType.PERSPECTIVE
    assert np.allclose(cam.projection, perspective(0.8, cam.aspect_ratio, 0.5, 50.0))


def test_attribute_change_needs_recalculation():
    cam = SceneCamera()
    before = cam.projection.copy()
    cam.orthographic_size = 4.0
    assert np.allclose(cam.projection, before)
    cam.recalculate_projection()
    other = SceneCamera()
    other.set_orthographic(4.0, -1.0, 1.0)
    assert np.allclose(cam.projection, other.projection)
    assert not np.allclose(cam.projection, before)