import math

import numpy as np
import pytest

from xbengine.camera import ProjectionType
from xbengine.components import (
    BodyType,
    BoxCollider2DComponent,
    CameraComponent,
    CircleCollider2DComponent,
    CircleRendererComponent,
    IDComponent,
    NativeScriptComponent,
    Rigidbody2DComponent,
    SpriteRendererComponent,
    TagComponent,
    TransformComponent,
    new_uuid,
)
from xbengine.mathutil import decompose_transform


def test_new_uuid_is_64_bit_and_varies():
    ids = {new_uuid() for _ in range(50)}
    assert len(ids) > 1
    assert all(0 <= i < 2**64 for i in ids)


def test_id_component_gets_fresh_id():
    assert IDComponent().id != IDComponent().id or IDComponent().id != IDComponent().id
    assert IDComponent(7).id == 7


def test_tag_default_empty():
    assert TagComponent().tag == ""
    assert TagComponent("Player").tag == "Player"


def test_default_transform_is_identity():
    assert np.allclose(TransformComponent().transform, np.identity(4))


def test_transform_decomposes_back():
    tc = TransformComponent(translation=(1.0, 2.0, 3.0), rotation=(0.0, 0.0, 0.3), scale=(2.0, 3.0, 4.0))
    parts = decompose_transform(tc.transform)
    assert np.allclose(parts.translation, tc.translation)
    assert np.allclose(parts.scale, tc.scale)
    assert np.allclose(parts.rotation, tc.rotation)


def test_transform_fields_are_arrays_and_independent():
    a = TransformComponent()
    b = TransformComponent()
    a.translation[0] = 5.0
    assert b.translation[0] == 0.0


def test_circle_renderer_defaults():
    c = CircleRendererComponent()
    assert c.color == (1.0, 1.0, 1.0, 1.0)
    assert c.thickness == 1.0
    assert c.fade == 0.005


def test_sprite_renderer_defaults():
    s = SpriteRendererComponent()
    assert s.texture is None
    assert s.tiling_factor == 1.0
    assert SpriteRendererComponent((0.5, 0.5, 0.5, 1.0)).color == (0.5, 0.5, 0.5, 1.0)


def test_camera_component_defaults():
    c = CameraComponent()
    assert c.primary is True
    assert c.fixed_aspect_ratio is False
    assert c.camera.projection_type is ProjectionType.ORTHOGRAPHIC


class _Script:
    pass


def test_native_script_lifecycle():
    nsc = NativeScriptComponent()
    nsc.bind(_Script)
    instance = nsc.instantiate()
    assert isinstance(instance, _Script)
    assert nsc.instance is instance
    nsc.destroy()
    assert nsc.instance is None


def test_native_script_unbound_raises():
    with pytest.raises(RuntimeError):
        NativeScriptComponent().instantiate()


def test_body_type_values():
    assert [b.value for b in BodyType] == [0, 1, 2]
    assert Rigidbody2DComponent().body_type is BodyType.STATIC
    assert Rigidbody2DComponent().fixed_rotation is False


def test_collider_defaults():
    box = BoxCollider2DComponent()
    assert box.size == (0.5, 0.5)
    assert box.friction == 0.5
    circle = CircleCollider2DComponent()
    assert circle.radius == 0.5
    assert circle.restitution == 0.0
    assert math.isclose(circle.density, 1.0)