"""Saving scenes to YAML text and loading them back."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

import yaml

from .camera import ProjectionType
from .components import (
    BodyType,
    BoxCollider2DComponent,
    CameraComponent,
    CircleCollider2DComponent,
    CircleRendererComponent,
    Rigidbody2DComponent,
    SpriteRendererComponent,
    TagComponent,
    TransformComponent,
)
from .scene import Entity, Scene

log = logging.getLogger(__name__)

SCENE_NAME = "Untitled"

_BODY_TYPE_NAMES = {
    BodyType.STATIC: "Static",
    BodyType.KINEMATIC: "Kinematic",
    BodyType.DYNAMIC: "Dynamic",
}
_BODY_TYPES_BY_NAME = {name: body_type for body_type, name in _BODY_TYPE_NAMES.items()}


class SceneFormatError(ValueError):
    """A scene document is missing a field or holds a value of the wrong shape."""


def body_type_to_string(body_type: BodyType) -> str:
    try:
        return _BODY_TYPE_NAMES[body_type]
    except KeyError:
        raise ValueError(f"unknown rigidbody type: {body_type!r}") from None


def body_type_from_string(text: str) -> BodyType:
    try:
        return _BODY_TYPES_BY_NAME[text]
    except KeyError:
        raise ValueError(f"unknown rigidbody type: {text!r}") from None


class _FlowSeq(list):
    """A sequence written in flow style, as vectors are."""


class _Dumper(yaml.SafeDumper):
    pass


_Dumper.add_representer(
    _FlowSeq,
    lambda dumper, data: dumper.represent_sequence("tag:yaml.org,2002:seq", data, flow_style=True),
)


def _flow(values: Any) -> _FlowSeq:
    return _FlowSeq(float(v) for v in values)


def _require(node: Any, key: str) -> Any:
    if not isinstance(node, Mapping) or key not in node:
        raise SceneFormatError(f"missing field {key!r}")
    return node[key]


def _vector(node: Any, key: str, size: int) -> tuple[float, ...]:
    value = _require(node, key)
    if not isinstance(value, list) or len(value) != size:
        raise SceneFormatError(f"field {key!r} must be a sequence of {size} numbers")
    try:
        return tuple(float(v) for v in value)
    except (TypeError, ValueError):
        raise SceneFormatError(f"field {key!r} must hold numbers") from None


def _float(node: Any, key: str) -> float:
    try:
        return float(_require(node, key))
    except (TypeError, ValueError):
        raise SceneFormatError(f"field {key!r} must be a number") from None


def _bool(node: Any, key: str) -> bool:
    value = _require(node, key)
    if not isinstance(value, bool):
        raise SceneFormatError(f"field {key!r} must be a boolean")
    return value


def _serialize_entity(entity: Entity) -> dict[str, Any]:
    out: dict[str, Any] = {"Entity": entity.uuid}

    if entity.has_component(TagComponent):
        out["TagComponent"] = {"Tag": entity.get_component(TagComponent).tag}

    if entity.has_component(TransformComponent):
        tc = entity.get_component(TransformComponent)
        out["TransformComponent"] = {
            "Translation": _flow(tc.translation),
            "Rotation": _flow(tc.rotation),
            "Scale": _flow(tc.scale),
        }

    if entity.has_component(CameraComponent):
        cc = entity.get_component(CameraComponent)
        camera = cc.camera
        out["CameraComponent"] = {
            "Camera": {
                "ProjectionType": camera.projection_type.value,
                "PerspectiveFOV": float(camera.perspective_fov),
                "PerspectiveNear": float(camera.perspective_near),
                "PerspectiveFar": float(camera.perspective_far),
                "OrthographicSize": float(camera.orthographic_size),
                "OrthographicNear": float(camera.orthographic_near),
                "OrthographicFar": float(camera.orthographic_far),
            },
            "Primary": bool(cc.primary),
            "FixedAspectRatio": bool(cc.fixed_aspect_ratio),
        }

    if entity.has_component(CircleRendererComponent):
        crc = entity.get_component(CircleRendererComponent)
        out["CircleRendererComponent"] = {
            "Color": _flow(crc.color),
            "Thickness": float(crc.thickness),
            "Fade": float(crc.fade),
        }

    if entity.has_component(SpriteRendererComponent):
        src = entity.get_component(SpriteRendererComponent)
        out["SpriteRendererComponent"] = {"Color": _flow(src.color)}

    if entity.has_component(Rigidbody2DComponent):
        rb2d = entity.get_component(Rigidbody2DComponent)
        out["Rigibody2DComponent"] = {
            "BodyType": body_type_to_string(rb2d.body_type),
            "FixedRotation": bool(rb2d.fixed_rotation),
        }

    if entity.has_component(BoxCollider2DComponent):
        bc2d = entity.get_component(BoxCollider2DComponent)
        out["BoxCollider2DComponent"] = {
            "Offset": _flow(bc2d.offset),
            "Size": _flow(bc2d.size),
            "Density": float(bc2d.density),
            "Friction": float(bc2d.friction),
            "Restitution": float(bc2d.restitution),
        }

    if entity.has_component(CircleCollider2DComponent):
        cc2d = entity.get_component(CircleCollider2DComponent)
        out["CircleCollider2DComponent"] = {
            "Offset": _flow(cc2d.offset),
            "Radius": float(cc2d.radius),
            "Density": float(cc2d.density),
            "Friction": float(cc2d.friction),
            "Restitution": float(cc2d.restitution),
        }

    return out


def _deserialize_entity(scene: Scene, node: Any) -> Entity:
    try:
        uuid = int(_require(node, "Entity"))
    except (TypeError, ValueError):
        raise SceneFormatError("field 'Entity' must be an integer") from None

    name = ""
    tag_node = node.get("TagComponent")
    if tag_node:
        name = str(_require(tag_node, "Tag"))
    log.debug("loading entity: id = %d, name = %s", uuid, name)

    entity = scene.create_entity_with_uuid(uuid, name)

    transform_node = node.get("TransformComponent")
    if transform_node:
        tc = entity.get_component(TransformComponent)
        tc.translation = list(_vector(transform_node, "Translation", 3))
        tc.rotation = list(_vector(transform_node, "Rotation", 3))
        tc.scale = list(_vector(transform_node, "Scale", 3))
        tc.__post_init__()

    camera_node = node.get("CameraComponent")
    if camera_node:
        cc = entity.add_component(CameraComponent())
        props = _require(camera_node, "Camera")
        try:
            cc.camera.projection_type = ProjectionType(int(_require(props, "ProjectionType")))
        except (TypeError, ValueError):
            raise SceneFormatError("field 'ProjectionType' is not a known projection") from None
        cc.camera.perspective_fov = _float(props, "PerspectiveFOV")
        cc.camera.perspective_near = _float(props, "PerspectiveNear")
        cc.camera.perspective_far = _float(props, "PerspectiveFar")
        cc.camera.orthographic_size = _float(props, "OrthographicSize")
        cc.camera.orthographic_near = _float(props, "OrthographicNear")
        cc.camera.orthographic_far = _float(props, "OrthographicFar")
        cc.camera.recalculate_projection()
        cc.primary = _bool(camera_node, "Primary")
        cc.fixed_aspect_ratio = _bool(camera_node, "FixedAspectRatio")

    circle_node = node.get("CircleRendererComponent")
    if circle_node:
        entity.add_component(
            CircleRendererComponent(
                color=_vector(circle_node, "Color", 4),  # type: ignore[arg-type]
                thickness=_float(circle_node, "Thickness"),
                fade=_float(circle_node, "Fade"),
            )
        )

    sprite_node = node.get("SpriteRendererComponent")
    if sprite_node:
        entity.add_component(
            SpriteRendererComponent(color=_vector(sprite_node, "Color", 4))  # type: ignore[arg-type]
        )

    body_node = node.get("Rigibody2DComponent")
    if body_node:
        entity.add_component(
            Rigidbody2DComponent(
                body_type=body_type_from_string(str(_require(body_node, "BodyType"))),
                fixed_rotation=_bool(body_node, "FixedRotation"),
            )
        )

    box_node = node.get("BoxCollider2DComponent")
    if box_node:
        entity.add_component(
            BoxCollider2DComponent(
                offset=_vector(box_node, "Offset", 2),  # type: ignore[arg-type]
                size=_vector(box_node, "Size", 2),  # type: ignore[arg-type]
                density=_float(box_node, "Density"),
                friction=_float(box_node, "Friction"),
                restitution=_float(box_node, "Restitution"),
            )
        )

    circle_collider_node = node.get("CircleCollider2DComponent")
    if circle_collider_node:
        entity.add_component(
            CircleCollider2DComponent(
                offset=_vector(circle_collider_node, "Offset", 2),  # type: ignore[arg-type]
                radius=_float(circle_collider_node, "Radius"),
                density=_float(circle_collider_node, "Density"),
                friction=_float(circle_collider_node, "Friction"),
                restitution=_float(circle_collider_node, "Restitution"),
            )
        )

    return entity


class SceneSerializer:
    """Writes a scene's entities to YAML and adds entities read from YAML to it."""

    def __init__(self, scene: Scene) -> None:
        self.scene = scene

    def dumps(self) -> str:
        document = {
            "Scene": SCENE_NAME,
            "Entities": [_serialize_entity(entity) for entity in self.scene.entities()],
        }
        return yaml.dump(
            document,
            Dumper=_Dumper,
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )

    def loads(self, text: str) -> bool:
        """Add the entities in ``text`` to the scene; False if it is not a scene document."""
        data = yaml.safe_load(text)
        if not isinstance(data, Mapping) or "Scene" not in data:
            return False
        log.debug("loading scene: '%s'", data["Scene"])

        entities = data.get("Entities") or []
        if not isinstance(entities, list):
            raise SceneFormatError("field 'Entities' must be a sequence")
        for node in entities:
            if not isinstance(node, Mapping):
                raise SceneFormatError("each entity must be a mapping")
            _deserialize_entity(self.scene, node)
        return True

    def serialize(self, filepath: str | Path) -> None:
        Path(filepath).write_text(self.dumps(), encoding="utf-8")

    def deserialize(self, filepath: str | Path) -> bool:
        return self.loads(Path(filepath).read_text(encoding="utf-8"))