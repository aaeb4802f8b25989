"""Scenes of entities and their components."""

from __future__ import annotations

import copy
import itertools
from typing import Any, Iterator, TypeVar

import numpy as np

from .components import (
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

T = TypeVar("T")

DEFAULT_ENTITY_NAME = "Block Entity"

_COPIED_COMPONENTS: tuple[type, ...] = (
    TransformComponent,
    SpriteRendererComponent,
    CircleRendererComponent,
    CameraComponent,
    NativeScriptComponent,
    Rigidbody2DComponent,
    BoxCollider2DComponent,
    CircleCollider2DComponent,
)


def _clone(component: Any) -> Any:
    """Copy a component by value; textures, script instances and bodies stay shared."""
    memo: dict[int, Any] = {}
    for attr in ("texture", "instance", "runtime_body"):
        value = getattr(component, attr, None)
        if value is not None:
            memo[id(value)] = value
    return copy.deepcopy(component, memo)


class Entity:
    """A handle to an entity in a scene."""

    def __init__(self, handle: int, scene: Scene) -> None:
        self.handle = handle
        self.scene = scene

    def _components(self) -> dict[type, Any]:
        try:
            return self.scene._registry[self.handle]
        except KeyError:
            raise ValueError(f"entity {self.handle} is not alive") from None

    def add_component(self, component: T) -> T:
        components = self._components()
        if type(component) in components:
            raise ValueError(f"entity already has {type(component).__name__}")
        components[type(component)] = component
        return component

    def add_or_replace_component(self, component: T) -> T:
        self._components()[type(component)] = component
        return component

    def get_component(self, component_type: type[T]) -> T:
        try:
            return self._components()[component_type]
        except KeyError:
            raise KeyError(f"entity has no {component_type.__name__}") from None

    def has_component(self, component_type: type) -> bool:
        return component_type in self._components()

    def remove_component(self, component_type: type) -> None:
        try:
            del self._components()[component_type]
        except KeyError:
            raise KeyError(f"entity has no {component_type.__name__}") from None

    @property
    def uuid(self) -> int:
        return self.get_component(IDComponent).id

    @property
    def name(self) -> str:
        return self.get_component(TagComponent).tag

    def __int__(self) -> int:
        return self.handle

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return self.handle == other.handle and self.scene is other.scene

    def __hash__(self) -> int:
        return hash((self.handle, id(self.scene)))

    def __repr__(self) -> str:
        return f"Entity({self.handle})"


class ScriptableEntity:
    """Base for native scripts attached through NativeScriptComponent."""

    def __init__(self) -> None:
        self._entity: Entity | None = None

    @property
    def entity(self) -> Entity | None:
        return self._entity

    def get_component(self, component_type: type[T]) -> T:
        if self._entity is None:
            raise RuntimeError("script is not attached to an entity")
        return self._entity.get_component(component_type)

    def on_create(self) -> None:
        """Called once, before the first update."""

    def on_destroy(self) -> None:
        """Called when the script is torn down."""

    def on_update(self, ts: float) -> None:
        """Called every runtime frame with the elapsed seconds."""


class Scene:
    """A set of entities, updated and rendered together."""

    def __init__(self) -> None:
        self._registry: dict[int, dict[type, Any]] = {}
        self._handles = itertools.count()
        self.viewport_width = 0
        self.viewport_height = 0

    @classmethod
    def copy(cls, other: Scene) -> Scene:
        """A new scene with the same entities, identifiers and component values."""
        new_scene = cls()
        new_scene.viewport_width = other.viewport_width
        new_scene.viewport_height = other.viewport_height
        by_uuid: dict[int, Entity] = {}
        for entity in other.entities_with(IDComponent):
            name = entity.name if entity.has_component(TagComponent) else ""
            by_uuid[entity.uuid] = new_scene.create_entity_with_uuid(entity.uuid, name)
        for component_type in _COPIED_COMPONENTS:
            for entity in other.entities_with(IDComponent, component_type):
                target = by_uuid[entity.uuid]
                target.add_or_replace_component(_clone(entity.get_component(component_type)))
        return new_scene

    def create_entity(self, name: str = "") -> Entity:
        return self.create_entity_with_uuid(new_uuid(), name)

    def create_entity_with_uuid(self, uuid: int, name: str = "") -> Entity:
        handle = next(self._handles)
        self._registry[handle] = {}
        entity = Entity(handle, self)
        entity.add_component(IDComponent(uuid))
        entity.add_component(TransformComponent())
        entity.add_component(TagComponent(name or DEFAULT_ENTITY_NAME))
        return entity

    def destroy_entity(self, entity: Entity) -> None:
        if entity.scene is not self or entity.handle not in self._registry:
            raise ValueError(f"{entity!r} does not belong to this scene")
        del self._registry[entity.handle]

    def entities(self) -> Iterator[Entity]:
        for handle in list(self._registry):
            yield Entity(handle, self)

    def entities_with(self, *args: type) -> Iterator[Entity]:
        """Entities that have every one of the given component types."""
        for handle, components in list(self._registry.items()):
            if all(t in components for t in args):
                yield Entity(handle, self)

    def __len__(self) -> int:
        return len(self._registry)

    def on_update_editor(self, ts: float, camera: Any, renderer: Any) -> None:
        """Render the scene through an editor camera."""
        self._render(renderer, camera.view_projection)

    def on_update_runtime(self, ts: float, renderer: Any) -> None:
        """Run scripts, then render through the primary camera if there is one."""
        for entity in list(self.entities_with(NativeScriptComponent)):
            nsc = entity.get_component(NativeScriptComponent)
            if nsc.instance is None:
                instance = nsc.instantiate()
                instance._entity = entity
                instance.on_create()
            nsc.instance.on_update(ts)

        for entity in self.entities_with(TransformComponent, CameraComponent):
            camera_component = entity.get_component(CameraComponent)
            if camera_component.primary:
                transform = entity.get_component(TransformComponent).transform
                view_projection = camera_component.camera.projection @ np.linalg.inv(transform)
                self._render(renderer, view_projection)
                break

    def on_viewport_resize(self, width: int, height: int) -> None:
        self.viewport_width = width
        self.viewport_height = height
        for entity in self.entities_with(CameraComponent):
            camera_component = entity.get_component(CameraComponent)
            if not camera_component.fixed_aspect_ratio:
                camera_component.camera.set_viewport_size(width, height)

    def duplicate_entity(self, entity: Entity) -> Entity:
        """A new entity with the same name and copies of the entity's components."""
        new_entity = self.create_entity(entity.name)
        for component_type in _COPIED_COMPONENTS:
            if entity.has_component(component_type):
                new_entity.add_or_replace_component(_clone(entity.get_component(component_type)))
        return new_entity

    def primary_camera_entity(self) -> Entity | None:
        for entity in self.entities_with(CameraComponent):
            if entity.get_component(CameraComponent).primary:
                return entity
        return None

    def _render(self, renderer: Any, view_projection: np.ndarray) -> None:
        renderer.begin_scene(view_projection)
        for entity in self.entities_with(TransformComponent, SpriteRendererComponent):
            renderer.draw_sprite(
                entity.get_component(TransformComponent).transform,
                entity.get_component(SpriteRendererComponent),
                int(entity),
            )
        for entity in self.entities_with(TransformComponent, CircleRendererComponent):
            circle = entity.get_component(CircleRendererComponent)
            renderer.draw_circle(
                entity.get_component(TransformComponent).transform,
                circle.color,
                circle.thickness,
                circle.fade,
                int(entity),
            )
        renderer.end_scene()