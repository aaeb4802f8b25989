# xbengine

The core of a small 2D game engine, written against numpy arrays and plain
Python objects. It covers these areas:

- **Events** (`xbengine.events`). These are window, application, key and mouse events. Each carries `EventCategory` flags. An `EventDispatcher` routes an event to a handler by its type. An `InputState` holds a snapshot of pressed keys, pressed buttons and the cursor position.
- **Math** (`xbengine.mathutil`). It builds 4x4 matrices: `ortho`, `perspective`, `translate`, `rotate` and `scale`. It also has quaternion helpers (`euler_to_quat`, `quat_to_mat4`, `quat_rotate`). `decompose_transform` splits a matrix into translation, Euler rotation and scale.
- **Buffer layouts** (`xbengine.buffer`). `ShaderDataType`, `BufferElement` and `BufferLayout` compute element offsets and the stride.
- **Cameras.**
  - `xbengine.camera` holds `Camera`, `OrthographicCamera` and `SceneCamera`. `SceneCamera` is perspective or orthographic.
  - `xbengine.editor_camera` holds `EditorCamera`, an orbiting camera driven by an `InputState` and by scroll events.
  - `xbengine.camera_controller` holds `OrthographicCameraController`: WASD to move, Q/E to rotate, the mouse wheel to zoom.
- **Textures** (`xbengine.texture`). `Texture2D` holds RGBA8 pixel data in memory. `SubTexture2D.create_from_coords` cuts a region out of a sprite atlas.
- **Rendering front end.**
  - `xbengine.render_api` holds the `RendererAPI` interface, `Shader` and `ShaderLibrary`, and the frame buffer specification types. Its `RecordingRendererAPI` backend keeps every draw call in memory.
  - `xbengine.renderer2d` holds `Renderer2D`, which batches quads, circles and lines and tracks `Statistics`.
- **Scenes.**
  - `xbengine.components` holds the components: transform, tag, sprite, circle, camera, rigid body, box and circle colliders, and native script.
  - `xbengine.scene` holds `Scene`, `Entity` and `ScriptableEntity`.
- **Serialization** (`xbengine.serializer`). `SceneSerializer` writes scenes to YAML and reads them back.

## Install

```
pip install .
```

## Example

```python
from xbengine.scene import Scene
from xbengine.components import SpriteRendererComponent, CameraComponent
from xbengine.renderer2d import Renderer2D
from xbengine.render_api import RecordingRendererAPI
from xbengine.serializer import SceneSerializer

scene = Scene()
player = scene.create_entity("Player")
player.add_component(SpriteRendererComponent(color=(1.0, 0.2, 0.3, 1.0)))

camera = scene.create_entity("Camera")
camera.add_component(CameraComponent())
scene.on_viewport_resize(1280, 720)

backend = RecordingRendererAPI()
renderer = Renderer2D(backend)
scene.on_update_runtime(0.016, renderer)
print(renderer.stats.draw_calls, renderer.stats.quad_count)
print(backend.draw_calls[0].batch, len(backend.draw_calls[0].vertices))

serializer = SceneSerializer(scene)
serializer.serialize("level.yaml")

loaded = Scene()
SceneSerializer(loaded).deserialize("level.yaml")
print([e.name for e in loaded.entities()])
```

`SceneSerializer.dumps()` and `loads(text)` do the same work on strings.
`loads` returns `False` when the text is not a scene document. It raises
`SceneFormatError` when a field is missing or malformed.

## Events

```python
from xbengine.events import EventDispatcher, MouseScrolledEvent, EventCategory

event = MouseScrolledEvent(0.0, 1.5)
assert event.is_in_category(EventCategory.MOUSE)
EventDispatcher(event).dispatch(MouseScrolledEvent, lambda e: True)
assert event.handled
```

## Scripts

Subclass `ScriptableEntity` and bind it to an entity:

```python
from xbengine.components import NativeScriptComponent, TransformComponent
from xbengine.scene import ScriptableEntity

class Mover(ScriptableEntity):
    def on_update(self, ts):
        self.get_component(TransformComponent).translation[0] += ts

nsc = player.add_component(NativeScriptComponent())
nsc.bind(Mover)
```

On its first runtime update, the scene creates the instance and calls
`on_create`. It calls `on_update(ts)` on every runtime update.

## What it does not do

- It opens no window and draws no pixels. `Renderer2D` builds vertex batches and hands them to a `RendererAPI`. The only backend included is `RecordingRendererAPI`, which stores the calls.
- It runs no physics. Rigid body and collider components are stored and serialized, but nothing simulates them.
- It has no profiling or tracing facility.
- It has no command-line program.

## Tests

```
pip install .[test]
pytest
```