"""Application, keyboard and mouse events, their dispatch and input state."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, ClassVar, Hashable, TypeVar


class EventType(enum.Enum):
    """The concrete kind of an event; the value is the event's name."""

    NONE = "None"
    WINDOW_CLOSE = "WindowClose"
    WINDOW_RESIZE = "WindowResize"
    WINDOW_FOCUS = "WindowFocus"
    WINDOW_LOST_FOCUS = "WindowLostFocus"
    WINDOW_MOVED = "WindowMoved"
    APP_TICK = "AppTick"
    APP_UPDATE = "AppUpdate"
    APP_RENDER = "AppRender"
    KEY_PRESSED = "KeyPressed"
    KEY_RELEASED = "KeyReleased"
    KEY_TYPED = "KeyTyped"
    MOUSE_BUTTON_PRESSED = "MouseButtonPressed"
    MOUSE_BUTTON_RELEASED = "MouseButtonReleased"
    MOUSE_MOVED = "MouseMoved"
    MOUSE_SCROLLED = "MouseScrolled"


class EventCategory(enum.IntFlag):
    """Bit flags grouping events by source."""

    NONE = 0
    APPLICATION = 1 << 0
    INPUT = 1 << 1
    KEYBOARD = 1 << 2
    MOUSE = 1 << 3
    MOUSE_BUTTON = 1 << 4


def _fmt(value: float) -> str:
    return f"{value:g}"


class Event:
    """Base of all events."""

    event_type: ClassVar[EventType] = EventType.NONE
    category: ClassVar[EventCategory] = EventCategory.NONE
    handled = False

    @property
    def name(self) -> str:
        return self.event_type.value

    def is_in_category(self, category: EventCategory) -> bool:
        return bool(self.category & category)

    def __str__(self) -> str:
        return self.name


@dataclass
class WindowResizeEvent(Event):
    width: int
    height: int

    event_type = EventType.WINDOW_RESIZE
    category = EventCategory.APPLICATION

    def __str__(self) -> str:
        return f"WindowResizeEvent : {self.width} , {self.height}"


@dataclass
class WindowCloseEvent(Event):
    event_type = EventType.WINDOW_CLOSE
    category = EventCategory.APPLICATION

    def __str__(self) -> str:
        return "WindowCloseEvent-----"


@dataclass
class AppTickEvent(Event):
    event_type = EventType.APP_TICK
    category = EventCategory.APPLICATION


@dataclass
class AppUpdateEvent(Event):
    event_type = EventType.APP_UPDATE
    category = EventCategory.APPLICATION


@dataclass
class AppRenderEvent(Event):
    event_type = EventType.APP_RENDER
    category = EventCategory.APPLICATION


@dataclass
class KeyEvent(Event):
    """Base of keyboard events."""

    key_code: int

    category = EventCategory.KEYBOARD | EventCategory.INPUT


@dataclass
class KeyPressedEvent(KeyEvent):
    repeat_count: int = 0

    event_type = EventType.KEY_PRESSED

    def __str__(self) -> str:
        return f"KeyPressedEvent : {self.key_code}({self.repeat_count} repeats)"


@dataclass
class KeyReleasedEvent(KeyEvent):
    event_type = EventType.KEY_RELEASED

    def __str__(self) -> str:
        return f"KeyReleasedEvent:{self.key_code}"


@dataclass
class KeyTypedEvent(KeyEvent):
    event_type = EventType.KEY_TYPED

    def __str__(self) -> str:
        return f"KeyTypedEvent:{self.key_code}"


@dataclass
class MouseMovedEvent(Event):
    x: float
    y: float

    event_type = EventType.MOUSE_MOVED
    category = EventCategory.MOUSE | EventCategory.INPUT

    def __str__(self) -> str:
        return f"MouseMovedEvent: {_fmt(self.x)} , {_fmt(self.y)}"


@dataclass
class MouseScrolledEvent(Event):
    x_offset: float
    y_offset: float

    event_type = EventType.MOUSE_SCROLLED
    category = EventCategory.MOUSE | EventCategory.INPUT

    def __str__(self) -> str:
        return (
            f"MouseScrolledEvent: XOffset - {_fmt(self.x_offset)}"
            f" , YOffset - {_fmt(self.y_offset)}"
        )


@dataclass
class MouseButtonEvent(Event):
    """Base of mouse button events."""

    button: int

    category = EventCategory.MOUSE | EventCategory.INPUT


@dataclass
class MouseButtonPressedEvent(MouseButtonEvent):
    event_type = EventType.MOUSE_BUTTON_PRESSED

    def __str__(self) -> str:
        return f"MouseButtonPressedEvent : {self.button}"


@dataclass
class MouseButtonReleasedEvent(MouseButtonEvent):
    event_type = EventType.MOUSE_BUTTON_RELEASED

    def __str__(self) -> str:
        return f"MouseButtonReleasedEvent : {self.button}"


E = TypeVar("E", bound=Event)


class EventDispatcher:
    """Routes one event to a handler registered for its concrete type."""

    def __init__(self, event: Event) -> None:
        self.event = event

    def dispatch(self, event_class: type[E], func: Callable[[E], bool]) -> bool:
        """Call ``func`` if the event is of ``event_class``; store its result as ``handled``."""
        if self.event.event_type is not event_class.event_type:
            return False
        self.event.handled = bool(func(self.event))  # type: ignore[arg-type]
        return True


@dataclass
class InputState:
    """A snapshot of pressed keys, pressed mouse buttons and the cursor position."""

    pressed_keys: set[Hashable] = field(default_factory=set)
    pressed_buttons: set[Hashable] = field(default_factory=set)
    mouse_x: float = 0.0
    mouse_y: float = 0.0

    def is_key_pressed(self, key: Hashable) -> bool:
        return key in self.pressed_keys

    def is_mouse_pressed(self, button: Hashable) -> bool:
        return button in self.pressed_buttons

    @property
    def mouse_position(self) -> tuple[float, float]:
        return (self.mouse_x, self.mouse_y)