"""Interactive editing state machine.

One ``EditSession`` owns the composition being edited and the single active
gesture. Pointer coordinates come in as display pixels and are converted
through the session's current ``CoordinateTransform`` before anything is
stored. Every committed change replaces the composition with a new immutable
snapshot.

States::

    Idle --pointer_down--------> Dragging --pointer_up--> Idle
    Idle --resize_handle_down--> Resizing --pointer_up--> Idle
    Idle --double_click--------> TextEditing --stop_editing--> Idle

Starting a gesture outside ``Idle`` is rejected, never queued.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from overlaystudio.models.composition import Composition
from overlaystudio.models.geometry import FrameSize, Point, ScaleFactor, Size, clamp_point
from overlaystudio.models.overlay import (
    DEFAULT_OVERLAY_POSITION,
    DEFAULT_OVERLAY_TEXT,
    Overlay,
    create_overlay,
    move_overlay,
    place_overlay,
    remove_overlay,
    replace_overlay,
    set_text,
    set_window,
)

from .aspect import resize_to_aspect_ratio
from .coordinates import CoordinateTransform

logger = logging.getLogger(__name__)

MIN_RESIZE_PX = 20


class IllegalTransitionError(Exception):
    """Raised when an edit operation is not allowed in the current state."""


@dataclass(frozen=True)
class Target:
    """Something that can be dragged: the video box or one overlay."""

    overlay_id: str | None = None

    @classmethod
    def video(cls) -> Target:
        return cls()

    @classmethod
    def overlay(cls, overlay_id: str) -> Target:
        return cls(overlay_id=overlay_id)

    @property
    def is_video(self) -> bool:
        return self.overlay_id is None


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    target: Target
    # Pointer position minus target position, in composition pixels
    drag_origin: Point


@dataclass(frozen=True)
class Resizing:
    target: Target
    drag_origin: Point
    original_size: FrameSize


@dataclass(frozen=True)
class TextEditing:
    overlay_id: str
    draft: str


EditState = Idle | Dragging | Resizing | TextEditing


class EditSession:
    """Coordinates drag, resize and text edits against a composition.

    Args:
        composition: Composition to edit.
        container: On-screen size of the editing viewport. Without one,
            display and composition pixels coincide.
        min_size: Smallest width the video box can be resized to.
        default_text: Text of overlays created by ``add_overlay``.
        default_position: Position of overlays created by ``add_overlay``.
    """

    def __init__(
        self,
        composition: Composition | None = None,
        container: Size | None = None,
        *,
        min_size: int = MIN_RESIZE_PX,
        default_text: str = DEFAULT_OVERLAY_TEXT,
        default_position: Point = DEFAULT_OVERLAY_POSITION,
    ) -> None:
        self._composition = composition or Composition()
        self._container = container
        self._transform = self._build_transform()
        self._state: EditState = Idle()
        self._preview_mode = False
        self.min_size = min_size
        self.default_text = default_text
        self.default_position = default_position

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def composition(self) -> Composition:
        return self._composition

    @property
    def state(self) -> EditState:
        return self._state

    @property
    def transform(self) -> CoordinateTransform:
        return self._transform

    @property
    def scale(self) -> ScaleFactor:
        return self._transform.scale

    @property
    def preview_mode(self) -> bool:
        return self._preview_mode

    @property
    def pointer_targets_enabled(self) -> bool:
        """Whether new gestures may start (pointer targets are interactive)."""
        return not self._preview_mode and isinstance(self._state, Idle)

    @property
    def affordances_visible(self) -> bool:
        """Whether drag and resize handles are shown."""
        return not self._preview_mode

    def snapshot(self) -> Composition:
        """The current composition; immutable, safe to hand to an export."""
        return self._composition

    # ------------------------------------------------------------------
    # Viewport
    # ------------------------------------------------------------------

    def set_container_size(self, container: Size) -> ScaleFactor:
        """Record a new viewport size (window resize) and recompute the scale."""
        self._container = container
        self._transform = self._build_transform()
        return self.scale

    def _build_transform(self) -> CoordinateTransform:
        if self._container is None:
            return CoordinateTransform()
        return CoordinateTransform.for_viewport(self._container, self._composition.size)

    # ------------------------------------------------------------------
    # Pointer gestures
    # ------------------------------------------------------------------

    def pointer_down(self, target: Target, pointer: Point) -> EditState:
        """Start dragging ``target`` from display-space ``pointer``."""
        self._require_idle("start a drag")
        current = self._target_position(target)
        origin = self._transform.to_composition(pointer) - current
        self._state = Dragging(target=target, drag_origin=origin)
        logger.debug("Drag started on %s", target)
        return self._state

    def resize_handle_down(self, target: Target, pointer: Point) -> EditState:
        """Start resizing the video box from display-space ``pointer``."""
        self._require_idle("start a resize")
        if not target.is_video:
            raise IllegalTransitionError("Only the video box has a resize handle")
        self._state = Resizing(
            target=target,
            drag_origin=self._transform.to_composition(pointer),
            original_size=self._composition.video.size,
        )
        logger.debug("Resize started on %s", target)
        return self._state

    def pointer_move(self, pointer: Point) -> EditState:
        """Update the active drag or resize; a no-op in other states."""
        state = self._state
        if isinstance(state, Dragging):
            position = self._transform.to_composition(pointer) - state.drag_origin
            self._set_target_position(state.target, position)
        elif isinstance(state, Resizing):
            delta = self._transform.to_composition(pointer) - state.drag_origin
            self._commit(video=self._composition.video.model_copy(
                update={"size": self._resized(state.original_size, delta)}
            ))
        return self._state

    def pointer_up(self) -> EditState:
        if isinstance(self._state, (Dragging, Resizing)):
            logger.debug("Gesture on %s finished", self._state.target)
            self._state = Idle()
        return self._state

    def _resized(self, original: FrameSize, delta: Point) -> FrameSize:
        width = max(original.width + delta.x, self.min_size)
        height = width * original.height / original.width
        return FrameSize.coerce(width, height)

    # ------------------------------------------------------------------
    # Text editing
    # ------------------------------------------------------------------

    def double_click(self, overlay_id: str) -> EditState:
        """Start editing the text of ``overlay_id``."""
        self._require_idle("start text editing")
        overlay = self._get_overlay(overlay_id)
        self._state = TextEditing(overlay_id=overlay_id, draft=overlay.text)
        return self._state

    def edit_text(self, text: str) -> EditState:
        state = self._state
        if not isinstance(state, TextEditing):
            raise IllegalTransitionError("No overlay is being edited")
        self._state = TextEditing(overlay_id=state.overlay_id, draft=text)
        return self._state

    def stop_editing(self, commit: bool = True) -> EditState:
        """Leave text editing (blur), committing the draft unless ``commit`` is False."""
        state = self._state
        if not isinstance(state, TextEditing):
            raise IllegalTransitionError("No overlay is being edited")
        if commit:
            self._update_overlay(set_text(self._get_overlay(state.overlay_id), state.draft))
        self._state = Idle()
        return self._state

    # ------------------------------------------------------------------
    # Discrete edits
    # ------------------------------------------------------------------

    def move_by(self, overlay_id: str, delta: Point) -> Overlay:
        """Apply a finished drag given as a display-space delta."""
        self._require_idle("move an overlay")
        moved = move_overlay(
            self._get_overlay(overlay_id), delta, self.scale, self._composition.size
        )
        self._update_overlay(moved)
        return moved

    def add_overlay(self, text: str | None = None, position: Point | None = None) -> Overlay:
        """Append a new overlay on top; leaves preview mode like the toolbar does."""
        if self._preview_mode:
            self.exit_preview()
        self._require_idle("add an overlay")
        overlay = create_overlay(
            self.default_text if text is None else text,
            clamp_point(position or self.default_position, self._composition.size),
        )
        self._commit(overlays=(*self._composition.overlays, overlay))
        return overlay

    def remove_overlay(self, overlay_id: str) -> None:
        self._require_idle("remove an overlay")
        self._commit(overlays=remove_overlay(self._composition.overlays, overlay_id))

    def set_overlay_window(
        self, overlay_id: str, start_frame: int | None, end_frame: int | None
    ) -> Overlay:
        self._require_idle("change an overlay window")
        updated = set_window(self._get_overlay(overlay_id), start_frame, end_frame)
        self._update_overlay(updated)
        return updated

    def set_aspect_ratio(self, ratio: str) -> FrameSize:
        """Resize the canvas to ``ratio`` keeping its width."""
        self._require_idle("change the aspect ratio")
        size = resize_to_aspect_ratio(self._composition.size.width, ratio)
        self._composition = self._composition.with_size(size)
        self._transform = self._build_transform()
        logger.info("Composition resized to %dx%d (%s)", size.width, size.height, ratio)
        return size

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------

    def enter_preview(self) -> None:
        """Switch to playback: any gesture ends and edit affordances hide."""
        if isinstance(self._state, TextEditing):
            self.stop_editing(commit=True)
        self._state = Idle()
        self._preview_mode = True

    def exit_preview(self) -> None:
        self._preview_mode = False

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_idle(self, action: str) -> None:
        if self._preview_mode:
            raise IllegalTransitionError(f"Cannot {action} in preview mode")
        if not isinstance(self._state, Idle):
            raise IllegalTransitionError(
                f"Cannot {action} while {type(self._state).__name__}"
            )

    def _get_overlay(self, overlay_id: str) -> Overlay:
        overlay = self._composition.get_overlay(overlay_id)
        if overlay is None:
            raise KeyError(f"No overlay with id {overlay_id!r}")
        return overlay

    def _target_position(self, target: Target) -> Point:
        if target.is_video:
            return self._composition.video.position
        return self._get_overlay(target.overlay_id).position

    def _set_target_position(self, target: Target, position: Point) -> None:
        if target.is_video:
            clamped = clamp_point(position, self._composition.size)
            self._commit(video=self._composition.video.model_copy(update={"position": clamped}))
        else:
            overlay = self._get_overlay(target.overlay_id)
            self._update_overlay(place_overlay(overlay, position, self._composition.size))

    def _update_overlay(self, overlay: Overlay) -> None:
        self._commit(overlays=replace_overlay(self._composition.overlays, overlay))

    def _commit(self, **changes: object) -> None:
        self._composition = self._composition.evolve(**changes)
