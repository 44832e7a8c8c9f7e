"""Per-word overlay animation.

Words fade and rise into place one after another, repeating every loop.
The first second an overlay is on screen is static so it does not pop in
mid-animation.
"""

from __future__ import annotations

from dataclasses import dataclass

from .spring import SpringConfig, interpolate, spring

LOOP_DURATION = 60
INITIAL_DELAY = 30
WORD_DELAY = 5
# Frames at the end of every loop where all words sit settled
SETTLE_FRAMES = 10
HIDDEN_OFFSET = 20.0
WORD_SPRING = SpringConfig(damping=200)


@dataclass(frozen=True)
class WordAnimation:
    """Animated state of one word."""

    opacity: float
    offset_y: float


@dataclass(frozen=True)
class OverlayAnimator:
    """Time-pure mapping from (frame, word index) to a word's animation.

    The live preview and the headless renderer must evaluate this with the
    same parameters; any divergence shows up as an export mismatch.
    """

    loop_duration: int = LOOP_DURATION
    initial_delay: int = INITIAL_DELAY
    word_delay: int = WORD_DELAY
    settle_frames: int = SETTLE_FRAMES
    hidden_offset: float = HIDDEN_OFFSET
    spring_config: SpringConfig = WORD_SPRING

    def __post_init__(self) -> None:
        if self.loop_duration <= self.settle_frames:
            raise ValueError("loop_duration must be longer than settle_frames")
        if self.initial_delay < 0 or self.word_delay < 0:
            raise ValueError("Delays must not be negative")

    def animate_word(self, frame: int, word_index: int, fps: int) -> WordAnimation:
        """Animation of word ``word_index`` at ``frame``.

        ``frame`` counts from the moment the overlay becomes visible.
        """
        if frame < self.initial_delay:
            return WordAnimation(opacity=1.0, offset_y=0.0)

        loop_frame = max(0, frame - self.initial_delay) % self.loop_duration
        opacity = spring(
            loop_frame - word_index * self.word_delay,
            fps,
            self.spring_config,
            duration_in_frames=self.loop_duration - self.settle_frames,
        )
        offset_y = interpolate(opacity, (0.0, 1.0), (self.hidden_offset, 0.0))
        return WordAnimation(opacity=opacity, offset_y=offset_y)

    def animate_words(self, frame: int, word_count: int, fps: int) -> tuple[WordAnimation, ...]:
        return tuple(self.animate_word(frame, i, fps) for i in range(word_count))
