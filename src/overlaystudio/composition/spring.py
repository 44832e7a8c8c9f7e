"""Physically modelled spring used to animate overlay words.

The preview player in the browser evaluates the same spring. Keeping the
integration scheme identical (per-frame stepping of the closed-form solution,
a 64 ms step cap, natural-duration measurement and time stretching) is what
makes exported frames match the preview.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache

# Longest step the integrator takes, in milliseconds
MAX_STEP_MS = 64.0

DEFAULT_REST_THRESHOLD = 0.005

# Frames a spring must stay inside the rest threshold to count as settled
SETTLE_CONFIRMATION_FRAMES = 20


@dataclass(frozen=True)
class SpringConfig:
    damping: float = 10.0
    mass: float = 1.0
    stiffness: float = 100.0
    overshoot_clamping: bool = False

    def __post_init__(self) -> None:
        if self.damping <= 0:
            raise ValueError("Spring damping must be positive")
        if self.mass <= 0:
            raise ValueError("Spring mass must be positive")
        if self.stiffness <= 0:
            raise ValueError("Spring stiffness must be positive")


@dataclass(frozen=True)
class SpringState:
    last_timestamp: float
    current: float
    to_value: float
    velocity: float


def _advance(state: SpringState, now: float, config: SpringConfig) -> SpringState:
    delta_time = min(now - state.last_timestamp, MAX_STEP_MS)
    c, m, k = config.damping, config.mass, config.stiffness

    v0 = -state.velocity
    x0 = state.to_value - state.current
    zeta = c / (2 * math.sqrt(k * m))
    omega0 = math.sqrt(k / m)
    t = delta_time / 1000

    if zeta < 1:
        omega1 = omega0 * math.sqrt(1 - zeta**2)
        sin1 = math.sin(omega1 * t)
        cos1 = math.cos(omega1 * t)
        envelope = math.exp(-zeta * omega0 * t)
        frag = envelope * (sin1 * ((v0 + zeta * omega0 * x0) / omega1) + x0 * cos1)
        position = state.to_value - frag
        velocity = zeta * omega0 * frag - envelope * (
            cos1 * (v0 + zeta * omega0 * x0) - omega1 * x0 * sin1
        )
    else:
        envelope = math.exp(-omega0 * t)
        position = state.to_value - envelope * (x0 + (v0 + omega0 * x0) * t)
        velocity = envelope * (v0 * (t * omega0 - 1) + t * x0 * omega0 * omega0)

    return SpringState(
        last_timestamp=now,
        current=position,
        to_value=state.to_value,
        velocity=velocity,
    )


def spring_calculation(
    frame: float,
    fps: float,
    config: SpringConfig = SpringConfig(),
    from_value: float = 0.0,
    to_value: float = 1.0,
) -> SpringState:
    """Integrate the spring from rest at frame 0 up to ``frame``.

    Negative frames are clamped to 0, where the spring is still at
    ``from_value``. Fractional frames take one final partial step.
    """
    state = SpringState(last_timestamp=0.0, current=from_value, to_value=to_value, velocity=0.0)
    frame_clamped = max(0.0, frame)
    last_whole = math.floor(frame_clamped)
    uneven_rest = frame_clamped % 1

    for f in range(last_whole + 1):
        step = f + uneven_rest if f == last_whole else f
        state = _advance(state, step / fps * 1000, config)
    return state


@lru_cache(maxsize=64)
def measure_spring(
    fps: float,
    config: SpringConfig = SpringConfig(),
    threshold: float = DEFAULT_REST_THRESHOLD,
    from_value: float = 0.0,
    to_value: float = 1.0,
) -> int:
    """Number of frames until the spring comes to rest.

    Rest means the distance to the target stays below ``threshold`` (relative
    to the travelled range) for ``SETTLE_CONFIRMATION_FRAMES`` frames.
    """
    if threshold == 0:
        raise ValueError("A zero rest threshold never settles")
    if threshold == 1:
        return 0

    span = abs(from_value - to_value) or 1.0

    def difference(at_frame: int) -> float:
        state = spring_calculation(at_frame, fps, config, from_value, to_value)
        return abs(state.current - to_value) / span

    frame = 0
    while difference(frame) >= threshold:
        frame += 1

    finished_frame = frame
    i = 0
    while i < SETTLE_CONFIRMATION_FRAMES:
        frame += 1
        if difference(frame) >= threshold:
            i = 1
            finished_frame = frame + 1
        else:
            i += 1
    return finished_frame


def interpolate(
    value: float,
    input_range: tuple[float, float],
    output_range: tuple[float, float],
) -> float:
    """Map ``value`` linearly between two ranges, extrapolating past the ends."""
    in_start, in_end = input_range
    out_start, out_end = output_range
    if in_end == in_start:
        raise ValueError("input_range must not be empty")
    progress = (value - in_start) / (in_end - in_start)
    return out_start + progress * (out_end - out_start)


def spring(
    frame: float,
    fps: float,
    config: SpringConfig = SpringConfig(),
    *,
    from_value: float = 0.0,
    to_value: float = 1.0,
    duration_in_frames: float | None = None,
    delay: float = 0.0,
) -> float:
    """Spring value at ``frame``.

    Args:
        frame: Frame to evaluate; values before the animation start are at rest.
        fps: Frames per second the frame index is counted in.
        config: Physical spring parameters.
        from_value: Start value.
        to_value: Target value.
        duration_in_frames: If given, time is stretched so the spring settles
            exactly at this frame, and ``to_value`` is returned after it.
        delay: Frames to wait before the animation starts.
    """
    delayed = frame - delay

    if duration_in_frames is None:
        processed = delayed
    else:
        if duration_in_frames <= 0:
            raise ValueError("duration_in_frames must be positive")
        if delayed > duration_in_frames:
            return to_value
        natural = measure_spring(fps, config, from_value=from_value, to_value=to_value)
        processed = delayed / (duration_in_frames / natural)

    state = spring_calculation(processed, fps, config, from_value, to_value)
    value = state.current
    if config.overshoot_clamping:
        value = min(value, to_value) if to_value >= from_value else max(value, to_value)
    return value
