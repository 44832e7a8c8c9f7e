"""Factory for creating renderer backends based on the export settings.

Centralizes backend selection so that both the export pipeline and the CLI
create the correct renderer without duplicating the wiring.
"""

from overlaystudio.config.settings import Settings
from overlaystudio.export.base import RendererProtocol


def create_renderer(settings: Settings) -> RendererProtocol:
    """Create the renderer backend named by ``settings.export.renderer``.

    Args:
        settings: Resolved application settings.

    Returns:
        A backend implementing ``RendererProtocol``.

    Raises:
        ValueError: If the backend name is unrecognised.
    """
    backend = settings.export.renderer

    if backend == "subprocess":
        from overlaystudio.export.subprocess_renderer import SubprocessRenderer

        return SubprocessRenderer(command=settings.export.renderer_command or None)

    if backend == "inprocess":
        from overlaystudio.export.inprocess_renderer import InProcessRenderer
        from overlaystudio.render.renderer import Renderer

        return InProcessRenderer(
            Renderer(settings=settings.render, media_root=settings.media.media_root)
        )

    raise ValueError(
        f"Unknown renderer backend: {backend!r}. "
        f"Supported backends: subprocess, inprocess"
    )
