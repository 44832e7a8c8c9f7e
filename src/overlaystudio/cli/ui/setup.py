"""Setup checks for system dependencies and configuration."""

import shutil

from overlaystudio.config.settings import Settings

from .console import console, print_error, print_muted, print_success, print_warning


def check_system_dependencies() -> list[str]:
    """Check for required system dependencies (ffmpeg).

    Note: ImageMagick is NOT required. Pillow handles all text rendering.

    Returns:
        List of missing dependency names.
    """
    missing = []
    if not shutil.which("ffmpeg"):
        missing.append("ffmpeg")
    return missing


def run_setup_check(settings: Settings) -> bool:
    """Check configuration and system dependencies, printing guidance.

    Args:
        settings: The loaded application settings.

    Returns:
        True if everything an export needs is present, False otherwise.
    """
    all_ok = True

    problems = settings.get_config_problems()
    if problems:
        all_ok = False
        print_error("Configuration problems:")
        for problem in problems:
            print_muted(f"  - {problem}")
        console.print()

    missing_deps = check_system_dependencies()
    if missing_deps:
        all_ok = False
        print_warning(f"Missing system dependencies: {', '.join(missing_deps)}")
        print_muted("  Install with:")
        print_muted("    macOS:  brew install ffmpeg")
        print_muted("    Linux:  apt install ffmpeg")
        print_muted("    Windows: choco install ffmpeg")
        console.print()

    if all_ok:
        print_success("All required configuration is present.")

    return all_ok
