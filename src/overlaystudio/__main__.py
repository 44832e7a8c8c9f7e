"""Allow ``python -m overlaystudio``; the export pipeline spawns the renderer this way."""

from overlaystudio.cli.app import app

if __name__ == "__main__":
    app(prog_name="overlaystudio")
