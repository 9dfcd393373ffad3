"""
Presentation manager CLI — presmgrctl command-line interface.

Usage:
    python -m presentation_manager.cli dev
    python -m presentation_manager.cli export --presentations-dir decks
    python -m presentation_manager.cli list --action export --json
    python -m presentation_manager.cli show
"""

from presentation_manager.cli.presmgrctl import main
