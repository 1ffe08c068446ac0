"""Entry point for ``python -m speech_intent``."""

from speech_intent.cli.commands import app

if __name__ == "__main__":
    app()
