"""CLI commands for speech_intent."""

import asyncio
import json

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.syntax import Syntax

from speech_intent import __logo__, __version__
from speech_intent.errors import ConfigurationError
from speech_intent.observability import configure_logging
from speech_intent.settings import SpeechIntentSettings, get_settings

app = typer.Typer(
    name="speech-intent",
    help=f"{__logo__} speech-intent - voice assistant backend for contacts and tasks",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} speech-intent v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """speech-intent - voice assistant backend for contacts and tasks."""
    pass


def _load_settings() -> SpeechIntentSettings:
    """Load settings, turning missing/invalid values into ConfigurationError."""
    try:
        return get_settings()
    except ValidationError as exc:
        fields = ", ".join(
            "SPEECH_INTENT_" + str(err["loc"][0]).upper() for err in exc.errors() if err["loc"]
        )
        raise ConfigurationError(f"Environment variable(s) {fields} not defined or invalid.") from exc


def _require_settings() -> SpeechIntentSettings:
    try:
        return _load_settings()
    except ConfigurationError as exc:
        configure_logging()
        logger.critical(f"CRITICAL: {exc}")
        raise typer.Exit(code=1)


# ============================================================================
# Serve (FastAPI HTTP)
# ============================================================================


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind host (default from settings)"),
    port: int = typer.Option(None, "--port", "-p", help="Bind port (default from settings)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
):
    """Start the speech-intent HTTP API server (FastAPI + Uvicorn)."""
    import uvicorn

    settings = _require_settings()
    bind_host = host or settings.host
    bind_port = port or settings.port

    console.print(f"{__logo__} Starting speech-intent API on http://{bind_host}:{bind_port} ...")
    uvicorn.run(
        "speech_intent.api.app:create_app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        factory=True,
        log_level=settings.log_level.lower(),
    )


# ============================================================================
# Classify (one-off, no database)
# ============================================================================


@app.command()
def classify(text: str = typer.Argument(..., help="Utterance to classify")):
    """Classify TEXT with the language model and print the IntentResult."""
    from speech_intent.intent.classifier import LLMIntentClassifier
    from speech_intent.providers.factory import build_provider

    settings = _require_settings()
    configure_logging(settings.log_level)
    try:
        provider = build_provider(settings)
    except (ConfigurationError, ValueError) as exc:
        logger.critical(f"CRITICAL: {exc}")
        raise typer.Exit(code=1)
    classifier = LLMIntentClassifier(provider)
    result = asyncio.run(classifier.classify(text))
    console.print(Syntax(json.dumps(result.to_wire(), indent=2, ensure_ascii=False), "json"))
    if result.error:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
