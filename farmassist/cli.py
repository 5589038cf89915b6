"""
Flask CLI commands for operating the advice provider.

Usage:
    flask check-provider                         # Probe the provider, re-enable it on success
    flask list-models                            # Gemini models that support generation
    flask ask "When should I sow wheat?"         # One advice call through the full pipeline
    flask ask "Weather this week?" --location Pune --crop wheat
"""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext


@click.command("check-provider")
@with_appcontext
def check_provider_command() -> None:
    """Run the provider connectivity probe and print the availability state."""
    from farmassist.services.ai import get_advice_service
    from farmassist.utils.sanitize import mask_secret

    key = current_app.config.get("GEMINI_API_KEY")
    if not key:
        click.echo("Error: GEMINI_API_KEY not configured. Add it to your environment or .env file.")
        raise SystemExit(1)

    service = get_advice_service()
    click.echo(f"API key found: {mask_secret(key)}")
    click.echo(f"Probing model {service.model_name}...")

    ok = service.revalidate()
    state = service.status()
    if ok:
        click.echo("Provider is available.")
        return

    click.echo(f"Provider probe failed: {state.get('reason') or 'unknown error'}")
    click.echo("Check that the key is valid, the API is enabled and the quota is not exhausted.")
    raise SystemExit(1)


@click.command("list-models")
@with_appcontext
def list_models_command() -> None:
    """List Gemini models available to the configured key."""
    from farmassist.services.ai import get_advice_service
    from farmassist.services.provider import ProviderError

    provider = get_advice_service().remote.provider
    try:
        names = provider.list_models()
    except ProviderError as e:
        click.echo(f"Failed to list models: {e}")
        raise SystemExit(1)

    if not names:
        click.echo("No models support content generation for this key.")
        return
    for name in names:
        click.echo(name)


@click.command("ask")
@click.argument("query")
@click.option("--location", default=None, help="Farm location used for weather context.")
@click.option("--crop", default=None, help="Crop the question is about.")
@with_appcontext
def ask_command(query: str, location: str | None, crop: str | None) -> None:
    """Ask the advice engine a question from the command line."""
    from farmassist.models import AdviceContext
    from farmassist.services.ai import AdviceValidationError, get_advice_service

    try:
        result = get_advice_service().get_advice(query, AdviceContext(location=location, crop=crop))
    except AdviceValidationError as e:
        click.echo(f"Error: {e}")
        raise SystemExit(2)

    click.echo(f"[{result.source.value} / {result.model} / {result.language.value}]")
    if result.topics:
        click.echo(f"Topics: {', '.join(t.value for t in result.topics)}")
    if result.error:
        click.echo(f"Provider error: {result.error}")
    click.echo("")
    click.echo(result.advice)
