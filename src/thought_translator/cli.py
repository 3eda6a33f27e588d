"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
import time

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from thought_translator.clipboard import SystemClipboard
from thought_translator.config import load_config
from thought_translator.languages import locale_for, search_languages
from thought_translator.models.tone import Tone
from thought_translator.pipeline.controller import InteractionController
from thought_translator.session import build_controller, build_history
from thought_translator.speech.dictation import DictationSession
from thought_translator.speech.errors import SpeechUnavailableError
from thought_translator.speech.synthesis import SpeechSynthesizer

app = typer.Typer(
    name="thought-translator",
    help="Untangle your thoughts. Write clearly, in any language.",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _parse_tone(value: str) -> Tone:
    try:
        return Tone.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def _run_rewrite(controller: InteractionController) -> None:
    """Stream a rewrite into a live panel and report the outcome."""
    with Live(Panel("", title="Polished Version"), console=console, refresh_per_second=15) as live:

        def on_output(text: str) -> None:
            live.update(Panel(text, title="Polished Version"))

        controller.add_output_listener(on_output)
        try:
            entry = asyncio.run(controller.submit())
        finally:
            controller.remove_output_listener(on_output)

    if controller.error:
        console.print(f"[red]{controller.error}[/red]")
        raise typer.Exit(1)
    if entry is None:
        console.print("[yellow]Nothing to translate.[/yellow]")
        raise typer.Exit(1)

    footer = f"{entry.tone.value} | {entry.output_language}"
    if controller.auto_copy and entry.output and controller.notice is None:
        footer += " | copied to clipboard"
    console.print(f"[dim]{footer}[/dim]")
    if controller.notice:
        console.print(f"[yellow]{controller.notice}[/yellow]")


def _speak_and_wait(synthesizer: SpeechSynthesizer, text: str, language: str, default_locale: str) -> None:
    try:
        synthesizer.speak(text, locale_for(language, default_locale))
    except SpeechUnavailableError as e:
        console.print(f"[yellow]{e}[/yellow]")
        return
    while synthesizer.is_speaking:
        time.sleep(0.1)


@app.command()
def rewrite(
    text: str = typer.Argument(help="Raw thought to polish"),
    tone: str = typer.Option(None, "--tone", "-t", help="Friendly, Humorous or Professional"),
    language: str = typer.Option(None, "--language", "-l", help="Output language, e.g. English"),
    no_copy: bool = typer.Option(False, "--no-copy", help="Do not copy the result to the clipboard"),
    speak: bool = typer.Option(False, "--speak", help="Read the result aloud"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Rewrite TEXT into clear, natural text."""
    _setup_logging(verbose)
    config = load_config()
    controller = build_controller(config, clipboard=SystemClipboard())
    if tone:
        controller.tone = _parse_tone(tone)
    if language:
        controller.language = language
    if no_copy:
        controller.auto_copy = False
    controller.input_text = text

    if verbose:
        console.print(f"[dim]Model: {config.llm.model}[/dim]")
        console.print(f"[dim]Tone: {controller.tone.value} | Language: {controller.language}[/dim]")

    _run_rewrite(controller)

    if verbose:
        usage = controller.rewriter.llm.get_token_summary()
        console.print(f"[dim]Tokens: {usage['input']} in / {usage['output']} out[/dim]")

    if speak:
        _speak_and_wait(
            SpeechSynthesizer(), controller.output_text, controller.language, config.speech.default_locale,
        )


@app.command()
def dictate(
    locale: str = typer.Option(None, "--locale", help="Dictation locale, e.g. en-US"),
    tone: str = typer.Option(None, "--tone", "-t", help="Friendly, Humorous or Professional"),
    language: str = typer.Option(None, "--language", "-l", help="Output language"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Dictate a thought with the microphone, then rewrite it."""
    _setup_logging(verbose)
    config = load_config()
    dictation = DictationSession(
        language=locale or config.speech.dictation_locale,
        phrase_time_limit=config.speech.phrase_time_limit,
    )
    handle = dictation.add_listener(lambda segment: console.print(f"[dim]{segment}[/dim]"))
    controller = build_controller(config, clipboard=SystemClipboard(), dictation=dictation)
    if tone:
        controller.tone = _parse_tone(tone)
    if language:
        controller.language = language

    try:
        if not controller.toggle_dictation():
            console.print(f"[red]{controller.notice}[/red]")
            raise typer.Exit(1)
        console.input("[bold]Listening... press Enter to stop.[/bold]\n")
        if controller.is_listening:
            controller.toggle_dictation()
    finally:
        dictation.remove_listener(handle)
        controller.close()

    if controller.error:
        console.print(f"[red]{controller.error}[/red]")
    if not controller.input_text.strip():
        console.print("[yellow]No speech was recognised.[/yellow]")
        raise typer.Exit(1)

    console.print(Panel(controller.input_text, title="Your Raw Thoughts"))
    _run_rewrite(controller)


@app.command()
def history(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of entries to show"),
) -> None:
    """List past translations, newest first."""
    store = build_history(load_config())
    if not len(store):
        console.print("[dim]Your translations will appear here.[/dim]")
        return

    table = Table(title=f"History ({len(store)})")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Input")
    table.add_column("Output")
    table.add_column("Tone | Language")
    table.add_column("Time", no_wrap=True)
    for entry in store.entries[:limit]:
        table.add_row(
            entry.id,
            entry.input,
            entry.output,
            f"{entry.tone.value} | {entry.output_language}",
            entry.created_at.strftime("%H:%M"),
        )
    console.print(table)


@app.command()
def show(
    entry_id: str = typer.Argument(help="History entry ID"),
    copy: bool = typer.Option(False, "--copy", "-c", help="Copy the output to the clipboard"),
) -> None:
    """Show one history entry."""
    store = build_history(load_config())
    entry = store.get(entry_id)
    if entry is None:
        console.print(f"[red]No history entry with ID {entry_id}[/red]")
        raise typer.Exit(1)
    console.print(Panel(entry.input, title="Your Raw Thoughts"))
    console.print(Panel(entry.output, title=f"Polished Version ({entry.tone.value} | {entry.output_language})"))
    if copy and SystemClipboard().copy(entry.output):
        console.print("[green]Copied![/green]")


@app.command()
def delete(entry_id: str = typer.Argument(help="History entry ID")) -> None:
    """Delete one history entry."""
    store = build_history(load_config())
    if store.remove(entry_id):
        console.print(f"[green]Deleted {entry_id}[/green]")
    else:
        console.print(f"[yellow]No history entry with ID {entry_id}[/yellow]")


@app.command()
def clear(yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt")) -> None:
    """Clear the whole history."""
    store = build_history(load_config())
    if not len(store):
        console.print("[dim]History is already empty.[/dim]")
        return
    if not yes and not typer.confirm(f"Delete all {len(store)} entries?"):
        raise typer.Abort()
    store.clear()
    console.print("[green]History cleared.[/green]")


@app.command()
def speak(entry_id: str = typer.Argument(help="History entry ID to read aloud")) -> None:
    """Read a history entry's output aloud."""
    config = load_config()
    entry = build_history(config).get(entry_id)
    if entry is None:
        console.print(f"[red]No history entry with ID {entry_id}[/red]")
        raise typer.Exit(1)
    _speak_and_wait(SpeechSynthesizer(), entry.output, entry.output_language, config.speech.default_locale)


@app.command()
def languages(search: str = typer.Option("", "--search", "-s", help="Filter by name")) -> None:
    """List supported output languages."""
    matches = search_languages(search)
    if not matches:
        console.print("[dim]No results found.[/dim]")
        return
    table = Table()
    table.add_column("Language")
    table.add_column("Speech locale", style="dim")
    for lang in matches:
        table.add_row(lang.name, lang.locale)
    console.print(table)


if __name__ == "__main__":
    app()
