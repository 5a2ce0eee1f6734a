#!/usr/bin/env python3
"""
Verse search script for Quran Companion.
Finds the ayah matching a typed (or transcribed) Arabic text, either through a
running server or by fetching chapter text directly from the upstream API.
"""
import sys
import argparse
from pathlib import Path
from rich.panel import Panel
from rich.table import Table

# Add project root to Python path when running script directly
if __name__ == "__main__":
    project_root = Path(__file__).resolve().parent.parent
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))

from config import SEARCH_ACCEPT_THRESHOLD, TOTAL_CHAPTERS
from src.search.cache import TTLCache, CorpusStore
from src.search.engine import VerseSearchEngine, QueryTooShort
from src.search.preloader import CorpusPreloader
from src.search.scorers import PositionalScorer
from src.search.upstream import QuranApiClient, UpstreamError
from src.text.normalizer import normalize_arabic
from src.text.numbers import to_arabic_number
from src.voice.client import CompanionClient
from server.utils.logging_config import get_console, setup_script_logging

console = get_console()


def parse_args():
    """Process command line options for verse search."""
    parser = argparse.ArgumentParser(
        description="Find the Quranic verse (ayah) matching an Arabic text")

    parser.add_argument(
        "text", type=str,
        help="Arabic text to search for")

    parser.add_argument(
        "--server", type=str, default=None,
        help="Base URL of a running server (e.g. http://localhost:5000); "
             "when omitted chapters are fetched from the upstream API")

    parser.add_argument(
        "--chapters", type=int, default=TOTAL_CHAPTERS,
        help=f"Only preload chapters 1..N in local mode (default: {TOTAL_CHAPTERS})")

    parser.add_argument(
        "--threshold", type=float, default=SEARCH_ACCEPT_THRESHOLD,
        help=f"Minimum score to accept a match (default: {SEARCH_ACCEPT_THRESHOLD})")

    parser.add_argument(
        "--show-debug", action="store_true",
        help="Show normalized text and word-by-word feedback")

    return parser.parse_args()


def format_match_display(match):
    """Format a match result for display."""
    table = Table(show_header=False, box=None)
    table.add_column("Label", style="bold cyan")
    table.add_column("Value")

    table.add_row("Surah Number", f"{match.surah_number} ({to_arabic_number(match.surah_number)})")
    table.add_row("Surah Name (Arabic)", match.surah_name)
    table.add_row("Surah Name (English)", match.surah_english_name)
    table.add_row("Ayah", str(match.ayah_number))
    table.add_row("Text", match.text)
    table.add_row("Score", f"{match.score:.1%}")
    return table


def search_locally(text, chapters, threshold):
    store = CorpusStore(TTLCache())
    preloader = CorpusPreloader(store, QuranApiClient(), last_chapter=chapters)
    with console.status(f"[bold]Fetching {chapters} chapters...[/bold]"):
        report = preloader.run()
    if report.failed:
        console.print(f"[yellow]Warning:[/yellow] {len(report.failed)} chapters could not be fetched")

    return VerseSearchEngine(store, threshold=threshold).search(text)


def main():
    """Run a verse search from the command line."""
    args = parse_args()
    setup_script_logging(verbose=args.show_debug)

    try:
        VerseSearchEngine.validate_query(args.text)
        if args.server:
            match = CompanionClient(base_url=args.server).search_ayah(args.text)
        else:
            match = search_locally(args.text, max(1, min(args.chapters, TOTAL_CHAPTERS)), args.threshold)
    except QueryTooShort as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1
    except UpstreamError as e:
        console.print(f"[red]Error:[/red] Upstream request failed: {e}")
        return 1

    if args.show_debug:
        console.print(f"\n[dim]Normalized query:[/dim] {normalize_arabic(args.text)}")

    if match is None:
        console.print("[yellow]No matching verse found.[/yellow]")
        return 0

    console.print(Panel(format_match_display(match), title="[bold]Matched Ayah[/bold]", border_style="green"))

    if args.show_debug:
        feedback_table = Table(title="Word Feedback", show_lines=True)
        feedback_table.add_column("#")
        feedback_table.add_column("Expected", style="bold")
        feedback_table.add_column("Spoken")
        feedback_table.add_column("Similarity", style="cyan")
        for word in PositionalScorer().word_feedback(match.text, args.text):
            style = "green" if word.correct else "red"
            feedback_table.add_row(
                str(word.position + 1), word.expected, f"[{style}]{word.spoken}[/{style}]", f"{word.similarity:.0%}"
            )
        console.print(feedback_table)

    return 0


if __name__ == "__main__":
    sys.exit(main())
