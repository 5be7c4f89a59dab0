"""
Command-line interface for LearningPacer source cards.

Commands:
- parse: Show how raw citation lines are parsed
- sources: Render the answer and source cards for a saved chat response
- label: Show the display name for a lecture or textbook title
"""

import sys

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from learningpacer.config import settings
from learningpacer.logging import configure_logging

console = Console()


@click.group()
@click.version_option(package_name="learningpacer")
def main() -> None:
    """LearningPacer - source cards for the course chat assistant."""
    configure_logging()


@main.command()
@click.argument("raw", nargs=-1, required=True)
def parse(raw: tuple[str, ...]) -> None:
    """Parse raw citation lines."""
    from learningpacer.citations import get_location_label, parse_citation

    table = Table(title="Parsed citations")
    table.add_column("Raw", overflow="fold")
    table.add_column("Title", style="bold")
    table.add_column("Type")
    table.add_column("Chapter")
    table.add_column("Location")

    for line in raw:
        citation = parse_citation(line)
        table.add_row(
            escape(line),
            escape(citation.document_title),
            citation.source_type.value,
            escape(citation.chapter or "-"),
            get_location_label(citation) or "-",
        )

    console.print(table)


def _print_card(index: int, card, preview_length: int) -> None:
    """Print one source card with its "why this source" excerpt."""
    from learningpacer.citations import (
        format_similarity,
        get_location_label,
        get_material_content,
        is_valid_quote,
        truncate_text,
    )

    citation, material = card.citation, card.material
    icon = "📖" if citation.source_type.value == "textbook" else "📄"
    location = get_location_label(citation)

    header = f"{icon} [bold]{escape(citation.document_title)}[/bold]"
    if location:
        header += f"  [cyan]{location}[/cyan]"
    lines = [header]
    if citation.chapter:
        lines.append(f"[dim]{escape(citation.chapter)}[/dim]")

    content = get_material_content(material)
    if material is not None and is_valid_quote(content):
        lines.append("")
        lines.append("[yellow]Why this source?[/yellow]")
        lines.append(f"\"{escape(truncate_text(content, preview_length))}\"")
        similarity = format_similarity(material.similarity)
        if similarity:
            lines.append(f"[green]{similarity} match[/green]")
        if material.source_url and material.source_url != "LOCAL_UPLOAD":
            lines.append(f"[dim]Source: {escape(material.source_url)}[/dim]")

    console.print(Panel("\n".join(lines), title=f"Source {index}", title_align="left"))


@main.command()
@click.argument("payload", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--preview-length",
    default=None,
    type=int,
    help="Excerpt length for 'Why this source?' (default from settings)",
)
def sources(payload: str, preview_length: int | None) -> None:
    """Render the answer and source cards from a saved chat response."""
    from learningpacer.chat import PayloadError, load_chat_payload
    from learningpacer.citations import (
        CitationMode,
        build_citation_cards,
        format_source,
        select_citation_mode,
    )

    try:
        response = load_chat_payload(payload)
    except PayloadError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    console.print(Markdown(response.answer))
    console.print()

    mode = select_citation_mode(response)

    if mode == CitationMode.GENERAL_KNOWLEDGE:
        console.print(
            "[yellow]⚠ General Knowledge[/yellow] - This answer is based on general "
            "knowledge, not course materials. Verify with your slides."
        )
        return

    if mode == CitationMode.LEGACY:
        formatted = format_source(response.source)
        console.print(f"[blue]Source:[/blue] {escape(formatted.label)}")
        return

    if mode == CitationMode.NONE:
        return

    cards = build_citation_cards(response.citations, response.retrieved_materials)
    if not cards:
        return

    console.print(f"[bold]SOURCES[/bold] ({len(cards)})")
    for i, card in enumerate(cards, 1):
        _print_card(i, card, preview_length or settings.preview_length)


@main.command()
@click.argument("title")
@click.option("--source-url", default=None, help="Material source URL or file name")
@click.option("--lecture-title", default=None, help="Lecture title from retrieval metadata")
def label(title: str, source_url: str | None, lecture_title: str | None) -> None:
    """Show the display name for a document title."""
    from learningpacer.citations import RetrievedMaterial, format_lecture_name

    material = None
    if source_url or lecture_title:
        material = RetrievedMaterial(source_url=source_url, lecture_title=lecture_title)

    console.print(escape(format_lecture_name(title, material)))


if __name__ == "__main__":
    main()
