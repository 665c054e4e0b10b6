#!/usr/bin/env python3
"""Interactive CLI for the feedback system.

This allows users to:
1. Submit feedback directly in the terminal
2. See the sentiment analysis immediately
3. Browse the most recent feedback
4. View the analytics dashboard (--dashboard)
"""
import argparse
import asyncio
import sys
from typing import Dict, List

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box
from rich.prompt import Prompt, IntPrompt

from smart_feedback.aggregator import aggregate
from smart_feedback.config import config
from smart_feedback.database import init_db, get_db_session, list_feedback, fetch_all_feedback
from smart_feedback.ingestion import submit_feedback
from smart_feedback.schemas import Category, FeedbackRecord, FeedbackRequest, SentimentResult, Statistics


console = Console()

LABEL_STYLES = {
    "Positive": "green",
    "Neutral": "yellow",
    "Negative": "red"
}

BAR_WIDTH = 30


def render_bar(count: int, largest: int, style: str = "cyan") -> str:
    """Build a proportional text bar for a count."""
    if largest <= 0 or count <= 0:
        return ""
    width = max(1, round(BAR_WIDTH * count / largest))
    return f"[{style}]{'█' * width}[/{style}]"


def _distribution_table(title: str, heading: str, counts: Dict[str, int], styles: Dict[str, str] = None) -> Table:
    table = Table(title=title, box=box.ROUNDED, header_style="bold magenta")
    table.add_column(heading, style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("", min_width=BAR_WIDTH)

    largest = max(counts.values(), default=0)
    for key, count in counts.items():
        style = (styles or {}).get(key, "cyan")
        table.add_row(str(key), str(count), render_bar(count, largest, style))

    return table


def build_dashboard(stats: Statistics, window_days: int) -> List:
    """Build the renderables for the analytics dashboard."""
    summary = (
        f"[bold]Total feedback:[/bold] {stats.total_count}\n"
        f"[bold]Average rating:[/bold] {stats.average_rating:.2f} / 5"
    )
    renderables = [
        Panel(summary, title="📊 Feedback Analytics", border_style="bold blue", box=box.DOUBLE)
    ]

    renderables.append(_distribution_table(
        "Sentiment", "Label", stats.sentiment_distribution, LABEL_STYLES
    ))
    renderables.append(_distribution_table(
        "Categories",
        "Category",
        {item.category: item.count for item in stats.category_distribution}
    ))
    renderables.append(_distribution_table(
        "Ratings",
        "Rating",
        {f"{'★' * rating}": count for rating, count in stats.rating_distribution.items()},
    ))

    trend = Table(title=f"Trend (last {window_days} days)", box=box.ROUNDED, header_style="bold magenta")
    trend.add_column("Date", style="cyan")
    for label, style in LABEL_STYLES.items():
        trend.add_column(label, style=style, justify="right")
    for point in stats.trend:
        trend.add_row(point.date, str(point.positive), str(point.neutral), str(point.negative))
    if not stats.trend:
        trend.add_row("[dim]no feedback in window[/dim]", "", "", "")
    renderables.append(trend)

    return renderables


class InteractiveFeedbackSystem:
    """Interactive feedback submission and analytics."""

    def display_result(self, sentiment: SentimentResult):
        """Display sentiment results in a nice format.

        Args:
            sentiment: Sentiment computed for the submitted message
        """
        style = LABEL_STYLES[sentiment.label.value]
        table = Table(
            title="📊 Sentiment Analysis",
            box=box.ROUNDED,
            show_header=True,
            header_style="bold magenta"
        )

        table.add_column("Attribute", style="cyan", width=20)
        table.add_column("Value", style="green")

        table.add_row("Sentiment", f"[{style}]{sentiment.label.value}[/{style}]")
        table.add_row("Score", str(sentiment.score))
        table.add_row("Comparative", f"{sentiment.comparative:.4f}")
        table.add_row("Positive words", ", ".join(sentiment.positive_words) or "-")
        table.add_row("Negative words", ", ".join(sentiment.negative_words) or "-")

        console.print(table)

    def display_recent(self, records: List[FeedbackRecord]):
        """Display the most recent feedback entries."""
        table = Table(title="🕑 Recent Feedback", box=box.ROUNDED, header_style="bold magenta")
        table.add_column("ID", justify="right", style="dim")
        table.add_column("Name", style="cyan")
        table.add_column("Category")
        table.add_column("Rating", justify="right")
        table.add_column("Sentiment")
        table.add_column("Message", overflow="ellipsis", max_width=50)

        for record in records:
            style = LABEL_STYLES[record.sentiment.label.value]
            table.add_row(
                str(record.id),
                record.name,
                record.category.value,
                str(record.rating),
                f"[{style}]{record.sentiment.label.value}[/{style}]",
                record.message
            )

        console.print(table)

    def display_welcome(self):
        """Display welcome message."""
        welcome = """
[bold cyan]Smart Feedback System[/bold cyan]
[dim]Interactive CLI Mode[/dim]

Each message is scored with the AFINN-165 sentiment lexicon:
  • Label (Positive, Neutral, Negative)
  • Score and comparative score
  • Matched positive and negative words
        """

        panel = Panel(
            welcome,
            border_style="bold blue",
            box=box.DOUBLE,
            padding=(1, 2)
        )

        console.print(panel)
        console.print()

    def prompt_submission(self) -> FeedbackRequest:
        """Ask for the submission fields.

        Raises:
            ValidationError: If the entered fields are invalid
        """
        name = Prompt.ask("Your name")
        email = Prompt.ask("Email (optional)", default="")
        category = Prompt.ask(
            "Category",
            choices=[category.value for category in Category],
            default=Category.GENERAL.value
        )
        rating = IntPrompt.ask(
            "Rating",
            choices=[str(value) for value in range(1, 6)],
            default=config.DEFAULT_RATING
        )
        message = Prompt.ask("Your feedback")

        return FeedbackRequest(
            name=name,
            email=email,
            category=category,
            rating=rating,
            message=message
        )

    async def show_dashboard(self, window_days: int = config.TREND_WINDOW_DAYS):
        """Render the analytics dashboard."""
        async with get_db_session() as db:
            records = await fetch_all_feedback(db)

        for renderable in build_dashboard(aggregate(records, window_days=window_days), window_days):
            console.print(renderable)

    async def show_recent(self):
        async with get_db_session() as db:
            records, _ = await list_feedback(db, limit=config.RECENT_FEEDBACK_LIMIT)
        self.display_recent(records)

    async def run_interactive(self):
        """Run the interactive CLI loop."""
        self.display_welcome()

        while True:
            console.print()
            console.print("[bold]Submit feedback[/bold] ('recent' to list, 'stats' for the dashboard, 'quit' to exit)")
            console.print()

            command = Prompt.ask("Command", default="submit")

            if command.lower() in ['quit', 'exit', 'q']:
                console.print("\n[cyan]Goodbye![/cyan]\n")
                break

            if command.lower() == "recent":
                await self.show_recent()
                continue

            if command.lower() == "stats":
                await self.show_dashboard()
                continue

            try:
                request = self.prompt_submission()
            except ValidationError as e:
                for error in e.errors():
                    field = ".".join(str(part) for part in error["loc"])
                    console.print(f"[red]⚠️  {field}: {error['msg']}[/red]")
                continue

            try:
                async with get_db_session() as db:
                    record = await submit_feedback(db, request)
            except Exception as e:
                console.print(f"\n[yellow]⚠️  Could not save to database: {e}[/yellow]")
                continue

            console.print()
            self.display_result(record.sentiment)
            console.print(f"\n[dim]💾 Saved to database with ID: {record.id}[/dim]")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Smart Feedback terminal client")
    parser.add_argument(
        "--dashboard",
        action="store_true",
        help="Print the analytics dashboard and exit"
    )
    parser.add_argument(
        "--window-days",
        type=int,
        default=config.TREND_WINDOW_DAYS,
        help="Trailing window for the sentiment trend"
    )
    args = parser.parse_args(argv)
    if args.window_days < 1:
        parser.error("--window-days must be at least 1")
    return args


async def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    # Initialize database
    console.print("[cyan]Initializing database...[/cyan]")
    await init_db()

    system = InteractiveFeedbackSystem()

    if args.dashboard:
        await system.show_dashboard(args.window_days)
        return

    try:
        await system.run_interactive()
    except KeyboardInterrupt:
        console.print("\n\n[cyan] Goodbye![/cyan]\n")
        sys.exit(0)


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
