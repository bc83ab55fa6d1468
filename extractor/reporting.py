"""
Console reporting - renders extraction events with rich.
"""

from rich.console import Console
from rich.table import Table
from rich import box

from config import ExtractionSettings


class ConsoleReporter:
    """
    Event callback that prints a run's progress.

    Register with EventEmitter.add_callback(reporter). Which events are
    shown follows the print_* flags in the settings.
    """

    def __init__(self, settings: ExtractionSettings = None, console: Console = None):
        self.settings = settings or ExtractionSettings()
        self.console = console or Console()

    def __call__(self, event_type: str, data: dict) -> None:
        handler = getattr(self, f"_on_{event_type}", None)
        if handler:
            handler(data)

    def _on_stage(self, data: dict) -> None:
        self.console.print(f"[bold cyan]{data['message']}[/bold cyan]")

    def _on_seed(self, data: dict) -> None:
        if not self.settings.print_initial_document:
            return
        self.console.print(
            f"Initial document is {data['document_id']}({data['topic']}): {data['title']}"
        )

    def _on_promotion(self, data: dict) -> None:
        if not self.settings.print_core_titles:
            return
        self.console.print(
            f"Adding core document {data['document_id']}({data['topic']}): {data['title']}"
            f" with an entropy delta of {data['entropy_delta']:.6f}."
        )

    def _on_comparison(self, data: dict) -> None:
        if not self.settings.print_comparison:
            return
        table = Table(title=f"Core vs document {data['document_id']}", box=box.SIMPLE)
        table.add_column("Measure")
        table.add_column("Value", justify="right")
        for key in ("core_features", "candidate_features", "shared_features",
                    "candidate_only", "core_only"):
            table.add_row(key.replace("_", " "), str(data[key]))
        table.add_row("shared mass", f"{data['shared_mass']:.3f}")
        self.console.print(table)

    def _on_round_failures(self, data: dict) -> None:
        self.console.print(
            f"[yellow]Round {data['round']}: {data['failed_count']} candidate(s) failed to score"
            f" {data['failed_ids']}[/yellow]"
        )

    def _on_assignment(self, data: dict) -> None:
        self.console.print(
            f"Stored core of {data['core_size']} documents for seed {data['seed_id']}"
            f" (slice {data['data_slice']})"
        )

    def _on_recommendations(self, data: dict) -> None:
        table = Table(title="Serendipitous documents", box=box.ROUNDED)
        table.add_column("#", justify="right")
        table.add_column("Document")
        table.add_column("Full rank", justify="right")
        table.add_column("Reduced rank", justify="right")
        table.add_column("Divergence", justify="right")
        for i, item in enumerate(data["candidates"], 1):
            table.add_row(
                str(i),
                f"{item['document_id']}({item['topic']}): {item['title']}",
                str(item["full_rank"]),
                str(item["reduced_rank"]),
                str(item["divergence"]),
            )
        self.console.print(table)

    def _on_abort(self, data: dict) -> None:
        self.console.print(f"[bold red]ABORT: {data['reason']}[/bold red]")

