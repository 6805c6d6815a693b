# site_deploy/cli/utils/progress.py
"""Progress display utilities"""

from typing import Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from ...adapters.base import DeployCallbacks
from ...constants import DeployLogLevel, DeployStatus
from ...models.result import DeployLogEntry, DeployProgress

LOG_STYLES = {
    DeployLogLevel.DEBUG: "dim",
    DeployLogLevel.INFO: "",
    DeployLogLevel.SUCCESS: "green",
    DeployLogLevel.WARN: "yellow",
    DeployLogLevel.ERROR: "red",
}

LOG_LEVEL_ORDER = list(DeployLogLevel)


class DeployProgressDisplay:
    """Live progress bar and log lines for one deployment

    Use as a context manager and hand ``callbacks()`` to the deploy service.
    """

    def __init__(self, console: Console = None,
                 min_level: DeployLogLevel = DeployLogLevel.INFO):
        self.console = console or Console()
        self.min_level = min_level
        self._progress: Optional[Progress] = None
        self._task_id: Optional[TaskID] = None
        self.status: DeployStatus = DeployStatus.IDLE

    def __enter__(self):
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold]{task.description}"),
            BarColumn(),
            "[progress.percentage]{task.percentage:>3.0f}%",
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )
        self._progress.__enter__()
        self._task_id = self._progress.add_task("Starting...", total=100)
        return self

    def __exit__(self, *args):
        if self._progress:
            self._progress.__exit__(*args)
            self._progress = None

    def callbacks(self) -> DeployCallbacks:
        return DeployCallbacks(
            on_progress=self.on_progress,
            on_log=self.on_log,
            on_status_change=self.on_status_change,
        )

    def on_progress(self, progress: DeployProgress) -> None:
        if self._progress is None:
            return
        description = f"\\[{progress.phase.value}] {progress.message}" if progress.message \
            else progress.phase.value
        self._progress.update(self._task_id, completed=progress.progress, description=description)

    def on_log(self, entry: DeployLogEntry) -> None:
        if LOG_LEVEL_ORDER.index(entry.level) < LOG_LEVEL_ORDER.index(self.min_level):
            return

        style = LOG_STYLES.get(entry.level, "")
        phase = f"[dim]{entry.phase.value:>8}[/dim] " if entry.phase else ""
        message = entry.message.replace("[", "\\[")
        line = f"[{style}]{message}[/{style}]" if style else message
        self.console.print(f"{phase}{line}", highlight=False)

    def on_status_change(self, status: DeployStatus) -> None:
        self.status = status
