import datetime
import logging
import os
import pathlib
from typing import Any

from rich.logging import RichHandler

logger = logging.getLogger(__name__)


class NewLineFormatter(logging.Formatter):
    """Aligns newlines during multiline prints."""

    def format(self, record):
        msg = super().format(record)
        if (idx := msg.find("|||")) != -1:
            preamble = msg[:idx]
            msg = msg.replace("|||", "").replace("\n", "\n" + (" " * len(preamble)))
        return msg


class LogRender:
    """Renders a record as level and message, with time and path when verbose."""

    def __init__(
        self,
        time_format="[%X]",
        level_width=8,
        print_time=False,
        print_path=False,
    ) -> None:
        self.time_format = time_format
        self.level_width = level_width
        self.print_time = print_time
        self.print_path = print_path

    def __call__(
        self,
        console,
        renderables,
        log_time=None,
        time_format=None,
        level: Any = "",
        path: str | None = None,
        line_no: int | None = None,
    ):
        from rich.containers import Renderables
        from rich.table import Table
        from rich.text import Text

        output = Table.grid(padding=(0, 1))
        output.expand = True
        if self.print_time:
            output.add_column(style="log.time")
        output.add_column(style="log.level", width=self.level_width)
        output.add_column(ratio=1, style="log.message", overflow="fold")
        if self.print_path:
            output.add_column(style="log.path")

        row = []
        if self.print_time:
            log_time = log_time or console.get_datetime()
            row.append(Text(log_time.strftime(time_format or self.time_format)))
        row.append(level)
        row.append(Renderables(renderables))
        if self.print_path:
            row.append(Text(f"{path}:{line_no}" if path and line_no else path or ""))

        output.add_row(*row)
        return output


class StderrRichHandler(RichHandler):
    """Rich handler writing to stderr, stdout may carry the compiled binary."""

    def __init__(self, renderer: LogRender) -> None:
        from rich.console import Console

        self.renderer = renderer
        super().__init__(console=Console(stderr=True))

    def render(
        self,
        *,
        record,
        traceback,
        message_renderable,
    ):
        path = pathlib.Path(record.pathname).name
        level = self.get_level_text(record)
        time_format = None if self.formatter is None else self.formatter.datefmt
        log_time = datetime.datetime.fromtimestamp(record.created)

        return self.renderer(
            self.console,
            [message_renderable] if not traceback else [message_renderable, traceback],
            log_time=log_time,
            time_format=time_format,
            level=level,
            path=path,
            line_no=record.lineno,
        )


def setup_logger(verbose: bool = False, log_file: str | None = None):
    from rich.traceback import install

    handlers = []
    if verbose:
        install()
    handlers.append(
        StderrRichHandler(LogRender(print_time=verbose, print_path=verbose))
    )
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(
            NewLineFormatter("%(asctime)s %(module)-10s %(levelname)-8s|||%(message)s")
        )
        handlers.append(handler)

    FORMAT = "%(message)s"
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        datefmt="[%H:%M:%S]",
        format=FORMAT,
        handlers=handlers,
        force=True,
    )
    if log_file:
        logger.debug(f"Writing log to '{log_file}'.")
