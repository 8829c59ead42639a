"""Terminal table rendering for scheduled tasks."""

from __future__ import annotations

from typing import Sequence

from colorama import Fore, Style

from mfc.models import UnixTask, WindowsTask

BORDER_COLOR = Fore.MAGENTA
HEADER_STYLE = Fore.LIGHTRED_EX + Style.BRIGHT
FIRST_COLUMN_STYLE = Fore.LIGHTBLUE_EX
ROW_STYLES = (Fore.CYAN, Fore.LIGHTCYAN_EX)
CAPTION_STYLE = Fore.LIGHTBLUE_EX + Style.BRIGHT


def _paint(text: str, style: str, color: bool) -> str:
    if not color or not style:
        return text
    return f"{style}{text}{Style.RESET_ALL}"


def render_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    caption: str = "",
    color: bool = True,
) -> str:
    """Render rows as a rounded box table with a caption line below it.

    Column widths are measured on the plain text before any color codes are
    added, so colored and plain output line up identically.
    """
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    def border(left: str, mid: str, right: str) -> str:
        line = left + mid.join("─" * (w + 2) for w in widths) + right
        return _paint(line, BORDER_COLOR, color)

    bar = _paint("│", BORDER_COLOR, color)

    def line(cells: Sequence[str], style_for: list[str]) -> str:
        padded = [
            " " + _paint(cell.ljust(width), style, color) + " "
            for cell, width, style in zip(cells, widths, style_for)
        ]
        return bar + bar.join(padded) + bar

    out = [
        border("╭", "┬", "╮"),
        line(headers, [HEADER_STYLE] * len(headers)),
        border("├", "┼", "┤"),
    ]

    for index, row in enumerate(rows):
        row_style = ROW_STYLES[index % 2]
        out.append(line(row, [FIRST_COLUMN_STYLE] + [row_style] * (len(row) - 1)))

    out.append(border("╰", "┴", "╯"))

    if caption:
        out.append(_paint(caption, CAPTION_STYLE, color))

    return "\n".join(out)


def render_unix_tasks(tasks: list[UnixTask], color: bool = True) -> str:
    rows = []
    for task in tasks:
        next_run = task.get_next_run()
        rows.append([
            task.schedule,
            task.command,
            next_run.strftime("%Y-%m-%d %H:%M") if next_run else "N/A",
        ])

    return render_table(
        ["Schedule", "Command", "Next Run"],
        rows,
        caption=f"Total Tasks: {len(tasks)}",
        color=color,
    )


def render_windows_tasks(tasks: list[WindowsTask], color: bool = True) -> str:
    rows = [
        [t.folder, t.host_name, t.task_name, t.next_run_time, t.status, t.logon_mode]
        for t in tasks
    ]

    return render_table(
        ["Folder", "Host Name", "Task Name", "Next Run Time", "Status", "Logon Mode"],
        rows,
        caption=f"Total Tasks: {len(tasks)}",
        color=color,
    )
