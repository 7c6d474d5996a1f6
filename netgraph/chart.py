"""Chart rendering: turns a store snapshot and a Window into a plotext frame.

build_frame() is pure and decides everything that ends up on screen (order,
colors, bounds, labels); draw() only hands the result to plotext and writes
it with ANSI cursor-home double-buffering.
"""

from __future__ import annotations

import hashlib
import shutil
import sys
from dataclasses import dataclass, field
from typing import TextIO

import plotext as plt

from netgraph.store import Point, Snapshot
from netgraph.units import format_rate, humanize_bps
from netgraph.window import Window, visible

Rgb = tuple[int, int, int]

Y_LABEL_FRACTIONS = (0.0, 0.25, 0.5, 0.75, 1.0)

MIN_WIDTH = 20
MIN_HEIGHT = 6

MODE_TITLES = {
    "combined": "tx+rx",
    "transmit": "tx",
    "receive": "rx",
}


def interface_color(name: str) -> Rgb:
    """Stable RGB color for an interface: a 3-byte BLAKE2b digest of its name."""
    r, g, b = hashlib.blake2b(name.encode(), digest_size=3).digest()
    return r, g, b


@dataclass
class Dataset:
    name: str
    color: Rgb
    points: tuple[Point, ...] = ()
    current: float = 0.0        # newest rate, bytes/sec

    @property
    def xs(self) -> list[float]:
        return [t for t, _ in self.points]

    @property
    def ys(self) -> list[float]:
        return [v for _, v in self.points]

    def legend(self) -> str:
        return f"{self.name} {format_rate(self.current)}"


@dataclass
class Frame:
    title: str
    x_bounds: tuple[float, float]
    y_bounds: tuple[float, float]
    x_labels: list[str]
    y_ticks: list[float]
    y_labels: list[str]
    datasets: list[Dataset] = field(default_factory=list)


def format_duration(seconds: float) -> str:
    return f"{seconds:g}s"


def build_frame(snapshot: Snapshot, window: Window, duration: float,
                mode: str = "combined") -> Frame:
    datasets = []
    for name in sorted(snapshot):
        series = snapshot[name]
        datasets.append(Dataset(
            name=name,
            color=interface_color(name),
            points=tuple(visible(series, window.start)),
            current=series[-1][1] if series else 0.0,
        ))

    y_ticks = [f * window.max_rate for f in Y_LABEL_FRACTIONS]
    title = (f"Network Bandwidth ({MODE_TITLES.get(mode, mode)}, "
             f"window={format_duration(duration)})")
    return Frame(
        title=title,
        x_bounds=window.x_bounds,
        y_bounds=window.y_bounds(),
        x_labels=[f"{v:.1f}s" for v in window.x_bounds],
        y_ticks=y_ticks,
        y_labels=[humanize_bps(v * 8) for v in y_ticks],
        datasets=datasets,
    )


def legend_line(frame: Frame) -> str:
    """One row listing every interface in its color, idle ones included."""
    parts = [plt.colorize("■ " + ds.legend(), ds.color) for ds in frame.datasets]
    return "  ".join(parts)


def render(frame: Frame, width: int, height: int, *, border: bool = True) -> str:
    """Build the chart and legend as a string sized width x height."""
    width = max(MIN_WIDTH, width)
    height = max(MIN_HEIGHT, height)

    plt.clf()
    plt.theme("clear")
    # last row is the legend
    plt.plotsize(width, height - 1)

    for ds in frame.datasets:
        if ds.points:
            plt.plot(ds.xs, ds.ys, color=ds.color, marker="braille")

    plt.frame(border)
    plt.title(frame.title)
    x0, x1 = frame.x_bounds
    y0, y1 = frame.y_bounds
    plt.xlim(x0, x1)
    plt.ylim(y0, y1)
    plt.xticks(list(frame.x_bounds), frame.x_labels)
    if frame.y_ticks[-1] > frame.y_ticks[0]:
        plt.yticks(frame.y_ticks, frame.y_labels)
    else:
        # nothing but zeros visible: label only the baseline
        plt.yticks([0.0], frame.y_labels[:1])
    plt.grid(False, False)

    return plt.build().rstrip() + "\n" + legend_line(frame)


def draw(frame: Frame, out: TextIO = sys.stdout, *, border: bool = True) -> None:
    cols, rows = shutil.get_terminal_size()
    out.write("\033[H" + render(frame, cols, rows, border=border) + "\033[J")
    out.flush()
