"""Command-line configuration, normalised into a frozen Settings object."""

from __future__ import annotations

import argparse
from argparse import ArgumentParser, Namespace
from dataclasses import dataclass, field

from netgraph import __version__, modes

MIN_INTERVAL_S = 0.05

DEFAULT_INTERVAL_S = 0.25
DEFAULT_REFRESH_S = 0.25
DEFAULT_WINDOW_S = 60.0


@dataclass(frozen=True)
class Settings:
    interval_s: float = DEFAULT_INTERVAL_S     # sampler period
    refresh_s: float = DEFAULT_REFRESH_S       # render / input tick
    window_s: float = DEFAULT_WINDOW_S         # initial display duration
    mode: str = modes.DEFAULT_MODE
    zoom: bool = True
    interface: str | None = None
    exclude: tuple[str, ...] = field(default_factory=tuple)
    frame: bool = True
    log_file: str | None = None
    log_level: str = "INFO"

    @classmethod
    def from_args(cls, args: Namespace) -> Settings:
        interval_s = max(MIN_INTERVAL_S, args.interval)
        return cls(
            interval_s=interval_s,
            refresh_s=max(MIN_INTERVAL_S, args.refresh),
            window_s=max(interval_s, args.window),
            mode=modes.resolve(args.mode),
            zoom=args.zoom,
            interface=args.interface,
            exclude=tuple(x.strip() for x in args.exclude.split(",") if x.strip()),
            frame=args.frame,
            log_file=args.log_file,
            log_level=args.log_level,
        )


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="netgraph",
        description="Live per-interface network bandwidth chart",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Controls:
  q       Quit
  Up/+    Double the time window
  Down/-  Halve the time window
""",
    )
    parser.add_argument("-V", "--version", action="version",
                        version=f"netgraph {__version__}")
    parser.add_argument("--interval", type=float, default=DEFAULT_INTERVAL_S,
                        help=f"Sampling interval in seconds (default: {DEFAULT_INTERVAL_S})")
    parser.add_argument("--refresh", type=float, default=DEFAULT_REFRESH_S,
                        help=f"Redraw / key poll interval in seconds (default: {DEFAULT_REFRESH_S})")
    parser.add_argument("--window", type=float, default=DEFAULT_WINDOW_S,
                        help=f"Initial time window in seconds (default: {DEFAULT_WINDOW_S:.0f})")
    parser.add_argument("--mode", choices=modes.choices(), default=modes.DEFAULT_MODE,
                        help="Which counters to chart: transmitted + received, "
                             "transmitted only or received only (default: combined)")
    parser.add_argument("--no-zoom", dest="zoom", action="store_false",
                        help="Disable Up/Down window adjustment")
    parser.add_argument("--interface", default=None,
                        help="Chart a single NIC (e.g. enp0s31f6)")
    parser.add_argument("--exclude", default="",
                        help="Comma-separated NICs to skip (e.g. lo,virbr0)")
    parser.add_argument(
        "--frame",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Show chart frame border (default: on)",
    )
    parser.add_argument("--log-file", default=None,
                        help="Write diagnostics to this file (nothing is logged to the screen)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Log level for --log-file (default: INFO)")
    return parser


def parse_settings(argv: list[str] | None = None) -> Settings:
    return Settings.from_args(build_parser().parse_args(argv))
