"""netgraph: live per-interface bandwidth chart for the terminal.

A background RateSampler turns cumulative interface counters into rates and
appends them to a SeriesStore; the Dashboard reads snapshots of that store and
draws them with plotext on every tick.
"""

__version__ = "0.1.0"
