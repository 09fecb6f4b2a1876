"""
stormimpact package
===================

Storm Impact: a one-shot report over NOAA storm-event records that ranks
event types by their health and economic toll.

- The CLI entry point is in `stormimpact/cli.py`.
- The end-to-end run (load -> clean -> decode -> aggregate) is in `stormimpact/pipeline.py`.
- Dataset loading is in `stormimpact/loader.py`.
"""

__version__ = '0.1.0'
