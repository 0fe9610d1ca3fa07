"""
Resource monitoring for a single running process.

Components:
- ResourceMonitor: fixed-interval async polling loop
- AggregateBuilder: single-writer accumulator behind the loop
"""

from .aggregate import AggregateBuilder
from .resource_monitor import ResourceMonitor

__all__ = [
    "AggregateBuilder",
    "ResourceMonitor",
]
