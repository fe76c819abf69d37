"""
Core type definitions and protocols.

This module defines shared protocols so engine components can accept
duck-typed collaborators without importing them.
"""

from typing import Protocol


class OutputSink(Protocol):
    """Destination for human-readable progress lines.

    Workflow code passes a sink in explicitly instead of writing to a
    process-wide console.
    """

    def write(self, line: str) -> None:
        """Emit one line of output."""
        ...


class ListSink:
    """OutputSink that collects lines in memory."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def write(self, line: str) -> None:
        self.lines.append(line)
