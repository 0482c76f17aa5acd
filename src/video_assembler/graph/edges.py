"""Conditional edge routing functions for the job graph."""

from __future__ import annotations

from typing import Literal

from video_assembler.graph.state import JobState
from video_assembler.models.job import JobKind


def route_after_fetch(state: JobState) -> Literal["synthesize_segments", "assemble_sequence"]:
    """Merge jobs already have videos; everything else needs segments first."""
    if state["kind"] == JobKind.MERGE:
        return "assemble_sequence"
    return "synthesize_segments"


def route_after_synthesize(state: JobState) -> Literal["assemble_sequence", "trim_output"]:
    """A single job has one segment and skips concatenation."""
    if state["kind"] == JobKind.SINGLE:
        return "trim_output"
    return "assemble_sequence"
