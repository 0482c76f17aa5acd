"""StateGraph definition — assembles nodes, edges, and conditional routing."""

from __future__ import annotations

from langgraph.graph import END, StateGraph

from video_assembler.graph.edges import route_after_fetch, route_after_synthesize
from video_assembler.graph.state import JobState
from video_assembler.nodes.assembler import assemble_sequence
from video_assembler.nodes.fetcher import fetch_assets
from video_assembler.nodes.synthesizer import synthesize_segments
from video_assembler.nodes.trimmer import trim_output
from video_assembler.nodes.validator import validate_request


def build_graph():
    """Build and compile the video job graph.

    Runs are one-shot and hold no checkpoint; job context (fetcher, command
    runner, workspace) arrives through ``config["configurable"]``.

    Returns:
        Compiled StateGraph ready for invocation.
    """
    graph = StateGraph(JobState)

    # Add nodes
    graph.add_node("validate_request", validate_request)
    graph.add_node("fetch_assets", fetch_assets)
    graph.add_node("synthesize_segments", synthesize_segments)
    graph.add_node("assemble_sequence", assemble_sequence)
    graph.add_node("trim_output", trim_output)

    # Entry point
    graph.set_entry_point("validate_request")

    # validate_request → fetch_assets
    graph.add_edge("validate_request", "fetch_assets")

    graph.add_conditional_edges(
        "fetch_assets",
        route_after_fetch,
        {
            "synthesize_segments": "synthesize_segments",
            "assemble_sequence": "assemble_sequence",
        },
    )

    graph.add_conditional_edges(
        "synthesize_segments",
        route_after_synthesize,
        {
            "assemble_sequence": "assemble_sequence",
            "trim_output": "trim_output",
        },
    )

    graph.add_edge("assemble_sequence", END)
    graph.add_edge("trim_output", END)

    return graph.compile()
