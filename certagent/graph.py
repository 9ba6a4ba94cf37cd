"""
Graph Construction
==================
Assembles the support routing StateGraph.

Architecture:

    START
      │
      ▼
    initial_support ──── "conversational" ─────────► END
      │
      │ "certification"
      ▼
    certification_support ─────────────────────────► END

Checkpointer injection:
  build_graph() accepts any LangGraph-compatible checkpointer. The caller owns
  its lifecycle; with no checkpointer an in-process MemorySaver is used, keyed
  by the thread_id in {"configurable": {"thread_id": ...}}.
"""
import logging

from langgraph.checkpoint.base import BaseCheckpointSaver
from langgraph.checkpoint.memory import MemorySaver
from langgraph.graph import END, START, StateGraph

from .nodes import create_certification_support_node, create_initial_support_node
from .providers import build_llm
from .routing import ROUTE_MAP, route_after_initial_support
from .state import SupportState

logger = logging.getLogger(__name__)


def build_graph(llm=None, checkpointer: BaseCheckpointSaver | None = None):
    """
    Build and compile the support routing graph.

    Args:
        llm:          Chat model used by both nodes. Defaults to build_llm().
        checkpointer: Any LangGraph checkpoint backend. Defaults to MemorySaver.

    Returns:
        A compiled graph ready for invoke() / stream() / ainvoke() calls.
    """
    if llm is None:
        llm = build_llm()

    if checkpointer is None:
        checkpointer = MemorySaver()

    workflow = StateGraph(SupportState)

    workflow.add_node("initial_support",       create_initial_support_node(llm))
    workflow.add_node("certification_support", create_certification_support_node(llm))

    workflow.add_edge(START, "initial_support")
    workflow.add_conditional_edges(
        "initial_support",
        route_after_initial_support,
        ROUTE_MAP,
    )
    workflow.add_edge("certification_support", END)

    print("Added edges!")

    return workflow.compile(checkpointer=checkpointer)


def draw_mermaid(graph) -> str:
    return graph.get_graph().draw_mermaid()


def save_graph_png(graph, path: str) -> str:
    """
    Render the graph to PNG and write it to path.

    draw_mermaid_png() renders through the mermaid.ink web service by default,
    so this needs network access.
    """
    image = graph.get_graph().draw_mermaid_png()
    with open(path, "wb") as f:
        f.write(image)
    logger.info("[graph] Saved graph image to %s", path)
    return path
