"""
certagent — KC Certification Support Package
============================================

Package layout:

    state.py          SupportState TypedDict, RouteUserRequest, Respond / Certification outcomes
    prompts.py        System prompts and the 'certification' table schema text
    providers.py      LLM provider detection and construction
    nodes.py          initial_support and certification_support node factories
    routing.py        Pure routing function for the conditional edge
    checkpointing.py  Memory + SQLite checkpoint backends
    graph.py          build_graph() — assembles and compiles the StateGraph
    session.py        SupportSession — async multi-turn chat interface
    sqltool.py        SQL assistant bootstrap, toolkit and ReAct agent

Entry points for external callers:

    SupportSession       start / chat / stream / get_history over a checkpointed graph
    build_graph          compiled support workflow for direct invoke / astream use
    bootstrap_sql_tools  connect to the certification database and build the SQL toolkit
    build_sql_agent      ReAct agent over the bootstrapped SQL tools
"""
from .checkpointing import memory_checkpointer, sqlite_checkpointer, thread_config
from .graph import build_graph, draw_mermaid
from .routing import UnknownRoutingLabel, route_for_label
from .session import SupportSession
from .sqltool import DatabaseBootstrapError, SqlBootstrap, bootstrap_sql_tools, build_sql_agent
from .state import Certification, Respond, SupportState

__all__ = [
    "SupportSession",
    "build_graph",
    "draw_mermaid",
    "SupportState",
    "Respond",
    "Certification",
    "route_for_label",
    "UnknownRoutingLabel",
    "memory_checkpointer",
    "sqlite_checkpointer",
    "thread_config",
    "bootstrap_sql_tools",
    "build_sql_agent",
    "SqlBootstrap",
    "DatabaseBootstrapError",
]
