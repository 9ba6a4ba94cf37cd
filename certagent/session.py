"""
Support Session
===============
High-level interface for multi-turn conversations with the support workflow.

Responsibilities:
  - Open and close the checkpointer via AsyncExitStack
  - Build and hold the compiled graph
  - Send user messages, stream step updates, read back history

Checkpointer modes:
  In-memory (default)
    SupportSession()
  SQLite (durable)
    SupportSession(in_memory=False, db_path="support_checkpoints.db")

Usage:
    session = SupportSession()
    await session.start()
    reply = await session.chat("certification_test_id", "완구는 어떤 KC인증을 받아야해?")
    await session.stop()
"""
import logging
from contextlib import AsyncExitStack
from typing import AsyncIterator

from langchain_core.messages import AIMessage, HumanMessage

from .checkpointing import memory_checkpointer, resolve_db_path, sqlite_checkpointer, thread_config
from .graph import build_graph
from .routing import route_for_label

logger = logging.getLogger(__name__)


def user_turn(message: str) -> dict:
    """Graph input for one user message."""
    return {"messages": [HumanMessage(content=message)]}


def last_ai_text(messages) -> str:
    """Return the content of the last AIMessage with text, or "" if none."""
    for msg in reversed(list(messages)):
        if isinstance(msg, AIMessage) and msg.content:
            return msg.content
    return ""


def to_history(messages) -> list[dict]:
    """Convert state messages to {role, content} dicts, skipping system/tool entries."""
    history = []
    for msg in messages:
        if isinstance(msg, HumanMessage):
            history.append({"role": "user", "content": msg.content})
        elif isinstance(msg, AIMessage) and msg.content:
            history.append({"role": "assistant", "content": msg.content})
    return history


class SupportSession:
    """
    Owns one compiled support graph and its checkpointer.

    Args:
        llm:       Chat model for both nodes. Defaults to build_llm() inside build_graph().
        in_memory: Use MemorySaver (True) or AsyncSqliteSaver (False).
        db_path:   SQLite file when in_memory is False. Defaults to resolve_db_path().
    """

    def __init__(self, llm=None, in_memory: bool = True, db_path: str | None = None):
        self._llm        = llm
        self._in_memory  = in_memory
        self._db_path    = db_path
        self._graph      = None
        self._exit_stack = AsyncExitStack()

    @property
    def graph(self):
        if self._graph is None:
            raise RuntimeError("SupportSession.start() has not been called")
        return self._graph

    async def start(self) -> None:
        if self._in_memory:
            checkpointer = memory_checkpointer()
            logger.info("[session] Using in-memory checkpointer (ephemeral)")
        else:
            path = resolve_db_path(self._db_path)
            checkpointer = await self._exit_stack.enter_async_context(
                sqlite_checkpointer(path)
            )
            logger.info("[session] Using SQLite checkpointer at: %s", path)

        self._graph = build_graph(self._llm, checkpointer=checkpointer)
        logger.info("[session] Ready")

    async def stop(self) -> None:
        await self._exit_stack.aclose()
        self._graph = None

    # ── State helpers ───────────────────────────────────────────────────────

    async def get_state(self, thread_id: str):
        return await self.graph.aget_state(thread_config(thread_id))

    async def update_state(self, thread_id: str, values: dict) -> None:
        """Patch checkpointed state, e.g. {"refund_authorized": True}."""
        await self.graph.aupdate_state(thread_config(thread_id), values)

    async def get_history(self, thread_id: str) -> list[dict]:
        state = await self.get_state(thread_id)
        return to_history(state.values.get("messages", []))

    # ── Conversation ────────────────────────────────────────────────────────

    async def chat(self, thread_id: str, message: str) -> dict:
        """
        Run one user turn through the workflow.

        Returns a dict with:
            content             — the final assistant reply
            next_representative — RESPOND | CERTIFICATION
            route               — "conversational" | "certification"
        """
        result = await self.graph.ainvoke(user_turn(message), config=thread_config(thread_id))
        label  = result["next_representative"]
        return {
            "content":             last_ai_text(result["messages"]),
            "next_representative": label,
            "route":               route_for_label(label),
        }

    async def stream(self, thread_id: str, message: str) -> AsyncIterator[dict]:
        """Yield one {node_name: update} dict per executed step."""
        async for step in self.graph.astream(
            user_turn(message),
            config=thread_config(thread_id),
            stream_mode="updates",
        ):
            yield step
