"""
Checkpointing
=============
Checkpoint backends for the support workflow. A checkpoint is a snapshot of
SupportState keyed by thread_id, so a later call with the same thread_id
continues the same conversation.

SupportSession picks one of:
  memory_checkpointer()   MemorySaver, gone when the process exits
  sqlite_checkpointer()   AsyncSqliteSaver on CHECKPOINT_DB_PATH
                          (default "support_checkpoints.db")
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from langgraph.checkpoint.memory import MemorySaver
from langgraph.checkpoint.sqlite.aio import AsyncSqliteSaver

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "support_checkpoints.db"


def resolve_db_path(db_path: str | None = None) -> str:
    """Explicit path, else CHECKPOINT_DB_PATH, else DEFAULT_DB_PATH."""
    if db_path:
        return db_path
    return os.getenv("CHECKPOINT_DB_PATH", DEFAULT_DB_PATH)


def thread_config(thread_id: str) -> dict:
    return {"configurable": {"thread_id": thread_id}}


@asynccontextmanager
async def sqlite_checkpointer(db_path: str | None = None) -> AsyncIterator[AsyncSqliteSaver]:
    # The saver owns the aiosqlite connection for the lifetime of the context.
    path = resolve_db_path(db_path)
    async with AsyncSqliteSaver.from_conn_string(path) as checkpointer:
        await checkpointer.setup()
        logger.info("[checkpointing] SQLite checkpointer ready at: %s", path)
        yield checkpointer


def memory_checkpointer() -> MemorySaver:
    return MemorySaver()
