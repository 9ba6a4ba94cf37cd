"""
Certification SQL Assistant
===========================
Connects to the certification database, derives a SQL toolkit from the live
schema and hands it to a prebuilt ReAct agent.

Bootstrap never exits the process. bootstrap_sql_tools() returns a
SqlBootstrap whose error is set when the database cannot be reached; the
caller decides what to do about it (sql_demo.py exits with status 1).

Connection string resolution order:
  1. database_url argument
  2. SUPABASE_DB_URL
  3. NEXT_PUBLIC_SUPABASE_DB_URL
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Iterator

from langchain_community.agent_toolkits import SQLDatabaseToolkit
from langchain_community.utilities import SQLDatabase
from langgraph.prebuilt import create_react_agent
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError

from .prompts import SQL_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

DATABASE_URL_ENV_VARS = ("SUPABASE_DB_URL", "NEXT_PUBLIC_SUPABASE_DB_URL")


class DatabaseBootstrapError(RuntimeError):
    """The certification database is not configured or not reachable."""


@dataclass
class SqlBootstrap:
    database: SQLDatabase | None = None
    tools: list = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def get_database_url() -> str | None:
    for name in DATABASE_URL_ENV_VARS:
        url = os.getenv(name)
        if url:
            return url
    return None


def connect_engine(database_url: str):
    """Create an engine and open one connection to prove the database is reachable."""
    engine = create_engine(database_url)
    with engine.connect():
        pass
    return engine


def bootstrap_sql_tools(llm, database_url: str | None = None) -> SqlBootstrap:
    """
    Connect, wrap the engine in SQLDatabase, and build the toolkit's tools.

    No toolkit is constructed when the connection fails.
    """
    url = database_url or get_database_url()
    if not url:
        error = DatabaseBootstrapError(
            "No database URL configured (set %s)" % " or ".join(DATABASE_URL_ENV_VARS)
        )
        logger.error("[sqltool] %s", error)
        return SqlBootstrap(error=error)

    try:
        engine = connect_engine(url)
    except SQLAlchemyError as exc:
        logger.error("[sqltool] Database connection failed: %s", exc)
        error = DatabaseBootstrapError(f"Database connection failed: {exc}")
        error.__cause__ = exc
        return SqlBootstrap(error=error)

    logger.info("[sqltool] Connected to %s", engine.url.render_as_string(hide_password=True))

    database = SQLDatabase(engine=engine)
    toolkit  = SQLDatabaseToolkit(db=database, llm=llm)
    tools    = toolkit.get_tools()

    logger.info("[sqltool] %d tools: %s", len(tools), [t.name for t in tools])
    return SqlBootstrap(database=database, tools=tools)


def describe_tools(tools) -> list[dict]:
    return [{"name": t.name, "description": t.description} for t in tools]


def build_sql_agent(llm, tools, prompt: str = SQL_SYSTEM_PROMPT):
    """Prebuilt ReAct agent that answers certification questions with the SQL tools."""
    return create_react_agent(llm, tools, prompt=prompt)


def stream_answer(agent, question: str) -> Iterator:
    """
    Stream the agent's steps for one question.

    Yields the last message of every step: its tool_calls list when the
    model is calling tools, otherwise its text content.
    """
    events = agent.stream(
        {"messages": [("user", question)]},
        stream_mode="values",
    )
    for event in events:
        last = event["messages"][-1]
        if getattr(last, "tool_calls", None):
            yield last.tool_calls
        elif last.content:
            yield last.content
