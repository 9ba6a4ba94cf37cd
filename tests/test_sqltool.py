"""
Tests for certagent/sqltool.py and sql_demo.py
==============================================
Uses throwaway SQLite files for a reachable database and a path inside a
missing directory for an unreachable one. The toolkit needs a real
BaseLanguageModel, so a FakeListChatModel stands in for the LLM.

Covers:
  - get_database_url: env var resolution order
  - bootstrap_sql_tools: missing URL, unreachable DB (no toolkit built), reachable DB
  - describe_tools: name/description summary
  - build_sql_agent: prompt handed to create_react_agent
  - stream_answer: tool calls vs text content
  - sql_demo.main: exit status 1 on connection failure
"""
from unittest.mock import MagicMock, patch

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage, HumanMessage
from sqlalchemy import create_engine, text

from certagent.prompts import SQL_SYSTEM_PROMPT
from certagent.sqltool import (
    DATABASE_URL_ENV_VARS,
    DatabaseBootstrapError,
    bootstrap_sql_tools,
    build_sql_agent,
    describe_tools,
    get_database_url,
    stream_answer,
)

UNREACHABLE_URL = "sqlite:////nonexistent-dir/certification/kc.db"


@pytest.fixture
def fake_llm():
    return FakeListChatModel(responses=["SELECT kc_certification FROM certification"])


@pytest.fixture
def certification_db(tmp_path) -> str:
    url = f"sqlite:///{tmp_path / 'kc.db'}"
    engine = create_engine(url)
    with engine.begin() as conn:
        conn.execute(text(
            "CREATE TABLE certification ("
            " id INTEGER PRIMARY KEY, created_at DATETIME, product TEXT, category TEXT,"
            " radio_certification TEXT, industry TEXT, condition TEXT, examples TEXT,"
            " kc_certification TEXT)"
        ))
        conn.execute(text(
            "INSERT INTO certification (product, category, kc_certification) "
            "VALUES ('완구', '어린이제품', '안전확인')"
        ))
    engine.dispose()
    return url


@pytest.fixture
def no_database_env(monkeypatch):
    for name in DATABASE_URL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# get_database_url
# ---------------------------------------------------------------------------

class TestGetDatabaseUrl:
    def test_none_when_unset(self, no_database_env):
        assert get_database_url() is None

    def test_prefers_supabase_db_url(self, no_database_env, monkeypatch):
        monkeypatch.setenv("SUPABASE_DB_URL", "postgresql://a")
        monkeypatch.setenv("NEXT_PUBLIC_SUPABASE_DB_URL", "postgresql://b")
        assert get_database_url() == "postgresql://a"

    def test_falls_back_to_next_public_url(self, no_database_env, monkeypatch):
        monkeypatch.setenv("NEXT_PUBLIC_SUPABASE_DB_URL", "postgresql://b")
        assert get_database_url() == "postgresql://b"


# ---------------------------------------------------------------------------
# bootstrap_sql_tools
# ---------------------------------------------------------------------------

class TestBootstrapFailure:
    def test_missing_url(self, no_database_env, fake_llm):
        result = bootstrap_sql_tools(fake_llm)
        assert not result.ok
        assert isinstance(result.error, DatabaseBootstrapError)
        assert result.tools == []

    def test_unreachable_database_skips_toolkit(self, fake_llm):
        with patch("certagent.sqltool.SQLDatabaseToolkit") as toolkit_cls:
            result = bootstrap_sql_tools(fake_llm, database_url=UNREACHABLE_URL)

        assert not result.ok
        assert isinstance(result.error, DatabaseBootstrapError)
        assert result.error.__cause__ is not None
        assert result.database is None
        assert result.tools == []
        toolkit_cls.assert_not_called()


class TestBootstrapSuccess:
    def test_tools_are_non_empty_with_name_and_description(self, fake_llm, certification_db):
        result = bootstrap_sql_tools(fake_llm, database_url=certification_db)

        assert result.ok
        assert result.tools
        for tool in result.tools:
            assert isinstance(tool.name, str) and tool.name
            assert isinstance(tool.description, str) and tool.description

    def test_database_exposes_certification_table(self, fake_llm, certification_db):
        result = bootstrap_sql_tools(fake_llm, database_url=certification_db)
        assert "certification" in result.database.get_usable_table_names()

    def test_url_from_env(self, fake_llm, certification_db, no_database_env, monkeypatch):
        monkeypatch.setenv("SUPABASE_DB_URL", certification_db)
        assert bootstrap_sql_tools(fake_llm).ok

    def test_query_tool_reads_rows(self, fake_llm, certification_db):
        result = bootstrap_sql_tools(fake_llm, database_url=certification_db)
        query_tool = next(t for t in result.tools if t.name == "sql_db_query")

        output = query_tool.invoke(
            {"query": "SELECT kc_certification FROM certification WHERE product = '완구'"}
        )
        assert "안전확인" in output


# ---------------------------------------------------------------------------
# Agent wiring
# ---------------------------------------------------------------------------

class TestDescribeTools:
    def test_summary(self):
        tool = MagicMock()
        tool.name = "sql_db_query"
        tool.description = "Run a query"
        assert describe_tools([tool]) == [{"name": "sql_db_query", "description": "Run a query"}]


class TestSqlSystemPrompt:
    def test_contains_korean_output_rule(self):
        assert "ALWAYS reply in korean." in SQL_SYSTEM_PROMPT

    def test_contains_exact_match_rule(self):
        assert (
            "ALWAYS search the 'product' and 'category' in 'certification' table "
            "using exact match first." in SQL_SYSTEM_PROMPT
        )

    def test_contains_schema_and_example(self):
        assert " 'kc_certification' TEXT" in SQL_SYSTEM_PROMPT
        assert "완구는 어떤 KC인증을 받아야해?" in SQL_SYSTEM_PROMPT
        assert "ALWAYS SQL query keyword should use ' instead of \"." in SQL_SYSTEM_PROMPT


class TestBuildSqlAgent:
    def test_passes_prompt_to_react_agent(self, fake_llm):
        tools = [MagicMock()]
        with patch("certagent.sqltool.create_react_agent") as create:
            agent = build_sql_agent(fake_llm, tools)

        create.assert_called_once_with(fake_llm, tools, prompt=SQL_SYSTEM_PROMPT)
        assert agent is create.return_value


class TestStreamAnswer:
    def test_yields_tool_calls_then_text(self):
        question = HumanMessage(content="완구는 어떤 KC인증을 받아야해?")
        calling = AIMessage(
            content="",
            tool_calls=[{"name": "sql_db_query", "args": {"query": "SELECT 1"}, "id": "call_0"}],
        )
        answer = AIMessage(content="완구는 [어린이제품] 카테고리에 속하며 [안전확인] 인증을 받아야합니다.")

        agent = MagicMock()
        agent.stream.return_value = iter([
            {"messages": [question]},
            {"messages": [question, calling]},
            {"messages": [question, calling, answer]},
        ])

        outputs = list(stream_answer(agent, question.content))

        assert outputs[0] == question.content
        assert outputs[1][0]["name"] == "sql_db_query"
        assert outputs[2] == answer.content
        agent.stream.assert_called_once_with(
            {"messages": [("user", question.content)]},
            stream_mode="values",
        )


# ---------------------------------------------------------------------------
# sql_demo.main
# ---------------------------------------------------------------------------

class TestSqlDemo:
    def test_exits_non_zero_when_database_unreachable(self, fake_llm, no_database_env, monkeypatch, capsys):
        import sql_demo

        monkeypatch.setenv("SUPABASE_DB_URL", UNREACHABLE_URL)
        with (
            patch("sql_demo.build_llm", return_value=fake_llm),
            patch("sql_demo.build_sql_agent") as build_agent,
        ):
            status = sql_demo.main()

        assert status == 1
        build_agent.assert_not_called()
        assert "오류" in capsys.readouterr().err

    def test_prints_tools_and_answer(self, fake_llm, certification_db, no_database_env, monkeypatch, capsys):
        import sql_demo

        monkeypatch.setenv("SUPABASE_DB_URL", certification_db)
        with (
            patch("sql_demo.build_llm", return_value=fake_llm),
            patch("sql_demo.build_sql_agent"),
            patch("sql_demo.stream_answer", return_value=iter(["완구는 [안전확인] 대상입니다."])),
        ):
            status = sql_demo.main()

        out = capsys.readouterr().out
        assert status == 0
        assert "sql_db_query" in out
        assert "완구는 [안전확인] 대상입니다." in out
