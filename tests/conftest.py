"""
pytest configuration for the certagent test suite.

Puts the project root on sys.path so `import certagent`, `import api` and
`import sql_demo` work without installing the package, and sets fake provider
credentials so nothing reaches a real LLM.

asyncio_mode = "auto" (pyproject.toml) collects async tests without
@pytest.mark.asyncio.
"""
import os
import sys
from unittest.mock import MagicMock

import pytest
from langchain_core.messages import AIMessage

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("LLM_PROVIDER", "openai")

from certagent.state import RouteUserRequest  # noqa: E402


def stub_llm(replies, label="RESPOND"):
    """
    MagicMock chat model.

    invoke() returns the given replies in order (str → AIMessage);
    with_structured_output(...).invoke() returns RouteUserRequest(label).
    """
    llm = MagicMock()
    llm.invoke.side_effect = [
        AIMessage(content=r) if isinstance(r, str) else r for r in replies
    ]
    router = MagicMock()
    router.invoke.return_value = RouteUserRequest(next_representative=label)
    llm.with_structured_output.return_value = router
    return llm


@pytest.fixture
def make_llm():
    return stub_llm
