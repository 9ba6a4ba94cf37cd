"""
Graph Nodes
===========
Each factory here returns one node of the support StateGraph, bound to a
specific chat model.

A label outside RESPOND / CERTIFICATION raises UnknownRoutingLabel as soon
as it is seen.

Node responsibilities:
  create_initial_support_node       — drafts a reply and classifies the turn
  create_certification_support_node — re-answers with the certification prompt

Nodes never mutate state["messages"]; they return the messages to append and
the add_messages reducer does the rest. Model errors are not caught here.
"""
import logging

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from .prompts import (
    CERTIFICATION_SYSTEM_PROMPT,
    INIT_SYSTEM_PROMPT,
    ROUTING_SYSTEM_PROMPT,
    ROUTING_USER_PROMPT,
)
from .routing import UnknownRoutingLabel
from .state import (
    CERTIFICATION,
    RESPOND,
    Certification,
    Respond,
    RouteUserRequest,
    SupportOutcome,
    SupportState,
)

logger = logging.getLogger(__name__)


ROUTING_METHOD = "function_calling"


def build_router(llm):
    """
    Structured-output runnable for RouteUserRequest.

    Bound as a tool call named RouteUserRequest on every provider, rather than
    each provider's default structured-output mode (json_schema on OpenAI).
    """
    return llm.with_structured_output(RouteUserRequest, method=ROUTING_METHOD)


def classify_next_representative(llm, messages) -> str:
    """
    Ask the model which representative should handle the conversation.

    The trailing HumanMessage restates the task after the history.
    """
    routing_messages = [
        SystemMessage(content=ROUTING_SYSTEM_PROMPT),
        *messages,
        HumanMessage(content=ROUTING_USER_PROMPT),
    ]
    result = build_router(llm).invoke(routing_messages)
    return result.next_representative


def run_initial_support(llm, messages) -> SupportOutcome:
    """Draft a reply, classify the turn, and return the tagged outcome."""
    history = list(messages)
    reply = llm.invoke([SystemMessage(content=INIT_SYSTEM_PROMPT), *history])
    label = classify_next_representative(llm, history)

    logger.info("[initial_support] next_representative=%s", label)

    if label == CERTIFICATION:
        return Certification(reply=reply, followup_prompt=CERTIFICATION_SYSTEM_PROMPT)
    if label == RESPOND:
        return Respond(reply=reply)
    raise UnknownRoutingLabel(label)


def create_initial_support_node(llm):
    def initial_support(state: SupportState) -> dict:
        outcome = run_initial_support(llm, state["messages"])
        followup = outcome.followup_prompt if isinstance(outcome, Certification) else ""
        return {
            "messages": [outcome.reply],
            "next_representative": outcome.label,
            "followup_prompt": followup,
        }

    return initial_support


def trim_trailing_ai_message(messages) -> list:
    """
    Drop the last message if the assistant wrote it.

    Keeps the user's question as the most recent turn the model sees.
    At most one message is removed.
    """
    history = list(messages)
    if history and isinstance(history[-1], AIMessage):
        return history[:-1]
    return history


def create_certification_support_node(llm, system_prompt: str = CERTIFICATION_SYSTEM_PROMPT):
    """
    The node answers with the followup_prompt chosen by initial_support,
    falling back to system_prompt when the state carries none.
    """
    def certification_support(state: SupportState) -> dict:
        prompt   = state.get("followup_prompt") or system_prompt
        history  = trim_trailing_ai_message(state["messages"])
        response = llm.invoke([SystemMessage(content=prompt), *history])
        logger.info("[certification_support] answered with %d messages of context", len(history))
        return {"messages": [response]}

    return certification_support
