"""
Support State
=============
Defines the state that flows through the support routing graph, the
structured-output schema used to classify a turn, and the tagged outcome
of the initial support step.

add_messages is a reducer: each node returns only the messages it adds and
LangGraph appends them, so no node mutates the history it was given.
"""
from dataclasses import dataclass
from typing import Annotated, ClassVar, Literal, Sequence, Union

from langchain_core.messages import BaseMessage
from langgraph.graph.message import add_messages
from pydantic import BaseModel, Field
from typing_extensions import TypedDict

RoutingLabel = Literal["RESPOND", "CERTIFICATION"]

RESPOND: RoutingLabel = "RESPOND"
CERTIFICATION: RoutingLabel = "CERTIFICATION"


class SupportState(TypedDict):
    messages: Annotated[Sequence[BaseMessage], add_messages]
    # Written by initial_support, read once by route_after_initial_support.
    next_representative: str
    # System prompt of the Certification outcome, "" after a Respond outcome.
    followup_prompt: str
    refund_authorized: bool


class RouteUserRequest(BaseModel):
    """Route the user's request to the right representative."""

    next_representative: RoutingLabel = Field(
        description="CERTIFICATION if the user needs KC certification help, otherwise RESPOND"
    )


@dataclass(frozen=True)
class Respond:
    reply: BaseMessage
    label: ClassVar[RoutingLabel] = RESPOND


@dataclass(frozen=True)
class Certification:
    reply: BaseMessage
    followup_prompt: str
    label: ClassVar[RoutingLabel] = CERTIFICATION


SupportOutcome = Union[Respond, Certification]
