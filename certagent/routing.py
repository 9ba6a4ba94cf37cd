"""
Routing Functions
=================
Pure functions that turn the classifier's label into an edge name.
LangGraph calls route_after_initial_support at the only conditional edge.

Graph routing map:
  initial_support → route_after_initial_support → "certification" | "conversational"

  "certification"  → certification_support
  "conversational" → END
"""
from typing import Literal

from langgraph.graph import END

from .state import CERTIFICATION, RESPOND, SupportState

ROUTE_MAP = {
    "certification":  "certification_support",
    "conversational": END,
}


class UnknownRoutingLabel(ValueError):
    """Raised when the classifier produced a label outside RESPOND / CERTIFICATION."""

    def __init__(self, label):
        super().__init__(f"Unknown routing label: {label!r}")
        self.label = label


def route_for_label(label: str) -> Literal["certification", "conversational"]:
    if label == CERTIFICATION:
        return "certification"
    if label == RESPOND:
        return "conversational"
    raise UnknownRoutingLabel(label)


def route_after_initial_support(
    state: SupportState,
) -> Literal["certification", "conversational"]:
    """Read the label written by initial_support and pick the outgoing edge."""
    return route_for_label(state.get("next_representative"))
