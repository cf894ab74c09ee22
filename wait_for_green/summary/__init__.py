"""Job summary rendering and step outputs."""

from wait_for_green.summary.outputs import ActionOutputs
from wait_for_green.summary.renderer import (
    SummaryRenderer,
    SummaryRow,
    SummarySection,
    escape_cell,
    escape_link_target,
)


__all__ = [
    "ActionOutputs",
    "SummaryRenderer",
    "SummaryRow",
    "SummarySection",
    "escape_cell",
    "escape_link_target",
]
