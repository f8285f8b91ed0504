"""LangGraph state definition for the pipeline driver.

Defines ``PipelineGraphState``, a ``TypedDict`` that flows through the
LangGraph ``StateGraph``.  The ``visited`` channel uses
``Annotated[list, operator.add]`` so each node appends the stage it handled
without overwriting earlier entries.

Note: We intentionally do NOT use ``from __future__ import annotations`` because
LangGraph needs to resolve type hints at runtime via ``get_type_hints()``.
"""

import operator
from typing import Annotated, TypedDict

from patent_pipeline.domain.entities import PipelineRun


class PipelineGraphState(TypedDict, total=False):
    """State flowing through the pipeline graph.

    * ``run`` -- the current immutable :class:`PipelineRun`; every node
      replaces it.
    * ``stop_reason`` -- set when a node could not move the run forward
      (``"error"`` or ``"stalled"``); routing ends the graph when present.
    * ``visited`` -- stage names in the order their nodes executed.
    """

    run: PipelineRun
    stop_reason: str
    visited: Annotated[list, operator.add]
