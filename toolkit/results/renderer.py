"""Result renderer — realizes a rendering plan as markup plus result actions."""
import logging
from dataclasses import dataclass
from typing import Any, Optional

from markupsafe import Markup

from ..browser import Window
from ..rendering import render_template
from .affordances import ResultActions
from .classifier import ErrorPlan, classify

logger = logging.getLogger(__name__)


@dataclass
class RenderedResult:
    plan: Any
    html: Markup
    actions: Optional[ResultActions] = None

    @property
    def kind(self) -> str:
        return self.plan.kind


def render_plan(plan, tool_id: str, window: Window) -> RenderedResult:
    if plan.kind in ("empty", "error"):
        actions = None
    else:
        actions = ResultActions(window, tool_id, plan.copy_text(), plan.download())
    html = render_template(
        "result.html", plan=plan, actions=actions, tool_id=tool_id, reload_href=window.location.href,
    )
    return RenderedResult(plan=plan, html=html, actions=actions)


def render_error(message: str, tool_id: str, window: Window) -> RenderedResult:
    return render_plan(ErrorPlan(message=message), tool_id, window)


def render_result(value: Any, tool_id: str, window: Window) -> RenderedResult:
    """Classify a Result and render it. Never raises."""
    try:
        plan = classify(value)
        return render_plan(plan, tool_id, window)
    except Exception as e:
        logger.error(f"Rendering result for {tool_id} failed: {e}", exc_info=True)
        return render_error(f"Could not display result: {e}", tool_id, window)
