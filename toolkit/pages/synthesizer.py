"""Page synthesizer — builds a tool's interactive page from its descriptor.

Each field type maps to one macro in ``fields.html``. Types without a macro
degrade to a plain text input, so a descriptor with an unexpected type still
yields a usable form.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from markupsafe import Markup

from ..rendering import render_template, template_macro
from ..tools.registry import FieldDescriptor, ToolDescriptor

logger = logging.getLogger(__name__)

# field type -> (macro name, input type passed to the "input" macro)
FIELD_CONTROLS: Dict[str, tuple] = {
    "text": ("input", "text"),
    "number": ("input", "number"),
    "email": ("input", "email"),
    "url": ("input", "url"),
    "password": ("input", "password"),
    "color": ("input", "color"),
    "date": ("input", "date"),
    "time": ("input", "time"),
    "datetime-local": ("input", "datetime-local"),
    "textarea": ("textarea", None),
    "select": ("select", None),
    "checkbox": ("checkbox", None),
    "range": ("range", None),
    "file": ("file", None),
}
FALLBACK_CONTROL = ("input", "text")

COMMON_FEATURES = [
    "Fast processing",
    "No sign-up required",
    "Copy and download your results",
    "Mobile-responsive design",
]

CATEGORY_FEATURES: Dict[str, List[str]] = {
    "calculators": [
        "Real-time calculations",
        "Detailed step-by-step results",
        "Multiple input formats supported",
        "Accurate mathematical computations",
    ],
    "converters": [
        "Bidirectional conversion",
        "Multiple unit systems",
        "Precision control",
        "Historical conversion rates",
    ],
    "generators": [
        "Customizable output formats",
        "Bulk generation support",
        "Export functionality",
        "Template system",
    ],
    "business": [
        "Professional formatting",
        "Export to multiple formats",
        "Template customization",
        "Business logic validation",
    ],
}

USE_CASES: Dict[str, List[str]] = {
    "tip-calculator": [
        "Restaurant bill splitting",
        "Service industry calculations",
        "Group dining expenses",
        "Delivery fee calculations",
    ],
    "mortgage-calculator": [
        "Home buying planning",
        "Refinancing analysis",
        "Payment schedule planning",
        "Interest rate comparisons",
    ],
    "bmi-calculator": [
        "Health assessments",
        "Fitness goal planning",
        "Medical consultations",
        "Wellness tracking",
    ],
    "length-converter": [
        "International measurements",
        "Construction projects",
        "Recipe conversions",
        "Scientific calculations",
    ],
    "color-converter": [
        "Web development",
        "Graphic design",
        "Print design",
        "Brand color matching",
    ],
}

DEFAULT_USE_CASES = [
    "Professional workflows",
    "Educational purposes",
    "Personal projects",
    "Business applications",
]


def tool_features(tool: ToolDescriptor) -> List[str]:
    return COMMON_FEATURES + CATEGORY_FEATURES.get(tool.category, [])


def tool_use_cases(tool: ToolDescriptor) -> List[str]:
    return USE_CASES.get(tool.id, DEFAULT_USE_CASES)


def _field_value(field: FieldDescriptor, values: Optional[Mapping[str, Any]]) -> Any:
    """Value a control shows: the submitted one after a POST, else the default."""
    if field.type == "file":
        return None
    if values is None:
        return field.default_value
    if field.type == "checkbox":
        raw = values.get(field.name)
        if isinstance(raw, str):
            return raw.strip().lower() in ("true", "on", "1", "yes")
        return bool(raw)
    return values.get(field.name, field.default_value)


class PageSynthesizer:
    def render_field(self, field: FieldDescriptor, values: Optional[Mapping[str, Any]] = None) -> Markup:
        macro_name, input_type = FIELD_CONTROLS.get(field.type, FALLBACK_CONTROL)
        if field.type not in FIELD_CONTROLS:
            logger.debug(f"Unknown field type {field.type!r} for {field.name}, rendering as text")
        macro = template_macro("fields.html", macro_name)
        value = _field_value(field, values)
        if input_type is not None:
            return Markup(macro(field, value, input_type))
        return Markup(macro(field, value))

    def render_fields(self, tool: ToolDescriptor, values: Optional[Mapping[str, Any]] = None) -> List[Markup]:
        return [self.render_field(f, values) for f in tool.fields]

    def render(
        self,
        tool: ToolDescriptor,
        result=None,
        values: Optional[Mapping[str, Any]] = None,
        related: Sequence[ToolDescriptor] = (),
    ) -> Markup:
        """Full page fragment for one tool.

        ``result`` is a RenderedResult painted into ``#tool-results``; with no
        result (or an empty one) the region stays hidden behind a placeholder.
        """
        shown = result if result is not None and result.kind != "empty" else None
        return render_template(
            "tool_page.html",
            tool=tool,
            controls=self.render_fields(tool, values),
            multipart=any(f.type == "file" for f in tool.fields),
            result=shown,
            features=tool_features(tool),
            use_cases=tool_use_cases(tool),
            related=list(related),
        )


_default = PageSynthesizer()


def render_tool_page(tool: ToolDescriptor, result=None, values=None, related=()) -> Markup:
    return _default.render(tool, result=result, values=values, related=related)
