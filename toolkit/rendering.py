"""Jinja2 environment shared by every page and result template.

Autoescape is always on: any value interpolated into a template is escaped
unless it is already ``Markup`` produced by another template.
"""
import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from .config import settings
from .results.formatting import format_value, humanize_key
from .tools.registry import DEFAULT_ICON, category_display_name

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"

def attr_number(value):
    """Numbers as they should appear in HTML attributes (``5`` not ``5.0``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(enabled_extensions=("html", "xml"), default=True),
    trim_blocks=True,
    lstrip_blocks=True,
)
env.filters["attr_number"] = attr_number
env.filters["humanize"] = humanize_key
env.filters["format_value"] = format_value
env.filters["category_name"] = category_display_name
env.globals["site_name"] = settings.site_name
env.globals["default_icon"] = DEFAULT_ICON
env.globals["feedback_ms"] = int(settings.copy_feedback_seconds * 1000)


def render_template(name: str, **context) -> Markup:
    """Render a template to a safe markup fragment."""
    return Markup(env.get_template(name).render(**context))


def template_macro(template: str, macro: str):
    """Look up a macro exported by a template (e.g. one control per field type)."""
    return getattr(env.get_template(template).module, macro)
