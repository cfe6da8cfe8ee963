"""Builtin tool sets shipped with the toolkit."""
from .calculators import tools as calculator_tools
from .converters import tools as converter_tools
from .generators import tools as generator_tools
from .health import tools as health_tools
from .text import tools as text_tools


def builtin_tool_sets():
    return [calculator_tools, health_tools, converter_tools, text_tools, generator_tools]
