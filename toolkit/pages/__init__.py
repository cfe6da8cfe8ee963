"""Tool page synthesis."""
from .synthesizer import PageSynthesizer, render_tool_page

__all__ = ["PageSynthesizer", "render_tool_page"]
