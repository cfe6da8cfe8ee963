"""Tool system — registry, executor, builtin tool sets."""
from .registry import (
    FieldConstraints, FieldDescriptor, FieldOption, ToolDescriptor, ToolRegistry, ToolSet, build_registry,
)
from .executor import execute_tool
from .builtin import builtin_tool_sets
