"""Tool registry — tool descriptors, decorator-based tool sets, and catalog lookup."""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from ..errors import RegistryNotReady

logger = logging.getLogger(__name__)

DEFAULT_ICON = "🛠️"

CATEGORY_NAMES: Dict[str, str] = {
    "calculators": "Calculators",
    "converters": "Converters",
    "generators": "Generators",
    "utilities": "Text & Utilities",
    "design": "Design Tools",
    "visualization": "Charts & Visualization",
    "media": "Image Tools",
    "business": "Business Tools",
    "health": "Health & Fitness",
    "finance": "Finance",
    "math": "Math & Science",
    "text": "Text Tools",
    "color": "Color Tools",
    "data": "Data Tools",
    "dev": "Developer Tools",
    "security": "Security Tools",
    "image": "Image Tools",
    "charts": "Charts",
}


def category_display_name(category: str) -> str:
    """Human name for a category; unknown ones are capitalized."""
    if category in CATEGORY_NAMES:
        return CATEGORY_NAMES[category]
    return category[:1].upper() + category[1:]


@dataclass
class FieldOption:
    value: str
    label: str


@dataclass
class FieldConstraints:
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[Union[float, str]] = None  # number or "any"


@dataclass
class FieldDescriptor:
    name: str
    label: str = ""
    type: str = "text"
    required: bool = False
    default_value: Any = None
    options: List[FieldOption] = field(default_factory=list)
    constraints: Optional[FieldConstraints] = None
    placeholder: Optional[str] = None
    accept: Optional[str] = None
    multiple: bool = False

    def __post_init__(self):
        if not self.label:
            self.label = self.name

    @property
    def min(self) -> Optional[float]:
        return self.constraints.min if self.constraints else None

    @property
    def max(self) -> Optional[float]:
        return self.constraints.max if self.constraints else None

    @property
    def step(self) -> Optional[Union[float, str]]:
        return self.constraints.step if self.constraints else None

    def problems(self) -> List[str]:
        """Schema violations for this field. Empty when the field is well formed."""
        found = []
        if self.type == "select" and not self.options:
            found.append(f"select field {self.name!r} has no options")
        if self.type == "range" and self.min is not None and self.max is not None and self.min >= self.max:
            found.append(f"range field {self.name!r} needs min < max")
        return found


ComputeFn = Callable[[Dict[str, Any]], Any]


@dataclass
class ToolDescriptor:
    id: str
    name: str
    description: str
    category: str
    compute: ComputeFn
    fields: List[FieldDescriptor] = field(default_factory=list)
    icon: str = DEFAULT_ICON

    @property
    def path(self) -> str:
        return f"/tools/{self.category}/{self.id}"

    @property
    def category_name(self) -> str:
        return category_display_name(self.category)

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def problems(self) -> List[str]:
        found = []
        seen = set()
        for f in self.fields:
            if f.name in seen:
                found.append(f"duplicate field name {f.name!r}")
            seen.add(f.name)
            found.extend(f.problems())
        return found


class ToolSet:
    """Tools declared by one tool-defining module, included into a registry later.

        tools = ToolSet("health")

        @tools.tool("bmi-calculator", "BMI Calculator", fields=[...])
        def bmi(data): ...
    """

    def __init__(self, category: str = ""):
        self.category = category
        self.tools: List[ToolDescriptor] = []

    def tool(
        self,
        id: str,
        name: str,
        description: str = "",
        fields: Optional[List[FieldDescriptor]] = None,
        icon: str = DEFAULT_ICON,
        category: str = "",
    ):
        """Decorator to declare a compute function as a tool."""
        def decorator(func):
            self.tools.append(ToolDescriptor(
                id=id,
                name=name,
                description=description or (func.__doc__ or "").strip(),
                category=category or self.category,
                compute=func,
                fields=fields or [],
                icon=icon,
            ))
            return func
        return decorator

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self.tools)


class ToolRegistry:
    """In-memory catalog of tool descriptors keyed by id."""

    def __init__(self):
        self._tools: Dict[str, ToolDescriptor] = {}
        self._ready = asyncio.Event()

    def register(self, descriptor: ToolDescriptor) -> ToolDescriptor:
        if not descriptor.id:
            raise ValueError("Tool must have an ID")
        if descriptor.id in self._tools:
            logger.info(f"Overwriting tool: {descriptor.id}")
        for problem in descriptor.problems():
            logger.warning(f"Tool {descriptor.id}: {problem}")
        self._tools[descriptor.id] = descriptor
        logger.debug(f"Registered tool: {descriptor.id} ({descriptor.category})")
        return descriptor

    def include(self, tool_set: ToolSet) -> None:
        for descriptor in tool_set:
            self.register(descriptor)

    def get(self, tool_id: str) -> Optional[ToolDescriptor]:
        return self._tools.get(tool_id)

    def all(self) -> Iterator[ToolDescriptor]:
        return iter(list(self._tools.values()))

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, tool_id: str) -> bool:
        return tool_id in self._tools

    def count(self) -> int:
        return len(self._tools)

    def categories(self) -> List[str]:
        seen: Dict[str, None] = {}
        for tool in self._tools.values():
            seen.setdefault(tool.category, None)
        return list(seen)

    def by_category(self, category: str) -> List[ToolDescriptor]:
        return [t for t in self._tools.values() if t.category == category]

    def category_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for tool in self._tools.values():
            counts[tool.category] = counts.get(tool.category, 0) + 1
        return counts

    def search(self, query: str) -> List[ToolDescriptor]:
        """Case-insensitive substring match on name, description and category."""
        term = query.lower()
        return [
            t for t in self._tools.values()
            if term in t.name.lower() or term in t.description.lower() or term in t.category.lower()
        ]

    # ── Readiness ────────────────────────────────────────────

    def mark_ready(self) -> None:
        if not self._tools:
            logger.warning("Registry marked ready with no tools")
        self._ready.set()
        logger.info(f"Tool registry ready: {len(self._tools)} tools in {len(self.categories())} categories")

    @property
    def ready(self) -> bool:
        return self._ready.is_set()

    async def wait_ready(self, timeout: Optional[float] = None) -> None:
        try:
            await asyncio.wait_for(self._ready.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            raise RegistryNotReady(f"Tool registry not ready after {timeout}s") from None


def build_registry(*tool_sets: ToolSet) -> ToolRegistry:
    """Create a registry from the given tool sets and signal readiness."""
    registry = ToolRegistry()
    for tool_set in tool_sets:
        registry.include(tool_set)
    registry.mark_ready()
    return registry
