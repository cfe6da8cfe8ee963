"""Shared fixtures: a small tool catalog covering every result shape."""
import pytest

from toolkit.browser import Capabilities, Window
from toolkit.compositor import CatalogCompositor
from toolkit.router import Router
from toolkit.tools.registry import (
    FieldConstraints, FieldDescriptor, FieldOption, ToolSet, build_registry,
)

sample_tools = ToolSet("health")


@sample_tools.tool(
    "bmi-calculator",
    "BMI Calculator",
    description="Calculate Body Mass Index",
    icon="⚖️",
    fields=[
        FieldDescriptor("weight", "Weight", "number", required=True, constraints=FieldConstraints(min=0, step=0.1)),
        FieldDescriptor("height", "Height", "number", required=True, constraints=FieldConstraints(min=0, step=0.1)),
    ],
)
def bmi(data):
    return {"bmi": data["weight"] / (data["height"] / 100) ** 2, "category": "Normal"}


@sample_tools.tool(
    "picker",
    "Option Picker",
    description="Echo the chosen option",
    category="utilities",
    fields=[
        FieldDescriptor("choice", "Choice", "select", default_value="b", options=[
            FieldOption("a", "A"), FieldOption("b", "B"), FieldOption("c", "C"),
        ]),
    ],
)
def picker(data):
    return data["choice"]


@sample_tools.tool("broken", "Broken Tool", description="Always fails", category="utilities")
def broken(data):
    raise RuntimeError("division by zero")


@sample_tools.tool("schedule", "Schedule", description="Returns a table", category="calculators")
def schedule(data):
    return {"rows": [{"a": 1, "b": 2}, {"a": 3, "b": 4}]}


@pytest.fixture
def tool_sets():
    return [sample_tools]


@pytest.fixture
def registry(tool_sets):
    return build_registry(*tool_sets)


@pytest.fixture
def compositor(registry):
    comp = CatalogCompositor(registry)
    comp.build()
    return comp


@pytest.fixture
def routes(compositor):
    return compositor.routes


@pytest.fixture
def window():
    return Window(origin="http://localhost", path="/")


@pytest.fixture
def router(window, routes, registry):
    return Router(window, routes, registry)


@pytest.fixture
def clipboard_window():
    copied = []

    async def writer(text):
        copied.append(text)

    win = Window(capabilities=Capabilities(clipboard=True, clipboard_writer=writer))
    win.copied = copied
    return win
