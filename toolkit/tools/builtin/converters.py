"""Unit and colour converters."""
import colorsys
import re

from ..registry import FieldConstraints, FieldDescriptor, FieldOption, ToolSet

tools = ToolSet("converters")

# metres per unit
LENGTH_UNITS = {
    "mm": ("Millimeters", 0.001),
    "cm": ("Centimeters", 0.01),
    "m": ("Meters", 1.0),
    "km": ("Kilometers", 1000.0),
    "in": ("Inches", 0.0254),
    "ft": ("Feet", 0.3048),
    "yd": ("Yards", 0.9144),
    "mi": ("Miles", 1609.344),
}

_UNIT_OPTIONS = [FieldOption(key, label) for key, (label, _) in LENGTH_UNITS.items()]
_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


@tools.tool(
    "length-converter",
    "Length Converter",
    description="Convert between metric and imperial length units",
    icon="📏",
    fields=[
        FieldDescriptor("value", "Value", "number", required=True, default_value=1, constraints=FieldConstraints(step="any")),
        FieldDescriptor("from", "From", "select", required=True, default_value="m", options=_UNIT_OPTIONS),
        FieldDescriptor("to", "To", "select", required=True, default_value="ft", options=_UNIT_OPTIONS),
    ],
)
def length_converter(data):
    metres = data["value"] * LENGTH_UNITS[data["from"]][1]
    converted = metres / LENGTH_UNITS[data["to"]][1]
    return {
        "result": round(converted, 6),
        "resultDescription": f"{data['value']:g} {data['from']} in {data['to']}",
        "meters": round(metres, 6),
    }


def parse_hex(value: str):
    match = _HEX_COLOR.match(value.strip())
    if not match:
        raise ValueError(f"Not a hex colour: {value}")
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))


@tools.tool(
    "color-converter",
    "Color Converter",
    description="Convert colours between HEX, RGB and HSL",
    icon="🎨",
    category="design",
    fields=[
        FieldDescriptor("color", "Color", "color", required=True, default_value="#3b82f6"),
    ],
)
def color_converter(data):
    r, g, b = parse_hex(data["color"])
    h, l, s = colorsys.rgb_to_hls(r / 255, g / 255, b / 255)
    return {
        "hex": "#{:02x}{:02x}{:02x}".format(r, g, b),
        "rgb": f"rgb({r}, {g}, {b})",
        "hsl": f"hsl({round(h * 360)}, {round(s * 100)}%, {round(l * 100)}%)",
        "components": {"red": r, "green": g, "blue": b},
    }
