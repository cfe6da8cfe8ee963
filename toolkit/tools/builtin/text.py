"""Text utilities."""
import json
import re

from ..registry import FieldDescriptor, FieldOption, ToolSet

tools = ToolSet("utilities")

CASES = {
    "upper": str.upper,
    "lower": str.lower,
    "title": str.title,
    "sentence": lambda s: s[:1].upper() + s[1:].lower(),
}


@tools.tool(
    "word-counter",
    "Word Counter",
    description="Count words, characters, sentences and paragraphs",
    icon="📝",
    fields=[FieldDescriptor("text", "Text", "textarea", required=True, placeholder="Paste your text here...")],
)
def word_counter(data):
    text = data["text"]
    words = text.split()
    return {
        "words": len(words),
        "characters": len(text),
        "charactersNoSpaces": len(re.sub(r"\s", "", text)),
        "sentences": len([s for s in re.split(r"[.!?]+", text) if s.strip()]),
        "paragraphs": len([p for p in re.split(r"\n\s*\n", text) if p.strip()]),
        "readingTime": f"{max(1, round(len(words) / 200))} min",
    }


@tools.tool(
    "case-converter",
    "Case Converter",
    description="Convert text to upper, lower, title or sentence case",
    icon="🔠",
    fields=[
        FieldDescriptor("text", "Text", "textarea", required=True),
        FieldDescriptor("case", "Case", "select", required=True, default_value="upper",
                        options=[FieldOption(k, k.title()) for k in CASES]),
    ],
)
def case_converter(data):
    return {"output": CASES[data["case"]](data["text"])}


@tools.tool(
    "json-formatter",
    "JSON Formatter",
    description="Validate and pretty-print JSON",
    icon="🧾",
    category="dev",
    fields=[
        FieldDescriptor("json", "JSON", "textarea", required=True, placeholder='{"key": "value"}'),
        FieldDescriptor("sortKeys", "Sort keys", "checkbox"),
    ],
)
def json_formatter(data):
    try:
        parsed = json.loads(data["json"])
    except json.JSONDecodeError as e:
        return {"error": f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})"}
    return {"output": json.dumps(parsed, indent=2, sort_keys=data["sortKeys"], ensure_ascii=False)}
