"""Result classifier — turns a compute function's return value into a rendering plan.

Compute functions may return an explicit plan (one of the ``*Plan`` models
below); it is used as-is. Anything else is classified by shape, first match
wins:

1. ``None``                                -> empty
2. mapping with a non-empty ``error``      -> error
3. not a mapping                           -> simple
4. mapping with a well-known numeric field -> numeric
5. mapping with a homogeneous record list  -> table
6. mapping with a well-known text field    -> text
7. any other mapping                       -> generic
"""
import dataclasses
import logging
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, Field, model_validator

from .formatting import (
    format_value, humanize_key, is_number, is_scalar, join_csv, rows_to_csv, to_json,
)

logger = logging.getLogger(__name__)

# (key, label, format) in display order
MAIN_NUMERIC_FIELDS: List[Tuple[str, str, str]] = [
    ("result", "Result", "auto"),
    ("total", "Total", "currency"),
    ("amount", "Amount", "currency"),
    ("bmi", "BMI", "decimal"),
    ("rate", "Rate", "percentage"),
    ("percentage", "Percentage", "percentage"),
    ("score", "Score", "auto"),
]
NUMERIC_KEYS = tuple(k for k, _, _ in MAIN_NUMERIC_FIELDS)

TEXT_KEYS = ("text", "content", "output", "processed", "generated")
# Extra long-form fields shown as sections once a result is classified as text
TEXT_SECTION_KEYS = TEXT_KEYS + ("analysis", "summary")


class Download(BaseModel):
    filename: str
    mime_type: str
    content: str


# ── Plan models ───────────────────────────────────────────────

class EmptyPlan(BaseModel):
    kind: Literal["empty"] = "empty"

    def copy_text(self) -> Optional[str]:
        return None

    def download(self) -> Optional[Download]:
        return None


class ErrorPlan(BaseModel):
    kind: Literal["error"] = "error"
    message: str

    def copy_text(self) -> Optional[str]:
        return None

    def download(self) -> Optional[Download]:
        return None


class SimplePlan(BaseModel):
    kind: Literal["simple"] = "simple"
    value: Any = None
    display: str = ""

    @model_validator(mode="after")
    def _fill_display(self):
        if not self.display:
            self.display = format_value(self.value)
        return self

    def copy_text(self) -> Optional[str]:
        if isinstance(self.value, bool) or self.value is None:
            return self.display
        return str(self.value)

    def download(self) -> Optional[Download]:
        return None


class MetricItem(BaseModel):
    key: str
    label: str = ""
    value: Any = None
    format: str = "auto"
    display: str = ""
    description: Optional[str] = None

    @model_validator(mode="after")
    def _fill_defaults(self):
        if not self.label:
            self.label = humanize_key(self.key)
        if not self.display:
            self.display = format_value(self.value, self.format)
        return self


class NumericPlan(BaseModel):
    kind: Literal["numeric"] = "numeric"
    main: List[MetricItem] = Field(default_factory=list)
    supplementary: List[MetricItem] = Field(default_factory=list)
    data: Dict[str, Any] = Field(default_factory=dict)

    def copy_text(self) -> Optional[str]:
        if self.data:
            return to_json(self.data)
        return to_json({m.key: m.value for m in self.main + self.supplementary})

    def download(self) -> Optional[Download]:
        return None


class Table(BaseModel):
    key: str
    title: str = ""
    headers: List[str]
    rows: List[List[Any]] = Field(default_factory=list)

    @model_validator(mode="after")
    def _fill_title(self):
        if not self.title:
            self.title = humanize_key(self.key)
        return self

    @property
    def header_labels(self) -> List[str]:
        return [humanize_key(h) for h in self.headers]

    def to_csv(self) -> str:
        return rows_to_csv(self.headers, self.rows)


class TablePlan(BaseModel):
    kind: Literal["table"] = "table"
    tables: List[Table] = Field(default_factory=list)
    data: Dict[str, Any] = Field(default_factory=dict)

    def to_csv(self) -> str:
        return join_csv([t.to_csv() for t in self.tables])

    def copy_text(self) -> Optional[str]:
        if self.data:
            return to_json(self.data)
        return to_json({t.key: [dict(zip(t.headers, row)) for row in t.rows] for t in self.tables})

    def download(self) -> Optional[Download]:
        return Download(filename="results.csv", mime_type="text/csv", content=self.to_csv())


class TextSection(BaseModel):
    key: str
    title: str = ""
    content: str
    is_markup: bool = False

    @model_validator(mode="after")
    def _fill_title(self):
        if not self.title:
            self.title = humanize_key(self.key)
        return self


class TextPlan(BaseModel):
    kind: Literal["text"] = "text"
    sections: List[TextSection] = Field(default_factory=list)

    def joined(self) -> str:
        return "\n\n".join(s.content for s in self.sections)

    def copy_text(self) -> Optional[str]:
        return self.joined()

    def download(self) -> Optional[Download]:
        return Download(filename="results.txt", mime_type="text/plain", content=self.joined())


class GenericEntry(BaseModel):
    key: str
    label: str
    value: Any = None
    display: str
    structured: bool = False


class GenericPlan(BaseModel):
    kind: Literal["generic"] = "generic"
    entries: List[GenericEntry] = Field(default_factory=list)
    data: Dict[str, Any] = Field(default_factory=dict)

    def copy_text(self) -> Optional[str]:
        return to_json(self.data or {e.key: e.value for e in self.entries})

    def download(self) -> Optional[Download]:
        return None


RenderingPlan = Annotated[
    Union[EmptyPlan, ErrorPlan, SimplePlan, NumericPlan, TablePlan, TextPlan, GenericPlan],
    Field(discriminator="kind"),
]
PLAN_TYPES = (EmptyPlan, ErrorPlan, SimplePlan, NumericPlan, TablePlan, TextPlan, GenericPlan)


class PlanEnvelope(BaseModel):
    """Wrapper used to validate a plan from plain data (e.g. JSON)."""
    plan: RenderingPlan


# ── Normalisation ─────────────────────────────────────────────

def normalize(value: Any) -> Any:
    """Bring models, dataclasses and top-level lists into mapping form."""
    if isinstance(value, BaseModel):
        return value.model_dump()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (list, tuple)):
        return {"items": list(value)}
    return value


# ── Shape predicates ──────────────────────────────────────────

def has_numeric_results(record: Mapping[str, Any]) -> bool:
    return any(is_number(record.get(k)) for k in NUMERIC_KEYS)


def is_record_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0 and isinstance(value[0], Mapping)


def is_homogeneous_record_list(value: Any) -> bool:
    """Every element is a mapping with exactly the first element's keys."""
    if not is_record_list(value):
        return False
    keys = set(value[0].keys())
    return all(isinstance(item, Mapping) and set(item.keys()) == keys for item in value)


def has_table_data(record: Mapping[str, Any]) -> bool:
    return any(is_homogeneous_record_list(v) for v in record.values())


def has_text_results(record: Mapping[str, Any]) -> bool:
    return any(isinstance(record.get(k), str) for k in TEXT_KEYS)


def _is_description_key(key: str) -> bool:
    return key.endswith("Description") or key.endswith("_description")


# ── Plan builders ─────────────────────────────────────────────

def build_numeric_plan(record: Mapping[str, Any]) -> NumericPlan:
    main = []
    for key, label, fmt in MAIN_NUMERIC_FIELDS:
        if key not in record:
            continue
        description = record.get(f"{key}Description") or record.get(f"{key}_description")
        main.append(MetricItem(
            key=key, label=label, value=record[key], format=fmt,
            description=str(description) if description else None,
        ))

    main_keys = {m.key for m in main}
    supplementary = [
        MetricItem(key=key, value=value)
        for key, value in record.items()
        if key not in main_keys and key != "error" and not _is_description_key(key)
        and value is not None and is_scalar(value)
    ]
    return NumericPlan(main=main, supplementary=supplementary, data=dict(record))


def build_table_plan(record: Mapping[str, Any]) -> TablePlan:
    tables = []
    for key, value in record.items():
        if not is_homogeneous_record_list(value):
            continue
        headers = list(value[0].keys())
        rows = [[item.get(h) for h in headers] for item in value]
        tables.append(Table(key=key, headers=headers, rows=rows))
    return TablePlan(tables=tables, data=dict(record))


def build_text_plan(record: Mapping[str, Any]) -> TextPlan:
    sections = [
        TextSection(key=key, content=record[key], is_markup="<" in record[key])
        for key in TEXT_SECTION_KEYS
        if isinstance(record.get(key), str)
    ]
    return TextPlan(sections=sections)


def build_generic_plan(record: Mapping[str, Any]) -> GenericPlan:
    entries = []
    for key, value in record.items():
        if key == "error":
            continue
        structured = not is_scalar(value)
        entries.append(GenericEntry(
            key=str(key),
            label=humanize_key(key),
            value=value,
            display=to_json(value) if structured else format_value(value),
            structured=structured,
        ))
    return GenericPlan(entries=entries, data={k: v for k, v in record.items() if k != "error"})


def classify(value: Any):
    """Return the rendering plan for a Result value."""
    if isinstance(value, PLAN_TYPES):
        return value

    value = normalize(value)

    if value is None:
        return EmptyPlan()

    if not isinstance(value, Mapping):
        return SimplePlan(value=value)

    if value.get("error"):
        return ErrorPlan(message=str(value["error"]))

    if has_numeric_results(value):
        plan = build_numeric_plan(value)
    elif has_table_data(value):
        plan = build_table_plan(value)
    elif has_text_results(value):
        plan = build_text_plan(value)
    else:
        if any(is_record_list(v) for v in value.values()):
            logger.info("Record list with mismatched keys, using generic layout")
        plan = build_generic_plan(value)

    logger.debug(f"Classified result as {plan.kind}")
    return plan
