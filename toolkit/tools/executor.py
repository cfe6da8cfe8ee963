"""Tool executor — coerces submitted form data and runs a tool's compute function."""
import logging
import math
import time
from typing import Any, Dict, Mapping, Optional

from .registry import FieldDescriptor, ToolDescriptor

logger = logging.getLogger(__name__)

NUMERIC_TYPES = ("number", "range")
_TRUTHY = ("true", "on", "1", "yes")


class FieldError(ValueError):
    """A submitted value does not satisfy its field descriptor."""


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _to_number(field: FieldDescriptor, raw: Any):
    if isinstance(raw, bool):
        raise FieldError(f"{field.label} must be a number")
    if isinstance(raw, (int, float)):
        num = raw
    else:
        try:
            num = float(str(raw).strip())
        except ValueError:
            raise FieldError(f"{field.label} must be a number") from None
    if isinstance(num, float) and not math.isfinite(num):
        raise FieldError(f"{field.label} must be a finite number")
    if isinstance(num, float) and num.is_integer() and field.step not in ("any",) and _integral_step(field):
        num = int(num)
    if field.min is not None and num < field.min:
        raise FieldError(f"{field.label} must be at least {field.min:g}")
    if field.max is not None and num > field.max:
        raise FieldError(f"{field.label} must be at most {field.max:g}")
    return num


def _integral_step(field: FieldDescriptor) -> bool:
    step = field.step
    if step is None:
        return field.type == "range"
    try:
        return float(step).is_integer()
    except (TypeError, ValueError):
        return False


def coerce_value(field: FieldDescriptor, raw: Any) -> Any:
    """Convert one submitted value to the Python type implied by the field."""
    if field.type == "checkbox":
        if isinstance(raw, bool):
            return raw
        return str(raw).strip().lower() in _TRUTHY if raw is not None else False
    if _is_blank(raw):
        if field.required:
            raise FieldError(f"{field.label} is required")
        return None
    if field.type in NUMERIC_TYPES:
        return _to_number(field, raw)
    if field.type == "select" and field.options and not field.multiple:
        allowed = {o.value for o in field.options}
        if str(raw) not in allowed:
            raise FieldError(f"{field.label}: {raw!r} is not a valid choice")
        return str(raw)
    if field.type == "file" or field.multiple:
        return raw
    return raw if isinstance(raw, str) else str(raw)


def coerce_input(tool: ToolDescriptor, data: Mapping[str, Any]) -> Dict[str, Any]:
    """Build the compute input record from raw submitted data.

    Declared fields are coerced (unchecked checkboxes become False, numbers
    become int/float). Undeclared keys pass through untouched.
    """
    record: Dict[str, Any] = {}
    for field in tool.fields:
        record[field.name] = coerce_value(field, data.get(field.name))
    for key, value in data.items():
        if key not in record:
            record[key] = value
    return record


def execute_tool(tool: Optional[ToolDescriptor], data: Mapping[str, Any]) -> Any:
    """Run a tool against submitted data. Never raises.

    Returns whatever the compute function returns, or an error record
    ``{"error": message}`` for unknown tools, invalid input and exceptions.
    """
    if tool is None:
        logger.warning("Submission for unknown tool")
        return {"error": "Tool not found"}

    try:
        record = coerce_input(tool, data)
    except FieldError as e:
        logger.info(f"Tool {tool.id}: invalid input: {e}")
        return {"error": str(e)}

    arg_str = ", ".join(f"{k}={v!r}" for k, v in record.items() if not hasattr(v, "read"))
    logger.info(f"Executing tool: {tool.id}({arg_str})")
    t0 = time.monotonic()

    try:
        result = tool.compute(record)
    except Exception as e:
        logger.error(f"Tool {tool.id} failed: {e}", exc_info=True)
        result = {"error": str(e) or e.__class__.__name__}

    elapsed = time.monotonic() - t0
    logger.info(f"Tool {tool.id}: {elapsed * 1000:.1f}ms")
    return result
