from pydantic import BaseModel
from typing import List

from .results.classifier import RenderingPlan


class ToolSummary(BaseModel):
    id: str
    name: str
    description: str
    category: str
    icon: str
    path: str


class ToolList(BaseModel):
    tools: List[ToolSummary]
    count: int


class RunResponse(BaseModel):
    tool_id: str
    plan: RenderingPlan
    html: str


class Health(BaseModel):
    ok: bool
    tools: int
