from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, confloat
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for documents exchanged with the site, which uses camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Action(CamelModel):
    type: Literal["action"] = "action"
    id: str
    instruction: str = ""
    start_minute: confloat(ge=0)
    duration_minutes: confloat(ge=0) = 0
    is_critical_path: bool = False
    # shared equipment label, e.g. "stovetop"; only shown, never enforced
    resource: Optional[str] = None
    image: Optional[str] = None

    @property
    def end_minute(self) -> float:
        return self.start_minute + self.duration_minutes


class ParallelBlock(CamelModel):
    type: Literal["parallel"] = "parallel"
    id: str
    start_minute: confloat(ge=0)
    actions: List[Action] = []


TimelineItem = Annotated[Union[Action, ParallelBlock], Field(discriminator="type")]


class CookingProcess(CamelModel):
    recipe_slug: str
    total_duration_minutes: confloat(ge=0)
    timeline: List[TimelineItem] = []
    finish_criteria: Optional[str] = None
