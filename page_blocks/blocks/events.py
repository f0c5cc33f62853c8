"""Bloc Events — liste ou grille d'évènements à venir."""
from typing import ClassVar, List, Literal, Optional
from pydantic import BaseModel, Field
from .base import BaseBlock, BlockConfig


class EventItem(BaseModel):
    title: str = ""
    date: str = ""
    time: str = ""
    location: str = ""
    description: str = ""


class EventsConfig(BlockConfig):
    variant: ClassVar[str] = "events"

    title: Optional[str] = None
    layout: Literal["list", "grid"] = "grid"
    events: List[EventItem] = Field(default_factory=list)


class EventsBlock(BaseBlock):
    type: Literal["events"] = "events"
    config: EventsConfig = Field(default_factory=EventsConfig)
