"""Bloc Leadership — membres du comité avec photo optionnelle."""
from typing import ClassVar, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from .base import BaseBlock, BlockConfig
from ..errors import InvalidConfig


class LeadershipMember(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = ""
    role: str = ""
    year: str = ""
    course: str = ""
    image_url: Optional[str] = None

    def initials(self) -> str:
        return "".join(part[0] for part in self.name.split() if part).upper()


class LeadershipConfig(BlockConfig):
    variant: ClassVar[str] = "leadership"

    title: Optional[str] = None
    layout: Literal["grid", "list"] = "grid"
    members: List[LeadershipMember] = Field(default_factory=list)

    def asset_refs(self) -> List[str]:
        return [m.image_url for m in self.members if m.image_url]

    def _check_slot(self, slot: int) -> None:
        if not 0 <= slot < len(self.members):
            raise InvalidConfig("leadership", f"slot membre {slot} hors limites ({len(self.members)} membres)")

    def asset_at(self, slot: int) -> Optional[str]:
        self._check_slot(slot)
        return self.members[slot].image_url

    def with_asset(self, slot: int, ref: str) -> "LeadershipConfig":
        self._check_slot(slot)
        members = list(self.members)
        members[slot] = members[slot].model_copy(update={"image_url": ref})
        return self.model_copy(update={"members": members})


class LeadershipBlock(BaseBlock):
    type: Literal["leadership"] = "leadership"
    config: LeadershipConfig = Field(default_factory=LeadershipConfig)
