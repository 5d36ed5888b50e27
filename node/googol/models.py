from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_serializer, field_validator

from .config import ONE_GOOGOL, POLL_DURATION


class CounterVote(str, Enum):
    PENDING = "pending"
    INCREMENT = "increment"
    DECREMENT = "decrement"


class PollVote(str, Enum):
    PENDING = "pending"
    BASE = "base"
    EXPONENT = "exponent"


class UpgradeKind(str, Enum):
    NONE = "none"
    BASE = "base"
    EXPONENT = "exponent"


class CountMeter(BaseModel):
    """
    How many clients currently hold each counter vote.
    """
    increment: int = Field(0, ge=0)
    decrement: int = Field(0, ge=0)
    pending: int = Field(0, ge=0)


class PollMeter(BaseModel):
    """
    How many clients currently hold each poll vote.
    """
    base: int = Field(0, ge=0)
    exponent: int = Field(0, ge=0)
    pending: int = Field(0, ge=0)


class Count(BaseModel):
    """
    The visible score. Travels as a decimal string so that clients
    without big integers don't lose precision.
    """
    value: int = 0
    meter: CountMeter = Field(default_factory=CountMeter)

    @field_validator("value")
    @classmethod
    def within_bounds(cls, v: int) -> int:
        if v < 0 or v > ONE_GOOGOL:
            raise ValueError("count must lie between zero and one googol")
        return v

    @field_serializer("value")
    def as_decimal(self, v: int) -> str:
        return str(v)


class Upgrade(BaseModel):
    level: int = Field(0, ge=0)
    last_upgrade: UpgradeKind = UpgradeKind.NONE
    base: int = Field(1, ge=1)
    exponent: int = Field(0, ge=0)


class Poll(BaseModel):
    time_remaining: int = Field(POLL_DURATION, ge=0)
    amplification: int = Field(1, ge=1)
    meter: PollMeter = Field(default_factory=PollMeter)


class CounterState(BaseModel):
    """
    Full persistent state: what gets broadcast and what gets saved.
    """
    count: Count = Field(default_factory=Count)
    poll: Optional[Poll] = None
    upgrade: Upgrade = Field(default_factory=Upgrade)

    def to_message(self) -> str:
        return self.model_dump_json()


class Client(BaseModel):
    counter_vote: CounterVote = CounterVote.PENDING
    action_clicks: int = 0
    poll_vote: PollVote = PollVote.PENDING


class NodeStatus(BaseModel):
    node: str
    clients: int
    ticks: int
    broadcasts: int
