"""
Events emitted by the repository loader.

Listeners receive one of these models; ``kind`` tags the variant so events
can be serialized or matched without isinstance checks.
"""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _LoadEvent(BaseModel):
    model_config = ConfigDict(frozen=True)


class LoadingStarted(_LoadEvent):
    """History is ready and ingestion begins."""

    kind: Literal["started"] = "started"
    total: int = Field(..., ge=0)


class LoadingStep(_LoadEvent):
    """One commit was inserted into the cache."""

    kind: Literal["step"] = "step"
    index: int = Field(..., ge=1)


class LoadingFinished(_LoadEvent):
    """Commits and references are loaded."""

    kind: Literal["finished"] = "finished"


class CancelRequested(_LoadEvent):
    """The owner asked to cancel the outstanding command."""

    kind: Literal["cancel_requested"] = "cancel_requested"


LoadEvent = Union[LoadingStarted, LoadingStep, LoadingFinished, CancelRequested]
