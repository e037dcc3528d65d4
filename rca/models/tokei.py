"""Schemas for the JSON emitted by ``tokei --output json``."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt


class TokeiLanguage(BaseModel):
    """One language entry; ``reports`` and ``children`` are dropped."""

    model_config = ConfigDict(extra="ignore")

    code: StrictInt = Field(ge=0)
    comments: StrictInt = Field(ge=0)
    blanks: StrictInt = Field(ge=0)


class TokeiTotal(TokeiLanguage):
    """The ``Total`` pseudo-language, which also carries the accuracy flag."""

    inaccurate: StrictBool
