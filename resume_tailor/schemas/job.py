from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class JobData(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    company_name: str = ""
    description: str = ""
    requirements: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
