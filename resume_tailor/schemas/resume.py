from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class ContactInfo(BaseModel):
    name: str
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    linkedin: str | None = None
    website: str | None = None


class Bullet(BaseModel):
    id: str
    text: str


class Experience(BaseModel):
    id: str
    company: str
    title: str
    location: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    bullets: list[Bullet] = Field(default_factory=list)


class Education(BaseModel):
    id: str
    institution: str
    degree: str
    field: str | None = None
    graduation_date: str | None = None
    gpa: str | None = None


class Skills(BaseModel):
    technical: list[str] = Field(default_factory=list)
    soft: list[str] = Field(default_factory=list)


class Project(BaseModel):
    id: str
    name: str
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    url: str | None = None


class ResumeContent(BaseModel):
    contact: ContactInfo
    summary: str | None = None
    experiences: list[Experience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: Skills = Field(default_factory=Skills)
    projects: list[Project] | None = None

    @model_validator(mode="after")
    def _validate_unique_ids(self) -> "ResumeContent":
        experience_ids = [exp.id for exp in self.experiences]
        if len(experience_ids) != len(set(experience_ids)):
            raise ValueError("experience ids must be unique within a resume")
        bullet_ids = [bullet.id for exp in self.experiences for bullet in exp.bullets]
        if len(bullet_ids) != len(set(bullet_ids)):
            raise ValueError("bullet ids must be unique within a resume")
        return self

    def bullet_count(self) -> int:
        return sum(len(exp.bullets) for exp in self.experiences)
