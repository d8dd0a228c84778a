"""Resume document model.

The resume is read once at startup and never changes afterwards, so every
model is frozen. Files use the camelCase keys of the resume format
(``personalInfo``, ``startDate``); Python code uses the snake_case names.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Contact(_Frozen):
    email: str
    phone: Optional[str] = None
    website: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None


class PersonalInfo(_Frozen):
    name: str
    title: str
    contact: Contact


class Experience(_Frozen):
    company: str
    position: str
    location: str
    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")
    responsibilities: List[str] = Field(default_factory=list)


class Skills(_Frozen):
    technical: List[str] = Field(default_factory=list)
    soft: List[str] = Field(default_factory=list)


class Project(_Frozen):
    name: str
    description: str


class Education(_Frozen):
    university: str
    certifications: List[str] = Field(default_factory=list)


class ResumeDocument(_Frozen):
    """A complete, validated resume."""

    personal_info: PersonalInfo = Field(alias="personalInfo")
    about: str
    experience: List[Experience]
    skills: Skills
    projects: List[Project]
    education: Education
