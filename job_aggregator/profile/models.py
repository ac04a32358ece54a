"""Canonical user profile data model."""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Optional


def _build(cls, data: Optional[dict]):
    """Instantiate a flat dataclass from a dict, ignoring unknown keys."""
    if not isinstance(data, dict):
        return None
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in names})


def _build_list(cls, items) -> list:
    if not isinstance(items, list):
        return []
    built = [_build(cls, item) for item in items]
    return [b for b in built if b is not None]


@dataclass
class ProfileSources:
    cv: bool = False
    linkedin: bool = False


@dataclass
class PersonalInfo:
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    headline: Optional[str] = None
    summary: Optional[str] = None
    gender: Optional[str] = None
    birth_date: Optional[str] = None
    profile_picture_url: Optional[str] = None
    background_image_url: Optional[str] = None


@dataclass
class Location:
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
    full_location: Optional[str] = None


@dataclass
class Contacts:
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    github: Optional[str] = None
    website: Optional[str] = None
    other: list[str] = field(default_factory=list)


@dataclass
class WorkExperience:
    title: str = ""
    company: str = ""
    company_linkedin: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None  # "Present" when ongoing
    description: Optional[str] = None
    logo_url: Optional[str] = None


@dataclass
class Education:
    institution: str = ""
    institution_linkedin: Optional[str] = None
    degree: Optional[str] = None
    field_of_study: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    grade: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None


@dataclass
class Certification:
    name: str = ""
    authority: Optional[str] = None
    license_number: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    url: Optional[str] = None


@dataclass
class Language:
    language: str = ""
    proficiency: Optional[str] = None


@dataclass
class VolunteerWork:
    title: str = ""
    company: Optional[str] = None
    cause: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    description: Optional[str] = None


@dataclass
class ProfileProject:
    title: str = ""
    description: Optional[str] = None
    url: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


@dataclass
class LinkedInExtras:
    public_identifier: Optional[str] = None
    connections: Optional[int] = None
    follower_count: Optional[int] = None
    occupation: Optional[str] = None
    industry: Optional[str] = None
    recommendations: list[str] = field(default_factory=list)
    volunteer_work: list[VolunteerWork] = field(default_factory=list)
    projects: list[ProfileProject] = field(default_factory=list)


@dataclass
class Profile:
    """Unified biographical record built from a CV and/or a LinkedIn profile."""

    sources: ProfileSources = field(default_factory=ProfileSources)
    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    location: Optional[Location] = None
    contacts: Contacts = field(default_factory=Contacts)
    skills: list[str] = field(default_factory=list)
    work_experience: list[WorkExperience] = field(default_factory=list)
    education: list[Education] = field(default_factory=list)
    certifications: list[Certification] = field(default_factory=list)
    languages: list[Language] = field(default_factory=list)
    linkedin_data: Optional[LinkedInExtras] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Profile":
        """Rebuild a Profile from its to_dict() output (unknown keys are ignored)."""
        data = data or {}
        linkedin = None
        if isinstance(data.get("linkedin_data"), dict):
            raw = data["linkedin_data"]
            linkedin = _build(LinkedInExtras, {
                k: v for k, v in raw.items() if k not in ("volunteer_work", "projects")
            })
            linkedin.recommendations = list(raw.get("recommendations") or [])
            linkedin.volunteer_work = _build_list(VolunteerWork, raw.get("volunteer_work"))
            linkedin.projects = _build_list(ProfileProject, raw.get("projects"))

        contacts = _build(Contacts, data.get("contacts")) or Contacts()
        contacts.other = list(contacts.other or [])

        return cls(
            sources=_build(ProfileSources, data.get("sources")) or ProfileSources(),
            personal_info=_build(PersonalInfo, data.get("personal_info")) or PersonalInfo(),
            location=_build(Location, data.get("location")),
            contacts=contacts,
            skills=[s for s in data.get("skills") or [] if isinstance(s, str)],
            work_experience=_build_list(WorkExperience, data.get("work_experience")),
            education=_build_list(Education, data.get("education")),
            certifications=_build_list(Certification, data.get("certifications")),
            languages=_build_list(Language, data.get("languages")),
            linkedin_data=linkedin,
        )


@dataclass
class ProfileSummary:
    """Bounded projection of a Profile used as language-model context."""

    skills: list[str] = field(default_factory=list)
    work_experience: list[dict] = field(default_factory=list)
    education: list[dict] = field(default_factory=list)
    headline: Optional[str] = None
    summary: Optional[str] = None
    location: Optional[str] = None
    languages: list[str] = field(default_factory=list)
    certifications: list[str] = field(default_factory=list)
    industry: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_prompt_dict(self) -> dict[str, Any]:
        """to_dict() with empty values dropped, as embedded in model prompts."""
        return {k: v for k, v in self.to_dict().items() if v not in (None, "", [])}
