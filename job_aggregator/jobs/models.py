"""Unified job display record."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class DisplayRecord:
    """One job result from any platform, ready for presentation."""

    id: str
    source: str  # "linkedin", "upwork", "indeed", "behance", "freelance"
    title: str
    url: str = ""
    company: str = ""
    company_url: Optional[str] = None
    company_logo: Optional[str] = None
    location: str = ""
    is_remote: bool = False
    employment_type: Optional[str] = None
    salary: Optional[str] = None
    description: str = ""
    skills: list[str] = field(default_factory=list)
    posted_at: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "source": self.source,
            "title": self.title,
            "url": self.url,
            "company": self.company,
            "company_url": self.company_url,
            "company_logo": self.company_logo,
            "location": self.location,
            "is_remote": self.is_remote,
            "employment_type": self.employment_type,
            "salary": self.salary,
            "description": self.description,
            "skills": list(self.skills),
            "posted_at": self.posted_at,
            "extra": dict(self.extra),
        }
