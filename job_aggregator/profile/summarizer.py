"""Reduce a Profile to the bounded summary used as model context."""

from typing import Optional

from job_aggregator.profile.models import Profile, ProfileSummary

MAX_SKILLS = 20
MAX_EXPERIENCES = 5
MAX_EDUCATION = 3
MAX_CERTIFICATIONS = 5
EXPERIENCE_DESCRIPTION_CHARS = 300
SUMMARY_CHARS = 500


def _truncate(text: Optional[str], limit: int) -> Optional[str]:
    return text[:limit] if text else text


def summarize_profile(profile: Optional[Profile]) -> Optional[ProfileSummary]:
    """Build a fresh ProfileSummary; returns None when there is no profile."""
    if profile is None:
        return None

    return ProfileSummary(
        skills=list(profile.skills[:MAX_SKILLS]),
        work_experience=[
            {
                "title": exp.title,
                "company": exp.company,
                "description": _truncate(exp.description, EXPERIENCE_DESCRIPTION_CHARS),
            }
            for exp in profile.work_experience[:MAX_EXPERIENCES]
        ],
        education=[
            {
                "institution": edu.institution,
                "degree": edu.degree,
                "field_of_study": edu.field_of_study,
            }
            for edu in profile.education[:MAX_EDUCATION]
        ],
        headline=profile.personal_info.headline,
        summary=_truncate(profile.personal_info.summary, SUMMARY_CHARS),
        location=profile.location.full_location if profile.location else None,
        languages=[lang.language for lang in profile.languages],
        certifications=[cert.name for cert in profile.certifications[:MAX_CERTIFICATIONS]],
        industry=profile.linkedin_data.industry if profile.linkedin_data else None,
    )
