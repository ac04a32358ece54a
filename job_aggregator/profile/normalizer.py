"""Map CV and LinkedIn records onto the canonical Profile, and merge Profiles."""

import copy
import logging
from typing import Optional

from job_aggregator.profile.models import (
    Certification,
    Contacts,
    Education,
    Language,
    LinkedInExtras,
    Location,
    PersonalInfo,
    Profile,
    ProfileProject,
    ProfileSources,
    VolunteerWork,
    WorkExperience,
)

logger = logging.getLogger("job_aggregator.profile")


def _opt(value) -> Optional[str]:
    """Empty or missing values become None."""
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    return str(value)


def _dicts(value) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def format_linkedin_date(date: Optional[dict]) -> Optional[str]:
    """Format a {day, month, year} structure as "MM/YYYY", or "YYYY" without a month."""
    if not isinstance(date, dict) or not date.get("year"):
        return None
    month = date.get("month")
    if month:
        return f"{int(month):02d}/{date['year']}"
    return str(date["year"])


def cv_to_profile(cv: dict) -> Profile:
    """Build a Profile from a parsed-CV record."""
    personal = cv.get("personalInfo") or {}
    contacts = cv.get("contacts") or {}
    name = personal.get("name") or ""
    surname = personal.get("surname") or ""

    current_location = _opt(personal.get("currentLocation"))

    return Profile(
        sources=ProfileSources(cv=True),
        personal_info=PersonalInfo(
            first_name=name,
            last_name=surname,
            full_name=f"{name} {surname}".strip(),
            headline=_opt(personal.get("headline")),
            summary=_opt(cv.get("careerSummary")),
            gender=_opt(personal.get("gender")),
            birth_date=_opt(personal.get("birthDate")),
        ),
        location=Location(full_location=current_location) if current_location else None,
        contacts=Contacts(
            email=_opt(contacts.get("email")),
            phone=_opt(contacts.get("phone")),
            linkedin=_opt(contacts.get("linkedin")),
            website=_opt(contacts.get("website")),
            other=[o for o in contacts.get("other") or [] if isinstance(o, str) and o],
        ),
        skills=[s for s in cv.get("skills") or [] if isinstance(s, str) and s.strip()],
        work_experience=[
            WorkExperience(
                title=exp.get("title") or "",
                company=exp.get("company") or "",
                location=_opt(exp.get("location")),
                start_date=_opt(exp.get("startDate")),
                end_date=_opt(exp.get("endDate")),
                description=_opt(exp.get("description")),
            )
            for exp in _dicts(cv.get("workExperience"))
        ],
        education=[
            Education(
                institution=edu.get("institution") or "",
                degree=_opt(edu.get("degree")),
                field_of_study=_opt(edu.get("fieldOfStudy")),
                start_date=_opt(edu.get("startDate")),
                end_date=_opt(edu.get("endDate")),
                grade=_opt(edu.get("grade")),
                description=_opt(edu.get("description")),
            )
            for edu in _dicts(cv.get("education"))
        ],
        certifications=[
            Certification(
                name=cert.get("name") or "",
                authority=_opt(cert.get("issuer")),
                license_number=_opt(cert.get("credentialId")),
                start_date=_opt(cert.get("issueDate")),
                end_date=_opt(cert.get("expirationDate")),
                url=_opt(cert.get("credentialUrl")),
            )
            for cert in _dicts(cv.get("licensesAndCertifications"))
        ],
        languages=[
            Language(language=lang.get("language") or "", proficiency=_opt(lang.get("proficiency")))
            for lang in _dicts(cv.get("languages"))
            if lang.get("language")
        ],
    )


def _handle_url(base: str, handle) -> Optional[str]:
    return f"{base}{handle}" if handle else None


def linkedin_to_profile(record: dict) -> Profile:
    """Build a Profile from an EnrichLayer LinkedIn person record."""
    extra = record.get("extra") or {}
    first = record.get("first_name") or ""
    last = record.get("last_name") or ""
    emails = record.get("personal_emails") or []
    numbers = record.get("personal_numbers") or []

    city = _opt(record.get("city"))
    state = _opt(record.get("state"))
    country = _opt(record.get("country_full_name"))
    full_location = ", ".join(part for part in (city, state, country) if part) or None

    experiences = []
    for exp in _dicts(record.get("experiences")):
        experiences.append(WorkExperience(
            title=exp.get("title") or "",
            company=exp.get("company") or "",
            company_linkedin=_opt(exp.get("company_linkedin_profile_url")),
            location=_opt(exp.get("location")),
            start_date=format_linkedin_date(exp.get("starts_at")),
            end_date=format_linkedin_date(exp.get("ends_at")) if exp.get("ends_at") else "Present",
            description=_opt(exp.get("description")),
            logo_url=_opt(exp.get("logo_url")),
        ))

    return Profile(
        sources=ProfileSources(linkedin=True),
        personal_info=PersonalInfo(
            first_name=first,
            last_name=last,
            full_name=record.get("full_name") or f"{first} {last}".strip(),
            headline=_opt(record.get("headline")),
            summary=_opt(record.get("summary")),
            gender=_opt(record.get("gender")),
            birth_date=format_linkedin_date(record.get("birth_date")),
            profile_picture_url=_opt(record.get("profile_pic_url")),
            background_image_url=_opt(record.get("background_cover_image_url")),
        ),
        location=Location(
            city=city,
            state=state,
            country=country,
            country_code=_opt(record.get("country")),
            full_location=full_location,
        ),
        contacts=Contacts(
            linkedin=_handle_url("https://linkedin.com/in/", record.get("public_identifier")),
            email=_opt(emails[0]) if emails else None,
            phone=_opt(numbers[0]) if numbers else None,
            twitter=_handle_url("https://twitter.com/", extra.get("twitter_profile_id")),
            facebook=_handle_url("https://facebook.com/", extra.get("facebook_profile_id")),
            github=_handle_url("https://github.com/", extra.get("github_profile_id")),
            website=_opt(extra.get("website")),
        ),
        skills=[s for s in record.get("skills") or [] if isinstance(s, str) and s.strip()],
        work_experience=experiences,
        education=[
            Education(
                institution=edu.get("school") or "",
                institution_linkedin=_opt(edu.get("school_linkedin_profile_url")),
                degree=_opt(edu.get("degree_name")),
                field_of_study=_opt(edu.get("field_of_study")),
                start_date=format_linkedin_date(edu.get("starts_at")),
                end_date=format_linkedin_date(edu.get("ends_at")),
                grade=_opt(edu.get("grade")),
                description=_opt(edu.get("description")),
                logo_url=_opt(edu.get("logo_url")),
            )
            for edu in _dicts(record.get("education"))
        ],
        certifications=[
            Certification(
                name=cert.get("name") or "",
                authority=_opt(cert.get("authority")),
                license_number=_opt(cert.get("license_number")),
                start_date=format_linkedin_date(cert.get("starts_at")),
                end_date=format_linkedin_date(cert.get("ends_at")),
                url=_opt(cert.get("url")),
            )
            for cert in _dicts(record.get("certifications"))
        ],
        languages=[
            Language(language=lang.get("name") or "", proficiency=_opt(lang.get("proficiency")))
            for lang in _dicts(record.get("languages_and_proficiencies"))
            if lang.get("name")
        ],
        linkedin_data=LinkedInExtras(
            public_identifier=_opt(record.get("public_identifier")),
            connections=record.get("connections") or None,
            follower_count=record.get("follower_count") or None,
            occupation=_opt(record.get("occupation")),
            industry=_opt(record.get("industry")),
            recommendations=[r for r in record.get("recommendations") or [] if isinstance(r, str)],
            volunteer_work=[
                VolunteerWork(
                    title=vol.get("title") or "",
                    company=_opt(vol.get("company")),
                    cause=_opt(vol.get("cause")),
                    start_date=format_linkedin_date(vol.get("starts_at")),
                    end_date=format_linkedin_date(vol.get("ends_at")),
                    description=_opt(vol.get("description")),
                )
                for vol in _dicts(record.get("volunteer_work"))
            ],
            projects=[
                ProfileProject(
                    title=proj.get("title") or "",
                    description=_opt(proj.get("description")),
                    url=_opt(proj.get("url")),
                    start_date=format_linkedin_date(proj.get("starts_at")),
                    end_date=format_linkedin_date(proj.get("ends_at")),
                )
                for proj in _dicts(record.get("accomplishment_projects"))
            ],
        ),
    )


def _dedupe_skills(skills: list[str]) -> list[str]:
    seen = set()
    unique = []
    for skill in skills:
        key = skill.strip().lower()
        if key and key not in seen:
            seen.add(key)
            unique.append(skill)
    return unique


def _dedupe_languages(languages: list[Language]) -> list[Language]:
    seen = set()
    unique = []
    for lang in languages:
        key = lang.language.strip().lower()
        if key and key not in seen:
            seen.add(key)
            unique.append(copy.copy(lang))
    return unique


def normalize_profile(profile: Profile) -> Profile:
    """Deep copy of a Profile with skills and languages deduplicated case-insensitively."""
    normalized = copy.deepcopy(profile)
    normalized.skills = _dedupe_skills(normalized.skills)
    normalized.languages = _dedupe_languages(normalized.languages)
    return normalized


def merge_profiles(primary: Profile, secondary: Profile) -> Profile:
    """Merge two Profiles, preferring primary and filling gaps from secondary.

    Scalars fall back field by field. Location and LinkedIn extras fall back as
    whole objects. Work experience and education keep the primary's list when it
    is non-empty, otherwise the secondary's list is used wholesale; they are never
    interleaved, so this part of the merge is not commutative. Certifications are
    concatenated as-is.
    """
    p, s = primary, secondary
    pi, si = p.personal_info, s.personal_info
    pc, sc = p.contacts, s.contacts

    merged = Profile(
        sources=ProfileSources(
            cv=p.sources.cv or s.sources.cv,
            linkedin=p.sources.linkedin or s.sources.linkedin,
        ),
        personal_info=PersonalInfo(
            first_name=pi.first_name or si.first_name,
            last_name=pi.last_name or si.last_name,
            full_name=pi.full_name or si.full_name,
            headline=pi.headline or si.headline,
            summary=pi.summary or si.summary,
            gender=pi.gender or si.gender,
            birth_date=pi.birth_date or si.birth_date,
            profile_picture_url=pi.profile_picture_url or si.profile_picture_url,
            background_image_url=pi.background_image_url or si.background_image_url,
        ),
        location=copy.deepcopy(p.location or s.location),
        contacts=Contacts(
            email=pc.email or sc.email,
            phone=pc.phone or sc.phone,
            linkedin=pc.linkedin or sc.linkedin,
            twitter=pc.twitter or sc.twitter,
            facebook=pc.facebook or sc.facebook,
            github=pc.github or sc.github,
            website=pc.website or sc.website,
            other=list(pc.other) + list(sc.other),
        ),
        skills=_dedupe_skills(list(p.skills) + list(s.skills)),
        work_experience=copy.deepcopy(p.work_experience if p.work_experience else s.work_experience),
        education=copy.deepcopy(p.education if p.education else s.education),
        certifications=copy.deepcopy(list(p.certifications) + list(s.certifications)),
        languages=_dedupe_languages(list(p.languages) + list(s.languages)),
        linkedin_data=copy.deepcopy(p.linkedin_data or s.linkedin_data),
    )

    logger.debug(
        "Merged profiles: %d skills, %d experiences, %d certifications",
        len(merged.skills), len(merged.work_experience), len(merged.certifications),
    )
    return merged


def add_cv(existing: Optional[Profile], cv_profile: Profile) -> Profile:
    """Fold a newly parsed CV into the current profile; existing data wins."""
    if existing is None:
        return cv_profile
    return merge_profiles(existing, cv_profile)


def add_linkedin(existing: Optional[Profile], linkedin_profile: Profile) -> Profile:
    """Fold a LinkedIn import into the current profile; LinkedIn data wins."""
    if existing is None:
        return linkedin_profile
    return merge_profiles(linkedin_profile, existing)
