"""Markdown rendering of candidate profiles and job stage pipelines."""

from datetime import timezone
from typing import Any, Dict, List, Optional

from .freshness import parse_timestamp


def format_month(value: Optional[str]) -> str:
    """Render a date as "Jan 2024" (UTC); missing dates mean the entry is ongoing."""
    if not value:
        return "Present"
    parsed = parse_timestamp(value)
    if parsed is None:
        return value
    return parsed.astimezone(timezone.utc).strftime("%b %Y")


def render_profile(candidate: Dict[str, Any]) -> str:
    sections: List[str] = [f"# {candidate.get('name', '')}"]

    if candidate.get("headline"):
        sections.append(f"**{candidate['headline']}**")

    contact: List[str] = []
    if candidate.get("email"):
        contact.append(f"📧 {candidate['email']}")
    if candidate.get("phone"):
        contact.append(f"📞 {candidate['phone']}")
    if candidate.get("address"):
        contact.append(f"📍 {candidate['address']}")
    location = candidate.get("location") or {}
    if location.get("city") and location.get("country"):
        contact.append(f"🌍 {location['city']}, {location['country']}")
    if contact:
        sections.append("## Contact Information\n" + "\n".join(contact))

    job = candidate.get("job") or {}
    sections.append("## Application Details")
    sections.append(f"**Position:** {job.get('title', '')} ({job.get('shortcode', '')})")
    sections.append(f"**Stage:** {candidate.get('stage', '')}")
    sections.append(f"**Applied:** {format_month(candidate.get('created_at'))}")
    if candidate.get("sourced"):
        sections.append("**Source:** Sourced candidate")

    if candidate.get("summary"):
        sections.append("## Summary\n" + candidate["summary"])

    skills = candidate.get("skills") or []
    if skills:
        sections.append("## Skills\n" + "\n".join(f"- {_skill_name(s)}" for s in skills))

    experience = candidate.get("experience_entries") or []
    if experience:
        sections.append("## Work Experience")
        for entry in experience:
            end = "Present" if entry.get("current") else format_month(entry.get("end_date"))
            duration = f"{format_month(entry.get('start_date'))} - {end}"
            industry = f" | {entry['industry']}" if entry.get("industry") else ""
            sections.append(
                f"### {entry.get('title', '')} at {entry.get('company', '')}\n"
                f"**{duration}**{industry}\n\n{entry.get('summary') or ''}"
            )

    education = candidate.get("education_entries") or []
    if education:
        sections.append("## Education")
        for entry in education:
            duration = f"{format_month(entry.get('start_date'))} - {format_month(entry.get('end_date'))}"
            sections.append(
                f"### {entry.get('degree', '')}\n"
                f"**{entry.get('school', '')}** | {entry.get('field_of_study', '')}\n*{duration}*"
            )

    profiles = candidate.get("social_profiles") or []
    if profiles:
        sections.append("## Social Profiles")
        for profile in profiles:
            sections.append(f"- **{profile.get('type', '')}:** [{profile.get('name', '')}]({profile.get('url', '')})")

    tags = candidate.get("tags") or []
    if tags:
        sections.append("## Tags\n" + " ".join(f"`{tag}`" for tag in tags))

    if candidate.get("cover_letter"):
        sections.append("## Cover Letter\n" + candidate["cover_letter"])

    return "\n\n".join(sections)


def _skill_name(skill: Any) -> str:
    # skills come back either as plain strings or {"name": ...}
    if isinstance(skill, dict):
        return str(skill.get("name", ""))
    return str(skill)


def render_stages(stages: List[Dict[str, Any]], job_title: str, shortcode: str) -> str:
    ordered = sorted(stages, key=lambda s: s.get("position", 0))
    lines: List[str] = [
        f"# {job_title} - Recruitment Stages",
        f"**Job Code:** {shortcode}\n",
        "## Recruitment Pipeline\n",
        "| Position | Stage | Type |",
        "|----------|-------|------|",
    ]
    for stage in ordered:
        lines.append(f"| {stage.get('position', 0) + 1} | {stage.get('name', '')} | {stage.get('kind', '')} |")
    lines.append("")

    lines.append("## Stage Details\n")
    for stage in ordered:
        lines.append(f"### {stage.get('position', 0) + 1}. {stage.get('name', '')}")
        lines.append(f"- **Type:** {stage.get('kind', '')}")
        lines.append(f"- **Slug:** {stage.get('slug', '')}\n")

    return "\n".join(lines)
