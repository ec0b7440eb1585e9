from __future__ import annotations

from resume_tailor.schemas.job import JobData
from resume_tailor.schemas.resume import ResumeContent


def _date_range(start: str | None, end: str | None) -> str:
    if not start and not end:
        return ""
    return f" ({start or '?'} - {end or 'Present'})"


def format_resume_for_prompt(resume: ResumeContent) -> str:
    """Render a resume as markdown-ish plain text, keeping ids visible.

    Experience and bullet ids are printed next to their text so the model can
    echo them back; they are the join keys used after the response is parsed.
    """
    lines: list[str] = [f"# {resume.contact.name}"]
    if resume.contact.location:
        lines.append(f"Location: {resume.contact.location}")

    if resume.summary:
        lines.extend(["", "## Summary", resume.summary.strip()])

    if resume.experiences:
        lines.extend(["", "## Experience"])
        for exp in resume.experiences:
            header = f"### {exp.title} at {exp.company}{_date_range(exp.start_date, exp.end_date)}"
            lines.append(f"{header} [experience_id: {exp.id}]")
            for bullet in exp.bullets:
                lines.append(f"- {bullet.text} [bullet_id: {bullet.id}]")

    if resume.education:
        lines.extend(["", "## Education"])
        for edu in resume.education:
            degree = f"{edu.degree} in {edu.field}" if edu.field else edu.degree
            suffix = f" ({edu.graduation_date})" if edu.graduation_date else ""
            lines.append(f"- {degree}, {edu.institution}{suffix}")

    if resume.skills.technical or resume.skills.soft:
        lines.extend(["", "## Skills"])
        if resume.skills.technical:
            lines.append(f"Technical: {', '.join(resume.skills.technical)}")
        if resume.skills.soft:
            lines.append(f"Soft: {', '.join(resume.skills.soft)}")

    if resume.projects:
        lines.extend(["", "## Projects"])
        for project in resume.projects:
            tech = f" [{', '.join(project.technologies)}]" if project.technologies else ""
            lines.append(f"- {project.name}{tech}: {project.description}".rstrip(": "))

    return "\n".join(lines)


def format_job_for_prompt(job: JobData) -> str:
    lines = [f"# {job.title}"]
    if job.company_name:
        lines.append(f"Company: {job.company_name}")
    if job.description:
        lines.extend(["", "## Description", job.description.strip()])
    if job.requirements:
        lines.extend(["", "## Requirements"])
        lines.extend(f"- {req}" for req in job.requirements)
    if job.skills:
        lines.extend(["", "## Skills", ", ".join(job.skills)])
    return "\n".join(lines)
