"""Render the contact notification email from a Jinja template."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from models import ContactSubmission, InterestCategory

INTEREST_LABELS: dict[InterestCategory, str] = {
    InterestCategory.CONSULTATION: "AI Consultation",
    InterestCategory.TRAINING: "AI Training",
    InterestCategory.IMPLEMENTATION: "AI Implementation",
    InterestCategory.DEVELOPMENT: "Custom AI Development",
    InterestCategory.OTHER: "Other",
}


def default_template_path() -> Path:
    return Path(__file__).resolve().parent / "templates" / "contact_email.html"


class ContactEmailRenderer:
    """Render submissions to HTML with autoescaping on every interpolated value."""

    def __init__(
        self, template_path: Path | None = None, *, site_name: str, site_domain: str
    ) -> None:
        self._template_path = template_path or default_template_path()
        self._site_name = site_name
        self._site_domain = site_domain
        self._environment = Environment(
            loader=FileSystemLoader(str(self._template_path.parent)),
            autoescape=select_autoescape(enabled_extensions=("html", "xml"), default=True),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, submission: ContactSubmission) -> str:
        template = self._environment.get_template(self._template_path.name)
        return template.render(
            site_name=self._site_name,
            site_domain=self._site_domain,
            first_name=submission.first_name,
            last_name=submission.last_name,
            email=submission.email,
            company=submission.company,
            phone=submission.phone,
            interest=INTEREST_LABELS.get(submission.interest, "Not specified"),
            message=submission.message,
        )
