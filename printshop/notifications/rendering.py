"""Email body rendering for notification events."""

from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..config import settings
from ..integrations.qr import qr_data_uri, tracking_url

_env = Environment(
    loader=FileSystemLoader(str(Path(__file__).parent / "email_templates")),
    autoescape=select_autoescape(["html"]),
)


@dataclass
class ProgressStep:
    name: str
    reached: bool


def render_plain_email(subject: str, message: str) -> str:
    return _env.get_template("plain.html").render(
        subject=subject,
        message=message,
        company_name=settings.company_name,
    )


def render_job_progress_email(
    subject: str,
    message: str,
    *,
    job_title: str,
    tracking_code: str,
    status_name: str,
    steps: list[ProgressStep] | None = None,
) -> str:
    """Rich job update with a tracking link and an embedded QR code for it."""
    url = tracking_url(tracking_code)
    return _env.get_template("job_progress.html").render(
        subject=subject,
        message=message,
        job_title=job_title,
        tracking_code=tracking_code,
        status_name=status_name,
        steps=steps or [],
        tracking_url=url,
        qr_image=qr_data_uri(url),
        company_name=settings.company_name,
    )
