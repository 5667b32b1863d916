import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from sprintboard.core.config import settings

logger = logging.getLogger(__name__)


def role_display_name(role: str) -> str:
    return role[:1] + role[1:].lower()


def build_invitation_message(
    to_email: str,
    inviter_name: Optional[str],
    inviter_email: str,
    project_name: str,
    role: str,
    project_id: int,
) -> MIMEMultipart:
    """Собирает письмо-приглашение с текстовой и HTML частями"""
    inviter = inviter_name or inviter_email
    project_url = f"{settings.APP_URL}/projects?project={project_id}"
    role_name = role_display_name(role)

    text = (
        "Project Invitation\n\n"
        "Hello,\n\n"
        f'{inviter} has invited you to join the project "{project_name}" as a {role_name}.\n\n'
        "You can now access this project and collaborate with the team.\n\n"
        f"View Project: {project_url}\n\n"
        f"If you have any questions, please contact {inviter} at {inviter_email}.\n\n"
        "---\n"
        "This is an automated message. Please do not reply to this email."
    )
    # Имя проекта и приглашающего задают пользователи
    safe_inviter = html.escape(inviter)
    safe_project = html.escape(project_name)
    safe_email = html.escape(inviter_email)
    html_body = (
        "<html><body>"
        "<h1>Project Invitation</h1>"
        "<p>Hello,</p>"
        f"<p><strong>{safe_inviter}</strong> has invited you to join the project "
        f"<strong>&quot;{safe_project}&quot;</strong> as a <strong>{role_name}</strong>.</p>"
        f"<p><a href=\"{html.escape(project_url)}\">View Project</a></p>"
        f"<p>If you have any questions, please contact {safe_inviter} at {safe_email}.</p>"
        "</body></html>"
    )

    msg = MIMEMultipart("alternative")
    msg["From"] = f'"{settings.PROJECT_NAME}" <{settings.SMTP_USER or "noreply@localhost"}>'
    msg["To"] = to_email
    msg["Subject"] = f'You\'ve been invited to join "{project_name}"'
    msg.attach(MIMEText(text, "plain"))
    msg.attach(MIMEText(html_body, "html"))
    return msg


def send_project_invitation(
    to_email: str,
    inviter_name: Optional[str],
    inviter_email: str,
    project_name: str,
    role: str,
    project_id: int,
) -> None:
    """
    Отправляет приглашение в проект по email.
    В режиме разработки письмо только логируется.
    """
    msg = build_invitation_message(to_email, inviter_name, inviter_email, project_name, role, project_id)
    logger.info("Sending invitation to %s: %s", to_email, msg["Subject"])

    if settings.ENVIRONMENT == "development":
        logger.info("Email content: %s", msg.get_payload(0).get_payload())
        return

    if not settings.SMTP_USER or not settings.SMTP_PASSWORD:
        raise RuntimeError("SMTP configuration is missing. Set SMTP_USER and SMTP_PASSWORD.")

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
        server.starttls()
        server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
        server.send_message(msg)
