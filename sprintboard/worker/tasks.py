import logging
from typing import Optional

from sprintboard.utils.notifications import send_project_invitation
from sprintboard.worker.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(autoretry_for=(OSError,), retry_backoff=True, max_retries=3)
def send_invitation_email(
    to_email: str,
    inviter_name: Optional[str],
    inviter_email: str,
    project_name: str,
    role: str,
    project_id: int,
):
    """
    Отправляет приглашение в проект. Повторяется при сетевых ошибках SMTP.
    """
    logger.info("Sending invitation for project %s to %s", project_id, to_email)
    send_project_invitation(
        to_email=to_email,
        inviter_name=inviter_name,
        inviter_email=inviter_email,
        project_name=project_name,
        role=role,
        project_id=project_id,
    )
    return {"status": "sent", "to": to_email}
