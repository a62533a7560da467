# core/notifications.py
import requests
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import List, Optional
from core.config import settings
from core.logging_config import logger


STATUS_LABELS = {
    "NEW": "New",
    "UNDER_REVIEW": "Under review",
    "IN_PROGRESS": "In progress",
    "RESOLVED": "Resolved",
    "REJECTED": "Rejected",
    "CLOSED": "Closed",
}


def status_label(status) -> str:
    return STATUS_LABELS.get(str(status), str(status))


# -----------------------------------------------------
# 📨 Send webhook (Discord, Slack, etc.)
# -----------------------------------------------------
def send_webhook_message(message: str):
    webhook_url = settings.NOTIFY_WEBHOOK_URL
    if not webhook_url:
        logger.debug("Webhook URL not configured: skipping.")
        return

    try:
        payload = {"content": message}
        response = requests.post(webhook_url, json=payload, timeout=10)
        logger.info(f"Webhook sent (status {response.status_code})")
    except Exception as e:
        logger.warning(f"Webhook failed: {e}")


# -----------------------------------------------------
# 📧 Send email (SMTP)
# -----------------------------------------------------
def send_email(
    subject: str,
    body: str,
    recipients: Optional[List[str]] = None,
    html_body: Optional[str] = None,
):
    """
    Send email via SMTP.

    Args:
        subject: Email subject
        body: Plain text email body
        recipients: List of recipient email addresses
        html_body: Optional HTML email body
    """
    smtp_host = settings.SMTP_HOST
    smtp_port = settings.SMTP_PORT
    smtp_user = settings.SMTP_USER
    smtp_pass = settings.SMTP_PASS

    recipient_list = [r for r in (recipients or []) if r]
    if not recipient_list:
        logger.warning("No recipients specified: skipping email.")
        return

    if not all([smtp_host, smtp_port, smtp_user, smtp_pass]):
        logger.warning("Email credentials missing: skipping email.")
        return

    try:
        msg = MIMEMultipart("alternative")
        msg["From"] = smtp_user
        msg["To"] = ", ".join(recipient_list)
        msg["Subject"] = subject

        msg.attach(MIMEText(body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))

        with smtplib.SMTP_SSL(smtp_host, smtp_port) as server:
            server.login(smtp_user, smtp_pass)
            server.send_message(msg)

        logger.info(f"Email sent to {', '.join(recipient_list)}")

    except Exception as e:
        logger.error(f"Email failed: {e}")
        raise


# -----------------------------------------------------
# Complaint notifications (best-effort, never raise)
# -----------------------------------------------------
def notify_status_change(repository, complaint, old_status, new_status, notes: Optional[str] = None):
    """
    Tell the complainant their complaint changed status.
    Runs after the change is committed; failures are logged and swallowed.
    """
    try:
        complainant = repository.get_complainant(complaint.complainant_id)
        if complainant is None or not complainant.email:
            logger.debug(f"Complaint {complaint.id}: complainant has no email: skipping.")
            return

        subject = f"Update on your complaint: {complaint.title}"
        body = f"""
Hello {complainant.full_name},

The status of your complaint "{complaint.title}" has changed.

Previous status: {status_label(old_status)}
New status: {status_label(new_status)}
"""
        if notes:
            body += f"\nNotes: {notes}\n"

        send_email(subject=subject, body=body, recipients=[complainant.email])
        send_webhook_message(
            f"Complaint {complaint.id}: {status_label(old_status)} → {status_label(new_status)}"
        )
    except Exception as e:
        logger.error(f"Status update notification failed for complaint {complaint.id}: {e}")


def notify_new_complaint(complaint, complainant):
    """Alert administrators that a complaint was submitted."""
    try:
        body = f"""
A new complaint was submitted.

Title: {complaint.title}
Complainant: {complainant.full_name} ({complainant.phone})
Location: {complaint.location or "Not specified"}

{complaint.description}
"""
        send_email(
            subject=f"New complaint: {complaint.title}",
            body=body,
            recipients=[settings.ADMIN_NOTIFICATION_EMAIL],
        )
        send_webhook_message(f"New complaint {complaint.id}: {complaint.title}")
    except Exception as e:
        logger.error(f"New complaint notification failed for complaint {complaint.id}: {e}")
