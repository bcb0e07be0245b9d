"""
Email notifications sent through Resend.

Delivery is best effort: nothing here raises into the request that triggered
it. Sending happens on a daemon thread so the handler returns without waiting
for the provider. Without RESEND_API_KEY the message is logged instead.
"""
import logging
import threading
from typing import Optional

import resend

from app.core.config import RESEND_API_KEY, EMAIL_FROM

logger = logging.getLogger(__name__)


def _send_email_sync(to_email: str, subject: str, text: str) -> Optional[str]:
    """Send one plain-text email. Returns the provider message id, or None."""
    if not RESEND_API_KEY:
        logger.info(f"[DEV] Email to {to_email}: {subject}")
        return None

    try:
        resend.api_key = RESEND_API_KEY
        response = resend.Emails.send({
            "from": EMAIL_FROM,
            "to": [to_email],
            "subject": subject,
            "text": text,
        })
        message_id = response.get("id") if isinstance(response, dict) else getattr(response, "id", None)
        logger.info(f"Email sent to {to_email} (id: {message_id})")
        return message_id
    except Exception:
        logger.exception(f"Email delivery failed for {to_email}")
        return None


def send_email(to_email: str, subject: str, text: str) -> None:
    """Queue an email on a background thread and return immediately."""
    thread = threading.Thread(
        target=_send_email_sync,
        args=(to_email, subject, text),
        daemon=True,
    )
    thread.start()
    logger.debug(f"Email queued to {to_email}: {subject}")


def build_application_email(job, driver) -> tuple:
    """Subject and body telling a job owner that a driver applied."""
    subject = f"TruckMatch application: {job.title} ({job.route})"

    job_lines = [
        f"Title: {job.title}",
        f"Route: {job.route}",
        f"Type: {job.type}",
        f"Price: {job.price}",
        f"Date: {job.date}",
    ]
    if job.phone:
        job_lines.append(f"Contact on listing: {job.phone}")

    driver_lines = [f"Name: {driver.name}", f"Email: {driver.email}"]
    if driver.phone:
        driver_lines.append(f"Phone: {driver.phone}")
    if driver.location:
        driver_lines.append(f"Location: {driver.location}")
    if driver.experience:
        driver_lines.append(f"Experience: {driver.experience}")
    if driver.categories:
        driver_lines.append(f"Categories: {', '.join(driver.categories)}")

    text = (
        "Hello!\n\nA driver applied to your job on TruckMatch.\n\n"
        "Job:\n" + "\n".join(job_lines) + "\n\n"
        "Driver:\n" + "\n".join(driver_lines) + "\n"
    )
    return subject, text


def notify_job_application(owner_email: str, job, driver) -> None:
    subject, text = build_application_email(job, driver)
    send_email(owner_email, subject, text)
