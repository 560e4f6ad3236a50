"""
Contact form submissions.

A submission is validated and acknowledged straight away; the notification
email to the studio goes out afterwards over SMTP when mail is configured.
Delivery failures are logged and never change the response the visitor got.
"""

import smtplib
from email.message import EmailMessage
from typing import Any, Dict, List, Optional

from studio_cms.models.inquiry import ContactInquiry
from studio_cms.services.validator import validate_payload
from studio_cms.utils.config import MailSettings
from studio_cms.utils.exceptions import MailDeliveryError, ValidationError
from studio_cms.utils.logger import get_logger
from studio_cms.utils.timestamps import utc_now_iso

logger = get_logger(__name__)

REQUIRED_FIELDS = ("name", "email", "reason", "message")


def missing_fields(payload: Any) -> List[str]:
    """Required fields that are absent or blank, in form order"""
    if not isinstance(payload, dict):
        return list(REQUIRED_FIELDS)
    missing = []
    for name in REQUIRED_FIELDS:
        value = payload.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def build_message(submission: Dict[str, Any], sender: str, recipient: str) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = f"New Contact Form Submission - {submission['reason']}"
    message["From"] = f'"Studio Contact Form" <{sender}>'
    message["To"] = recipient
    message["Reply-To"] = submission["email"]
    message.set_content(
        "New Contact Form Submission\n\n"
        f"Name: {submission['name']}\n"
        f"Email: {submission['email']}\n"
        f"Reason: {submission['reason']}\n\n"
        f"Message:\n{submission['message']}\n\n"
        f"Submitted: {submission['submittedAt']}\n"
        f"IP: {submission.get('ip') or 'unknown'}\n"
    )
    return message


class InquiryService:
    """Validates contact form submissions and mails them to the studio"""

    def __init__(self, mail: MailSettings):
        self.mail = mail

    def accept(self, payload: Any, ip: Optional[str] = None, user_agent: Optional[str] = None) -> Dict[str, Any]:
        """
        Validate a submission and stamp it.

        Raises:
            ValidationError: Fields missing, or present but malformed
        """
        missing = missing_fields(payload)
        if missing:
            raise ValidationError(
                "All fields are required",
                details=[{"field": name, "message": "is required"} for name in missing],
            )
        submission = validate_payload(ContactInquiry, payload)
        submission.update(submittedAt=utc_now_iso(), ip=ip, userAgent=user_agent)
        logger.info("Contact form received", reason=submission["reason"], ip=ip)
        return submission

    def send(self, submission: Dict[str, Any]) -> None:
        """
        Mail one submission to the contact address.

        Raises:
            MailDeliveryError: SMTP connection, login or send failed
        """
        mail = self.mail
        message = build_message(submission, sender=mail.username, recipient=mail.contact_email)
        smtp_class = smtplib.SMTP_SSL if mail.use_ssl else smtplib.SMTP
        try:
            with smtp_class(mail.host, mail.port, timeout=mail.timeout_seconds) as smtp:
                if not mail.use_ssl:
                    smtp.starttls()
                smtp.login(mail.username, mail.password)
                smtp.send_message(message)
        except smtplib.SMTPAuthenticationError as e:
            raise MailDeliveryError(f"Email authentication failed: {e.smtp_code}")
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(f"Failed to send email: {e}")

    def deliver(self, submission: Dict[str, Any]) -> None:
        """Background delivery: skipped when mail is unconfigured, failures logged"""
        if not self.mail.configured:
            logger.info("Mail not configured, contact form logged only", reason=submission["reason"])
            return
        try:
            self.send(submission)
        except MailDeliveryError as e:
            logger.error("Contact form email failed", error=e.message, reason=submission["reason"])
            return
        logger.info("Contact form email sent", recipient=self.mail.contact_email)
