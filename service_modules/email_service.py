"""
Email Service - handles sending emails via SMTP.
"""
import re
import smtplib
import ssl
import logging
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart

import config

logger = logging.getLogger("gymbucket")

EMAIL_WRAPPER = """
<div style="max-width:480px;margin:0 auto;font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,sans-serif;border-radius:16px;overflow:hidden;border:1px solid #e5e7eb;">
    <div style="background:#2563eb;padding:24px;text-align:center;">
        <h1 style="color:white;margin:0;font-size:24px;">GymBucket</h1>
    </div>
    <div style="padding:32px 24px;">{body}</div>
</div>
"""


class EmailService:
    """Service for sending transactional emails via SMTP."""

    def __init__(self):
        self.smtp_host = config.SMTP_HOST
        self.smtp_port = config.SMTP_PORT
        self.smtp_user = config.SMTP_USER
        self.smtp_password = config.SMTP_PASSWORD
        self.from_email = config.SMTP_FROM_EMAIL
        self.from_name = config.SMTP_FROM_NAME

    def is_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_password)

    def send_email(self, to_email: str, subject: str, html_body: str) -> bool:
        if not self.is_configured():
            logger.warning(f"SMTP not configured, email '{subject}' to {to_email} not sent")
            return False

        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = f"{self.from_name} <{self.from_email}>"
            msg["To"] = to_email

            # Plain text fallback
            text_body = html_body.replace("<br>", "\n").replace("</p>", "\n")
            text_body = re.sub(r"<[^>]+>", "", text_body)

            msg.attach(MIMEText(text_body, "plain"))
            msg.attach(MIMEText(html_body, "html"))

            context = ssl.create_default_context()
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls(context=context)
                server.login(self.smtp_user, self.smtp_password)
                server.sendmail(self.from_email, to_email, msg.as_string())

            logger.info(f"Email sent to {to_email}: {subject}")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False

    def send_password_reset_email(self, to_email: str, first_name: str, reset_url: str) -> bool:
        subject = "GymBucket - Reset Your Password"
        body = f"""
        <p>Hi <strong>{first_name}</strong>,</p>
        <p>We received a request to reset your password. Use the link below to choose a new one.</p>
        <p style="text-align:center;"><a href="{reset_url}">Reset Password</a></p>
        <p style="color:#6b7280;font-size:12px;">This link expires in 1 hour. If you didn't request this, you can safely ignore this email.</p>
        """
        return self.send_email(to_email, subject, EMAIL_WRAPPER.format(body=body))

    def send_verification_email(self, to_email: str, first_name: str, verify_url: str) -> bool:
        subject = "GymBucket - Confirm Your Email"
        body = f"""
        <p>Hi <strong>{first_name}</strong>,</p>
        <p>Thanks for registering. Please confirm your email address to activate your trainer account.</p>
        <p style="text-align:center;"><a href="{verify_url}">Confirm Email</a></p>
        """
        return self.send_email(to_email, subject, EMAIL_WRAPPER.format(body=body))


# Singleton
_email_service = EmailService()

def get_email_service() -> EmailService:
    return _email_service
