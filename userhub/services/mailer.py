"""Transactional email: confirmation links for account flows and the contact form."""

from __future__ import annotations

import html
import logging
import smtplib
from email.message import EmailMessage
from typing import TYPE_CHECKING

from userhub.core.errors import MailDeliveryError

if TYPE_CHECKING:
    from userhub.core.config import Settings

logger = logging.getLogger(__name__)

EMAIL_FOOTER_HTML = (
    "<br><p>If you did not request this action, please ignore this email.</p>"
    "<br><p>This link is available only for {minutes} minutes.</p>"
)


class Mailer:
    """
    Compose and send notification emails over SMTP.

    When MAIL_ENABLED is false the message is logged instead of sent, so the
    confirmation flows stay usable in development without an SMTP server.
    Raises MailDeliveryError when the SMTP server cannot accept the message.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def send(
        self,
        to: str,
        subject: str,
        text: str,
        html_body: str | None = None,
        reply_to: str | None = None,
    ) -> None:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.settings.MAIL_SENDER
        msg["To"] = to
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.set_content(text)
        if html_body:
            msg.add_alternative(html_body, subtype="html")

        if not self.settings.MAIL_ENABLED:
            logger.info(
                "Mail disabled; not sending",
                extra={"mail_to": to, "mail_subject": subject, "mail_text": text},
            )
            return
        self._dispatch_smtp(msg)

    def _dispatch_smtp(self, msg: EmailMessage) -> None:
        s = self.settings
        if not s.SMTP_HOST:
            logger.error("MAIL_ENABLED is true but SMTP_HOST is not set")
            raise MailDeliveryError("Email is not configured; set SMTP_HOST.")
        try:
            with smtplib.SMTP(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT_SEC) as smtp:
                if s.SMTP_USE_TLS:
                    smtp.starttls()
                if s.SMTP_USERNAME and s.SMTP_PASSWORD is not None:
                    smtp.login(s.SMTP_USERNAME, s.SMTP_PASSWORD.get_secret_value())
                smtp.send_message(msg)
        except smtplib.SMTPAuthenticationError as e:
            logger.error("SMTP authentication failed for '%s': %s", s.SMTP_USERNAME, e)
            raise MailDeliveryError("Email could not be sent (SMTP authentication failed).") from e
        except smtplib.SMTPException as e:
            logger.error("SMTP error sending to %s: %s", msg["To"], e)
            raise MailDeliveryError("Email could not be sent.") from e
        except OSError as e:
            logger.error("Network error connecting to %s:%d: %s", s.SMTP_HOST, s.SMTP_PORT, e)
            raise MailDeliveryError("Email server is unreachable.") from e
        logger.info("Email sent to %s, subject: %s", msg["To"], msg["Subject"])

    def frontend_link(self, route: str) -> str:
        return f"{self.settings.FRONTEND_URL}/{route.lstrip('/')}"

    def _send_link(
        self,
        to: str,
        subject: str,
        intro: str,
        label: str,
        route: str,
        ttl_minutes: int,
    ) -> None:
        link = self.frontend_link(route)
        footer = EMAIL_FOOTER_HTML.format(minutes=ttl_minutes)
        self.send(
            to,
            subject,
            text=f"{intro} {link}",
            html_body=f'<p>{html.escape(intro)}</p><a href="{html.escape(link)}">{label}</a>{footer}',
        )

    def send_registration_link(self, email: str, token: str) -> None:
        self._send_link(
            email,
            "Confirm your email",
            "Please confirm your email by clicking the following link:",
            "Confirm your email",
            f"auth/sign-up/{token}",
            self.settings.REGISTRATION_EXPIRE_MINUTES,
        )
        logger.debug("Registration mail sent to %s", email)

    def send_reset_password_link(self, email: str, token: str) -> None:
        self._send_link(
            email,
            "Password Reset Request",
            "Click the link to reset your password:",
            "RESET PASSWORD",
            f"auth/reset-password/{token}",
            self.settings.CONFIRMATION_EXPIRE_MINUTES,
        )

    def send_change_email_link(self, email: str, token: str) -> None:
        self._send_link(
            email,
            "Change Email Request",
            "Click the link to change your email:",
            "CONFIRM EMAIL",
            f"settings/change-email/{token}",
            self.settings.CONFIRMATION_EXPIRE_MINUTES,
        )

    def send_delete_profile_link(self, email: str, token: str) -> None:
        self._send_link(
            email,
            "Delete profile request",
            "Click the link if you are sure that you want to delete your account:",
            "DELETE ACCOUNT",
            f"settings/delete-profile/{token}",
            self.settings.CONFIRMATION_EXPIRE_MINUTES,
        )

    def send_contact_form(self, email: str, subject: str, message: str) -> None:
        """Forward a contact form to ADMIN_MAIL with Reply-To set to the visitor."""
        if not self.settings.ADMIN_MAIL:
            logger.error("ADMIN_MAIL is not set; cannot deliver contact form from %s", email)
            raise MailDeliveryError("Failed to send message. Please try again later.")
        self.send(
            self.settings.ADMIN_MAIL,
            f"Contact Us: {email}",
            text=(
                "Message from contact form\n"
                f"Email: {email}\n"
                f"Subject: {subject}\n"
                f"Message: {message}"
            ),
            reply_to=email,
        )
        logger.info("Contact form submitted by %s", email)
