"""
Email service for StaffHub.
Sends HTML notification emails through Gmail SMTP, rendered from Jinja2 templates.
"""
import logging
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.utils import make_msgid
from typing import List, Dict, Any, Union
import aiosmtplib
from bs4 import BeautifulSoup
from jinja2 import Environment, FileSystemLoader, select_autoescape
import premailer

from app.config import Settings
from app.utils.helpers import long_date, format_date_range

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when a message could not be handed to the SMTP server."""


class EmailService:
    """Gmail SMTP transport; unconfigured (a valid state) without credentials."""

    def __init__(self, config: Settings):
        self.smtp_server = config.smtp_host
        self.smtp_port = config.smtp_port
        self.smtp_use_tls = config.smtp_use_tls
        self.username = config.gmail_user
        self.password = config.gmail_app_password
        self.from_name = config.email_from_name

        self.jinja_env = Environment(
            loader=FileSystemLoader(config.email_templates_dir),
            autoescape=select_autoescape(['html', 'xml'])
        )
        self.jinja_env.filters["long_date"] = long_date
        self.jinja_env.globals["date_range"] = format_date_range

    @property
    def configured(self) -> bool:
        return bool(self.username and self.password)

    @property
    def sender(self) -> str:
        return f"{self.from_name} <{self.username}>"

    def render(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template and inline its CSS for mail clients."""
        try:
            template = self.jinja_env.get_template(template_name)
            html = template.render(**context)
        except Exception as e:
            logger.error(f"Failed to render template '{template_name}': {str(e)}")
            raise
        return premailer.transform(html)

    async def send_mail(self, to: Union[str, List[str]], subject: str, html: str) -> str:
        """
        Send an HTML email.

        Args:
            to: One address or a list of addresses
            subject: Subject line
            html: Rendered HTML body

        Returns:
            The Message-ID of the sent message

        Raises:
            EmailDeliveryError: if the transport is unconfigured or SMTP fails
        """
        if not self.configured:
            raise EmailDeliveryError("Gmail credentials not configured")

        recipients = [to] if isinstance(to, str) else list(to)
        message_id = make_msgid(domain=self.username.split("@")[-1])

        mime_message = MIMEMultipart('alternative')
        mime_message['Subject'] = subject
        mime_message['From'] = self.sender
        mime_message['To'] = ", ".join(recipients)
        mime_message['Message-ID'] = message_id
        mime_message.attach(MIMEText(self._html_to_text(html), 'plain', 'utf-8'))
        mime_message.attach(MIMEText(html, 'html', 'utf-8'))

        smtp_client = aiosmtplib.SMTP(
            hostname=self.smtp_server,
            port=self.smtp_port,
            start_tls=self.smtp_use_tls
        )
        try:
            await smtp_client.connect()
            await smtp_client.login(self.username, self.password)
            await smtp_client.send_message(mime_message, recipients=recipients)
            await smtp_client.quit()
        except aiosmtplib.SMTPException as e:
            logger.error(f"SMTP send to {recipients} failed: {str(e)}")
            raise EmailDeliveryError(str(e)) from e
        except OSError as e:
            logger.error(f"SMTP connection to {self.smtp_server}:{self.smtp_port} failed: {str(e)}")
            raise EmailDeliveryError(str(e)) from e

        logger.info(f"Email '{subject}' sent to {recipients}")
        return message_id

    def _html_to_text(self, html_content: str) -> str:
        """Plain-text alternative part for the HTML body."""
        soup = BeautifulSoup(html_content, 'html.parser')
        return soup.get_text("\n", strip=True)
