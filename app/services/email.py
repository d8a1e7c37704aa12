import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from app.core.config import settings

logger = logging.getLogger(__name__)

def send_email(to_email: str, subject: str, body: str) -> bool:
    try:
        msg = MIMEMultipart()
        msg['From'] = settings.MAIL_FROM
        msg['To'] = to_email
        msg['Subject'] = subject
        msg.attach(MIMEText(body, 'html'))

        if settings.MAIL_SSL:
            logger.info("Connecting to %s:%s via SSL...", settings.MAIL_SERVER, settings.MAIL_PORT)
            server = smtplib.SMTP_SSL(settings.MAIL_SERVER, settings.MAIL_PORT)
        else:
            logger.info("Connecting to %s:%s via TLS...", settings.MAIL_SERVER, settings.MAIL_PORT)
            server = smtplib.SMTP(settings.MAIL_SERVER, settings.MAIL_PORT)

        # leaving the block quits and closes the connection, also on errors
        with server:
            if not settings.MAIL_SSL:
                server.starttls()
            server.login(settings.MAIL_USERNAME, settings.MAIL_PASSWORD)
            server.sendmail(settings.MAIL_FROM, to_email, msg.as_string())
        logger.info("Email successfully sent to %s", to_email)
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email to %s: %s", to_email, e)
        return False

def send_password_reset_email(to_email: str, user_name: str, token: str) -> bool:
    link = f"{settings.SITE_URL.rstrip('/')}/reset-password?token={token}"
    body = f"""
    <p>Namaste {user_name},</p>
    <p>We received a request to reset your password. The link below is valid for
    {settings.RESET_TOKEN_EXPIRE_MINUTES} minutes:</p>
    <p><a href="{link}">Reset your password</a></p>
    <p>If you did not ask for this, you can ignore this email.</p>
    """
    return send_email(to_email, "Reset your password", body)
