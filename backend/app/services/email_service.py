"""
Service d'envoi d'emails SMTP.
Utilisé pour prévenir le superviseur lorsqu'un garde déclenche une alerte de panique.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from app.config import settings

logger = logging.getLogger(__name__)


def send_panic_alert_email(
    to_email: str,
    guard_name: str,
    latitude: float,
    longitude: float,
    post_name: Optional[str] = None,
) -> None:
    """
    Envoie un email HTML d'alerte de panique avec un lien vers la position du garde.
    Lève une exception en cas d'échec SMTP.
    """
    maps_url = f"https://www.google.com/maps?q={latitude},{longitude}"
    post_line = f" au poste <strong>{post_name}</strong>" if post_name else ""

    msg = MIMEMultipart("alternative")
    msg["From"] = settings.SMTP_FROM
    msg["To"] = to_email
    msg["Subject"] = f"PatrolTrack — ALERTE DE PANIQUE : {guard_name}"

    html_content = f"""
    <html>
      <body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: auto;">
        <h2 style="color: #d93025;">Alerte de panique</h2>
        <p>
          Le garde <strong>{guard_name}</strong> a déclenché une alerte de panique{post_line}.
        </p>
        <p>
          Position signalée : <a href="{maps_url}">{latitude}, {longitude}</a>
        </p>
        <hr style="border: none; border-top: 1px solid #eee;" />
        <p style="font-size: 12px; color: #888;">
          Ce message est généré automatiquement par PatrolTrack. Ne pas répondre à cet email.
        </p>
      </body>
    </html>
    """
    msg.attach(MIMEText(html_content, "html", "utf-8"))

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
        if settings.SMTP_USE_TLS:
            server.starttls()
        if settings.SMTP_USERNAME:
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.send_message(msg)

    logger.info("Email d'alerte envoyé à %s (garde %s)", to_email, guard_name)
