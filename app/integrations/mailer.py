# app/integrations/mailer.py
from __future__ import annotations

import logging
from html import escape

import requests

from app.config import settings

logger = logging.getLogger(__name__)

BREVO_SEND_URL = "https://api.brevo.com/v3/smtp/email"


class MailerError(RuntimeError):
    pass


def _sender() -> dict:
    email = settings.BREVO_SENDER_EMAIL.strip()
    if not email:
        raise MailerError("BREVO_SENDER_EMAIL não configurado.")
    sender = {"email": email}
    if settings.BREVO_SENDER_NAME:
        sender["name"] = settings.BREVO_SENDER_NAME
    return sender


def send_email(to: str, subject: str, html: str) -> None:
    """
    POST /v3/smtp/email (Brevo)
    Header: api-key: <BREVO_API_KEY>
    Qualquer resposta fora de 2xx vira MailerError.
    """
    api_key = settings.BREVO_API_KEY.strip()
    if not api_key:
        raise MailerError("BREVO_API_KEY não configurado.")

    payload = {
        "sender": _sender(),
        "to": [{"email": to}],
        "subject": subject,
        "htmlContent": html,
    }
    headers = {
        "accept": "application/json",
        "api-key": api_key,
        "content-type": "application/json",
    }

    try:
        resp = requests.post(
            BREVO_SEND_URL,
            headers=headers,
            json=payload,
            timeout=settings.MAIL_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error("mailer: erro de rede ao enviar para %s: %s", to, e)
        raise MailerError("Falha de rede ao enviar email.") from e

    if not (200 <= resp.status_code < 300):
        logger.error("mailer: brevo status=%s body=%s", resp.status_code, resp.text[:300])
        raise MailerError(f"Brevo recusou o envio (status={resp.status_code}).")

    logger.info("mailer: email enviado para %s", to)


def confirmation_email_html(*, user_email: str, accept_url: str, reject_url: str) -> str:
    return f"""\
<!DOCTYPE html>
<html>
<head><meta charset="UTF-8" /><title>Confirmação de Cadastro</title></head>
<body>
  <table cellpadding="0" cellspacing="0" border="0"
         style="width:100%;max-width:600px;margin:0 auto;background-color:#f0f0f5;">
    <tr><td style="padding:50px;text-align:center;">
      <h1 style="font-size:32px;color:#3cb371;">Confirmação de Cadastro</h1>
      <p style="font-size:18px;">Email: {escape(user_email)}</p>
      <p style="font-size:18px;">Olá,</p>
      <p style="font-size:18px;">Para ativar a conta e começar a utilizar a plataforma,
         confirme o endereço de email clicando no botão abaixo:</p>
      <a href="{escape(accept_url)}"
         style="display:block;background-color:#3cb371;color:#ffffff;padding:15px 30px;border-radius:5px;font-size:20px;">
         Ativar Conta</a>
      <a href="{escape(reject_url)}"
         style="display:block;background-color:#ff0000;color:#ffffff;padding:15px 30px;border-radius:5px;font-size:20px;margin-top:12px;">
         Recusar Conta</a>
      <p style="font-size:18px;">Se você não solicitou essa confirmação, ignore este email.</p>
      <p style="font-size:18px;">Obrigado!</p>
    </td></tr>
  </table>
</body>
</html>
"""
