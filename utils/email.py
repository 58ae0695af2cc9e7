# utils/email.py
"""
Brevo transactional email / SMS transport.

Thin wrappers over the Brevo HTTP API. They raise on any failure; callers
that must not raise (the notification gateway) turn errors into results.
"""
import re
from typing import Optional

import requests

import config

BREVO_EMAIL_URL = "https://api.brevo.com/v3/smtp/email"
BREVO_SMS_URL = "https://api.brevo.com/v3/transactionalSMS/sms"
REQUEST_TIMEOUT = 10


class EmailDeliveryError(Exception):
     """Brevo rejected the request or is not configured."""


def strip_html(html: str) -> str:
     """Plain-text fallback for an HTML body."""
     return re.sub(r"\s+", " ", re.sub(r"<[^>]*>", "", html)).strip()


def send_transactional_email(
     to_email: str,
     subject: str,
     html: str,
     to_name: Optional[str] = None,
     text: Optional[str] = None,
     api_key: Optional[str] = None,
     sender_email: Optional[str] = None,
     sender_name: Optional[str] = None,
) -> Optional[str]:
     """
     Send one email through Brevo.

     Returns:
          The Brevo message id, if the response carried one

     Raises:
          EmailDeliveryError: If no API key is configured or Brevo rejects the request
          requests.RequestException: On network failure
     """
     key = api_key or config.BREVO_API_KEY
     if not key:
          raise EmailDeliveryError("BREVO_API_KEY is not set")

     recipient = {"email": to_email}
     if to_name:
          recipient["name"] = to_name

     response = requests.post(
          BREVO_EMAIL_URL,
          headers={
               "api-key": key,
               "Content-Type": "application/json",
          },
          json={
               "sender": {
                    "name": sender_name or config.APP_NAME,
                    "email": sender_email or config.EMAIL_FROM,
               },
               "to": [recipient],
               "subject": subject,
               "htmlContent": html,
               "textContent": text or strip_html(html),
          },
          timeout=REQUEST_TIMEOUT,
     )
     if response.status_code not in (200, 201, 202):
          raise EmailDeliveryError(f"Brevo error: {response.status_code} {response.text}")
     try:
          return response.json().get("messageId")
     except ValueError:
          return None


def send_transactional_sms(
     to_phone: str,
     content: str,
     sender: str,
     api_key: Optional[str] = None,
) -> Optional[str]:
     """
     Send one SMS through Brevo.

     Raises:
          EmailDeliveryError: If no API key is configured or Brevo rejects the request
          requests.RequestException: On network failure
     """
     key = api_key or config.BREVO_API_KEY
     if not key:
          raise EmailDeliveryError("BREVO_API_KEY is not set")

     response = requests.post(
          BREVO_SMS_URL,
          headers={
               "api-key": key,
               "Content-Type": "application/json",
          },
          json={
               "sender": sender,
               "recipient": to_phone,
               "content": content,
               "type": "transactional",
          },
          timeout=REQUEST_TIMEOUT,
     )
     if response.status_code not in (200, 201, 202):
          raise EmailDeliveryError(f"Brevo SMS error: {response.status_code} {response.text}")
     try:
          message_id = response.json().get("messageId")
     except ValueError:
          return None
     return str(message_id) if message_id is not None else None
