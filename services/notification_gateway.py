# services/notification_gateway.py
"""
Notification Gateway - delivers scheduled notifications to one recipient.

The scheduler core only sees NotificationGateway.send_reminder(), which
always returns a SendResult. Delivery failures are values, never
exceptions, so one bad address cannot stop a tick.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests

import config
from schemas.ledger import Recipient
from schemas.notification import NotificationContext, NotificationKind, SendResult
from services.notification_templates import render_notification
from utils.email import EmailDeliveryError, send_transactional_email, send_transactional_sms

logger = logging.getLogger(__name__)


class NotificationGateway(ABC):
     """Outbound notification channel."""

     @abstractmethod
     def send_reminder(
          self,
          recipient: Recipient,
          kind: NotificationKind,
          context: NotificationContext
     ) -> SendResult:
          """Deliver one notification. Must not raise."""


class BrevoNotificationGateway(NotificationGateway):
     """
     Email through Brevo, plus SMS when an SMS sender is configured and the
     recipient has a phone number. Email delivery decides the result; SMS is
     best effort.
     """

     def __init__(
          self,
          api_key: Optional[str] = None,
          sender_email: Optional[str] = None,
          app_name: Optional[str] = None,
          app_url: Optional[str] = None,
          sms_sender: Optional[str] = None,
     ):
          self.api_key = api_key or config.BREVO_API_KEY
          self.sender_email = sender_email or config.EMAIL_FROM
          self.app_name = app_name or config.APP_NAME
          self.app_url = app_url or config.APP_URL
          self.sms_sender = sms_sender if sms_sender is not None else config.BREVO_SMS_SENDER

     def send_reminder(
          self,
          recipient: Recipient,
          kind: NotificationKind,
          context: NotificationContext
     ) -> SendResult:
          if not recipient.email:
               return SendResult.failed(f"{recipient.role} has no email address")

          message = render_notification(kind, recipient, context, self.app_name, self.app_url)
          if message is None:
               return SendResult.failed(f"no template for {kind.value}")

          try:
               message_id = send_transactional_email(
                    to_email=recipient.email,
                    to_name=recipient.name,
                    subject=message.subject,
                    html=message.html,
                    text=message.text,
                    api_key=self.api_key,
                    sender_email=self.sender_email,
                    sender_name=self.app_name,
               )
          except (EmailDeliveryError, requests.RequestException) as e:
               logger.warning(f"[Gateway] {kind.value} to {recipient.email} failed: {e}")
               return SendResult.failed(str(e))

          if self.sms_sender and recipient.phone:
               try:
                    send_transactional_sms(recipient.phone, message.sms, self.sms_sender, api_key=self.api_key)
               except (EmailDeliveryError, requests.RequestException) as e:
                    logger.warning(f"[Gateway] SMS {kind.value} to {recipient.phone} failed: {e}")

          logger.info(f"[Gateway] Sent {kind.value} to {recipient.email}")
          return SendResult.ok(message_id=str(message_id) if message_id is not None else None)
