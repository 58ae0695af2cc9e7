# services/notification_templates.py
"""
Rendering of scheduled notifications (rent reminders, lease expiry).
"""
from html import escape
from typing import NamedTuple, Optional

from schemas.ledger import Recipient
from schemas.notification import NotificationContext, NotificationKind
from utils.email import strip_html


class RenderedMessage(NamedTuple):
     subject: str
     html: str
     text: str
     sms: str


def cents_to_dollars(cents: int) -> str:
     """150000 -> '1,500.00'"""
     return f"{cents / 100:,.2f}"


def format_date(value) -> str:
     return value.strftime("%m/%d/%Y") if value else ""


def email_wrapper(content: str, app_name: str) -> str:
     return f"""
     <!DOCTYPE html>
     <html>
     <head><meta charset="utf-8"></head>
     <body style="margin: 0; padding: 0; background-color: #f8fafc; font-family: Arial, sans-serif;">
          <table width="100%" cellpadding="0" cellspacing="0" style="padding: 40px 20px;">
               <tr><td align="center">
                    <table width="600" cellpadding="0" cellspacing="0" style="background-color: #ffffff; border-radius: 8px;">
                         <tr><td style="padding: 32px 40px; border-bottom: 1px solid #e2e8f0;">
                              <h1 style="margin: 0; font-size: 24px; color: #0f172a;">{escape(app_name)}</h1>
                         </td></tr>
                         <tr><td style="padding: 40px;">{content}</td></tr>
                         <tr><td style="padding: 24px 40px; border-top: 1px solid #e2e8f0;">
                              <p style="margin: 0; font-size: 12px; color: #64748b; text-align: center;">
                                   This email was sent by {escape(app_name)}. If you didn't expect this email, you can safely ignore it.
                              </p>
                         </td></tr>
                    </table>
               </td></tr>
          </table>
     </body>
     </html>
     """


def _charges_table(context: NotificationContext) -> str:
     if not context.charges:
          return ""
     rows = "".join(
          f"<tr><td>{escape(charge.name)}</td><td style='text-align: right;'>${cents_to_dollars(charge.monthly_amount)}</td></tr>"
          for charge in context.charges
     )
     return f"<table width='100%' style='margin: 16px 0; font-size: 14px; color: #334155;'>{rows}</table>"


def render_rent_reminder(
     kind: NotificationKind,
     recipient: Recipient,
     context: NotificationContext,
     app_name: str,
     app_url: str,
) -> RenderedMessage:
     amount = cents_to_dollars(context.amount_due)
     due = format_date(context.due_date)
     if kind == NotificationKind.RENT_LATE:
          due = f"{due} (OVERDUE)"
          intro = "Your rent payment is past due. Please pay as soon as possible."
     elif kind == NotificationKind.RENT_DUE_TODAY:
          intro = "This is a friendly reminder that your rent payment is due today."
     else:
          intro = "This is a friendly reminder that your rent payment is coming up."

     fee_line = ""
     if context.late_fee:
          fee_line = f"<p style='margin: 0 0 8px; font-size: 14px; color: #b91c1c;'>Includes late fee: ${cents_to_dollars(context.late_fee)}</p>"

     content = f"""
          <h2 style="margin: 0 0 16px; font-size: 20px; color: #0f172a;">Rent Payment Reminder</h2>
          <p style="margin: 0 0 16px; font-size: 16px; color: #334155;">Hi {escape(recipient.name)},</p>
          <p style="margin: 0 0 24px; font-size: 16px; color: #334155;">{intro}</p>
          <div style="margin: 16px 0; padding: 24px; background-color: #f8fafc; border-radius: 8px; text-align: center;">
               <p style="margin: 0 0 8px; font-size: 14px; color: #64748b;">{escape(context.property_name)}</p>
               <p style="margin: 0 0 8px; font-size: 32px; font-weight: 700; color: #0f172a;">${amount}</p>
               {fee_line}
               <p style="margin: 0; font-size: 14px; color: #64748b;">Due: {due}</p>
          </div>
          {_charges_table(context)}
          <a href="{app_url}/renter/payments" style="display: inline-block; padding: 12px 24px; background-color: #0f172a; color: #ffffff; text-decoration: none; border-radius: 6px;">
               View Payment Details
          </a>
     """
     html = email_wrapper(content, app_name)
     return RenderedMessage(
          subject=f"Rent Reminder: ${amount} due {due}",
          html=html,
          text=strip_html(html),
          sms=f"{app_name}: rent of ${amount} for {context.property_name} due {due}.",
     )


def render_lease_expiring(
     recipient: Recipient,
     context: NotificationContext,
     app_name: str,
     app_url: str,
) -> RenderedMessage:
     days = context.days_until_expiry
     expiry = format_date(context.end_date)
     if recipient.role == "tenant":
          body = (
               f"Your lease at <strong>{escape(context.property_name)}</strong> will expire in "
               f"<strong>{days} days</strong> ({expiry})."
          )
          follow_up = "Please contact your landlord to discuss renewal options or move-out procedures."
          link = f"{app_url}/renter/lease"
     else:
          unit = f", unit {escape(context.unit_number)}" if context.unit_number else ""
          body = (
               f"The lease for <strong>{escape(context.tenant_name)}</strong> at "
               f"<strong>{escape(context.property_name)}</strong>{unit} will expire in "
               f"<strong>{days} days</strong> ({expiry})."
          )
          follow_up = "Consider offering a renewal or scheduling the move-out inspection."
          link = f"{app_url}/landlord/leases/{context.lease_id}"

     content = f"""
          <h2 style="margin: 0 0 16px; font-size: 20px; color: #ca8a04;">Lease Expiring Soon</h2>
          <p style="margin: 0 0 16px; font-size: 16px; color: #334155;">Hi {escape(recipient.name)},</p>
          <p style="margin: 0 0 24px; font-size: 16px; color: #334155;">{body}</p>
          <p style="margin: 0 0 24px; font-size: 16px; color: #334155;">{follow_up}</p>
          <a href="{link}" style="display: inline-block; padding: 12px 24px; background-color: #0f172a; color: #ffffff; text-decoration: none; border-radius: 6px;">
               View Lease Details
          </a>
     """
     html = email_wrapper(content, app_name)
     return RenderedMessage(
          subject=f"Lease Expiring: {days} days remaining",
          html=html,
          text=strip_html(html),
          sms=f"{app_name}: lease at {context.property_name} expires in {days} days ({expiry}).",
     )


def render_notification(
     kind: NotificationKind,
     recipient: Recipient,
     context: NotificationContext,
     app_name: str,
     app_url: str,
) -> Optional[RenderedMessage]:
     """Render a notification, or None for a kind with no template."""
     if kind in (NotificationKind.RENT_DUE_SOON, NotificationKind.RENT_DUE_TODAY, NotificationKind.RENT_LATE):
          return render_rent_reminder(kind, recipient, context, app_name, app_url)
     if kind == NotificationKind.LEASE_EXPIRING:
          return render_lease_expiring(recipient, context, app_name, app_url)
     return None
