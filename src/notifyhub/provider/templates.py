"""HTML notification template

Renders the plain message into a minimal inline-styled HTML document so every
email carries a readable HTML alternative next to the text part.
"""

from html import escape


def _nl2br(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\n", "<br/>")


def build_notification_html(subject: str, message: str, org_name: str = "MADPC") -> str:
    """Build the HTML alternative for a notification email"""
    org = escape(org_name)
    return f"""
  <div style="font-family: Arial, sans-serif; background:#f6f9fc; padding:24px;">
    <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="max-width:640px;margin:0 auto;background:#ffffff;border-radius:8px;overflow:hidden;border:1px solid #e6eaf1;">
      <tr>
        <td style="background:#0f62fe;color:#ffffff;padding:16px 20px;font-size:18px;font-weight:600;">
          {org} Notification
        </td>
      </tr>
      <tr>
        <td style="padding:20px;">
          <h1 style="margin:0 0 12px 0;font-size:18px;color:#111827;">{escape(subject)}</h1>
          <div style="font-size:14px;line-height:1.6;color:#374151;white-space:pre-wrap;">{_nl2br(escape(message))}</div>
        </td>
      </tr>
      <tr>
        <td style="padding:16px 20px;color:#6b7280;font-size:12px;background:#f9fafb;border-top:1px solid #e6eaf1;">
          This email was sent by {org}. Please do not share sensitive information over email.
        </td>
      </tr>
    </table>
  </div>
"""
