"""Outbound email delivery."""

from __future__ import annotations

from flask import current_app
import resend

from models.user import User


VERIFICATION_SUBJECT = "Welcome to Adaayien - Verify Your Email"


def build_verification_url(token: str) -> str:
    backend_url = current_app.config.get("BACKEND_URL", "").rstrip("/")
    return f"{backend_url}/auth/verify-email/{token}"


def _verification_bodies(user: User, url: str) -> tuple[str, str]:
    hours = int(current_app.config["EMAIL_VERIFICATION_TTL"].total_seconds() // 3600)
    html = f"""<!DOCTYPE html>
<html>
  <body style="margin:0;background:#f9fafb;font-family:Arial,sans-serif;">
    <div style="max-width:600px;margin:0 auto;">
      <div style="background:#6366f1;color:#ffffff;padding:20px;text-align:center;">
        <h1 style="margin:0;">Welcome to Adaayien</h1>
      </div>
      <div style="padding:30px;">
        <p>Hi {user.name},</p>
        <p>Please confirm your email address to activate your account.</p>
        <p>
          <a href="{url}" style="display:inline-block;background:#6366f1;color:#ffffff;
             padding:12px 24px;text-decoration:none;border-radius:6px;font-weight:bold;">
            Verify email
          </a>
        </p>
        <p>This link expires in {hours} hours. If you did not create an account you can
           ignore this message.</p>
      </div>
    </div>
  </body>
</html>"""
    text = (
        f"Hi {user.name},\n\nVerify your Adaayien account by opening this link "
        f"within {hours} hours:\n{url}\n"
    )
    return html, text


def _send_via_resend(payload: dict) -> tuple[bool, str | None]:
    api_key = (current_app.config.get("RESEND_API_KEY") or "").strip()
    if not api_key:
        return False, "Resend API key is not configured."

    resend.api_key = api_key
    try:
        response = resend.Emails.send(payload)
    except Exception as exc:
        return False, str(exc)

    if not isinstance(response, dict) or not response.get("id"):
        return False, str(response)
    return True, None


def deliver(payload: dict) -> tuple[bool, str | None]:
    """Send ``payload`` with the configured provider."""

    provider = current_app.config.get("MAIL_PROVIDER", "log")
    if provider == "resend":
        return _send_via_resend(payload)
    if provider == "log":
        current_app.logger.info(
            "Email to %s (%s):\n%s", payload["to"], payload["subject"], payload["text"]
        )
        return True, None
    return False, f"Unknown mail provider: {provider}"


def send_verification_email(user: User, token: str) -> bool:
    """Email the verification link; returns whether delivery succeeded."""

    url = build_verification_url(token)
    html, text = _verification_bodies(user, url)
    payload = {
        "from": current_app.config.get("MAIL_FROM"),
        "to": [user.email],
        "subject": VERIFICATION_SUBJECT,
        "html": html,
        "text": text,
    }
    sent, error = deliver(payload)
    if sent:
        current_app.logger.info("Verification email sent to %s", user.email)
    else:
        current_app.logger.warning(
            "Failed to send verification email to %s: %s", user.email, error
        )
    return sent
