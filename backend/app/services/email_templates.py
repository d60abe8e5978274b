"""HTML bodies for account emails."""
from html import escape
from urllib.parse import urlencode

CONFIRMATION_SUBJECT = "Confirm your email address"
NEW_PASSWORD_SUBJECT = "New password"


def build_confirmation_link(link_base: str, token: str) -> str:
    return f"{link_base}?{urlencode({'token': token})}"


def _wrap(title: str, body: str) -> str:
    return f"""
    <html>
    <body style="font-family: Helvetica, Arial, sans-serif; max-width: 580px; margin: 0 auto; padding: 20px; color: #0b0c0c;">
        <h1 style="background: #0b0c0c; color: #ffffff; padding: 12px; font-size: 24px;">{title}</h1>
        <div style="border-top: 10px solid #1d70b8; padding-top: 20px; font-size: 19px; line-height: 25px;">
            {body}
        </div>
    </body>
    </html>
    """


def build_confirmation_email(link: str, expire_minutes: int) -> str:
    body = f"""
        <p>Thank you for registering in Budget Tracker. Please click on the below link to activate your account:</p>
        <blockquote style="border-left: 10px solid #b1b4b6; padding: 15px 0 0.1px 15px;">
            <p><a href="{escape(link)}">Activate Now</a></p>
        </blockquote>
        <p>Link will expire in {expire_minutes} minutes.</p>
        <p>See you soon</p>
    """
    return _wrap("Confirm your email", body)


def build_new_password_email(new_password: str) -> str:
    body = f"""
        <p>Your password has been reset. Here is your new password:</p>
        <blockquote style="border-left: 10px solid #b1b4b6; padding: 15px 0 0.1px 15px;">
            <p>{escape(new_password)}</p>
        </blockquote>
        <p>For security reasons, please change your password after logging in.</p>
    """
    return _wrap("New Password Confirmation", body)
