"""Outbound email notifications.

Sending is fire-and-forget: the credential service hands each message to the
NotificationDispatcher, which runs it on a small thread pool and logs the
outcome. A failed send never reaches the HTTP response.
"""

import logging
import smtplib
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Protocol

from joyxora.config import Settings

logger = logging.getLogger("joyxora")


def reset_link(frontend_url: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}/reset-password?token={token}"


class Notifier(Protocol):
    """Delivers account emails."""

    def send_welcome(self, email: str, username: str) -> None: ...

    def send_reset_link(self, email: str, username: str, token: str) -> None: ...


class SmtpNotifier:
    """Sends HTML emails through an SMTP relay with STARTTLS."""

    def __init__(self, settings: Settings) -> None:
        self.server = settings.SMTP_SERVER
        self.port = settings.SMTP_PORT
        self.user = settings.EMAIL_USER
        self.password = settings.EMAIL_PASS
        self.from_name = settings.EMAIL_FROM_NAME
        self.frontend_url = settings.FRONTEND_URL
        self.reset_expire_minutes = settings.RESET_TOKEN_EXPIRE_MINUTES
        self.timeout = settings.SMTP_TIMEOUT_SECONDS

    def _send(self, to: str, subject: str, html: str) -> None:
        message = MIMEMultipart()
        message["From"] = f'"{self.from_name}" <{self.user}>'
        message["To"] = to
        message["Subject"] = subject
        message.attach(MIMEText(html, "html"))

        with smtplib.SMTP(self.server, self.port, timeout=self.timeout) as server:
            server.starttls()
            server.login(self.user, self.password)
            server.send_message(message)

    def send_welcome(self, email: str, username: str) -> None:
        html = f"""
        <div style="font-family:Arial;max-width:600px;margin:auto;padding:20px;border-radius:10px;background:#f8fff8;">
          <h2 style="color:#10b981;">Welcome, {username}!</h2>
          <p>Thank you for joining <b>Joyxora</b>. Your account has been created successfully.</p>
          <p>Start encrypting your files and chatting securely today!</p>
        </div>
        """
        self._send(email, "Welcome to Joyxora", html)

    def send_reset_link(self, email: str, username: str, token: str) -> None:
        link = reset_link(self.frontend_url, token)
        if self.reset_expire_minutes % 60 == 0:
            hours = self.reset_expire_minutes // 60
            lifetime = f"{hours} hour" if hours == 1 else f"{hours} hours"
        else:
            lifetime = f"{self.reset_expire_minutes} minutes"
        html = f"""
        <div style="font-family:Arial;max-width:600px;margin:auto;padding:20px;border-radius:10px;border:1px solid #10b981;">
          <h2 style="color:#10b981;">Password Reset Request</h2>
          <p>Hello {username},</p>
          <p>Click below to reset your password:</p>
          <a href="{link}" style="display:inline-block;padding:12px 24px;background:#10b981;color:white;border-radius:8px;">Reset Password</a>
          <p style="color:#666;font-size:12px;margin-top:20px;">This link expires in {lifetime}.</p>
          <p style="color:#666;font-size:12px;">If you didn't request this, please ignore this email.</p>
        </div>
        """
        self._send(email, "Reset your Joyxora password", html)


class LoggingNotifier:
    """Writes emails to the log. Used when SMTP credentials are not configured."""

    def __init__(self, frontend_url: str) -> None:
        self.frontend_url = frontend_url

    def send_welcome(self, email: str, username: str) -> None:
        logger.info("WELCOME EMAIL: to=%s username=%s", email, username)

    def send_reset_link(self, email: str, username: str, token: str) -> None:
        logger.info("PASSWORD RESET: to=%s link=%s", email, reset_link(self.frontend_url, token))


class NotificationDispatcher:
    """Runs notifier calls in the background and records how they went."""

    def __init__(self, notifier: Notifier, max_workers: int = 2) -> None:
        self.notifier = notifier
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="joyxora-mail")
        self._lock = threading.Lock()
        self._pending: set[Future] = set()
        self.sent = 0
        self.failed = 0

    def send_welcome(self, email: str, username: str) -> Future:
        return self._submit("welcome", email, self.notifier.send_welcome, email, username)

    def send_reset_link(self, email: str, username: str, token: str) -> Future:
        return self._submit("reset", email, self.notifier.send_reset_link, email, username, token)

    def _submit(self, kind: str, email: str, fn, *args) -> Future:
        future = self._executor.submit(self._run, kind, email, fn, *args)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        logger.info("Dispatched %s email to %s", kind, email)
        return future

    def _run(self, kind: str, email: str, fn, *args) -> None:
        try:
            fn(*args)
        except Exception:
            with self._lock:
                self.failed += 1
            logger.exception("Failed to send %s email to %s", kind, email)
            raise
        with self._lock:
            self.sent += 1
        logger.info("Sent %s email to %s", kind, email)

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def join(self, timeout: float | None = None) -> None:
        """Wait for every dispatched send to finish."""
        with self._lock:
            pending = list(self._pending)
        wait_futures(pending, timeout=timeout)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
