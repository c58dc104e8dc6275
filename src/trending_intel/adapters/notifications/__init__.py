"""Notification adapters."""

from trending_intel.adapters.notifications.resend_sender import ResendEmailSender

__all__ = ["ResendEmailSender"]
