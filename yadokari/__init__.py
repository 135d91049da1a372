"""Webhook-triggered notifier for newly published rental listings."""

__version__ = "0.1.0"
