"""Mailing-list adapters (subscriber registration)."""

from studio_api.adapters.mailing_list.base import AbstractMailingListClient
from studio_api.adapters.mailing_list.factory import create_mailing_list_client
from studio_api.adapters.mailing_list.mailerlite_client import MailerLiteClient

__all__ = [
    "AbstractMailingListClient",
    "MailerLiteClient",
    "create_mailing_list_client",
]
