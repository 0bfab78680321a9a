"""Factory for the optional mailing-list client."""

from studio_api.adapters.mailing_list.base import AbstractMailingListClient
from studio_api.adapters.mailing_list.mailerlite_client import MailerLiteClient
from studio_api.core.config import MailingListSettings, settings


def create_mailing_list_client(
    mailing_list_settings: MailingListSettings | None = None,
) -> AbstractMailingListClient | None:
    """Return a MailerLite client, or None when registration is not configured."""
    cfg = mailing_list_settings or settings.mailing_list
    if not cfg.api_key:
        return None
    return MailerLiteClient(
        cfg.api_key,
        group_id=cfg.group_id,
        base_url=cfg.base_url,
        timeout_seconds=cfg.timeout_seconds,
    )
