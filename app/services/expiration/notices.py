# app/services/expiration/notices.py
"""Author notification templates."""

from dataclasses import dataclass

from app.models import ContentItem

EXPIRING_SOON_SUBJECT = "Your Post Will Expire Soon!"
EXPIRED_SUBJECT = "Post Expiration"


@dataclass
class Notice:
    recipient: str | None
    subject: str
    body: str


def _greeting(item: ContentItem) -> str:
    name = item.author.display_name if item.author else "there"
    return f"Hello {name},\n\n"


def _recipient(item: ContentItem) -> str | None:
    return item.author.email if item.author else None


def expiring_soon_notice(item: ContentItem, site_url: str) -> Notice:
    body = _greeting(item)
    body += f"You are the author of a {item.kind} on {site_url} that will expire in 2 weeks!\n\n"
    body += f"{item.kind.capitalize()}: {item.title}\n\n"
    body += (
        f"Upon expiration, the {item.kind} will be marked as expired and hidden from visitors. "
        "It will not be deleted.\n\n"
    )
    body += "Thanks!\n"
    return Notice(recipient=_recipient(item), subject=EXPIRING_SOON_SUBJECT, body=body)


def expired_notice(item: ContentItem, site_url: str) -> Notice:
    body = _greeting(item)
    body += f"You are the author of a {item.kind} on {site_url} that has expired!\n\n"
    body += f"{item.kind.capitalize()}: {item.title}\n\n"
    body += f"The {item.kind} has been marked as expired and is now hidden from visitors.\n\n"
    body += "Thanks!\n"
    return Notice(recipient=_recipient(item), subject=EXPIRED_SUBJECT, body=body)
