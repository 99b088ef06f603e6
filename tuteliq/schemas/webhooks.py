"""
tuteliq/schemas/webhooks.py
============================
Webhook management results.
"""

from dataclasses import dataclass
from typing import Any

from tuteliq.schemas.safety import opt_int, str_list


@dataclass(frozen=True)
class Webhook:
    id: str
    url: str
    events: list[str]
    active: bool
    secret: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Webhook":
        return cls(
            id=data.get("id", ""),
            url=data.get("url", ""),
            events=str_list(data.get("events")),
            active=bool(data.get("active", False)),
            secret=data.get("secret"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


@dataclass(frozen=True)
class WebhookListResult:
    webhooks: list[Webhook]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "WebhookListResult":
        return cls(webhooks=[Webhook.from_json(w) for w in data.get("webhooks") or []])


@dataclass(frozen=True)
class WebhookActionResult:
    """Result of creating or updating a webhook."""

    message: str
    webhook: Webhook

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "WebhookActionResult":
        return cls(
            message=data.get("message", ""),
            webhook=Webhook.from_json(data.get("webhook") or {}),
        )


@dataclass(frozen=True)
class DeleteWebhookResult:
    message: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "DeleteWebhookResult":
        return cls(message=data.get("message", ""))


@dataclass(frozen=True)
class TestWebhookResult:
    __test__ = False  # not a pytest test class

    message: str
    status_code: int | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "TestWebhookResult":
        return cls(
            message=data.get("message", ""),
            status_code=opt_int(data.get("status_code")),
        )


@dataclass(frozen=True)
class RegenerateSecretResult:
    message: str
    secret: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "RegenerateSecretResult":
        return cls(message=data.get("message", ""), secret=data.get("secret", ""))
