"""
tuteliq/schemas/account.py
===========================
Account data rights (GDPR Articles 7, 15, 16, 17, 20) and breach
management (Articles 33/34) results.
"""

from dataclasses import dataclass
from typing import Any

from tuteliq.schemas.safety import str_list


# ---------------------------------------------------------------------------
# Erasure / portability
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AccountDeletionResult:
    message: str
    deleted_count: int

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "AccountDeletionResult":
        return cls(
            message=data.get("message", ""),
            deleted_count=int(data.get("deleted_count", 0)),
        )


@dataclass(frozen=True)
class AccountExportResult:
    user_id: str
    exported_at: str
    data: dict[str, Any]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "AccountExportResult":
        # This endpoint answers in camelCase.
        return cls(
            user_id=data.get("userId", ""),
            exported_at=data.get("exportedAt", ""),
            data=data.get("data") or {},
        )


# ---------------------------------------------------------------------------
# Consent
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConsentRecord:
    id: str
    user_id: str
    consent_type: str
    status: str
    version: str
    created_at: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ConsentRecord":
        return cls(
            id=data.get("id", ""),
            user_id=data.get("user_id", ""),
            consent_type=data.get("consent_type", ""),
            status=data.get("status", ""),
            version=data.get("version", ""),
            created_at=data.get("created_at", ""),
        )


@dataclass(frozen=True)
class ConsentActionResult:
    message: str
    consent: ConsentRecord

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ConsentActionResult":
        return cls(
            message=data.get("message", ""),
            consent=ConsentRecord.from_json(data.get("consent") or {}),
        )


@dataclass(frozen=True)
class ConsentStatusResult:
    consents: list[ConsentRecord]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ConsentStatusResult":
        return cls(consents=[ConsentRecord.from_json(c) for c in data.get("consents") or []])


# ---------------------------------------------------------------------------
# Rectification / audit
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RectifyDataResult:
    message: str
    updated_fields: list[str]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "RectifyDataResult":
        return cls(
            message=data.get("message", ""),
            updated_fields=str_list(data.get("updated_fields")),
        )


@dataclass(frozen=True)
class AuditLogEntry:
    id: str
    user_id: str
    action: str
    created_at: str
    details: dict[str, Any] | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "AuditLogEntry":
        return cls(
            id=data.get("id", ""),
            user_id=data.get("user_id", ""),
            action=data.get("action", ""),
            created_at=data.get("created_at", ""),
            details=data.get("details"),
        )


@dataclass(frozen=True)
class AuditLogsResult:
    audit_logs: list[AuditLogEntry]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "AuditLogsResult":
        return cls(audit_logs=[AuditLogEntry.from_json(e) for e in data.get("audit_logs") or []])


# ---------------------------------------------------------------------------
# Breach management
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BreachRecord:
    id: str
    title: str
    description: str
    severity: str
    status: str
    notification_status: str
    affected_user_ids: list[str]
    data_categories: list[str]
    reported_by: str
    notification_deadline: str
    created_at: str
    updated_at: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "BreachRecord":
        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            description=data.get("description", ""),
            severity=data.get("severity", ""),
            status=data.get("status", ""),
            notification_status=data.get("notification_status", ""),
            affected_user_ids=str_list(data.get("affected_user_ids")),
            data_categories=str_list(data.get("data_categories")),
            reported_by=data.get("reported_by", ""),
            notification_deadline=data.get("notification_deadline", ""),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass(frozen=True)
class LogBreachResult:
    message: str
    breach: BreachRecord

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "LogBreachResult":
        return cls(
            message=data.get("message", ""),
            breach=BreachRecord.from_json(data.get("breach") or {}),
        )


@dataclass(frozen=True)
class BreachListResult:
    breaches: list[BreachRecord]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "BreachListResult":
        return cls(breaches=[BreachRecord.from_json(b) for b in data.get("breaches") or []])


@dataclass(frozen=True)
class BreachResult:
    breach: BreachRecord

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "BreachResult":
        return cls(breach=BreachRecord.from_json(data.get("breach") or {}))
