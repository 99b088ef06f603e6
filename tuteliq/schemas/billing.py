"""
tuteliq/schemas/billing.py
===========================
Pricing and usage-reporting results.

Not to be confused with ``tuteliq.transport.Usage``, the per-response
monthly counters read from headers.
"""

from dataclasses import dataclass
from typing import Any

from tuteliq.schemas.safety import str_list


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PricingPlan:
    name: str
    price: str
    messages: str
    features: list[str]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "PricingPlan":
        return cls(
            name=data.get("name", ""),
            price=str(data.get("price", "")),
            messages=str(data.get("messages", "")),
            features=str_list(data.get("features")),
        )


@dataclass(frozen=True)
class PricingResult:
    plans: list[PricingPlan]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "PricingResult":
        return cls(plans=[PricingPlan.from_json(p) for p in data.get("plans") or []])


@dataclass(frozen=True)
class PricingDetailPlan:
    name: str
    tier: str
    price: dict[str, Any]
    limits: dict[str, Any]
    features: dict[str, Any]
    endpoints: list[str]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "PricingDetailPlan":
        return cls(
            name=data.get("name", ""),
            tier=data.get("tier", ""),
            price=data.get("price") or {},
            limits=data.get("limits") or {},
            features=data.get("features") or {},
            endpoints=str_list(data.get("endpoints")),
        )


@dataclass(frozen=True)
class PricingDetailsResult:
    plans: list[PricingDetailPlan]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "PricingDetailsResult":
        return cls(plans=[PricingDetailPlan.from_json(p) for p in data.get("plans") or []])


# ---------------------------------------------------------------------------
# Usage reporting
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UsageDay:
    date: str
    total_requests: int
    success_requests: int
    error_requests: int

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "UsageDay":
        return cls(
            date=data.get("date", ""),
            total_requests=int(data.get("total_requests", 0)),
            success_requests=int(data.get("success_requests", 0)),
            error_requests=int(data.get("error_requests", 0)),
        )


@dataclass(frozen=True)
class UsageHistoryResult:
    api_key_id: str
    days: list[UsageDay]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "UsageHistoryResult":
        return cls(
            api_key_id=data.get("api_key_id", ""),
            days=[UsageDay.from_json(d) for d in data.get("days") or []],
        )


@dataclass(frozen=True)
class UsageByToolResult:
    date: str
    tools: dict[str, int]
    endpoints: dict[str, int]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "UsageByToolResult":
        return cls(
            date=data.get("date", ""),
            tools={k: int(v) for k, v in (data.get("tools") or {}).items()},
            endpoints={k: int(v) for k, v in (data.get("endpoints") or {}).items()},
        )


@dataclass(frozen=True)
class UsageMonthlyResult:
    tier: str
    tier_display_name: str
    billing: dict[str, Any]
    usage: dict[str, Any]
    rate_limit: dict[str, Any]
    links: dict[str, Any]
    recommendations: dict[str, Any] | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "UsageMonthlyResult":
        return cls(
            tier=data.get("tier", ""),
            tier_display_name=data.get("tier_display_name", ""),
            billing=data.get("billing") or {},
            usage=data.get("usage") or {},
            rate_limit=data.get("rate_limit") or {},
            links=data.get("links") or {},
            recommendations=data.get("recommendations"),
        )
