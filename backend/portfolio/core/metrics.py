"""Prometheus counters for role sync, webhooks, dependency tooling and status checks."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

# Custom registry to avoid conflicts with default process metrics
REGISTRY = CollectorRegistry()

# Clerk webhook deliveries by event type and processing outcome.
CLERK_WEBHOOK_TOTAL = Counter(
    "portfolio_clerk_webhook_total",
    "Clerk webhook events received",
    ["event_type", "outcome"],
    registry=REGISTRY,
)

# Role reconciliation runs, labelled by trigger (webhook, request, manual).
ROLE_SYNC_TOTAL = Counter(
    "portfolio_role_sync_total",
    "Clerk to user_roles reconciliation runs",
    ["trigger", "outcome"],
    registry=REGISTRY,
)

ROLE_CHANGES_TOTAL = Counter(
    "portfolio_role_changes_total",
    "Role rows added or removed",
    ["role", "action"],
    registry=REGISTRY,
)

DEPENDENCY_UPDATES_TOTAL = Counter(
    "portfolio_dependency_updates_total",
    "Package updates attempted by the dependency manager",
    ["mode", "outcome"],
    registry=REGISTRY,
)

DEPENDENCY_SCAN_SECONDS = Histogram(
    "portfolio_dependency_scan_seconds",
    "Duration of full dependency scans",
    registry=REGISTRY,
    buckets=(1.0, 5.0, 15.0, 30.0, 60.0, 120.0, 300.0),
)

STATUS_CHECK_TOTAL = Counter(
    "portfolio_status_check_total",
    "System status checks by check name and result",
    ["check", "status"],
    registry=REGISTRY,
)

SERVICE_OPERATION_SECONDS = Histogram(
    "portfolio_service_operation_seconds",
    "Service operation latency recorded by measure_operation",
    ["service", "operation", "status"],
    registry=REGISTRY,
)
