"""
Dashboard statistics as pure functions.

Inputs are iterables of plain mappings (e.g. ``Shipment.objects.values(...)``),
``now`` is always passed in. Months are calendar buckets: two timestamps are in
the same bucket when their year and month match in ``now``'s time zone.
"""

from collections import Counter
from decimal import Decimal

STATUSES       = ("Pending", "In Transit", "Delivered", "Delayed", "Cancelled")
OPEN_STATUSES  = ("Pending", "In Transit")
DELIVERED      = "Delivered"
COMPLETED      = "Completed"
TRAILING_MONTHS = 6
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _local(dt, now):
    if dt is None:
        return None
    if dt.tzinfo is not None and now.tzinfo is not None:
        return dt.astimezone(now.tzinfo)
    return dt


def _month_of(dt, now):
    dt = _local(dt, now)
    return (dt.year, dt.month) if dt is not None else None


# ── Counts ────────────────────────────────────────────────────────────────────
def count_by_status(shipments) -> dict:
    counts = Counter(s["status"] for s in shipments)
    return {status: counts.get(status, 0) for status in STATUSES}


def completed_revenue(payments) -> Decimal:
    return sum((Decimal(p["amount"]) for p in payments if p["status"] == COMPLETED), Decimal("0"))


def delivery_success_rate(shipments) -> float:
    """Percentage of shipments delivered; 0 when there are none."""
    total = delivered = 0
    for s in shipments:
        total += 1
        delivered += s["status"] == DELIVERED
    if total == 0:
        return 0.0
    return delivered * 100 / total


def status_distribution(shipments) -> list:
    counts = Counter(s["status"] or "Unknown" for s in shipments)
    return [{"name": name, "value": value} for name, value in counts.items()]


def shipment_summary(shipments) -> dict:
    counts = count_by_status(shipments)
    return {
        "total":      sum(counts.values()),
        "pending":    counts["Pending"],
        "in_transit": counts["In Transit"],
        "delivered":  counts["Delivered"],
    }


# ── Month series ──────────────────────────────────────────────────────────────
def trailing_months(now, count: int = TRAILING_MONTHS) -> list:
    """(year, month) pairs for the last `count` calendar months, oldest first, ending with now's."""
    year, month = now.year, now.month
    months = []
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def month_label(year_month) -> str:
    return MONTH_NAMES[year_month[1] - 1]


def shipment_series(shipments, now, count: int = TRAILING_MONTHS) -> list:
    """Per month: shipments created that month, by status."""
    months = trailing_months(now, count)
    buckets = {m: Counter() for m in months}
    for s in shipments:
        key = _month_of(s["created_at"], now)
        if key in buckets:
            buckets[key][s["status"]] += 1
    series = []
    for m in months:
        row = {"name": month_label(m)}
        row.update({status: buckets[m].get(status, 0) for status in STATUSES})
        series.append(row)
    return series


def revenue_series(payments, now, count: int = TRAILING_MONTHS) -> list:
    """Per month: completed payment amounts by the month the payment was recorded."""
    months = trailing_months(now, count)
    totals = {m: Decimal("0") for m in months}
    for p in payments:
        if p["status"] != COMPLETED:
            continue
        key = _month_of(p["created_at"], now)
        if key in totals:
            totals[key] += Decimal(p["amount"])
    return [{"name": month_label(m), "revenue": totals[m]} for m in months]


def customer_series(customers, now, count: int = TRAILING_MONTHS) -> list:
    """
    Per month: customer accounts existing at the end of that month.

    Derived from today's total minus sign-ups in later months, so accounts that
    were deleted since are not counted in any month.
    """
    customers = list(customers)
    months = trailing_months(now, count)
    signups = Counter(_month_of(c["created_at"], now) for c in customers)
    running = len(customers)
    counts = {}
    for m in reversed(months):
        counts[m] = running
        running -= signups.get(m, 0)
    return [{"name": month_label(m), "customers": counts[m]} for m in months]


# ── Activity feed ─────────────────────────────────────────────────────────────
def recent_activities(shipments, customers, limit: int = 4) -> list:
    """Three newest shipments and two newest sign-ups, merged newest first."""
    latest_shipments = sorted(shipments, key=lambda s: s["created_at"], reverse=True)[:3]
    latest_customers = sorted(customers, key=lambda c: c["created_at"], reverse=True)[:2]

    activities = [
        {
            "id":        str(s["id"]),
            "type":      "shipment",
            "text":      f"New shipment created for {s.get('owner_name') or 'a customer'}.",
            "timestamp": s["created_at"],
        }
        for s in latest_shipments
    ] + [
        {
            "id":        str(c["id"]),
            "type":      "customer",
            "text":      f"New customer registered: {c['name']}.",
            "timestamp": c["created_at"],
        }
        for c in latest_customers
    ]
    activities.sort(key=lambda a: a["timestamp"], reverse=True)
    return activities[:limit]


def dashboard_summary(shipments, payments, customers, now) -> dict:
    """Everything the admin dashboard shows, in one dict."""
    shipments = list(shipments)
    payments  = list(payments)
    customers = list(customers)
    return {
        "metrics": {
            "total_shipments":       len(shipments),
            "total_customers":       len(customers),
            "total_revenue":         completed_revenue(payments),
            "delivery_success_rate": delivery_success_rate(shipments),
        },
        "charts": {
            "shipment_data":        shipment_series(shipments, now),
            "status_distribution":  status_distribution(shipments),
            "revenue_data":         revenue_series(payments, now),
            "customer_growth_data": customer_series(customers, now),
        },
        "recent_activities": recent_activities(shipments, customers),
    }


# ── Staff overview ────────────────────────────────────────────────────────────
def staff_summary(shipments, events, now, priority_limit: int = 5) -> dict:
    """
    Overview for one staff member.
    `shipments` are their assigned shipments; `events` the tracking entries of those
    shipments (mappings with "shipment", "status", "timestamp").
    """
    shipments = list(shipments)
    today = _local(now, now).date()
    delivered_today = {
        e["shipment"] for e in events
        if e["status"] == DELIVERED and _local(e["timestamp"], now).date() == today
    }

    open_shipments = [s for s in shipments if s["status"] in OPEN_STATUSES]
    # no estimate sorts last
    open_shipments.sort(key=lambda s: (s.get("estimated_delivery") is None,
                                       s.get("estimated_delivery") or now))
    return {
        "metrics": {
            "assigned_shipments": len(shipments),
            "pending_deliveries": len(open_shipments),
            "completed_today":    sum(1 for s in shipments
                                      if s["status"] == DELIVERED and s["id"] in delivered_today),
            "delivery_rate":      delivery_success_rate(shipments),
        },
        "priority_shipments": open_shipments[:priority_limit],
    }
