"""
List logic behind the dashboard, expenses and reports pages.

Everything here works on plain lists of Expense and returns new lists; the
only functions that touch storage are the group helpers at the bottom.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from expense_tracker.logger import get_logger
from expense_tracker.models import Expense, ExpenseGroup
from expense_tracker.utils.identifiers import generate_id, utc_now_iso

logger = get_logger(__name__)

ALL = "all"
UNGROUPED = "ungrouped"
SORT_FIELDS = ("date", "amount", "vendor")


def _matches_group(expense: Expense, group: str) -> bool:
    if group == ALL:
        return True
    if group == UNGROUPED:
        return not expense.group_id
    return expense.group_id == group


def filter_expenses(
    expenses: Iterable[Expense],
    search: str = "",
    category: str = ALL,
    group: str = ALL,
    sort_by: str = "date",
    sort_order: str = "desc",
) -> List[Expense]:
    """Search, category/group filter, then sort (expenses list view)."""
    if sort_by not in SORT_FIELDS:
        raise ValueError(f"Unsupported sort field '{sort_by}'. Available: {list(SORT_FIELDS)}")

    result = list(expenses)

    if search:
        query = search.lower()
        result = [
            e for e in result
            if query in e.vendor.lower()
            or (e.notes and query in e.notes.lower())
            or query in e.date
        ]

    if category != ALL:
        result = [e for e in result if e.category == category]

    result = [e for e in result if _matches_group(e, group)]

    if sort_by == "vendor":
        key = lambda e: e.vendor.lower()
    else:
        key = lambda e: getattr(e, sort_by)
    result.sort(key=key, reverse=(sort_order == "desc"))
    return result


def default_report_range(today: Optional[date] = None, days: int = 30) -> Tuple[str, str]:
    today = today or date.today()
    return (today - timedelta(days=days)).isoformat(), today.isoformat()


def filter_by_date_range(
    expenses: Iterable[Expense],
    date_from: str = "",
    date_to: str = "",
    group: str = ALL,
) -> List[Expense]:
    """Inclusive YYYY-MM-DD range plus group filter, oldest first (reports view)."""
    result = [
        e for e in expenses
        if (not date_from or e.date >= date_from)
        and (not date_to or e.date <= date_to)
        and _matches_group(e, group)
    ]
    result.sort(key=lambda e: e.date)
    return result


def total_amount(expenses: Iterable[Expense]) -> float:
    return sum(e.amount for e in expenses)


def category_totals(expenses: Iterable[Expense]) -> Dict[str, Dict[str, float]]:
    """Per category: number of expenses and their summed amount."""
    totals = defaultdict(lambda: {"count": 0, "amount": 0.0})
    for e in expenses:
        totals[e.category]["count"] += 1
        totals[e.category]["amount"] += e.amount
    return dict(totals)


def category_breakdown(expenses: Iterable[Expense]) -> Dict[str, float]:
    return {cat: t["amount"] for cat, t in category_totals(expenses).items()}


def this_month(expenses: Iterable[Expense], today: Optional[date] = None) -> List[Expense]:
    prefix = (today or date.today()).strftime("%Y-%m")
    return [e for e in expenses if e.date.startswith(prefix)]


def recent_expenses(expenses: Iterable[Expense], limit: int = 5) -> List[Expense]:
    return sorted(expenses, key=lambda e: e.created_at, reverse=True)[:limit]


# ---------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------

def create_group(store, name: str, expense_ids: Iterable[str] = (), description: Optional[str] = None) -> ExpenseGroup:
    """Save a new group and move the selected expenses into it."""
    name = (name or "").strip()
    if not name:
        raise ValueError("Group name must not be blank")

    group = ExpenseGroup(id=generate_id(), name=name, description=description or None, created_at=utc_now_iso())
    store.upsert_group(group)

    selected = set(expense_ids)
    for expense in store.list_expenses():
        if expense.id in selected:
            store.upsert_expense(expense.with_updates(group_id=group.id))

    logger.info(f"Created group '{group.name}' with {len(selected)} selected expenses")
    return group


def delete_group(store, group_id: str) -> None:
    """Delete a group and clear groupId on its members (cascade-null)."""
    detached = 0
    for expense in store.list_expenses():
        if expense.group_id == group_id:
            store.upsert_expense(expense.with_updates(group_id=None))
            detached += 1

    store.delete_group(group_id)
    logger.info(f"Deleted group {group_id}; detached {detached} expenses")
