"""
Column-name and label rule tables.

Selection and KPI heuristics are driven by these tables rather than inline
conditionals. Name hints match case-insensitively anywhere in the name.
"""
import re
from typing import Iterable, Optional, Pattern, Sequence, Tuple


def _hint_pattern(words: Iterable[str]) -> Pattern:
    return re.compile("|".join(re.escape(w) for w in words), re.IGNORECASE)


DATE_NAME_HINTS = (
    "date", "day", "time", "created", "updated", "timestamp", "period", "month", "week", "year",
)
MONEY_NAME_HINTS = (
    "amount", "revenue", "income", "sales", "price", "cost", "expense", "spend",
    "payroll", "salary", "wage", "profit", "total", "value",
)
QUANTITY_NAME_HINTS = (
    "qty", "quantity", "units", "count", "items", "hours", "headcount", "visits", "orders", "tickets",
)
ENTITY_NAME_HINTS = (
    "employee", "user", "customer", "client", "student", "patient", "vendor", "supplier",
    "account", "department", "team", "project", "product", "service", "course", "clinic",
    "facility", "school", "region", "branch", "category", "type", "channel", "status",
)
STATUS_NAME_HINTS = ("status", "state", "stage", "phase", "result", "outcome")

DATE_NAME_PATTERN = _hint_pattern(DATE_NAME_HINTS)
MONEY_NAME_PATTERN = _hint_pattern(MONEY_NAME_HINTS)
QUANTITY_NAME_PATTERN = _hint_pattern(QUANTITY_NAME_HINTS)
ENTITY_NAME_PATTERN = _hint_pattern(ENTITY_NAME_HINTS)
STATUS_NAME_PATTERN = _hint_pattern(STATUS_NAME_HINTS)

# Added to a column's date tally when its name reads like a date
DATE_NAME_NUDGE = 2

# (pattern, bonus) pairs; the first matching rule applies
NUMERIC_NAME_BONUSES: Sequence[Tuple[Pattern, int]] = (
    (MONEY_NAME_PATTERN, 1_000_000),
    (QUANTITY_NAME_PATTERN, 500_000),
)
CATEGORICAL_NAME_BONUSES: Sequence[Tuple[Pattern, int]] = (
    (ENTITY_NAME_PATTERN, 10_000),
)

# Status labels. Open is checked first: negated done words ("unpaid",
# "incomplete", "not delivered") contain a done word.
OPEN_LABEL_PATTERN = re.compile(
    r"open|pending|in.?progress|new|draft|waiting"
    r"|(?:\bun|\bin|\bnot[\s_-]*)(?:done|closed|complete|delivered|paid|approved|resolved|shipped|posted)",
    re.IGNORECASE,
)
DONE_LABEL_PATTERN = re.compile(
    r"done|closed|complete|completed|delivered|paid|approved|resolved|shipped|posted", re.IGNORECASE
)

# Dataset intent, matched against all column names joined together
INTENT_RULES: Sequence[Tuple[str, Pattern]] = (
    ("HR", re.compile(r"employee|payroll|salary|department|position|hire|leave|absence|hr\b")),
    ("Finance", re.compile(r"invoice|expense|account|vendor|supplier|ap\b|ar\b|gl\b|budget|amount|payment|finance")),
    ("Sales", re.compile(r"order|product|sku|customer|revenue|sales|ship|channel|region")),
    ("Ops", re.compile(r"ticket|case|priority|sla|issue|status|resolution|incident|service")),
    ("Education", re.compile(r"student|course|grade|faculty|school|class|attendance")),
    ("Healthcare", re.compile(r"patient|clinic|diagnosis|treatment|appointment|visit|doctor|hospital")),
)
GENERIC_INTENT = "Generic"


def name_matches(name: str, pattern: Pattern) -> bool:
    return bool(pattern.search(name or ""))


def name_bonus(name: str, rules: Sequence[Tuple[Pattern, int]]) -> int:
    """Bonus of the first rule whose pattern matches the column name, else 0."""
    for pattern, bonus in rules:
        if name_matches(name, pattern):
            return bonus
    return 0


def classify_status_label(label: str) -> Optional[str]:
    """'open', 'done' or None for a status value."""
    if OPEN_LABEL_PATTERN.search(label or ""):
        return "open"
    if DONE_LABEL_PATTERN.search(label or ""):
        return "done"
    return None


def classify_dataset_intent(columns: Iterable[str]) -> str:
    """Coarse business domain guessed from column names (HR, Finance, Sales, ...)."""
    joined = " ".join(columns).lower()
    for intent, pattern in INTENT_RULES:
        if pattern.search(joined):
            return intent
    return GENERIC_INTENT
