"""Monitoring configuration for the trainer."""
from prometheus_client import Counter

# Session metrics
sessions_started = Counter(
    "wordtrainer_sessions_started_total",
    "Total number of study sessions started",
    ["kind"],  # review, retraining
)

nothing_due_sessions = Counter(
    "wordtrainer_nothing_due_sessions_total",
    "Total number of review sessions started with no words due",
)

# Answer metrics
answers = Counter(
    "wordtrainer_answers_total",
    "Total number of answers recorded",
    ["outcome", "kind"],
)

words_advanced = Counter(
    "wordtrainer_words_advanced_total",
    "Total number of SRS stage advancements",
)

mistakes_cleared = Counter(
    "wordtrainer_mistakes_cleared_total",
    "Total number of words removed from a mistake list during retraining",
)

# Error metrics
invalid_dates = Counter(
    "wordtrainer_invalid_dates_total",
    "Total number of unparseable review dates treated as due",
)

error_count = Counter(
    "wordtrainer_errors_total",
    "Total number of errors encountered",
    ["error_type"],
)

# Storage metrics
store_operations = Counter(
    "wordtrainer_store_operations_total",
    "Total number of persistence adapter operations",
    ["operation_type"],
)
