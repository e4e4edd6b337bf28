"""Global pytest configuration."""

import os

# Pin settings that tests assert on before any imports read them
os.environ.setdefault("DEFAULT_CURRENCY", "USD")
os.environ.setdefault("CURRENCY_SYMBOL", "$")
os.environ.setdefault("CALENDAR_FIRST_WEEKDAY", "6")
os.environ.setdefault("GROUP_ORDER_DEFAULT", "first_seen")
