import re
from datetime import datetime


def format_currency(amount):
    try:
        value = float(amount or 0)
    except (TypeError, ValueError):
        value = 0.0
    return f"₹{value:,.0f}"


def _as_datetime(value):
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def format_date(value):
    if not value:
        return ''
    try:
        dt = _as_datetime(value)
    except ValueError:
        return str(value)
    return f"{dt.day} {dt.strftime('%B %Y')}"


def format_date_short(value):
    if not value:
        return ''
    try:
        dt = _as_datetime(value)
    except ValueError:
        return str(value)
    return f"{dt.day} {dt.strftime('%b %Y')}"


def truncate_text(text, max_length):
    text = text or ''
    if len(text) <= max_length:
        return text
    return text[:max_length].rstrip() + '...'


def create_slug(text):
    slug = re.sub(r'[^a-z0-9]+', '-', (text or '').lower())
    return slug.strip('-')


def format_number(num):
    try:
        value = float(num or 0)
    except (TypeError, ValueError):
        value = 0.0
    if value.is_integer():
        return f"{int(value):,}"
    return f"{value:,}"


def register_filters(app):
    app.jinja_env.filters['currency'] = format_currency
    app.jinja_env.filters['date'] = format_date
    app.jinja_env.filters['date_short'] = format_date_short
    app.jinja_env.filters['truncate_text'] = truncate_text
    app.jinja_env.filters['number'] = format_number
