"""Currency and date formatting for display."""

from datetime import date, datetime
from decimal import Decimal


CURRENCY_SYMBOL = "₡"

_MONTHS = {
    'en': ["January", "February", "March", "April", "May", "June", "July",
           "August", "September", "October", "November", "December"],
    'es': ["enero", "febrero", "marzo", "abril", "mayo", "junio", "julio",
           "agosto", "septiembre", "octubre", "noviembre", "diciembre"],
}

def format_currency(amount: Decimal | int | float, language: str = 'en') -> str:
    """Format a colón amount, e.g. ``₡25,000`` (en) or ``₡25.000`` (es).

    Whole amounts carry no decimals.
    """
    value = Decimal(str(amount))
    if value == value.to_integral_value():
        text = f"{int(value):,}"
    else:
        text = f"{value:,.2f}"
    if language == 'es':
        text = text.replace(',', '\0').replace('.', ',').replace('\0', '.')
    return f"{CURRENCY_SYMBOL}{text}"

def format_date(value: date | datetime | None, language: str = 'en') -> str:
    """Short numeric date: ``7/1/2024`` (en) or ``1/7/2024`` (es)."""
    if value is None:
        return "-"
    if language == 'es':
        return f"{value.day}/{value.month}/{value.year}"
    return f"{value.month}/{value.day}/{value.year}"

def format_long_date(value: date | datetime | None, language: str = 'en') -> str:
    """Long date: ``July 1, 2024`` (en) or ``1 de julio de 2024`` (es)."""
    if value is None:
        return "-"
    months = _MONTHS.get(language, _MONTHS['en'])
    month = months[value.month - 1]
    if language == 'es':
        return f"{value.day} de {month} de {value.year}"
    return f"{month} {value.day}, {value.year}"

def month_name(month: int, language: str = 'en') -> str:
    """Capitalized name of a 1-based month."""
    return _MONTHS.get(language, _MONTHS['en'])[month - 1].capitalize()
