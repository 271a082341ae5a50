"""Currency symbols and amount formatting."""

from collections import namedtuple

Currency = namedtuple('Currency', ['code', 'symbol', 'name'])

CURRENCIES = (
    Currency('NPR', 'रु', 'Nepalese Rupee'),
    Currency('USD', '$', 'US Dollar'),
    Currency('EUR', '€', 'Euro'),
    Currency('GBP', '£', 'British Pound'),
    Currency('INR', '₹', 'Indian Rupee'),
    Currency('JPY', '¥', 'Japanese Yen'),
)

DEFAULT_CURRENCY = CURRENCIES[0]

PREFERRED_CURRENCY_KEY = 'preferred_currency'

_BY_CODE = {currency.code: currency for currency in CURRENCIES}


def get_currency(code):
    """Return the Currency for code, or None if unsupported."""
    if not code or not isinstance(code, str):
        return None
    return _BY_CODE.get(code.upper())


def symbol_for(code):
    """Display symbol for code, falling back to the default currency."""
    return (get_currency(code) or DEFAULT_CURRENCY).symbol


def format_amount(amount, code=None):
    """
    Format an amount for display, e.g. ``format_amount(1234.5, 'USD')``
    gives ``'$ 1,234.5'``.
    """
    if isinstance(amount, float) and amount.is_integer():
        amount = int(amount)
    return f"{symbol_for(code)} {amount:,}"


def preferred_currency(store):
    """Currency saved in the client store, or the default one."""
    return get_currency(store.get(PREFERRED_CURRENCY_KEY)) or DEFAULT_CURRENCY


def set_preferred_currency(store, code):
    """
    Save code as the preferred currency.

    Unknown codes are ignored and None is returned.
    """
    currency = get_currency(code)
    if currency is None:
        return None
    store.set(PREFERRED_CURRENCY_KEY, currency.code)
    return currency
