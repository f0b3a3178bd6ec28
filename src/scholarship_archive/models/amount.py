"""Currency amount recognition and parsing for strings like '$1,500' or '500 - 1,000 EUR'."""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

CURRENCY_SYMBOLS: dict[str, str] = {
    "$": "USD",
    "€": "EUR",
    "£": "GBP",
    "¥": "JPY",
    "₹": "INR",
}

# Comma thousands only; a dot is always the decimal point ("1.000" is neither)
_NUMBER = r"(?<![\d.,])(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d{1,2})?(?![\d.,])"
_NUMBER_PATTERN = re.compile(_NUMBER)
_CODE_PATTERN = re.compile(r"(?<![A-Za-z])([A-Z]{3})(?![A-Za-z])")
_RANGE_SEPARATOR = r"\s*(?:-|–|to)\s*"


def _money(symbols: str, codes: str) -> str:
    """One currency-annotated number: '$1,500', 'USD2000', 'CAD $2,500', '1,500 €', '5k EUR'."""
    return (
        rf"(?:(?:{codes})\s?(?:(?:{symbols})\s?)?|(?:{symbols})\s?)?"
        rf"(?:{_NUMBER})"
        rf"(?:\s?[kK])?(?:\s?(?:{symbols}|{codes}))?"
    )


def build_amount_pattern(
    symbols: Optional[list[str]] = None,
    codes: Optional[list[str]] = None,
) -> re.Pattern[str]:
    """
    Compile the currency-amount pattern.
    A match needs at least one currency marker (symbol or ISO code) somewhere in the string.
    """
    symbol_alt = "|".join(re.escape(s) for s in (symbols or list(CURRENCY_SYMBOLS)))
    code_alt = "|".join(re.escape(c) for c in codes) if codes else "[A-Z]{3}"
    money = _money(symbol_alt, code_alt)
    return re.compile(rf"^\s*{money}(?:{_RANGE_SEPARATOR}{money})?\s*$")


DEFAULT_AMOUNT_PATTERN = build_amount_pattern()


def is_currency_amount(
    text: str,
    pattern: re.Pattern[str] = DEFAULT_AMOUNT_PATTERN,
    symbols: Optional[list[str]] = None,
    codes: Optional[list[str]] = None,
) -> bool:
    """True if text is a recognised currency amount (a bare number is not)."""
    if not text or not pattern.match(text):
        return False
    has_symbol = any(s in text for s in (symbols or list(CURRENCY_SYMBOLS)))
    found_codes = _CODE_PATTERN.findall(text)
    has_code = any(c in codes for c in found_codes) if codes else bool(found_codes)
    return has_symbol or has_code


@dataclass(frozen=True)
class AmountParts:
    minimum: Optional[Decimal]
    maximum: Optional[Decimal]
    currency: Optional[str]


def _to_decimal(chunk: str, text_after: str) -> Optional[Decimal]:
    try:
        value = Decimal(chunk.replace(",", ""))
    except InvalidOperation:
        return None
    if text_after[:1] in ("k", "K"):
        value *= 1000
    return value


def parse_amount(text: Optional[str]) -> AmountParts:
    """Extract (min, max, currency) from an amount string; missing parts are None."""
    if not text:
        return AmountParts(None, None, None)
    values: list[Decimal] = []
    for m in _NUMBER_PATTERN.finditer(text):
        value = _to_decimal(m.group(0), text[m.end():].lstrip())
        if value is not None:
            values.append(value)
    currency = None
    code = _CODE_PATTERN.search(text)
    if code:
        currency = code.group(1)
    else:
        for symbol, iso in CURRENCY_SYMBOLS.items():
            if symbol in text:
                currency = iso
                break
    if not values:
        return AmountParts(None, None, currency)
    return AmountParts(min(values), max(values), currency)
