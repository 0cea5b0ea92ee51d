"""Package-wide defaults shared by the parsers, validators and engines."""

from __future__ import annotations

from typing import FrozenSet, Optional

DEFAULT_PRECISION: int = 4
MIN_PRECISION: int = 0
MAX_PRECISION: int = 10

# Series shorter than this trigger a small-sample warning (dispersion, correlation).
SMALL_SAMPLE_THRESHOLD: int = 5

ODDS_MAX_DENOMINATOR: int = 100
FRACTION_MAX_DENOMINATOR: int = 1000

# Languages whose number formatting uses a comma as the decimal separator.
DECIMAL_COMMA_LANGUAGES: FrozenSet[str] = frozenset(
    {
        "bg",
        "ca",
        "cs",
        "da",
        "de",
        "el",
        "es",
        "et",
        "fi",
        "fr",
        "hr",
        "hu",
        "id",
        "it",
        "lt",
        "lv",
        "nb",
        "nl",
        "nn",
        "no",
        "pl",
        "pt",
        "ro",
        "ru",
        "sk",
        "sl",
        "sr",
        "sv",
        "tr",
        "uk",
        "vi",
    }
)


def is_decimal_comma_locale(locale: Optional[str]) -> bool:
    """Return ``True`` when a BCP-47-like tag names a decimal-comma language.

    Args:
        locale (str | None): Tag such as ``"de-DE"``, ``"pt_BR"`` or ``"fr"``.
            ``None`` and empty strings are treated as "no hint".

    Returns:
        bool: Whether the primary language subtag is in
        :data:`DECIMAL_COMMA_LANGUAGES`.
    """
    if not locale:
        return False
    language = locale.strip().replace("_", "-").split("-", 1)[0].lower()
    return language in DECIMAL_COMMA_LANGUAGES
