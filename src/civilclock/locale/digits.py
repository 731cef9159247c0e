"""
Digits — цифры систем счисления

Таблица: система счисления → десять глифов 0..9. Используется при
рендеринге чисел в локали с нелатинскими цифрами и при разборе строк
(регулярные выражения цифр и перевод глифов в значения).
"""

from typing import Final, Optional

# Системы с непрерывным блоком цифр: первый глиф (ноль)
_ZERO_CODEPOINTS: Final[dict[str, int]] = {
    "arab": 0x0660,
    "arabext": 0x06F0,
    "bali": 0x1B50,
    "beng": 0x09E6,
    "deva": 0x0966,
    "fullwide": 0xFF10,
    "gujr": 0x0AE6,
    "khmr": 0x17E0,
    "knda": 0x0CE6,
    "laoo": 0x0ED0,
    "limb": 0x1946,
    "mlym": 0x0D66,
    "mong": 0x1810,
    "mymr": 0x1040,
    "orya": 0x0B66,
    "tamldec": 0x0BE6,
    "telu": 0x0C66,
    "thai": 0x0E50,
    "tibt": 0x0F20,
}

NUMBERING_SYSTEM_DIGITS: Final[dict[str, str]] = {
    "latn": "0123456789",
    "hanidec": "〇一二三四五六七八九",
    **{
        system: "".join(chr(zero + i) for i in range(10))
        for system, zero in _ZERO_CODEPOINTS.items()
    },
}

# Глиф → значение для всех известных систем
_DIGIT_VALUES: Final[dict[str, int]] = {
    glyph: value
    for glyphs in NUMBERING_SYSTEM_DIGITS.values()
    for value, glyph in enumerate(glyphs)
}


def is_supported(numbering_system: Optional[str]) -> bool:
    return numbering_system is None or numbering_system in NUMBERING_SYSTEM_DIGITS


def digits_for(numbering_system: Optional[str]) -> str:
    """Глифы 0..9 системы (неизвестная система → латинские)."""
    return NUMBERING_SYSTEM_DIGITS.get(numbering_system or "latn", NUMBERING_SYSTEM_DIGITS["latn"])


def transliterate(text: str, numbering_system: Optional[str]) -> str:
    """
    Замена латинских цифр в строке на цифры системы.

    Examples:
        >>> transliterate("2017-05", "arab")
        '٢٠١٧-٠٥'
    """
    glyphs = digits_for(numbering_system)
    if glyphs == NUMBERING_SYSTEM_DIGITS["latn"]:
        return text
    return text.translate({ord(str(i)): glyphs[i] for i in range(10)})


def parse_digits(text: str) -> int:
    """
    Целое из цифр любой известной системы (знак '-' допускается).

    Examples:
        >>> parse_digits("١٢")
        12
        >>> parse_digits("-07")
        -7

    Raises:
        ValueError: Строка содержит нецифровые символы
    """
    sign = 1
    if text.startswith(("-", "+")):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if not text:
        raise ValueError("empty digit string")
    value = 0
    for glyph in text:
        digit = _DIGIT_VALUES.get(glyph)
        if digit is None:
            raise ValueError(f"not a digit: {glyph!r}")
        value = value * 10 + digit
    return sign * value


def digit_regex(numbering_system: Optional[str], quantifier: str = "") -> str:
    """
    Фрагмент регулярного выражения для одной цифры системы.

    Латинская система дополнительно допускает только ASCII 0-9; остальные
    системы принимают и свои глифы, и ASCII.
    """
    system = numbering_system or "latn"
    if system == "latn" or system not in NUMBERING_SYSTEM_DIGITS:
        return f"[0-9]{quantifier}"
    glyphs = NUMBERING_SYSTEM_DIGITS[system]
    return f"[0-9{glyphs}]{quantifier}"
