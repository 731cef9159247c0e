"""
Tokens — разбор строки формата на токены

Строка формата разбивается слева направо:
- Подряд идущие одинаковые символы → один токен ("yyyy", "MM")
- Текст в одинарных кавычках → литерал; '' внутри формата → литеральная кавычка
- Токен только из пробелов → литерал

Макро-токены (D, DD, t, ff, ...) разворачиваются в токены по LDML-шаблону
локали (см. ldml_to_tokens).
"""

import re
from typing import Final, Optional, Sequence

from babel.dates import tokenize_pattern
from pydantic import BaseModel, Field

from civilclock.locale.presets import MACRO_TOKENS, FormatOptions

_WHITESPACE_RE: Final[re.Pattern[str]] = re.compile(r"^\s+$")


class FormatToken(BaseModel):
    """Токен формата: литерал или код поля."""

    literal: bool = Field(..., description="True — выводится как есть")
    val: str = Field(..., description="Текст литерала или код токена")

    model_config = {"frozen": True}


# =============================================================================
# ТОКЕНИЗАТОР
# =============================================================================


def parse_format(fmt: str) -> list[FormatToken]:
    """
    Строка формата → список токенов.

    Examples:
        >>> [t.val for t in parse_format("yyyy-MM-dd")]
        ['yyyy', '-', 'MM', '-', 'dd']
        >>> parse_format("HH 'h' mm")[2]
        FormatToken(literal=True, val='h')
        >>> parse_format("''")[0].val
        "'"
    """
    current: Optional[str] = None
    current_full = ""
    bracketed = False
    splits: list[FormatToken] = []

    for char in fmt:
        if char == "'":
            if current_full or bracketed:
                splits.append(
                    FormatToken(
                        literal=bracketed or bool(_WHITESPACE_RE.match(current_full)),
                        val="'" if current_full == "" else current_full,
                    )
                )
            current = None
            current_full = ""
            bracketed = not bracketed
        elif bracketed:
            current_full += char
        elif char == current:
            current_full += char
        else:
            if current_full:
                splits.append(
                    FormatToken(literal=bool(_WHITESPACE_RE.match(current_full)), val=current_full)
                )
            current_full = char
            current = char

    if current_full:
        splits.append(
            FormatToken(
                literal=bracketed or bool(_WHITESPACE_RE.match(current_full)), val=current_full
            )
        )
    return splits


def macro_token_to_format_opts(token: str) -> Optional[FormatOptions]:
    """Опции пресета для макро-токена или None."""
    return MACRO_TOKENS.get(token)


def stringify_tokens(tokens: Sequence[FormatToken], render) -> str:
    """Сборка строки: литералы как есть, остальные токены через render."""
    return "".join(token.val if token.literal else render(token.val) for token in tokens)


# =============================================================================
# LDML → ТОКЕНЫ
# =============================================================================


def _ldml_field_token(char: str, width: int) -> Optional[str]:
    """Поле LDML-шаблона → эквивалентный токен формата (None — не поддержано)."""
    if char == "G":
        return "GGGGG" if width == 5 else ("GG" if width == 4 else "G")
    if char in "yu":
        return "yy" if width == 2 else ("yyyy" if width == 4 else "y")
    if char in "ML":
        return char * min(width, 5)
    if char == "d":
        return "d" * min(width, 2)
    if char == "E":
        return "EEEEE" if width >= 5 else ("EEEE" if width == 4 else "EEE")
    if char in "ce":
        if width <= 2:
            return "c"
        return "c" * min(width, 5)
    if char in "hK":
        return "h" * min(width, 2)
    if char in "Hk":
        return "H" * min(width, 2)
    if char in "ms":
        return char * min(width, 2)
    if char == "S":
        return "SSS"
    if char in "abB":
        return "a"
    if char in "zvVO":
        return "ZZZZZ" if width >= 4 else "ZZZZ"
    if char in "ZxX":
        return "ZZ"
    return None


def ldml_to_tokens(pattern: str) -> list[FormatToken]:
    """
    LDML-шаблон (из Babel) → токены формата.

    Examples:
        >>> [t.val for t in ldml_to_tokens("M/d/y")]
        ['M', '/', 'd', '/', 'y']
    """
    tokens: list[FormatToken] = []
    for kind, value in tokenize_pattern(pattern):
        if kind == "chars":
            if value:
                tokens.append(FormatToken(literal=True, val=value))
            continue
        char, width = value
        token = _ldml_field_token(char, width)
        if token is None:
            tokens.append(FormatToken(literal=True, val=char * width))
        else:
            tokens.append(FormatToken(literal=False, val=token))
    return tokens
