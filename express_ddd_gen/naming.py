"""Naming convention helpers.

Every generated file name, class name and template slot is derived from a
single user-supplied word.  ``derive_naming_variants`` computes all case
variants at once so templates always receive a consistent set.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_SEPARATORS = re.compile(r"[-_\s]+")


def _segments(value: str) -> list[str]:
    return [seg for seg in _SEPARATORS.split(value.strip()) if seg]


def to_camel_case(value: str) -> str:
    """Convert ``order-item`` / ``order_item`` / ``Order Item`` to ``orderItem``.

    Letters inside a segment keep their case, so ``OrderItem`` becomes
    ``orderItem`` and re-applying the conversion is a no-op.
    """
    parts = _segments(value)
    if not parts:
        return ""
    head = parts[0][0].lower() + parts[0][1:]
    tail = "".join(p[0].upper() + p[1:] for p in parts[1:])
    return head + tail


def to_pascal_case(value: str) -> str:
    """Convert ``order-item`` or ``orderItem`` to ``OrderItem``."""
    camel = to_camel_case(value)
    if not camel:
        return ""
    return camel[0].upper() + camel[1:]


def to_kebab_case(value: str) -> str:
    """Convert ``OrderItem`` or ``order_item`` to ``order-item``."""
    s1 = re.sub(r"([a-z])([A-Z])", r"\1-\2", value.strip())
    return re.sub(r"[\s_]+", "-", s1).lower()


def to_snake_case(value: str) -> str:
    """Convert ``OrderItem`` or ``order-item`` to ``order_item``."""
    s1 = re.sub(r"([a-z])([A-Z])", r"\1_\2", value.strip())
    return re.sub(r"[\s-]+", "_", s1).lower()


def pluralize(word: str) -> str:
    """Pluralise the trailing English word of *word*.

    E.g. ``'category'`` -> ``'categories'``, ``'box'`` -> ``'boxes'``,
    ``'order'`` -> ``'orders'``.
    """
    if not word:
        return word
    lower = word.lower()
    if lower.endswith("y") and len(word) > 1 and lower[-2] not in "aeiou":
        return word[:-1] + _match_case(word[-1], "ies")
    if lower.endswith(("s", "sh", "ch", "x", "z")):
        return word + _match_case(word[-1], "es")
    return word + _match_case(word[-1], "s")


def singularize(word: str) -> str:
    """Inverse of :func:`pluralize` for the suffixes it produces."""
    lower = word.lower()
    if lower.endswith("ies") and len(word) > 3:
        return word[:-3] + _match_case(word[-1], "y")
    if lower.endswith(("sses", "shes", "ches", "xes", "zes")):
        return word[:-2]
    if lower.endswith("s") and not lower.endswith(("ss", "us", "is")) and len(word) > 1:
        return word[:-1]
    return word


def _match_case(reference: str, suffix: str) -> str:
    return suffix.upper() if reference.isupper() else suffix


class NamingVariants(BaseModel):
    """All case variants of one identifier.

    Attributes use snake_case; the camelCase aliases are what templates see
    (``{{ pascalCase }}``, ``{{ pluralKebabCase }}`` ...).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    camel_case: str
    pascal_case: str
    kebab_case: str
    snake_case: str
    lowercase: str
    uppercase: str
    plural_camel_case: str
    plural_pascal_case: str
    plural_kebab_case: str
    singular_camel_case: str
    singular_pascal_case: str

    @property
    def constant_case(self) -> str:
        """``ORDER_ITEM`` style name, used for environment variables."""
        return self.snake_case.upper()

    def as_template_data(self) -> dict[str, Any]:
        """Return the variants keyed by their camelCase aliases."""
        return self.model_dump(by_alias=True)


def derive_naming_variants(value: str) -> NamingVariants:
    """Derive every naming variant from *value*.

    Never raises; single-character and already-cased input is handled by the
    same rules.
    """
    plural = pluralize(value.strip())
    singular = singularize(value.strip())
    return NamingVariants(
        camel_case=to_camel_case(value),
        pascal_case=to_pascal_case(value),
        kebab_case=to_kebab_case(value),
        snake_case=to_snake_case(value),
        lowercase=value.strip().lower(),
        uppercase=value.strip().upper(),
        plural_camel_case=to_camel_case(plural),
        plural_pascal_case=to_pascal_case(plural),
        plural_kebab_case=to_kebab_case(plural),
        singular_camel_case=to_camel_case(singular),
        singular_pascal_case=to_pascal_case(singular),
    )
