"""English inflection heuristics used to name resources and examples.

The rules are deliberately small: regular suffix rules, a table of irregular
words and a set of uncountable nouns. They cover the resource names that
show up in controller tests (``foo``/``foos``, ``category``/``categories``,
``person``/``people``) without trying to be a general-purpose inflector.

Rules are applied in order and the first match wins, so more specific
patterns are listed before the generic ``s`` suffix.
"""

from __future__ import annotations

import re

# ============================================================================
#                               Rule tables
# ============================================================================

_PLURAL_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(quiz)$", re.I), r"\1zes"),
    (re.compile(r"^(ox)$", re.I), r"\1en"),
    (re.compile(r"([m|l])ouse$", re.I), r"\1ice"),
    (re.compile(r"(matr|vert|ind)(?:ix|ex)$", re.I), r"\1ices"),
    (re.compile(r"(x|ch|ss|sh)$", re.I), r"\1es"),
    (re.compile(r"([^aeiouy]|qu)y$", re.I), r"\1ies"),
    (re.compile(r"(hive)$", re.I), r"\1s"),
    (re.compile(r"(?:([^f])fe|([lr])f)$", re.I), r"\1\2ves"),
    (re.compile(r"sis$", re.I), "ses"),
    (re.compile(r"([ti])um$", re.I), r"\1a"),
    (re.compile(r"(buffal|tomat)o$", re.I), r"\1oes"),
    (re.compile(r"(bu)s$", re.I), r"\1ses"),
    (re.compile(r"(alias|status)$", re.I), r"\1es"),
    (re.compile(r"(octop|vir)us$", re.I), r"\1i"),
    (re.compile(r"(ax|test)is$", re.I), r"\1es"),
    (re.compile(r"s$", re.I), "s"),
    (re.compile(r"$"), "s"),
]

_SINGULAR_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(database)s$", re.I), r"\1"),
    (re.compile(r"(quiz)zes$", re.I), r"\1"),
    (re.compile(r"(matr)ices$", re.I), r"\1ix"),
    (re.compile(r"(vert|ind)ices$", re.I), r"\1ex"),
    (re.compile(r"^(ox)en", re.I), r"\1"),
    (re.compile(r"(alias|status)(es)?$", re.I), r"\1"),
    (re.compile(r"(octop|vir)(us|i)$", re.I), r"\1us"),
    (re.compile(r"^(a)x[ie]s$", re.I), r"\1xis"),
    (re.compile(r"(cris|test)(is|es)$", re.I), r"\1is"),
    (re.compile(r"(shoe)s$", re.I), r"\1"),
    (re.compile(r"(o)es$", re.I), r"\1"),
    (re.compile(r"(bus)(es)?$", re.I), r"\1"),
    (re.compile(r"([m|l])ice$", re.I), r"\1ouse"),
    (re.compile(r"(x|ch|ss|sh)es$", re.I), r"\1"),
    (re.compile(r"(m)ovies$", re.I), r"\1ovie"),
    (re.compile(r"(s)eries$", re.I), r"\1eries"),
    (re.compile(r"([^aeiouy]|qu)ies$", re.I), r"\1y"),
    (re.compile(r"([lr])ves$", re.I), r"\1f"),
    (re.compile(r"(tive)s$", re.I), r"\1"),
    (re.compile(r"(hive)s$", re.I), r"\1"),
    (re.compile(r"([^f])ves$", re.I), r"\1fe"),
    (re.compile(r"(^analy)(sis|ses)$", re.I), r"\1sis"),
    (
        re.compile(
            r"((a)naly|(b)a|(d)iagno|(p)arenthe|(p)rogno|(s)ynop|(t)he)(sis|ses)$",
            re.I,
        ),
        r"\1sis",
    ),
    (re.compile(r"([ti])a$", re.I), r"\1um"),
    (re.compile(r"(n)ews$", re.I), r"\1ews"),
    (re.compile(r"(ss)$", re.I), r"\1"),
    (re.compile(r"s$", re.I), ""),
]

IRREGULARS: dict[str, str] = {
    "person": "people",
    "man": "men",
    "woman": "women",
    "child": "children",
    "sex": "sexes",
    "move": "moves",
    "cow": "kine",
    "zombie": "zombies",
}

UNCOUNTABLES: frozenset[str] = frozenset(
    {
        "equipment",
        "information",
        "rice",
        "money",
        "species",
        "series",
        "fish",
        "sheep",
        "jeans",
        "police",
        "news",
    }
)

VOWELS = frozenset("aeiou")


# ============================================================================
#                               Helpers
# ============================================================================


def _split_last_word(word: str) -> tuple[str, str]:
    # "line_item" -> ("line_", "item"); only the last word is inflected
    head, sep, tail = word.rpartition("_")
    return head + sep, tail


def _apply(word: str, rules: list[tuple[re.Pattern[str], str]]) -> str:
    for pattern, replacement in rules:
        if pattern.search(word):
            return pattern.sub(replacement, word, count=1)
    return word


def _match_case(source: str, result: str) -> str:
    if source[:1].isupper():
        return result[:1].upper() + result[1:]
    return result


# ============================================================================
#                               Public API
# ============================================================================


def pluralize(word: str) -> str:
    """Return the plural form of ``word``.

    Args:
        word: A singular (or already plural) noun, optionally snake_cased.

    Returns:
        str: The plural form; uncountable words are returned unchanged.
    """
    if not word:
        return word
    head, last = _split_last_word(word)
    lower = last.lower()
    if lower in UNCOUNTABLES:
        return word
    if lower in IRREGULARS:
        return head + _match_case(last, IRREGULARS[lower])
    if lower in IRREGULARS.values():
        return word
    return head + _apply(last, _PLURAL_RULES)


def singularize(word: str) -> str:
    """Return the singular form of ``word``.

    Args:
        word: A plural (or already singular) noun, optionally snake_cased.

    Returns:
        str: The singular form; uncountable words are returned unchanged.
    """
    if not word:
        return word
    head, last = _split_last_word(word)
    lower = last.lower()
    if lower in UNCOUNTABLES:
        return word
    for singular, plural in IRREGULARS.items():
        if lower == plural:
            return head + _match_case(last, singular)
        if lower == singular:
            return word
    return head + _apply(last, _SINGULAR_RULES)


def is_singular(word: str) -> bool:
    """Return True when ``word`` is unchanged by :func:`singularize`."""
    return singularize(word) == word


def classify(name: str) -> str:
    """Turn a (possibly plural) resource name into a model class name.

    ``"line_items"`` becomes ``"LineItem"``.
    """
    return "".join(part[:1].upper() + part[1:] for part in singularize(name).split("_"))


def underscore(name: str) -> str:
    """Turn a CamelCase class name into snake_case (``LineItem`` -> ``line_item``)."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.replace("-", "_").lower()


def indefinite_article(word: str) -> str:
    """Return ``"an"`` for words starting with a vowel letter, else ``"a"``."""
    return "an" if word[:1].lower() in VOWELS else "a"
