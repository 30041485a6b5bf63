"""Language data consumed by the intent parsers.

Every keyword list, filler word and fallback label the parsers rely on lives
here so a new language only needs a new :class:`Locale` instance. All entries
are stored in normalized form (lower case, no accents).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(slots=True, frozen=True)
class Locale:
    """Keyword sets and labels for one language."""

    name: str
    expense_keywords: tuple[str, ...]
    income_keywords: tuple[str, ...]
    filler_words: tuple[str, ...]
    currency_words: tuple[str, ...]
    card_prepositions: tuple[str, ...]
    goal_trigger: str
    goal_value_prefixes: tuple[str, ...]
    goal_duration_pattern: str
    stop_words: tuple[str, ...]
    skip_words: tuple[str, ...]
    yes_words: tuple[str, ...]
    menu_words: tuple[str, ...]
    confirm_prefix: str
    default_category: str
    income_category: str
    voice_income_label: str
    manual_income_label: str
    default_goal_name: str
    category_aliases: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )


PT_BR = Locale(
    name="pt_BR",
    expense_keywords=("gastei", "paguei", "comprei", "despesa de", "uma compra de"),
    income_keywords=("recebi", "ganhei", "pix de", "pagamento de", "entrou"),
    filler_words=("em", "no", "na", "para", "com", "de"),
    currency_words=("reais", "real", "r$"),
    # Longest first so "no cartao" wins over the bare "no".
    card_prepositions=("no cartao", "no credito", "com o", "pelo", "no"),
    goal_trigger="criar meta",
    goal_value_prefixes=("valor de", "de", "com"),
    goal_duration_pattern=r"(?<!\w)em\s*(\d{1,4})\s*mes(?:es)?",
    stop_words=("nao", "n", "chega", "parar", "menu", "cancelar"),
    skip_words=("nao", "pular", "n"),
    yes_words=("sim", "s", "quero", "claro", "bora"),
    menu_words=("menu", "voltar", "inicio", "menu principal"),
    # Any reply starting with this letter confirms a pending entry.
    confirm_prefix="s",
    default_category="Outros",
    income_category="Receita",
    voice_income_label="Receita por voz",
    manual_income_label="Receita manual",
    default_goal_name="Nova Meta",
    category_aliases=MappingProxyType(
        {
            "alimentacao": (
                "mercado",
                "supermercado",
                "restaurante",
                "almoco",
                "jantar",
                "lanche",
                "padaria",
                "ifood",
                "comida",
            ),
            "transporte": ("uber", "taxi", "onibus", "metro", "gasolina", "combustivel"),
            "moradia": ("aluguel", "condominio", "luz", "agua", "internet"),
            "lazer": ("cinema", "show", "bar", "viagem", "netflix"),
            "saude": ("farmacia", "remedio", "medico", "consulta", "academia"),
            "educacao": ("curso", "livro", "escola", "faculdade"),
        }
    ),
)

LOCALES: dict[str, Locale] = {PT_BR.name: PT_BR}


def get_locale(name: str) -> Locale:
    """Return the locale registered under ``name``."""

    try:
        return LOCALES[name]
    except KeyError as exc:
        raise ValueError(f"Unknown locale: {name}") from exc


__all__ = ["Locale", "LOCALES", "PT_BR", "get_locale"]
