"""Static menu texts and small rendering helpers."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import TYPE_CHECKING

from poupazap.nlu.normalizer import normalize

if TYPE_CHECKING:  # pragma: no cover - typing only
    from poupazap.services.storage import CreditCard

TWO_PLACES = Decimal("0.01")
BACK_HINT = 'Digite "menu" para voltar.'

NUMBER_WORDS = {
    "um": "1",
    "uma": "1",
    "primeiro": "1",
    "dois": "2",
    "duas": "2",
    "segundo": "2",
    "tres": "3",
    "terceiro": "3",
    "quatro": "4",
    "quarto": "4",
    "cinco": "5",
    "seis": "6",
    "sete": "7",
    "oito": "8",
    "nove": "9",
}
KEYCAP_MARKS = ("\ufe0f", "\u20e3")
MAX_OPTION_DIGITS = 4


def format_currency(value: Decimal) -> str:
    """Return ``value`` in Brazilian notation, e.g. ``R$ 1.234,56``."""

    normalized = Decimal(value).quantize(TWO_PLACES)
    sign = "-" if normalized < 0 else ""
    grouped = f"{abs(normalized):,.2f}"
    swapped = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {swapped}"


def map_input_to_menu_option(text: str) -> str:
    """Reduce menu replies like ``"1️⃣"``, ``" 2 "`` or ``"três"`` to a digit string.

    Anything that is not recognized is returned normalized, so callers can
    compare it against their option digits and fall back to free text.
    """

    cleaned = normalize(text)
    for mark in KEYCAP_MARKS:
        cleaned = cleaned.replace(mark, "")
    cleaned = cleaned.strip().rstrip(".)")
    if cleaned.isdecimal() and len(cleaned) <= MAX_OPTION_DIGITS:
        return str(int(cleaned))
    return NUMBER_WORDS.get(cleaned, cleaned)


def option_index(option: str, count: int) -> int | None:
    """Return the zero-based position chosen by a numbered reply, if in range."""

    if not option.isdecimal() or len(option) > MAX_OPTION_DIGITS:
        return None
    index = int(option) - 1
    return index if 0 <= index < count else None


def get_main_menu() -> str:
    return (
        "*PoupaZap* 💰\n\n"
        "Escolha uma opção:\n\n"
        "1️⃣ Meus Relatórios\n"
        "2️⃣ Gerenciar Finanças\n"
        "3️⃣ Lançar Manualmente\n"
        "4️⃣ Ajuda\n\n"
        '💡 Você também pode escrever ou falar, por exemplo: "gastei 50 no mercado".'
    )


def get_reports_menu() -> str:
    return (
        "*Meus Relatórios* 📊\n\n"
        "Qual relatório você quer ver?\n\n"
        "1️⃣ Extrato Recente\n"
        "2️⃣ Resumo do Mês\n"
        "3️⃣ Gastos por Categoria\n\n"
        f"{BACK_HINT}"
    )


def get_manage_menu() -> str:
    return (
        "*Gerenciar Finanças* 🛠️\n\n"
        "O que você quer gerenciar?\n\n"
        "1️⃣ Orçamento Mensal\n"
        "2️⃣ Minhas Metas\n"
        "3️⃣ Meus Cartões de Crédito\n"
        "4️⃣ Despesas Agendadas\n\n"
        f"{BACK_HINT}"
    )


def get_manual_entry_menu() -> str:
    return (
        "*Lançar Manualmente* ✍️\n\n"
        "O que você quer lançar?\n\n"
        "1️⃣ Adicionar Despesa\n"
        "2️⃣ Adicionar Receita\n\n"
        f"{BACK_HINT}"
    )


def get_category_menu(title: str, categories: Sequence[str]) -> str:
    """Return a numbered list of the user's categories."""

    lines = [f"*{title}* 📂", "", "Escolha a categoria:", ""]
    lines.extend(f"{index}. {name}" for index, name in enumerate(categories, start=1))
    lines.extend(["", BACK_HINT])
    return "\n".join(lines)


def get_cards_menu(cards: Sequence["CreditCard"]) -> str:
    """Return the card management menu listing registered cards."""

    lines = ["*Meus Cartões de Crédito* 💳", ""]
    if cards:
        lines.extend(f"{index}. {card.nickname}" for index, card in enumerate(cards, start=1))
    else:
        lines.append("Nenhum cartão cadastrado.")
    lines.extend(
        [
            "",
            "1️⃣ Adicionar Cartão",
            "2️⃣ Remover Cartão",
            "",
            BACK_HINT,
        ]
    )
    return "\n".join(lines)


def get_help() -> str:
    return (
        "*Ajuda* ❓\n\n"
        "Use os números dos menus para navegar ou escreva frases como:\n"
        '• "gastei 35,90 no almoço"\n'
        '• "paguei 120 no cartão nubank"\n'
        '• "recebi 1500 de salário"\n'
        '• "criar meta viagem de 3000 em 6 meses"\n\n'
        'Digite "menu" a qualquer momento para voltar ao início.'
    )


__all__ = [
    "format_currency",
    "get_cards_menu",
    "get_category_menu",
    "get_help",
    "get_main_menu",
    "get_manage_menu",
    "get_manual_entry_menu",
    "get_reports_menu",
    "map_input_to_menu_option",
    "option_index",
]
