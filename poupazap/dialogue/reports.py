"""Text reports built from storage query results."""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping, Sequence
from decimal import Decimal

from poupazap.dialogue.menus import format_currency
from poupazap.services.storage import MonthlyBalance, Transaction, TransactionType

STATEMENT_LIMIT = 10
MONTH_NAMES = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)


def render_statement(transactions: Sequence[Transaction]) -> str:
    """Return the list of the latest transactions, newest first."""

    if not transactions:
        return "📋 *Extrato*\n\nNenhuma transação encontrada."

    entries = []
    for transaction in transactions:
        is_income = transaction.type is TransactionType.INCOME
        icon, signal = ("💰", "+") if is_income else ("💸", "-")
        category_text = transaction.category
        if transaction.description:
            category_text = f"{transaction.category} ({transaction.description})"
        if transaction.card_name:
            category_text += f" [💳 {transaction.card_name}]"
        timestamp = transaction.created_at.strftime("%d/%m/%Y às %H:%M")
        entries.append(
            f"{icon} {signal}{format_currency(transaction.amount)} - {category_text}\n📅 {timestamp}"
        )

    body = "\n\n".join(entries)
    return f"📋 *Extrato - Últimas {STATEMENT_LIMIT} transações*\n\n{body}"


def render_monthly_report(
    balance: MonthlyBalance,
    budget: Decimal,
    *,
    now: dt.datetime | None = None,
) -> str:
    """Return the month summary with budget usage when a budget is set."""

    now = now or dt.datetime.now()
    month_label = f"{MONTH_NAMES[now.month - 1]} de {now.year}"

    if budget > 0:
        used = balance.expenses / budget * 100
        status = (
            "🔴 Status: Acima do orçamento"
            if balance.expenses > budget
            else "🟢 Status: Dentro do orçamento"
        )
        budget_status = "\n".join(
            [
                f"🎯 Orçamento: {format_currency(budget)}",
                (
                    f"Utilizado: {format_currency(balance.expenses)} de "
                    f"{format_currency(budget)} ({used:.0f}%)"
                ),
                f"Saldo do Orçamento: {format_currency(budget - balance.expenses)}",
                status,
            ]
        )
    else:
        budget_status = "⚠️ Orçamento mensal não definido."

    return (
        f"📊 *Resumo Mensal - {month_label}*\n\n"
        f"💰 Receitas: {format_currency(balance.income)}\n"
        f"💸 Despesas: {format_currency(balance.expenses)}\n"
        f"📈 Saldo do Mês: {format_currency(balance.balance)}\n\n"
        f"{budget_status}"
    )


def render_category_report(expenses: Mapping[str, Decimal]) -> str:
    """Return the current month's expenses split by category."""

    total = sum(expenses.values(), Decimal(0))
    if total == 0:
        return "📊 *Gastos por Categoria*\n\nNenhuma despesa registrada este mês."

    lines = ["📊 *Gastos por Categoria - Mês Atual*", ""]
    for category, amount in expenses.items():
        if amount > 0:
            percentage = amount / total * 100
            lines.append(f"📂 {category}: {format_currency(amount)} ({percentage:.1f}%)")
    lines.extend(["", f"💸 *Total de Despesas:* {format_currency(total)}"])
    return "\n".join(lines)


__all__ = [
    "STATEMENT_LIMIT",
    "render_category_report",
    "render_monthly_report",
    "render_statement",
]
