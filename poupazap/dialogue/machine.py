"""Dialogue state machine driving each user's conversation.

Every :class:`~poupazap.dialogue.states.DialogueState` has exactly one handler.
A handler receives the session and the incoming text, may change the session's
state and temp data, performs at most one write through the storage
collaborator and returns the reply text.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from decimal import Decimal

from poupazap.dialogue.menus import (
    format_currency,
    get_cards_menu,
    get_category_menu,
    get_help,
    get_main_menu,
    get_manage_menu,
    get_manual_entry_menu,
    get_reports_menu,
    map_input_to_menu_option,
    option_index,
)
from poupazap.dialogue.reports import (
    STATEMENT_LIMIT,
    render_category_report,
    render_monthly_report,
    render_statement,
)
from poupazap.dialogue.session import Session
from poupazap.dialogue.states import MAIN_MENU_SENTINEL, DialogueState
from poupazap.nlu.amounts import parse_currency_value
from poupazap.nlu.categories import classify
from poupazap.nlu.intents import (
    IntentType,
    ParsedIntent,
    parse_intent,
    parse_quick_expense,
    parse_quick_income,
)
from poupazap.nlu.locale import PT_BR, Locale
from poupazap.nlu.normalizer import normalize
from poupazap.services.storage import CreditCard, Storage, StorageError, TransactionType

logger = logging.getLogger(__name__)

Handler = Callable[[Session, str], Awaitable[str]]

TWO_PLACES = Decimal("0.01")
UNKNOWN_STATE_TEXT = "😕 Não entendi. Voltando ao menu principal."
STORAGE_FAILURE_TEXT = "❌ Não foi possível concluir a operação agora. Tente novamente."
LOST_ENTRY_TEXT = "😕 Não encontrei os dados do lançamento. Vamos recomeçar."
INVALID_OPTION_TEXT = "Opção inválida."
INVALID_AMOUNT_TEXT = "❌ Valor inválido! Digite um valor numérico positivo."
INVALID_BUDGET_TEXT = "❌ Valor inválido!"
INVALID_GOAL_FORMAT_TEXT = "❌ Formato inválido!\nUse: Nome | Valor | Meses"
INVALID_GOAL_VALUES_TEXT = "❌ Valores inválidos!"
INVALID_DAY_TEXT = "❌ Dia inválido! Digite um número de 1 a 31."
CANCELLED_ENTRY_TEXT = "Ok, lançamento cancelado."
CANCELLED_GOAL_TEXT = "Ok, criação de meta cancelada."
ASK_ANOTHER_TEXT = "Deseja lançar outra?"
NOT_UNDERSTOOD_NEXT_TEXT = 'Não entendi. Deseja lançar outra transação ou voltar ao "menu"?'

DAY_PATTERN = re.compile(r"\d{1,2}")
LEADING_INT_PATTERN = re.compile(r"\d{1,4}(?!\d)")


class DialogueMachine:
    """Dispatches messages to the handler of the session's current state."""

    def __init__(self, storage: Storage, *, locale: Locale = PT_BR) -> None:
        self._storage = storage
        self._locale = locale
        self._handlers: dict[DialogueState, Handler] = {
            DialogueState.MENU: self._process_main_menu,
            DialogueState.SELECTING_REPORT: self._process_selecting_report,
            DialogueState.MANAGING_FINANCES: self._process_managing_finances,
            DialogueState.MANUAL_ENTRY: self._process_manual_entry,
            DialogueState.AWAITING_NEXT_ENTRY: self._process_awaiting_next_entry,
            DialogueState.ADDING_INCOME: self._process_adding_income,
            DialogueState.AWAITING_EXPENSE_DESCRIPTION: self._process_expense_description,
            DialogueState.SETTING_BUDGET: self._process_setting_budget,
            DialogueState.ADDING_GOAL: self._process_adding_goal,
            DialogueState.CONFIRM_QUICK_EXPENSE: self._process_confirm_quick_expense,
            DialogueState.CONFIRM_QUICK_INCOME: self._process_confirm_quick_income,
            DialogueState.ADDING_GOAL_ASK_VALUE_FROM_VOICE: self._process_goal_value_from_voice,
            DialogueState.CONFIRM_VOICE_GOAL: self._process_confirm_voice_goal,
            DialogueState.SELECTING_CATEGORY: self._process_selecting_category,
            DialogueState.ADDING_EXPENSE: self._process_adding_expense,
            DialogueState.AWAITING_SCHEDULED_DAY: self._process_scheduled_day,
            DialogueState.MANAGING_CARDS: self._process_managing_cards,
            DialogueState.ADDING_CARD: self._process_adding_card,
            DialogueState.REMOVING_CARD: self._process_removing_card,
        }
        missing = set(DialogueState) - set(self._handlers)
        if missing:
            names = ", ".join(sorted(state.value for state in missing))
            raise RuntimeError(f"Dialogue states without handler: {names}")

    @property
    def locale(self) -> Locale:
        return self._locale

    def handler_for(self, state: DialogueState) -> Handler:
        return self._handlers[state]

    async def process_command(self, session: Session, message: str) -> str:
        """Handle one incoming message and return the reply text."""

        message = message or ""
        if message == MAIN_MENU_SENTINEL:
            session.reset()
            return get_main_menu()

        state = DialogueState.parse(session.current_state)
        if state is None:
            logger.warning(
                "No handler for state %r of session %s, resetting to menu",
                session.current_state,
                session.id,
            )
            session.reset()
            return f"{UNKNOWN_STATE_TEXT}\n\n{get_main_menu()}"

        return await self._run(session, self._handlers[state], message)

    async def process_voice(self, session: Session, text: str) -> str:
        """Handle transcribed speech.

        Recognized intents are always confirmed before anything is stored;
        otherwise the text goes through :meth:`process_command` as if typed.
        """

        async def interpret(current: Session, message: str) -> str:
            reply = await self._interpret_free_text(current, message, is_voice=True)
            if reply is not None:
                return reply
            return await self.process_command(current, message)

        if DialogueState.parse(session.current_state) is None:
            return await self.process_command(session, text)
        return await self._run(session, interpret, text)

    async def _run(self, session: Session, handler: Handler, message: str) -> str:
        snapshot = session.snapshot()
        try:
            return await handler(session, message)
        except StorageError:
            logger.exception(
                "Storage failure for session %s in state %s",
                session.id,
                snapshot.current_state,
            )
            session.restore(snapshot)
            return STORAGE_FAILURE_TEXT

    # -- free text -----------------------------------------------------

    async def _interpret_free_text(
        self, session: Session, text: str, *, is_voice: bool
    ) -> str | None:
        """Move to the confirmation state of the intent found in ``text``."""

        cards = await self._storage.get_credit_cards(session.id)
        intent = parse_intent(
            text, categories=session.categories, cards=cards, locale=self._locale
        )
        if intent is None:
            return None

        icon = "🎙️" if is_voice else "📝"
        if intent.type is IntentType.QUICK_EXPENSE:
            session.temp_data = self._expense_temp_data(intent, is_voice=is_voice)
            session.transition(DialogueState.CONFIRM_QUICK_EXPENSE)
            card_text = ""
            if intent.card_id is not None:
                nickname = next(
                    (card.nickname for card in cards if card.id == intent.card_id), ""
                )
                card_text = f" no cartão {nickname}"
            return (
                f"{icon} Entendi: despesa de {format_currency(intent.amount)} em "
                f"{intent.category} ({intent.description}){card_text}. Confirma? (Sim/Não)"
            )

        if intent.type is IntentType.QUICK_INCOME:
            session.temp_data = self._income_temp_data(intent, is_voice=is_voice)
            session.transition(DialogueState.CONFIRM_QUICK_INCOME)
            return (
                f"{icon} Entendi: receita de {format_currency(intent.amount)} "
                f"({intent.description}). Confirma? (Sim/Não)"
            )

        session.temp_data = {
            "goal_name": intent.goal_name,
            "goal_months": intent.goal_months,
        }
        if intent.amount > 0:
            session.temp_data["goal_target_value"] = str(intent.amount)
            session.transition(DialogueState.CONFIRM_VOICE_GOAL)
            return self._render_goal_confirmation(
                intent.goal_name or self._locale.default_goal_name,
                intent.amount,
                intent.goal_months or 0,
                icon=icon,
            )

        session.transition(DialogueState.ADDING_GOAL_ASK_VALUE_FROM_VOICE)
        return (
            f'{icon} Meta "{intent.goal_name}" em {intent.goal_months} meses. '
            "Qual o valor total para a meta?"
        )

    # -- menus ---------------------------------------------------------

    async def _process_main_menu(self, session: Session, message: str) -> str:
        option = map_input_to_menu_option(message)
        if option == "1":
            session.transition(DialogueState.SELECTING_REPORT)
            return get_reports_menu()
        if option == "2":
            session.transition(DialogueState.MANAGING_FINANCES)
            return get_manage_menu()
        if option == "3":
            session.transition(DialogueState.MANUAL_ENTRY)
            return get_manual_entry_menu()
        if option == "4":
            return get_help()

        reply = await self._interpret_free_text(session, message, is_voice=False)
        if reply is not None:
            return reply
        return f"{INVALID_OPTION_TEXT} Por favor, escolha uma das opções abaixo:\n\n{get_main_menu()}"

    async def _process_selecting_report(self, session: Session, message: str) -> str:
        option = map_input_to_menu_option(message)
        if option == "1":
            transactions = await self._storage.get_recent_transactions(
                session.id, limit=STATEMENT_LIMIT
            )
            response = render_statement(transactions)
        elif option == "2":
            balance = await self._storage.get_monthly_balance(session.id)
            response = render_monthly_report(balance, session.monthly_budget)
        elif option == "3":
            expenses = await self._storage.get_category_expenses(session.id, session.categories)
            response = render_category_report(expenses)
        else:
            return f"{INVALID_OPTION_TEXT}\n\n{get_reports_menu()}"

        session.transition(DialogueState.MENU)
        return response

    async def _process_managing_finances(self, session: Session, message: str) -> str:
        option = map_input_to_menu_option(message)
        if option == "1":
            session.transition(DialogueState.SETTING_BUDGET)
            return "🎯 *Definir Orçamento Mensal*\n\nDigite o valor:"
        if option == "2":
            session.transition(DialogueState.ADDING_GOAL)
            return (
                "🎯 *Criar Meta Financeira*\n\n"
                "Digite no formato:\nNome | Valor total | Prazo em meses"
            )
        if option == "3":
            cards = await self._storage.get_credit_cards(session.id)
            session.transition(DialogueState.MANAGING_CARDS)
            return get_cards_menu(cards)
        if option == "4":
            session.temp_data = {"transaction_type": TransactionType.EXPENSE.value, "scheduled": True}
            session.transition(DialogueState.SELECTING_CATEGORY)
            return get_category_menu("Despesa Agendada", session.categories)
        return f"{INVALID_OPTION_TEXT}\n\n{get_manage_menu()}"

    async def _process_manual_entry(self, session: Session, message: str) -> str:
        option = map_input_to_menu_option(message)
        if option == "1":
            session.temp_data = {"transaction_type": TransactionType.EXPENSE.value, "scheduled": False}
            session.transition(DialogueState.SELECTING_CATEGORY)
            return get_category_menu("Despesa Única", session.categories)
        if option == "2":
            session.transition(DialogueState.ADDING_INCOME)
            return "💰 *Adicionar Receita*\n\nDigite o valor da receita:"
        return f"{INVALID_OPTION_TEXT}\n\n{get_manual_entry_menu()}"

    # -- manual entries ------------------------------------------------

    async def _process_selecting_category(self, session: Session, message: str) -> str:
        index = option_index(map_input_to_menu_option(message), len(session.categories))
        category: str | None = None
        if index is not None:
            category = session.categories[index]
        else:
            category = classify(message, session.categories)

        if category is None:
            title = "Despesa Agendada" if session.temp_data.get("scheduled") else "Despesa Única"
            return f"{INVALID_OPTION_TEXT}\n\n{get_category_menu(title, session.categories)}"

        session.temp_data["category"] = category
        session.transition(DialogueState.ADDING_EXPENSE)
        return f"💸 *{category}*\n\nDigite o valor da despesa:"

    async def _process_adding_expense(self, session: Session, message: str) -> str:
        amount = self._positive_amount(message)
        if amount is None:
            return INVALID_AMOUNT_TEXT

        session.temp_data["amount"] = str(amount)
        if session.temp_data.get("scheduled"):
            session.transition(DialogueState.AWAITING_SCHEDULED_DAY)
            return "📅 Em que dia do mês essa despesa vence? (1 a 31)"

        session.transition(DialogueState.AWAITING_EXPENSE_DESCRIPTION)
        return (
            f"✅ Valor {format_currency(amount)} anotado.\n"
            '📝 Quer adicionar uma descrição? (Ou digite "não")'
        )

    async def _process_scheduled_day(self, session: Session, message: str) -> str:
        normalized = normalize(message)
        if not DAY_PATTERN.fullmatch(normalized) or not 1 <= int(normalized) <= 31:
            return INVALID_DAY_TEXT

        amount = session.temp_decimal("amount")
        category = session.temp_data.get("category")
        if amount is None or not category:
            return self._lost_entry(session)

        day = int(normalized)
        await self._storage.add_scheduled_expense(
            session.id, amount=amount, category=category, day_of_month=day
        )
        session.reset()
        return (
            f"✅ Despesa agendada de {format_currency(amount)} em {category} "
            f"todo dia {day}."
        )

    async def _process_adding_income(self, session: Session, message: str) -> str:
        amount = self._positive_amount(message)
        if amount is None:
            return INVALID_AMOUNT_TEXT

        await self._storage.add_transaction(
            session.id,
            type=TransactionType.INCOME,
            amount=amount,
            category=self._locale.income_category,
            description=self._locale.manual_income_label,
        )
        session.temp_data = {}
        session.transition(DialogueState.AWAITING_NEXT_ENTRY)
        return f"✅ Receita de {format_currency(amount)} registrada. {ASK_ANOTHER_TEXT}"

    async def _process_expense_description(self, session: Session, message: str) -> str:
        if normalize(message) in self._locale.skip_words:
            description = session.temp_data.get("description") or ""
        else:
            description = message.strip()
        return await self._store_expense(session, description)

    async def _process_awaiting_next_entry(self, session: Session, message: str) -> str:
        cards = await self._storage.get_credit_cards(session.id)
        expense = parse_quick_expense(
            message, categories=session.categories, cards=cards, locale=self._locale
        )
        if expense.success:
            session.temp_data = self._expense_temp_data(expense, is_voice=False)
            return await self._store_expense(session, expense.description)

        income = parse_quick_income(message, locale=self._locale)
        if income.success:
            session.temp_data = self._income_temp_data(income, is_voice=False)
            return await self._store_income(session)

        normalized = normalize(message)
        if normalized in self._locale.stop_words:
            session.reset()
            return get_main_menu()
        if normalized in self._locale.yes_words:
            session.temp_data = {}
            session.transition(DialogueState.MANUAL_ENTRY)
            return get_manual_entry_menu()
        return NOT_UNDERSTOOD_NEXT_TEXT

    async def _store_expense(self, session: Session, description: str) -> str:
        """Write the pending expense and ask for another entry."""

        amount = session.temp_decimal("amount")
        if amount is None:
            return self._lost_entry(session)
        category = session.temp_data.get("category") or self._locale.default_category

        await self._storage.add_transaction(
            session.id,
            type=TransactionType.EXPENSE,
            amount=amount,
            category=category,
            description=description,
            card_id=session.temp_data.get("card_id"),
            is_voice=bool(session.temp_data.get("is_voice", False)),
        )
        session.temp_data = {}
        session.transition(DialogueState.AWAITING_NEXT_ENTRY)
        return (
            f"✅ Despesa de {format_currency(amount)} ({description or category}) "
            f"registrada. {ASK_ANOTHER_TEXT}"
        )

    async def _store_income(self, session: Session) -> str:
        amount = session.temp_decimal("amount")
        if amount is None:
            return self._lost_entry(session)
        description = session.temp_data.get("description") or self._locale.voice_income_label

        await self._storage.add_transaction(
            session.id,
            type=TransactionType.INCOME,
            amount=amount,
            category=self._locale.income_category,
            description=description,
            is_voice=bool(session.temp_data.get("is_voice", False)),
        )
        session.temp_data = {}
        session.transition(DialogueState.AWAITING_NEXT_ENTRY)
        return (
            f"✅ Receita de {format_currency(amount)} ({description}) registrada. "
            f"{ASK_ANOTHER_TEXT}"
        )

    # -- confirmations -------------------------------------------------

    async def _process_confirm_quick_expense(self, session: Session, message: str) -> str:
        if not self._confirmed(message):
            session.reset()
            return CANCELLED_ENTRY_TEXT
        return await self._store_expense(session, session.temp_data.get("description") or "")

    async def _process_confirm_quick_income(self, session: Session, message: str) -> str:
        if not self._confirmed(message):
            session.reset()
            return CANCELLED_ENTRY_TEXT
        return await self._store_income(session)

    # -- budget and goals ----------------------------------------------

    async def _process_setting_budget(self, session: Session, message: str) -> str:
        budget = self._positive_amount(message)
        if budget is None:
            return INVALID_BUDGET_TEXT

        await self._storage.set_monthly_budget(session.id, budget)
        session.monthly_budget = budget
        session.reset()
        return f"✅ Orçamento mensal definido para {format_currency(budget)}."

    async def _process_adding_goal(self, session: Session, message: str) -> str:
        parts = [part.strip() for part in message.split("|")]
        if len(parts) != 3:
            return INVALID_GOAL_FORMAT_TEXT

        name, value_text, months_text = parts
        value = self._positive_amount(value_text)
        months_match = LEADING_INT_PATTERN.match(normalize(months_text))
        months = int(months_match.group(0)) if months_match else 0
        if not name or value is None or months <= 0:
            return INVALID_GOAL_VALUES_TEXT

        monthly_target = (value / months).quantize(TWO_PLACES)
        await self._storage.create_goal(
            session.id,
            name=name,
            target_value=value,
            months=months,
            monthly_target=monthly_target,
        )
        session.reset()
        return (
            f'✅ *Meta "{name}" criada!*\n'
            f"💰 Valor: {format_currency(value)}\n"
            f"📅 Prazo: {months} meses\n"
            f"💵 Guardar por mês: {format_currency(monthly_target)}"
        )

    async def _process_goal_value_from_voice(self, session: Session, message: str) -> str:
        value = self._positive_amount(message)
        if value is None:
            return "❌ Valor inválido! Qual o valor total para a meta?"

        session.temp_data["goal_target_value"] = str(value)
        session.transition(DialogueState.CONFIRM_VOICE_GOAL)
        return self._render_goal_confirmation(
            session.temp_data.get("goal_name") or self._locale.default_goal_name,
            value,
            int(session.temp_data.get("goal_months") or 0),
            icon="🎙️",
        )

    async def _process_confirm_voice_goal(self, session: Session, message: str) -> str:
        if not self._confirmed(message):
            session.reset()
            return CANCELLED_GOAL_TEXT

        name = str(session.temp_data.get("goal_name") or self._locale.default_goal_name)
        value = session.temp_decimal("goal_target_value")
        months = session.temp_data.get("goal_months")
        if value is None or not months:
            return self._lost_entry(session)
        composed = f"{name.replace('|', ' ')} | {value} | {months}"
        return await self._process_adding_goal(session, composed)

    # -- credit cards --------------------------------------------------

    async def _process_managing_cards(self, session: Session, message: str) -> str:
        option = map_input_to_menu_option(message)
        if option == "1":
            session.transition(DialogueState.ADDING_CARD)
            return "💳 Digite o apelido do cartão (ex.: nubank):"

        cards = await self._storage.get_credit_cards(session.id)
        if option == "2":
            if not cards:
                return f"Você ainda não tem cartões cadastrados.\n\n{get_cards_menu(cards)}"
            session.transition(DialogueState.REMOVING_CARD)
            listing = "\n".join(
                f"{index}. {card.nickname}" for index, card in enumerate(cards, start=1)
            )
            return f"🗑️ Qual cartão remover? Digite o número ou o apelido:\n\n{listing}"
        return f"{INVALID_OPTION_TEXT}\n\n{get_cards_menu(cards)}"

    async def _process_adding_card(self, session: Session, message: str) -> str:
        nickname = " ".join(message.split())
        if not nickname or nickname.isdecimal():
            return "❌ Apelido inválido! Digite um nome para o cartão."

        cards = await self._storage.get_credit_cards(session.id)
        if any(normalize(card.nickname) == normalize(nickname) for card in cards):
            return f'❌ Já existe um cartão chamado "{nickname}". Escolha outro apelido.'

        await self._storage.add_credit_card(session.id, nickname=nickname)
        session.reset()
        return (
            f'✅ Cartão "{nickname}" cadastrado! '
            f'Use "paguei 50 no {normalize(nickname)}" para lançar nele.'
        )

    async def _process_removing_card(self, session: Session, message: str) -> str:
        cards = await self._storage.get_credit_cards(session.id)
        card = self._find_card(cards, message)
        if card is None:
            return "❌ Cartão não encontrado. Digite o número ou o apelido."

        await self._storage.remove_credit_card(session.id, card_id=card.id)
        session.reset()
        return f'🗑️ Cartão "{card.nickname}" removido.'

    # -- helpers -------------------------------------------------------

    def _confirmed(self, message: str) -> bool:
        return normalize(message).startswith(self._locale.confirm_prefix)

    def _expense_temp_data(self, intent: ParsedIntent, *, is_voice: bool) -> dict[str, object]:
        return {
            "transaction_type": TransactionType.EXPENSE.value,
            "amount": str(intent.amount),
            "category": intent.category,
            "description": intent.description,
            "card_id": intent.card_id,
            "is_voice": is_voice,
        }

    def _income_temp_data(self, intent: ParsedIntent, *, is_voice: bool) -> dict[str, object]:
        return {
            "transaction_type": TransactionType.INCOME.value,
            "amount": str(intent.amount),
            "description": intent.description,
            "is_voice": is_voice,
        }

    def _render_goal_confirmation(
        self, name: str, value: Decimal, months: int, *, icon: str
    ) -> str:
        return (
            f'{icon} Ok! Meta: "{name}", Valor: {format_currency(value)}, '
            f"Prazo: {months} meses. Correto? (Sim/Não)"
        )

    @staticmethod
    def _find_card(cards: list[CreditCard], message: str) -> CreditCard | None:
        option = map_input_to_menu_option(message)
        index = option_index(option, len(cards))
        if index is not None:
            return cards[index]
        for card in cards:
            if normalize(card.nickname) == option:
                return card
        return None

    @staticmethod
    def _lost_entry(session: Session) -> str:
        session.reset()
        return f"{LOST_ENTRY_TEXT}\n\n{get_main_menu()}"

    @staticmethod
    def _positive_amount(text: str) -> Decimal | None:
        """Return ``text`` as a positive amount or ``None`` when it is not one."""

        try:
            amount = parse_currency_value(text)
        except ValueError:
            return None
        return amount if amount > 0 else None


__all__ = [
    "DialogueMachine",
    "Handler",
    "INVALID_AMOUNT_TEXT",
    "INVALID_BUDGET_TEXT",
    "INVALID_GOAL_FORMAT_TEXT",
    "INVALID_GOAL_VALUES_TEXT",
    "STORAGE_FAILURE_TEXT",
    "UNKNOWN_STATE_TEXT",
]
