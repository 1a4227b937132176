"""
Statement service: Trial Balance, Profit & Loss and Balance Sheet.

Statements are derived from recomputed balances (LedgerService),
never from stored snapshots. They report drift through
is_balanced/difference and never correct it.

An account appears on a statement when it is active, or when it
is inactive but still carries a non-zero figure. Dropping the
latter would break the statement totals.
"""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from books_ledger.models.account import Account
from books_ledger.models.balance import Balance, ZERO, quantize
from books_ledger.models.enums import AccountGroup, ACCOUNT_TYPES_BY_GROUP
from books_ledger.schemas.reports import (
    BalanceSheet,
    ColumnTotals,
    ProfitAndLoss,
    ProfitLossFigure,
    StatementLine,
    TrialBalance,
    TrialBalanceEntry,
    TypeSection,
)
from books_ledger.services.ledger_service import LedgerService, check_range

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def _included(account: Account, amount: Decimal) -> bool:
    return account.is_active or amount != ZERO


def _sections(
    group: AccountGroup, lines: list[tuple[Account, Decimal]]
) -> list[TypeSection]:
    """Group statement lines by account type, in the chart's type order."""
    by_type: dict[str, list[StatementLine]] = {}
    for account, amount in lines:
        by_type.setdefault(account.account_type, []).append(StatementLine(
            account_id=account.id,
            account_code=account.code,
            account_name=account.name,
            amount=amount,
        ))
    order = list(ACCOUNT_TYPES_BY_GROUP[group])
    types = sorted(
        by_type,
        key=lambda t: (order.index(t) if t in order else len(order), t),
    )
    return [
        TypeSection(
            account_type=t,
            accounts=by_type[t],
            total=quantize(sum((line.amount for line in by_type[t]), ZERO)),
        )
        for t in types
    ]


def _total(sections: list[TypeSection]) -> Decimal:
    return quantize(sum((s.total for s in sections), ZERO))


class StatementService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = LedgerService(db)

    def _accounts(self) -> list[Account]:
        accounts = self.db.execute(
            select(Account).order_by(Account.code)
        ).scalars().all()
        return list(accounts)

    def trial_balance(self, as_of: date | None = None) -> TrialBalance:
        """
        Every account's balance as of a date, in Dr/Cr columns.

        Total debits equal total credits whenever every voucher
        balances and the opening balances balance.
        """
        balances = self.ledger.balances_as_of(as_of)

        entries = []
        group_totals = {
            group: ColumnTotals(debit=ZERO, credit=ZERO) for group in AccountGroup
        }
        total_debit = total_credit = ZERO
        for account in self._accounts():
            balance = balances.get(account.id, Balance())
            if not _included(account, balance.amount):
                continue
            debit = balance.magnitude if balance.amount > 0 else ZERO
            credit = balance.magnitude if balance.amount < 0 else ZERO
            entries.append(TrialBalanceEntry(
                account_id=account.id,
                account_code=account.code,
                account_name=account.name,
                group=account.group,
                account_type=account.account_type,
                debit=debit,
                credit=credit,
            ))
            totals = group_totals[account.group]
            totals.debit = quantize(totals.debit + debit)
            totals.credit = quantize(totals.credit + credit)
            total_debit += debit
            total_credit += credit

        total_debit = quantize(total_debit)
        total_credit = quantize(total_credit)
        difference = total_debit - total_credit
        if difference != ZERO:
            logger.warning(
                "Trial balance as of %s is out by %s", as_of, difference
            )

        return TrialBalance(
            as_of=as_of,
            entries=entries,
            group_totals=group_totals,
            total_debit=total_debit,
            total_credit=total_credit,
            is_balanced=difference == ZERO,
            difference=difference,
        )

    def profit_and_loss(
        self,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> ProfitAndLoss:
        """
        Income and expenses from movements inside the range.

        Income counts credit minus debit, expenses debit minus
        credit. Opening balances are not movements and are left out.
        """
        check_range(from_date, to_date)
        movements = self.ledger.movements(from_date, to_date)

        income, expenses = [], []
        for account in self._accounts():
            debit, credit = movements.get(account.id, (ZERO, ZERO))
            if account.group == AccountGroup.INCOME:
                amount = quantize(credit - debit)
                if _included(account, amount):
                    income.append((account, amount))
            elif account.group == AccountGroup.EXPENSES:
                amount = quantize(debit - credit)
                if _included(account, amount):
                    expenses.append((account, amount))

        income_by_type = _sections(AccountGroup.INCOME, income)
        expense_by_type = _sections(AccountGroup.EXPENSES, expenses)
        total_income = _total(income_by_type)
        total_expenses = _total(expense_by_type)
        net_result = total_income - total_expenses

        if total_income != ZERO:
            profit_percentage = quantize(net_result / total_income * HUNDRED)
        else:
            profit_percentage = ZERO

        return ProfitAndLoss(
            from_date=from_date,
            to_date=to_date,
            income_by_type=income_by_type,
            expense_by_type=expense_by_type,
            total_income=total_income,
            total_expenses=total_expenses,
            net_result=net_result,
            is_profit=total_income >= total_expenses,
            profit_percentage=profit_percentage,
        )

    def balance_sheet(self, as_of: date | None = None) -> BalanceSheet:
        """
        Assets against liabilities and capital as of a date.

        The profit or loss carried across is cumulative from the
        start of the books through as_of (income and expense
        balances, openings included), so that
        assets == liabilities + capital + profit whenever the
        books are consistent.
        """
        balances = self.ledger.balances_as_of(as_of)

        assets, liabilities, capital = [], [], []
        profit = ZERO
        for account in self._accounts():
            balance = balances.get(account.id, Balance())
            amount = balance.natural_amount(account.group)
            if account.group == AccountGroup.INCOME:
                profit += amount
            elif account.group == AccountGroup.EXPENSES:
                profit -= amount
            elif _included(account, amount):
                target = {
                    AccountGroup.ASSETS: assets,
                    AccountGroup.LIABILITIES: liabilities,
                    AccountGroup.CAPITAL: capital,
                }[account.group]
                target.append((account, amount))

        assets_by_type = _sections(AccountGroup.ASSETS, assets)
        liabilities_by_type = _sections(AccountGroup.LIABILITIES, liabilities)
        capital_lines = [
            line for section in _sections(AccountGroup.CAPITAL, capital)
            for line in section.accounts
        ]

        profit = quantize(profit)
        total_assets = _total(assets_by_type)
        total_liabilities = _total(liabilities_by_type)
        total_capital = quantize(sum((line.amount for line in capital_lines), ZERO))
        total_liabilities_and_capital = quantize(
            total_liabilities + total_capital + profit
        )
        difference = total_assets - total_liabilities_and_capital
        if difference != ZERO:
            logger.warning(
                "Balance sheet as of %s is out by %s", as_of, difference
            )

        return BalanceSheet(
            as_of=as_of,
            assets_by_type=assets_by_type,
            liabilities_by_type=liabilities_by_type,
            capital=capital_lines,
            profit_loss=ProfitLossFigure(amount=profit, is_profit=profit >= ZERO),
            total_assets=total_assets,
            total_liabilities=total_liabilities,
            total_capital=total_capital,
            total_liabilities_and_capital=total_liabilities_and_capital,
            is_balanced=difference == ZERO,
            difference=difference,
        )
