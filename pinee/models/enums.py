from enum import Enum

class TransactionType(str, Enum):
    income = "income"
    expense = "expense"
    investment = "investment"

class IncomeStatus(str, Enum):
    received = "received"
    pending = "pending"
    consolidated = "consolidated"

class ExpenseStatus(str, Enum):
    paid = "paid"
    unpaid = "unpaid"

class InvestmentStatus(str, Enum):
    invested = "invested"
    pending = "pending"

# Status que confirmam uma receita (inclui "paid" por compatibilidade com dados antigos)
CONFIRMED_INCOME_STATUSES = frozenset({"consolidated", "paid", "received"})

VALID_STATUSES = {
    TransactionType.income.value: frozenset(s.value for s in IncomeStatus),
    TransactionType.expense.value: frozenset(s.value for s in ExpenseStatus),
    TransactionType.investment.value: frozenset(s.value for s in InvestmentStatus),
}

class PeriodMode(str, Enum):
    monthly = "monthly"
    yearly = "yearly"
    all_time = "allTime"

class RecurringFrequency(str, Enum):
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"

class CategoryType(str, Enum):
    income = "income"
    expense = "expense"
    investment = "investment"
