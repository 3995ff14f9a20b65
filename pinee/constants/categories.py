from enum import Enum
from typing import List, Optional

from pinee.models.enums import CategoryType
from pinee.schemas.category import CategoryRead

class SystemCategoryKey(str, Enum):
    INVESTMENT = "investment"
    EXTRA_INCOME = "extra_income"


def _default(id_: str, name: str, icon: str, color: str, type_: CategoryType) -> CategoryRead:
    return CategoryRead(id=id_, name=name, icon=icon, color=color, type=type_, is_system=True, is_default=True)


INCOME_DEFAULTS = [
    _default("salary", "Salário", "dollarsign.circle.fill", "green", CategoryType.income),
    _default("services_income", "Serviços", "briefcase.fill", "orange", CategoryType.income),
    _default(SystemCategoryKey.EXTRA_INCOME.value, "Renda Extra", "gift.fill", "blue", CategoryType.income),
]

EXPENSE_DEFAULTS = [
    _default("home", "Casa", "house.fill", "brown", CategoryType.expense),
    _default("subscriptions", "Assinaturas", "tv.fill", "purple", CategoryType.expense),
    _default("transportation", "Transporte", "car.fill", "blue", CategoryType.expense),
    _default("food", "Alimentação", "fork.knife", "green", CategoryType.expense),
    _default("shopping", "Compras", "bag.fill", "pink", CategoryType.expense),
    _default("health", "Saúde", "heart.fill", "red", CategoryType.expense),
    _default("education", "Educação", "book.fill", "indigo", CategoryType.expense),
    _default("credit_card", "Cartão de Crédito", "creditcard.fill", "teal", CategoryType.expense),
    _default("leisure", "Lazer", "sparkles", "orange", CategoryType.expense),
    _default("loans", "Empréstimos", "banknote", "red", CategoryType.expense),
]

# Só aparece quando o tipo pedido é investimento
INVESTMENT_DEFAULTS = [
    _default(SystemCategoryKey.INVESTMENT.value, "Investimentos", "chart.line.uptrend.xyaxis", "blue",
             CategoryType.investment),
]

DEFAULT_CATEGORY_IDS = frozenset(c.id for c in INCOME_DEFAULTS + EXPENSE_DEFAULTS + INVESTMENT_DEFAULTS)


def default_categories(type_: Optional[CategoryType] = None) -> List[CategoryRead]:
    if type_ is None:
        return INCOME_DEFAULTS + EXPENSE_DEFAULTS
    if type_ == CategoryType.income:
        return list(INCOME_DEFAULTS)
    if type_ == CategoryType.expense:
        return list(EXPENSE_DEFAULTS)
    return list(INVESTMENT_DEFAULTS)
