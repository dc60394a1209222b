"""Spending roll-ups that treat a parent and its subcategories as one bucket."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from services.tree import build_category_tree, family_index


@dataclass
class SpendEntry:
    """A transaction amount booked on a category."""

    category_id: int
    amount: Decimal  # always positive


@dataclass
class BudgetEntry:
    """A planned amount booked on a category."""

    category_id: int
    planned_amount: Decimal


@dataclass
class CategoryRollup:
    """Budget and spending totals of one category family.

    Attributes:
        category_id: ID of the top-level category.
        name: Name of the top-level category.
        color: Display color of the top-level category.
        budgeted: Planned amounts booked on the family.
        spent: Transaction amounts booked on the family.
    """

    category_id: int
    name: str
    color: str
    budgeted: Decimal = Decimal("0")
    spent: Decimal = Decimal("0")

    @property
    def available(self) -> Decimal:
        """Budget left to spend; negative when overspent."""
        return self.budgeted - self.spent

    @property
    def percent_spent(self) -> Optional[Decimal]:
        """Spent as a percentage of budgeted, None without a budget."""
        if self.budgeted <= 0:
            return None
        return self.spent / self.budgeted * 100


@dataclass
class RollupReport:
    """Per-family totals plus amounts that no longer map to a family.

    Entries whose category was deleted, or belongs to an inactive family,
    land in the unassigned totals instead of failing the report.
    """

    rows: List[CategoryRollup] = field(default_factory=list)
    unassigned_budgeted: Decimal = Decimal("0")
    unassigned_spent: Decimal = Decimal("0")

    @property
    def total_budgeted(self) -> Decimal:
        return sum((row.budgeted for row in self.rows), Decimal("0")) + (
            self.unassigned_budgeted
        )

    @property
    def total_spent(self) -> Decimal:
        return sum((row.spent for row in self.rows), Decimal("0")) + (
            self.unassigned_spent
        )


class SpendAggregator:
    """Groups budgets and transactions by category family.

    Reads categories only through CategoryService.list_by_owner.

    Args:
        category_service: CategoryService used to read the owner's forest.
    """

    def __init__(self, category_service):
        self.category_service = category_service

    def rollup(
        self,
        owner_id: int,
        spends: Iterable[SpendEntry],
        budgets: Iterable[BudgetEntry] = (),
        include_empty: bool = False,
    ) -> RollupReport:
        """Total budgets and spending per active top-level category.

        Args:
            owner_id: The owning user ID.
            spends: Transaction amounts of the period to aggregate.
            budgets: Planned amounts of the same period.
            include_empty: Keep families with neither budget nor spending.

        Returns:
            RollupReport with one row per active family, in tree order.
        """
        categories = self.category_service.list_by_owner(owner_id)
        index = family_index(categories)

        # Inactive subcategories still count towards an active parent
        rows: Dict[int, CategoryRollup] = {}
        for tree in build_category_tree(categories):
            parent = tree.category
            if not parent.is_active:
                continue
            rows[parent.id] = CategoryRollup(
                category_id=parent.id, name=parent.name, color=parent.color
            )

        report = RollupReport()
        for budget in budgets:
            family_id = index.get(budget.category_id)
            if family_id not in rows:
                report.unassigned_budgeted += budget.planned_amount
            else:
                rows[family_id].budgeted += budget.planned_amount

        for spend in spends:
            family_id = index.get(spend.category_id)
            if family_id not in rows:
                report.unassigned_spent += spend.amount
            else:
                rows[family_id].spent += spend.amount

        report.rows = [
            row
            for row in rows.values()
            if include_empty or row.budgeted > 0 or row.spent > 0
        ]
        return report
