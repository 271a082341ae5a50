"""Budget service."""

from datetime import date
from lifehub.errors import ValidationError
from lifehub.models.budget import Budget
from lifehub.models.category import Category
from lifehub.resources.base import ScopedResourceService

DUPLICATE_BUDGET = 'Budget for this category/month/year already exists'


class BudgetService(ScopedResourceService):
    """Monthly budgets; the fetched collection is keyed by month and year."""

    kind = 'budgets'
    label = 'Budget'
    model = Budget
    writable_fields = ('category_id', 'amount', 'month', 'year')
    required_fields = ('amount', 'month', 'year')

    def list(self, month=None, year=None):
        today = date.today()
        return super().list(month or today.month, year or today.year)

    def fetch_query(self, month, year):
        return super().fetch_query().filter(Budget.month == month, Budget.year == year)

    def validate(self, data, partial):
        if data.get('category_id') == '':
            data['category_id'] = None
        if 'month' in data and not 1 <= (data['month'] or 0) <= 12:
            raise ValidationError('month must be between 1 and 12', field='month')
        if data.get('amount') is not None and data['amount'] < 0:
            raise ValidationError('amount cannot be negative', field='amount')

    def before_create(self, record):
        self._check_category(record)
        self._check_duplicate(record)

    def before_update(self, record, data):
        self._check_category(record)
        self._check_duplicate(record)

    def integrity_message(self, error):
        return DUPLICATE_BUDGET

    def _check_category(self, record):
        if record.category_id is None:
            return
        category = Category.scoped_query(self.tenancy, self.user_id).filter(
            Category.id == record.category_id
        ).first()
        if category is None:
            raise ValidationError('Category not found', field='category_id')

    def _check_duplicate(self, record):
        # NULL columns never collide in a unique index, so check explicitly
        query = Budget.query.filter(
            Budget.user_id == record.user_id,
            Budget.month == record.month,
            Budget.year == record.year,
            self.tenancy.scope_criteria(Budget),
        )
        if record.category_id is None:
            query = query.filter(Budget.category_id.is_(None))
        else:
            query = query.filter(Budget.category_id == record.category_id)
        if record.id is not None:
            query = query.filter(Budget.id != record.id)
        if query.first() is not None:
            raise ValidationError(DUPLICATE_BUDGET)
