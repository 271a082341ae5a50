"""Loan service."""

from lifehub.errors import ValidationError
from lifehub.models.loan import Loan, LOAN_STATUSES, LOAN_TYPES
from lifehub.resources.base import ScopedResourceService


class LoanService(ScopedResourceService):
    kind = 'loans'
    label = 'Loan'
    model = Loan
    writable_fields = (
        'name', 'type', 'amount', 'remaining_amount', 'status', 'person', 'description'
    )
    required_fields = ('name', 'type', 'amount', 'remaining_amount')

    def validate(self, data, partial):
        if 'type' in data and data['type'] not in LOAN_TYPES:
            raise ValidationError(f"type must be one of: {', '.join(LOAN_TYPES)}", field='type')
        if 'status' in data and data['status'] not in LOAN_STATUSES:
            raise ValidationError(
                f"status must be one of: {', '.join(LOAN_STATUSES)}", field='status'
            )
        if not partial and not data.get('status'):
            data['status'] = 'active'
