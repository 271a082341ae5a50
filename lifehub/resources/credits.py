"""Credit and credit payment services."""

import logging
from datetime import date
from lifehub.errors import AuthError, NotFoundError, ValidationError
from lifehub.extensions import db
from lifehub.models.credit import Credit, CreditPayment
from lifehub.resources.base import ResourceService, ScopedResourceService

logger = logging.getLogger(__name__)


class CreditService(ScopedResourceService):
    """Money owed to the acting user, in the active tenancy."""

    kind = 'credits'
    label = 'Credit'
    model = Credit
    writable_fields = (
        'name', 'person', 'phone', 'email', 'total_amount', 'remaining_amount', 'description'
    )
    required_fields = ('name', 'person', 'total_amount')

    def validate(self, data, partial):
        for field in ('total_amount', 'remaining_amount'):
            if data.get(field) is not None and data[field] < 0:
                raise ValidationError(f"{field} cannot be negative", field=field)

    def before_create(self, record):
        if record.remaining_amount is None:
            record.remaining_amount = record.total_amount
        self._check_remaining(record)

    def before_update(self, record, data):
        self._check_remaining(record)

    def _check_remaining(self, record):
        if record.total_amount is None:
            raise ValidationError('total_amount is required', field='total_amount')
        if record.remaining_amount is None:
            raise ValidationError('remaining_amount is required', field='remaining_amount')
        if record.remaining_amount > record.total_amount:
            raise ValidationError(
                'remaining_amount cannot exceed total_amount', field='remaining_amount'
            )


class CreditPaymentService(ResourceService):
    """
    Payments recorded against a credit visible in the active tenancy.

    Recording a payment lowers the credit's remaining amount and deleting
    one restores it, so both kinds are invalidated together.
    """

    kind = 'credit-payments'
    label = 'Payment'

    def list(self, credit_id):
        if not self.is_authenticated:
            return []
        credit = self.run_query(lambda: self._credit(credit_id))

        def fetch():
            payments = credit.payments.order_by(
                CreditPayment.payment_date.desc(), CreditPayment.created_at.desc()
            )
            return [payment.to_dict() for payment in payments.all()]

        return self.cached((credit_id,), fetch)

    def create(self, credit_id, payload):
        """
        Record a payment.

        Request Body:
            amount, payment_date (ISO date, default today), description

        Raises:
            ValidationError: If the amount is not positive or exceeds what is
                still owed
        """

        def operation():
            self.require_user()
            data = self._clean(payload)
            credit = self._credit(credit_id)
            if data['amount'] > credit.remaining_amount:
                raise ValidationError('Payment exceeds the remaining amount', field='amount')
            payment = CreditPayment(credit_id=credit.id, **data)
            credit.remaining_amount -= data['amount']
            db.session.add(payment)
            db.session.flush()
            logger.info(f"Payment of {data['amount']} recorded on credit {credit.id}")
            return payment.to_dict()

        return self.mutate('create', operation)

    def delete(self, credit_id, payment_id):
        def operation():
            self.require_user()
            credit = self._credit(credit_id)
            payment = credit.payments.filter(CreditPayment.id == payment_id).first()
            if payment is None:
                raise NotFoundError('Payment not found')
            credit.remaining_amount = min(
                credit.total_amount, credit.remaining_amount + payment.amount
            )
            db.session.delete(payment)
            db.session.flush()
            return None

        return self.mutate('delete', operation)

    def _credit(self, credit_id):
        if not self.is_authenticated:
            raise AuthError('User not authenticated')
        self.check_access()
        return Credit.get_for_scope(credit_id, self.tenancy, self.user_id)

    def _clean(self, payload):
        if not isinstance(payload, dict):
            raise ValidationError('Request body must be a JSON object')
        unknown = set(payload) - {'amount', 'payment_date', 'description'}
        if unknown:
            field = sorted(unknown)[0]
            raise ValidationError(f"Unknown field '{field}'", field=field)

        amount = payload.get('amount')
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
            raise ValidationError('amount must be greater than zero', field='amount')

        payment_date = payload.get('payment_date')
        try:
            payment_date = date.fromisoformat(payment_date) if payment_date else date.today()
        except (TypeError, ValueError):
            raise ValidationError('Invalid value for payment_date', field='payment_date') from None

        description = payload.get('description')
        if description is not None and not isinstance(description, str):
            raise ValidationError('Invalid value for description', field='description')

        return {'amount': float(amount), 'payment_date': payment_date, 'description': description}
