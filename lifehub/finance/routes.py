"""Finance JSON API: wallets, categories, transactions, transfers, budgets, loans and credits."""

from flask import Blueprint, jsonify, request
from lifehub.auth.guards import require_auth
from lifehub.crud import json_body, register_resource
from lifehub.preferences.routes import require_module
from lifehub.resources.budgets import BudgetService
from lifehub.resources.categories import CategoryService
from lifehub.resources.credits import CreditPaymentService, CreditService
from lifehub.resources.loans import LoanService
from lifehub.resources.transactions import TransactionService
from lifehub.resources.transfers import TransferService
from lifehub.resources.wallets import WalletService

finance_bp = Blueprint('finance', __name__, url_prefix='/api/finance')
require_module(finance_bp, 'finance')


def transaction_filters():
    return (request.args.get('wallet_id'),)


def budget_period():
    return (request.args.get('month', type=int), request.args.get('year', type=int))


register_resource(finance_bp, WalletService, '/wallets', 'wallets', 'wallet')
register_resource(finance_bp, CategoryService, '/categories', 'categories', 'category')
register_resource(
    finance_bp, TransactionService, '/transactions', 'transactions', 'transaction',
    list_args=transaction_filters
)
register_resource(finance_bp, TransferService, '/transfers', 'transfers', 'transfer')
register_resource(
    finance_bp, BudgetService, '/budgets', 'budgets', 'budget',
    list_args=budget_period
)
register_resource(finance_bp, LoanService, '/loans', 'loans', 'loan')
register_resource(finance_bp, CreditService, '/credits', 'credits', 'credit')


@finance_bp.route('/credits/<credit_id>/payments', methods=['GET'])
@require_auth
def list_credit_payments(credit_id):
    return jsonify({'payments': CreditPaymentService.for_request().list(credit_id)}), 200


@finance_bp.route('/credits/<credit_id>/payments', methods=['POST'])
@require_auth
def create_credit_payment(credit_id):
    """
    Record a payment against a credit.

    Request Body:
        {"amount": 50, "payment_date": "2024-05-01", "description": "..."}

    Returns:
        201: Payment recorded
        400: Invalid amount or more than the remaining amount
        404: Credit outside the active tenancy
    """
    payment = CreditPaymentService.for_request().create(credit_id, json_body())
    return jsonify({'message': 'Payment recorded successfully', 'payment': payment}), 201


@finance_bp.route('/credits/<credit_id>/payments/<payment_id>', methods=['DELETE'])
@require_auth
def delete_credit_payment(credit_id, payment_id):
    CreditPaymentService.for_request().delete(credit_id, payment_id)
    return jsonify({'message': 'Payment deleted successfully'}), 200
