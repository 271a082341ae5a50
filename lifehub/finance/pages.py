"""Finance page view models."""

from collections import defaultdict
from datetime import date
from flask import Blueprint, jsonify
from lifehub.auth.guards import require_auth
from lifehub.currency import format_amount, preferred_currency
from lifehub.preferences.routes import require_module
from lifehub.resources.budgets import BudgetService
from lifehub.resources.categories import CategoryService
from lifehub.resources.credits import CreditService
from lifehub.resources.loans import LoanService
from lifehub.resources.transactions import TransactionService
from lifehub.resources.transfers import TransferService
from lifehub.resources.wallets import WalletService
from lifehub.tenancy.store import SessionStore

finance_pages_bp = Blueprint('finance_pages', __name__, url_prefix='/finance')
require_module(finance_pages_bp, 'finance')

RECENT_TRANSACTIONS = 5


def _display_code():
    return preferred_currency(SessionStore()).code


def _with_display(wallet):
    return {**wallet, 'balance_display': format_amount(wallet['balance'], wallet['currency'])}


def _month_spending(transactions, month, year):
    """Expense totals per category id for one month."""
    spent = defaultdict(float)
    for transaction in transactions:
        day = date.fromisoformat(transaction['date'])
        if transaction['type'] == 'expense' and day.month == month and day.year == year:
            spent[transaction['category_id']] += transaction['expense'] or 0
    return spent


@finance_pages_bp.route('', methods=['GET'])
@require_auth
def dashboard():
    """
    Finance overview for the active tenancy.

    Returns:
        200: Wallet totals, recent transactions and this month's budget use
    """
    today = date.today()
    code = _display_code()
    wallets = WalletService.for_request().list()
    transactions = TransactionService.for_request().list()
    budgets = BudgetService.for_request().list(today.month, today.year)
    spent = _month_spending(transactions, today.month, today.year)

    total_balance = sum(wallet['balance'] for wallet in wallets)
    income = sum(t['income'] or 0 for t in transactions if t['type'] == 'income')
    expense = sum(t['expense'] or 0 for t in transactions if t['type'] == 'expense')

    return jsonify({
        'total_balance': format_amount(total_balance, code),
        'total_income': format_amount(income, code),
        'total_expense': format_amount(expense, code),
        'wallet_count': len(wallets),
        'recent_transactions': transactions[:RECENT_TRANSACTIONS],
        'budgets': [
            {**budget, 'spent': spent.get(budget['category_id'], 0)}
            for budget in budgets
        ]
    }), 200


@finance_pages_bp.route('/wallets', methods=['GET'])
@require_auth
def wallets_page():
    wallets = WalletService.for_request().list()
    return jsonify({'wallets': [_with_display(wallet) for wallet in wallets]}), 200


@finance_pages_bp.route('/wallet/<id>', methods=['GET'])
@require_auth
def wallet_page(id):
    """
    One wallet with its transactions.

    Returns:
        200: Wallet and transactions
        404: Wallet outside the active tenancy
    """
    wallet = WalletService.for_request().get(id)
    transactions = TransactionService.for_request().list_for_wallet(id)
    return jsonify({
        'wallet': _with_display(wallet),
        'transactions': [
            {
                **transaction,
                'amount_display': format_amount(
                    transaction['income'] or transaction['expense'] or 0, wallet['currency']
                )
            }
            for transaction in transactions
        ]
    }), 200


@finance_pages_bp.route('/transactions', methods=['GET'])
@require_auth
def transactions_page():
    return jsonify({
        'transactions': TransactionService.for_request().list(),
        'wallets': WalletService.for_request().list(),
        'categories': CategoryService.for_request().list()
    }), 200


@finance_pages_bp.route('/categories', methods=['GET'])
@require_auth
def categories_page():
    return jsonify({'categories': CategoryService.for_request().list()}), 200


@finance_pages_bp.route('/budgets', methods=['GET'])
@require_auth
def budgets_page():
    today = date.today()
    code = _display_code()
    budgets = BudgetService.for_request().list(today.month, today.year)
    spent = _month_spending(TransactionService.for_request().list(), today.month, today.year)
    return jsonify({
        'month': today.month,
        'year': today.year,
        'budgets': [
            {
                **budget,
                'amount_display': format_amount(budget['amount'], code),
                'spent': spent.get(budget['category_id'], 0),
                'spent_display': format_amount(spent.get(budget['category_id'], 0), code)
            }
            for budget in budgets
        ],
        'categories': CategoryService.for_request().list()
    }), 200


@finance_pages_bp.route('/loans', methods=['GET'])
@require_auth
def loans_page():
    code = _display_code()
    loans = LoanService.for_request().list()
    return jsonify({
        'loans': [
            {**loan, 'remaining_display': format_amount(loan['remaining_amount'] or 0, code)}
            for loan in loans
        ]
    }), 200


@finance_pages_bp.route('/transfers', methods=['GET'])
@require_auth
def transfers_page():
    code = _display_code()
    return jsonify({
        'transfers': [
            {**transfer, 'amount_display': format_amount(transfer['amount'], code)}
            for transfer in TransferService.for_request().list()
        ],
        'wallets': WalletService.for_request().list()
    }), 200


@finance_pages_bp.route('/credits', methods=['GET'])
@require_auth
def credits_page():
    """
    Credits with the share already paid back.

    Returns:
        200: Credits and the total still owed
    """
    code = _display_code()
    credits = CreditService.for_request().list()
    outstanding = sum(credit['remaining_amount'] for credit in credits)
    return jsonify({
        'outstanding': format_amount(outstanding, code),
        'credits': [
            {
                **credit,
                'remaining_display': format_amount(credit['remaining_amount'], code),
                'paid_percent': round(
                    100 * (credit['total_amount'] - credit['remaining_amount']) / credit['total_amount']
                ) if credit['total_amount'] else 0
            }
            for credit in credits
        ]
    }), 200
