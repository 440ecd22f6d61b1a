"""Errors raised by the wallet engine."""

from shared.domain.exceptions import NotFoundError, PolicyError, ValidationError


class WalletNotFound(NotFoundError):
    default_message = "Wallet not found"
    code = "wallet_not_found"


class UserNotFound(NotFoundError):
    default_message = "User not found"
    code = "user_not_found"


class InvalidAmount(ValidationError):
    default_message = "Amount must be greater than zero"
    code = "invalid_amount"


class InvalidPaymentMethod(InvalidAmount):
    default_message = "Unsupported payment method"
    code = "invalid_payment_method"


class InvalidTransactionType(ValidationError):
    default_message = "Transaction type is not allowed for this operation"
    code = "invalid_transaction_type"


class InsufficientBalance(PolicyError):
    default_message = "Insufficient wallet balance"
    code = "insufficient_balance"
