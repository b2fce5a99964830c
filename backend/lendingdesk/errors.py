from __future__ import annotations


class LendingDeskError(Exception):
    """Base error carrying a machine-readable code and the HTTP status to answer with."""

    code = "LENDINGDESK_ERROR"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LendingDeskError):
    code = "VALIDATION_ERROR"
    status_code = 400


class NetworkError(LendingDeskError):
    code = "NETWORK_ERROR"
    status_code = 503


class ContractError(LendingDeskError):
    code = "CONTRACT_ERROR"
    status_code = 500


class InsufficientFundsError(LendingDeskError):
    code = "INSUFFICIENT_FUNDS"
    status_code = 400

    def __init__(self, message: str = "Insufficient funds") -> None:
        super().__init__(message)


class InsufficientLiquidityError(LendingDeskError):
    code = "INSUFFICIENT_LIQUIDITY"
    status_code = 400

    def __init__(self, message: str = "Insufficient liquidity") -> None:
        super().__init__(message)


class HealthFactorError(LendingDeskError):
    code = "HEALTH_FACTOR_ERROR"
    status_code = 400

    def __init__(self, message: str = "Health factor too low") -> None:
        super().__init__(message)


class TransactionPreparationError(LendingDeskError):
    code = "TRANSACTION_PREPARATION_ERROR"
    status_code = 500


def classify_chain_error(exc: BaseException) -> LendingDeskError:
    """Map a raw node/contract failure onto the error taxonomy."""
    if isinstance(exc, LendingDeskError):
        return exc

    message = str(exc) or exc.__class__.__name__
    lowered = message.lower()

    if "insufficient balance" in lowered:
        return InsufficientFundsError()
    if "insufficient liquidity" in lowered:
        return InsufficientLiquidityError()
    if "health factor" in lowered:
        return HealthFactorError()
    if "network" in lowered or "timeout" in lowered or "timed out" in lowered:
        return NetworkError(f"Network error: {message}")
    return ContractError(f"Contract error: {message}")
