"""Unsigned call data for pool actions.

Nothing is signed or sent and no balance, allowance or health-factor checks
happen here; the pool enforces those when the wallet submits.
"""

from __future__ import annotations

import logging
from typing import Any

from eth_abi import encode
from web3 import Web3

from lendingdesk.chain.abi import ERC20_ABI, POOL_ABI
from lendingdesk.chain.units import parse_units
from lendingdesk.config.assets import AssetRegistry
from lendingdesk.errors import TransactionPreparationError
from lendingdesk.schemas.asset import Asset
from lendingdesk.schemas.chain import UnsignedTransaction
from lendingdesk.schemas.transactions import TransactionAction, TransactionRequest
from lendingdesk.validation.validator import (
    require_address,
    require_amount,
    require_interest_rate_mode,
    require_supported_asset,
)

logger = logging.getLogger(__name__)

REFERRAL_CODE = 0

ACTION_MESSAGES: dict[str, str] = {
    "approve": "Approval transaction prepared. Sign with your wallet to execute.",
    "deposit": "Deposit transaction prepared. Sign with your wallet to execute.",
    "borrow": "Borrow transaction prepared. Sign with your wallet to execute.",
    "repay": "Repay transaction prepared. Sign with your wallet to execute.",
    "withdraw": "Withdraw transaction prepared. Sign with your wallet to execute.",
    "flash-loan": "Flash loan transaction prepared. Sign with your wallet to execute.",
}


class TransactionPreparer:
    def __init__(self, registry: AssetRegistry, pool_address: str) -> None:
        self.registry = registry
        # encoding needs no provider
        self._w3 = Web3()
        self.pool_address = Web3.to_checksum_address(pool_address)
        self._pool = self._w3.eth.contract(address=self.pool_address, abi=POOL_ABI)

    def prepare(self, action: TransactionAction, request: TransactionRequest) -> UnsignedTransaction:
        handlers = {
            "approve": self.approve,
            "deposit": self.deposit,
            "borrow": self.borrow,
            "repay": self.repay,
            "withdraw": self.withdraw,
            "flash-loan": self.flash_loan,
        }
        handler = handlers.get(action)
        if handler is None:
            raise TransactionPreparationError(f"Unsupported action: {action}")
        return handler(request)

    def _common(self, request: TransactionRequest) -> tuple[str, Asset, int]:
        user = require_address(request.user_address, "userAddress")
        token = require_address(request.token_address, "tokenAddress")
        amount = require_amount(request.amount)
        asset = require_supported_asset(self.registry, token)
        return Web3.to_checksum_address(user), asset, parse_units(amount, asset.decimals)

    def _build(self, sender: str, contract: Any, fn_name: str, args: list[Any]) -> UnsignedTransaction:
        try:
            data = contract.encode_abi(fn_name, args=args)
        except Exception as exc:
            logger.error("Failed to encode %s call: %s", fn_name, exc)
            raise TransactionPreparationError(f"Failed to prepare {fn_name}: {exc}") from exc
        logger.info("Prepared %s for %s -> %s", fn_name, sender, contract.address)
        return UnsignedTransaction(from_address=sender, to=contract.address, data=data, value="0")

    def approve(self, request: TransactionRequest) -> UnsignedTransaction:
        user, asset, amount = self._common(request)
        token = self._w3.eth.contract(
            address=Web3.to_checksum_address(asset.address), abi=ERC20_ABI
        )
        return self._build(user, token, "approve", [self.pool_address, amount])

    def deposit(self, request: TransactionRequest) -> UnsignedTransaction:
        user, asset, amount = self._common(request)
        return self._build(
            user,
            self._pool,
            "deposit",
            [Web3.to_checksum_address(asset.address), amount, user, REFERRAL_CODE],
        )

    def borrow(self, request: TransactionRequest) -> UnsignedTransaction:
        user, asset, amount = self._common(request)
        mode = require_interest_rate_mode(request.interest_rate_mode)
        return self._build(
            user,
            self._pool,
            "borrow",
            [Web3.to_checksum_address(asset.address), amount, mode, REFERRAL_CODE, user],
        )

    def repay(self, request: TransactionRequest) -> UnsignedTransaction:
        user, asset, amount = self._common(request)
        mode = require_interest_rate_mode(request.interest_rate_mode)
        return self._build(
            user,
            self._pool,
            "repay",
            [Web3.to_checksum_address(asset.address), amount, mode, user],
        )

    def withdraw(self, request: TransactionRequest) -> UnsignedTransaction:
        user, asset, amount = self._common(request)
        return self._build(
            user,
            self._pool,
            "withdraw",
            [Web3.to_checksum_address(asset.address), amount, user],
        )

    def flash_loan(self, request: TransactionRequest) -> UnsignedTransaction:
        user, asset, amount = self._common(request)
        receiver = user
        if request.callback_address:
            receiver = Web3.to_checksum_address(
                require_address(request.callback_address, "callbackAddress")
            )
        params = encode(["address", "uint256"], [user, amount])
        return self._build(
            user,
            self._pool,
            "flashLoanSimple",
            [receiver, Web3.to_checksum_address(asset.address), amount, params, REFERRAL_CODE],
        )
