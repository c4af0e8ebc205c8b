"""
Account data models: balances, deposit addresses and ledger transactions.

Models:
    BalanceEntry: Free / used / total amounts of one currency
    Balance: Balances of one account keyed by currency code
    DepositAddress: Deposit address for a currency
    WithdrawalReceipt: Acknowledgement of a withdrawal request
    Transaction: Deposit or withdrawal ledger entry
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, computed_field

from tradebridge.models.trading import Fee


class BalanceEntry(BaseModel):
    """
    Balance of a single currency.

    Attributes:
        free: Amount available for trading or withdrawal.
        used: Amount reserved in orders.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    free: Optional[Decimal] = None
    used: Optional[Decimal] = None

    @computed_field  # type: ignore[misc]
    @property
    def total(self) -> Optional[Decimal]:
        """
        Sum of free and used.

        Returns:
            Optional[Decimal]: free + used, or None if either is unknown.
        """
        if self.free is None or self.used is None:
            return None
        return self.free + self.used


class Balance(BaseModel):
    """
    Balances of one account.

    Attributes:
        account_type: Account the balances were read from.
        currencies: BalanceEntry keyed by unified currency code.
        info: Raw exchange payload.

    Example:
        >>> balance.currencies["BTC"].free
        Decimal('0.005')
    """

    model_config = {"frozen": True, "extra": "forbid"}

    account_type: str
    currencies: Dict[str, BalanceEntry] = Field(default_factory=dict)
    info: Any = None


class DepositAddress(BaseModel):
    """Deposit address; tag is the memo / payment id where applicable."""

    model_config = {"frozen": True, "extra": "forbid"}

    currency: str
    address: str = Field(..., min_length=1)
    tag: Optional[str] = None
    info: Dict[str, Any] = Field(default_factory=dict)


class WithdrawalReceipt(BaseModel):
    """Withdrawal acknowledgement returned by the exchange."""

    model_config = {"frozen": True, "extra": "forbid"}

    id: Optional[str] = None
    info: Dict[str, Any] = Field(default_factory=dict)


class Transaction(BaseModel):
    """
    Deposit or withdrawal ledger entry.

    Attributes:
        id: Exchange transaction id.
        txid: On-chain transaction hash.
        timestamp: Creation time (UTC).
        updated: Last update time (UTC).
        address: Counterparty address.
        tag: Address memo / payment id.
        type: deposit, withdrawal, or the raw exchange type.
        amount: Transferred amount.
        currency: Unified currency code.
        status: pending, ok, failed, or the raw exchange status.
        fee: Network or withdrawal fee.
        info: Raw exchange payload.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(..., min_length=1)
    txid: Optional[str] = None
    timestamp: Optional[datetime] = None
    updated: Optional[datetime] = None
    address: Optional[str] = None
    tag: Optional[str] = None
    type: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    status: Optional[str] = None
    fee: Optional[Fee] = None
    info: Dict[str, Any] = Field(default_factory=dict)
