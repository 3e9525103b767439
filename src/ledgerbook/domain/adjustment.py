"""Balance adjustment."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerbook.config import ADJUSTMENT_DOWN_CATEGORY, ADJUSTMENT_UP_CATEGORY
from ledgerbook.domain.balance import account_balance
from ledgerbook.domain.entities import (
    ChangeStatus,
    LedgerChange,
    PostingSource,
    Snapshot,
    SourceKind,
    Transaction,
    TransactionKind,
)
from ledgerbook.domain.ledger import append_postings, new_id
from ledgerbook.utils.date_parser import today_utc

logger = logging.getLogger(__name__)

ADJUSTMENT_SOURCE = PostingSource(kind=SourceKind.ADJUSTMENT)


class AdjustmentService:
    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    def adjust(
        self,
        account: str,
        stated_balance: Decimal,
        observation: Optional[str] = None,
        today: Optional[date] = None,
    ) -> LedgerChange:
        """Bring an account to a declared balance with one posting.

        Args:
            account: Account name
            stated_balance: The balance the account should have
            observation: Optional note for the posting
            today: Posting date, defaults to the current UTC date

        Returns:
            LedgerChange with one posting, or status NOTHING_TO_ADJUST when
            the derived balance already matches

        Raises:
            NotFoundError: If the account does not exist
        """
        delta = stated_balance - account_balance(self.snapshot, account)
        if delta == 0:
            return LedgerChange(
                snapshot=self.snapshot, status=ChangeStatus.NOTHING_TO_ADJUST
            )

        if today is None:
            today = today_utc()

        posting = Transaction(
            id=new_id("trans-adj"),
            kind=TransactionKind.REVENUE if delta > 0 else TransactionKind.EXPENSE,
            date=today,
            description=f"Ajuste de Saldo - {account}",
            category=ADJUSTMENT_UP_CATEGORY if delta > 0 else ADJUSTMENT_DOWN_CATEGORY,
            account=account,
            amount=abs(delta),
            observation=observation or "Ajuste manual de saldo.",
            source=ADJUSTMENT_SOURCE,
        )
        logger.info("Adjusted %s by %s", account, delta)
        return LedgerChange(
            snapshot=append_postings(self.snapshot, [posting]), added=(posting,)
        )
