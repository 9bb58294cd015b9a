"""
Settlement service for recording payments between users.
"""
import logging
from datetime import datetime
from splitledger.core.exceptions import AuthorizationDenied, NotFound, ValidationFailed
from splitledger.core.utils import qround
from splitledger.models.user import User
from splitledger.models.settlement import Settlement
from splitledger.schemas.settlement import SettlementCreate
from splitledger.services.repository import LedgerRepository
from splitledger.services.validation import require_positive

logger = logging.getLogger(__name__)


def create_settlement(repository: LedgerRepository, current_user: User, data: SettlementCreate) -> Settlement:
    """
    Record a settlement.

    The amount is not checked against what is actually owed; a settlement may
    exceed the outstanding debt.
    """
    amount = require_positive(qround(data.amount))
    if data.payer_id == data.receiver_id:
        raise ValidationFailed("Payer and receiver cannot be the same user")

    if current_user.id not in (data.payer_id, data.receiver_id):
        logger.warning(f"User {current_user.id} tried to record a settlement they are not part of")
        raise AuthorizationDenied("You must be either the payer or the receiver")

    if data.group_id is not None:
        group = repository.get_group(data.group_id)
        if not group:
            raise NotFound("Group not found")
        if not (group.has_member(data.payer_id) and group.has_member(data.receiver_id)):
            raise AuthorizationDenied("Both parties must be members of the group")
    else:
        users = repository.get_users([data.payer_id, data.receiver_id])
        if len(users) != 2:
            raise NotFound("User not found")

    settlement = Settlement(
        amount=amount,
        note=data.note,
        date=data.date or datetime.now(),
        payer_id=data.payer_id,
        receiver_id=data.receiver_id,
        group_id=data.group_id,
        related_expense_ids=data.related_expense_ids,
        created_by_id=current_user.id
    )
    settlement = repository.add(settlement)
    logger.info(
        f"Recorded settlement {settlement.id}: user {settlement.payer_id} -> "
        f"user {settlement.receiver_id} ({amount})"
    )
    return settlement
