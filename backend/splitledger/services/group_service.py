"""
Group and contact management.
"""
import logging
from typing import List
from splitledger.core.exceptions import NotFound
from splitledger.models.user import User
from splitledger.models.group import Group, GroupMember, GroupRole
from splitledger.schemas.group import GroupCreate
from splitledger.schemas.user import ContactUser, ContactGroup, ContactsResponse
from splitledger.services.repository import LedgerRepository
from splitledger.services.validation import require_non_empty

logger = logging.getLogger(__name__)


def create_group(repository: LedgerRepository, current_user: User, data: GroupCreate) -> Group:
    """Create a group; the creator becomes its admin."""
    name = require_non_empty(data.name, "Group name")

    member_ids: List[int] = [current_user.id]
    for uid in data.member_ids:
        if uid not in member_ids:
            member_ids.append(uid)

    users = repository.get_users(member_ids)
    missing = [uid for uid in member_ids if uid not in users]
    if missing:
        raise NotFound(f"Users not found: {missing}")

    group = Group(
        name=name,
        description=(data.description or "").strip(),
        created_by_id=current_user.id,
        members=[
            GroupMember(
                user_id=uid,
                role=GroupRole.ADMIN if uid == current_user.id else GroupRole.MEMBER
            )
            for uid in member_ids
        ]
    )
    group = repository.add(group)
    logger.info(f"Created group {group.id} with {len(member_ids)} members")
    return group


MIN_SEARCH_LENGTH = 2


def search_users(repository: LedgerRepository, current_user: User, query: str) -> List[ContactUser]:
    """Find other users by name or email; queries shorter than two characters match nothing."""
    query = (query or "").strip()
    if len(query) < MIN_SEARCH_LENGTH:
        return []
    return [
        ContactUser(id=u.id, name=u.name, email=u.email, image_url=u.image_url or "")
        for u in repository.search_users(query, exclude_user_id=current_user.id)
    ]


def get_contacts(repository: LedgerRepository, current_user: User) -> ContactsResponse:
    """People the current user shares personal expenses with, and their groups."""
    expenses = repository.fetch_expenses(personal_only=True, involving_user_id=current_user.id)

    contact_ids = []
    for expense in expenses:
        for uid in [expense.payer_id] + [s.user_id for s in expense.splits]:
            if uid != current_user.id and uid not in contact_ids:
                contact_ids.append(uid)

    users = repository.get_users(contact_ids)
    contact_users = [
        ContactUser(id=u.id, name=u.name, email=u.email, image_url=u.image_url or "")
        for u in (users.get(uid) for uid in contact_ids)
        if u is not None
    ]

    groups = [
        ContactGroup(
            id=g.id,
            name=g.name,
            description=g.description or "",
            member_count=len(g.members)
        )
        for g in repository.get_user_groups(current_user.id)
    ]
    groups.sort(key=lambda g: g.name.lower())

    return ContactsResponse(users=contact_users, groups=groups)
