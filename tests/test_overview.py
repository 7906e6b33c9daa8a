"""Inquiry overview metrics."""

from datetime import timedelta

import pytest

from opsdesk.core.exceptions import PermissionDeniedError
from opsdesk.db.base import utcnow
from opsdesk.db.enums import InquiryStatus
from opsdesk.db.models import Inquiry
from opsdesk.schemas.inquiry import InquiryAssign, InquiryMessageCreate, InquiryStatusUpdate
from opsdesk.services import inquiry_analytics_service, inquiry_service


@pytest.fixture
def workload(db, org, file_inquiry, actor_for):
    """
    Five inquiries:
    - one untouched (OPEN, unassigned)
    - one claimed by Alice through a reply (IN_PROGRESS)
    - one resolved and one closed by Alice
    - one resolved by Bob
    """
    alice = actor_for(org.cs_agent)
    bob = actor_for(org.cs_agent2)

    file_inquiry(subject="Untouched")
    claimed = file_inquiry(subject="Claimed")
    inquiry_service.add_message(db, alice, claimed.id, InquiryMessageCreate(message="Checking"))

    for subject, target in (("Resolved", InquiryStatus.RESOLVED), ("Closed", InquiryStatus.CLOSED)):
        inquiry = file_inquiry(subject=subject)
        inquiry_service.update_status(db, alice, inquiry.id, InquiryStatusUpdate(status=target))

    bobs = file_inquiry(subject="Bob resolved")
    inquiry_service.assign_inquiry(db, bob, bobs.id, InquiryAssign(staff_profile_id=org.cs_agent2.id))
    inquiry_service.update_status(db, bob, bobs.id, InquiryStatusUpdate(status=InquiryStatus.RESOLVED))


def test_overview_totals(db, org, workload, actor_for):
    overview = inquiry_analytics_service.get_overview(db, actor_for(org.admin))

    assert overview.totals.total == 5
    assert overview.totals.unresolved == 2
    assert overview.totals.resolved == 3
    assert overview.totals.unchecked == 1
    assert overview.totals.in_charge == 1


def test_overview_leaderboard_order(db, org, workload, actor_for):
    overview = inquiry_analytics_service.get_overview(db, actor_for(org.super_admin))
    rows = overview.staff_performance

    assert [row.staff_profile_id for row in rows] == [org.cs_agent.id, org.cs_agent2.id]
    alice = rows[0]
    assert alice.staff_name == "Alice Support"
    assert (alice.solved_count, alice.resolved_count, alice.closed_count) == (2, 1, 1)
    assert alice.active_count == 1
    assert alice.assigned_total == 3
    assert rows[1].solved_count == 1


def test_overview_window_excludes_old_inquiries(db, org, workload, file_inquiry, actor_for):
    old = file_inquiry(subject="Last year")
    db.query(Inquiry).filter(Inquiry.id == old.id).update(
        {Inquiry.created_at: utcnow() - timedelta(days=400)}, synchronize_session=False
    )
    db.commit()

    admin = actor_for(org.admin)
    assert inquiry_analytics_service.get_overview(db, admin).totals.total == 6
    assert inquiry_analytics_service.get_overview(db, admin, days=30).totals.total == 5


def test_overview_is_admin_only(db, org, actor_for):
    with pytest.raises(PermissionDeniedError):
        inquiry_analytics_service.get_overview(db, actor_for(org.cs_agent))
    with pytest.raises(PermissionDeniedError):
        inquiry_analytics_service.get_overview(db, actor_for(org.customer))
