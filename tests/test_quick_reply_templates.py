"""
Quick-reply template tests.

Tests cover:
- Default templates are seeded once
- Type filter returns COMMON + matching templates
- Create / update / delete with manage permission
- Unprovisioned store: list degrades to empty, writes are unavailable
"""

import pytest
from pydantic import ValidationError
from sqlalchemy import event

from opsdesk.core.exceptions import (
    InquiryNotFoundError,
    PermissionDeniedError,
    TemplatesUnavailableError,
)
from opsdesk.db.enums import InquiryType
from opsdesk.db.models import QuickReplyTemplate
from opsdesk.schemas.quick_reply import QuickReplyTemplateCreate, QuickReplyTemplateUpdate
from opsdesk.services import actor_service, quick_reply_service


def _create(db, actor, **overrides) -> str:
    data = {
        "title": "Refund approved",
        "body": "Your refund has been approved and will arrive in 3-5 days.",
        "type": "payment",
        "tags": ["refund"],
    }
    data.update(overrides)
    return quick_reply_service.create_template(db, actor, QuickReplyTemplateCreate(**data)).id


def test_defaults_are_seeded_once(db, org, actor_for):
    actor = actor_for(org.cs_agent)
    first = quick_reply_service.list_templates(db, actor)
    second = quick_reply_service.list_templates(db, actor)

    assert len(first) == len(quick_reply_service.DEFAULT_TEMPLATES)
    assert [t.id for t in first] == [t.id for t in second]
    assert db.query(QuickReplyTemplate).count() == len(quick_reply_service.DEFAULT_TEMPLATES)


def test_concurrent_first_listing_seeds_once(session_factory, org):
    session_a = session_factory()
    session_b = session_factory()
    try:
        actor = actor_service.resolve_actor(session_a, org.cs_agent.user_id)

        # Another request seeds between this one's emptiness check and its insert
        def seed_concurrently(session, flush_context, instances):
            quick_reply_service.ensure_default_templates(session_b)

        event.listen(session_a, "before_flush", seed_concurrently, once=True)
        templates = quick_reply_service.list_templates(session_a, actor)
    finally:
        session_a.close()
        session_b.close()

    assert len(templates) == len(quick_reply_service.DEFAULT_TEMPLATES)
    with session_factory() as check:
        assert check.query(QuickReplyTemplate).count() == len(quick_reply_service.DEFAULT_TEMPLATES)


def test_type_filter_includes_common(db, org, actor_for):
    templates = quick_reply_service.list_templates(db, actor_for(org.cs_agent), InquiryType.PAYMENT)

    types = {t.type for t in templates}
    assert types == {"COMMON", "payment"}
    assert "payment_refund_in_progress" in {t.id for t in templates}


def test_customer_can_list_templates(db, org, actor_for):
    assert quick_reply_service.list_templates(db, actor_for(org.customer))


def test_create_update_delete(db, org, actor_for):
    actor = actor_for(org.cs_agent)
    template_id = _create(db, actor, title="  Refund approved  ", tags=[" refund ", "  "])
    assert template_id.startswith("custom_")

    stored = db.get(QuickReplyTemplate, template_id)
    assert stored.title == "Refund approved"
    assert stored.tags == ["refund"]
    assert stored.created_by_user_id == org.cs_agent.user_id

    updated = quick_reply_service.update_template(
        db, actor, template_id, QuickReplyTemplateUpdate(type="COMMON", tags=["general"])
    )
    assert updated.type == "COMMON"
    assert updated.tags == ["general"]
    assert updated.title == "Refund approved"

    quick_reply_service.delete_template(db, actor, template_id)
    assert db.get(QuickReplyTemplate, template_id) is None


def test_update_missing_template(db, org, actor_for):
    with pytest.raises(InquiryNotFoundError):
        quick_reply_service.update_template(
            db, actor_for(org.cs_agent), "custom_missing", QuickReplyTemplateUpdate(title="New title")
        )


def test_manage_requires_permission(db, org, actor_for):
    with pytest.raises(PermissionDeniedError):
        _create(db, actor_for(org.customer))

    admin_id = _create(db, actor_for(org.admin))
    with pytest.raises(PermissionDeniedError):
        quick_reply_service.delete_template(db, actor_for(org.customer), admin_id)


def test_template_validation():
    with pytest.raises(ValidationError):
        QuickReplyTemplateCreate(title="Hi", body="Long enough body text")
    with pytest.raises(ValidationError):
        QuickReplyTemplateCreate(title="Valid title", body="short")
    with pytest.raises(ValidationError):
        QuickReplyTemplateCreate(title="Valid title", body="Long enough body text", tags=["x" * 31])
    with pytest.raises(ValidationError):
        QuickReplyTemplateCreate(
            title="Valid title", body="Long enough body text", tags=[str(n) for n in range(11)]
        )


# =============================================================================
# Unprovisioned store
# =============================================================================


@pytest.fixture
def unprovisioned(engine):
    QuickReplyTemplate.__table__.drop(engine)


def test_list_degrades_to_empty(db, org, unprovisioned, actor_for):
    assert quick_reply_service.list_templates(db, actor_for(org.cs_agent)) == []


def test_writes_are_unavailable(db, org, unprovisioned, actor_for):
    actor = actor_for(org.cs_agent)
    with pytest.raises(TemplatesUnavailableError) as exc_info:
        _create(db, actor)
    assert exc_info.value.retryable is True

    with pytest.raises(TemplatesUnavailableError):
        quick_reply_service.delete_template(db, actor, "common_need_details")

    # Session is usable after the rollback
    assert actor_for(org.cs_agent).staff_profile_id == org.cs_agent.id
