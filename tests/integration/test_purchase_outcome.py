"""Purchase outcome: preconditions, confirmation dates, automatic follow-up."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from app.domain.lifecycle.errors import (
    Conflict,
    InvalidPurchaseType,
    MeetingNotCompleted,
    NotFound,
    StoreFailure,
    Unauthorized,
)
from app.domain.lifecycle.purchase_outcome import DEFAULT_FOLLOWUP_NOTES
from app.domain.lifecycle.repository import LifecycleRepository
from app.domain.lifecycle.settings import SettingsResolver
from app.models import ActivityLog, Client, ClientFollowup


@pytest.fixture
def met_client(db_session, client_record, trainer, gym_settings):
    client_record.assigned_to = trainer.id
    client_record.first_meeting_date = datetime(2025, 3, 1, 10, 0)
    client_record.first_meeting_completed = True
    db_session.commit()
    db_session.refresh(client_record)
    return client_record


@pytest.mark.parametrize("purchase_type", ["package", "custom_plan", "none"])
def test_outcome_requires_completed_meeting(
    db_session, make_service, admin, client_record, gym_settings, purchase_type
):
    with pytest.raises(MeetingNotCompleted):
        make_service().record_outcome(client_record.id, purchase_type, "Too early", admin)

    db_session.expire_all()
    client = db_session.get(Client, client_record.id)
    assert client.purchase_type is None
    assert client.next_confirmation_due is None
    assert client.internal_notes is None
    assert db_session.query(ClientFollowup).count() == 0
    assert db_session.query(ActivityLog).count() == 0


def test_gate_is_checked_before_meeting_precondition(make_service, assistant, client_record, gym_settings):
    with pytest.raises(Unauthorized):
        make_service().record_outcome(client_record.id, "package", None, assistant)


def test_package_sets_confirmation_date(db_session, make_service, trainer, met_client, now):
    result = make_service().record_outcome(met_client.id, "package", None, trainer)

    assert result.client.purchase_type == "package"
    assert result.client.next_confirmation_due == now + timedelta(days=7)
    assert result.followup_id is None
    assert result.require_default_template_assignment is True
    assert db_session.query(ClientFollowup).count() == 0


def test_custom_plan_sets_confirmation_date(make_service, trainer, met_client, now):
    result = make_service().record_outcome(met_client.id, "custom_plan", None, trainer)

    assert result.client.next_confirmation_due == now + timedelta(days=14)


def test_no_purchase_schedules_one_followup(db_session, make_service, trainer, met_client, now):
    result = make_service().record_outcome(met_client.id, "none", None, trainer)

    assert result.client.purchase_type == "none"
    assert result.client.next_confirmation_due is None

    followups = db_session.query(ClientFollowup).filter_by(type="post_first_meeting").all()
    assert len(followups) == 1
    assert followups[0].id == result.followup_id
    assert followups[0].trainer_id == trainer.id
    assert followups[0].scheduled_at == now + timedelta(days=5)
    assert followups[0].notes == DEFAULT_FOLLOWUP_NOTES


def test_notes_are_stored_on_client_and_followup(db_session, make_service, trainer, met_client):
    result = make_service().record_outcome(met_client.id, "none", "Will think about it", trainer)

    assert result.client.internal_notes == "Will think about it"
    assert db_session.query(ClientFollowup).one().notes == "Will think about it"


def test_outcome_is_logged_with_label(db_session, make_service, trainer, met_client):
    make_service().record_outcome(met_client.id, "custom_plan", None, trainer)

    entry = db_session.query(ActivityLog).filter_by(action="purchase_outcome_recorded").one()
    assert entry.notes == "First meeting outcome recorded: Custom plan purchased"


def test_rerecording_overwrites_outcome(db_session, make_service, trainer, met_client, now):
    service = make_service()
    service.record_outcome(met_client.id, "none", None, trainer)
    result = service.record_outcome(met_client.id, "package", None, trainer)

    assert result.client.purchase_type == "package"
    assert result.client.next_confirmation_due == now + timedelta(days=7)
    # the follow-up from the first recording stays scheduled
    assert db_session.query(ClientFollowup).count() == 1


def test_unknown_purchase_type_is_rejected(make_service, trainer, met_client):
    with pytest.raises(InvalidPurchaseType):
        make_service().record_outcome(met_client.id, "membership", None, trainer)


def test_missing_settings_row(db_session, make_service, admin, client_record):
    client_record.first_meeting_completed = True
    db_session.commit()

    with pytest.raises(NotFound):
        make_service().record_outcome(client_record.id, "package", None, admin)


def test_followup_failure_keeps_outcome(db_session, make_service, trainer, met_client, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(LifecycleRepository, "create_followup", staticmethod(boom))

    result = make_service().record_outcome(met_client.id, "none", None, trainer)

    assert result.ok
    assert result.followup_id is None
    assert [w.source for w in result.warnings] == ["followup"]
    db_session.expire_all()
    assert db_session.get(Client, met_client.id).purchase_type == "none"
    assert db_session.query(ActivityLog).filter_by(action="purchase_outcome_recorded").count() == 1


def test_unassigned_trainer_cannot_record_outcome(db_session, make_service, other_trainer, met_client):
    with pytest.raises(Unauthorized):
        make_service().record_outcome(met_client.id, "none", "Not my client", other_trainer)

    db_session.expire_all()
    client = db_session.get(Client, met_client.id)
    assert client.purchase_type is None
    assert client.next_confirmation_due is None
    assert client.internal_notes is None
    assert db_session.query(ClientFollowup).count() == 0
    assert db_session.query(ActivityLog).count() == 0


def test_gate_wins_over_stale_version(make_service, other_trainer, met_client):
    with pytest.raises(Unauthorized):
        make_service().record_outcome(
            met_client.id, "package", None, other_trainer, expected_version=met_client.version + 3
        )


def test_stale_version_for_allowed_editor(db_session, make_service, trainer, met_client):
    with pytest.raises(Conflict):
        make_service().record_outcome(
            met_client.id, "package", None, trainer, expected_version=met_client.version + 3
        )

    db_session.expire_all()
    assert db_session.get(Client, met_client.id).purchase_type is None


def test_settings_read_failure_is_store_failure(db_session, make_service, trainer, met_client, monkeypatch):
    def lost_connection(self, gym_id):
        raise OperationalError("SELECT gym_settings", {}, Exception("connection lost"))

    monkeypatch.setattr(SettingsResolver, "resolve", lost_connection)

    with pytest.raises(StoreFailure):
        make_service().record_outcome(met_client.id, "package", None, trainer)

    db_session.expire_all()
    assert db_session.get(Client, met_client.id).purchase_type is None
