import pytest

from app.models import Notification
from app.services import notification_service
from app.services.notification_service import (
    NotificationDispatcher,
    NotificationError,
    staff_notification_template,
)


def test_in_app_notification_is_stored(db_session, trainer):
    result = NotificationDispatcher(db_session, default_channel="app").notify(
        trainer.id, "New client assigned", "Mario Rossi has been assigned to you."
    )

    assert result == {"app_sent": True, "email_sent": False}
    stored = db_session.query(Notification).one()
    assert stored.user_id == trainer.id
    assert stored.read is False


def test_unknown_recipient_raises(db_session, gym):
    with pytest.raises(NotificationError):
        NotificationDispatcher(db_session, default_channel="app").notify(9999, "t", "m")


def test_unknown_channel_raises(db_session, trainer):
    with pytest.raises(NotificationError):
        NotificationDispatcher(db_session).notify(trainer.id, "t", "m", channel="pager")


def test_email_without_api_key_raises(db_session, trainer, monkeypatch):
    monkeypatch.setattr(notification_service, "RESEND_API_KEY", None)

    with pytest.raises(NotificationError):
        NotificationDispatcher(db_session).notify(trainer.id, "t", "m", channel="email")


def test_email_is_sent_through_resend(db_session, trainer, monkeypatch):
    sent = []
    monkeypatch.setattr(notification_service, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(notification_service.resend.Emails, "send", lambda params: sent.append(params))

    result = NotificationDispatcher(db_session).notify(trainer.id, "Hello", "World", channel="both")

    assert result == {"app_sent": True, "email_sent": True}
    assert sent[0]["to"] == ["tina@irontemple.it"]
    assert sent[0]["subject"] == "Hello"


def test_template_escapes_html():
    body = staff_notification_template("<b>Hi</b>", "Tom & Jerry")
    assert "&lt;b&gt;Hi&lt;/b&gt;" in body
    assert "Tom &amp; Jerry" in body
