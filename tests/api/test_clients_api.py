"""Client intake and lookup endpoints."""

from app.models import ActivityLog, Client


def test_create_client(api_client, acting_user, admin, db_session):
    acting_user["user"] = admin

    response = api_client.post(
        "/clients",
        json={
            "firstName": " Giulia ",
            "lastName": "Bianchi",
            "email": "Giulia@Example.com",
            "phone": "+39 333 765 4321",
            "source": "website",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["firstName"] == "Giulia"
    assert body["email"] == "giulia@example.com"
    assert body["phone"] == "+393337654321"
    assert body["assignedTo"] is None
    assert body["firstMeetingCompleted"] is False
    assert db_session.query(ActivityLog).filter_by(action="client_created").count() == 1


def test_create_client_rejects_bad_phone(api_client, acting_user, admin):
    acting_user["user"] = admin

    response = api_client.post(
        "/clients", json={"firstName": "Giulia", "lastName": "Bianchi", "phone": "333 765"}
    )

    assert response.status_code == 422


def test_trainer_sees_only_assigned_clients(api_client, acting_user, trainer, gym, db_session):
    db_session.add_all(
        [
            Client(gym_id=gym.id, first_name="Mine", last_name="One", assigned_to=trainer.id),
            Client(gym_id=gym.id, first_name="Not", last_name="Mine"),
        ]
    )
    db_session.commit()
    acting_user["user"] = trainer

    body = api_client.get("/clients").json()

    assert [c["firstName"] for c in body] == ["Mine"]
    assert body[0]["canEdit"] is True


def test_admin_sees_whole_gym(api_client, acting_user, admin, client_record):
    acting_user["user"] = admin

    body = api_client.get("/clients").json()

    assert [c["id"] for c in body] == [client_record.id]


def test_get_client_not_found(api_client, acting_user, admin):
    acting_user["user"] = admin

    response = api_client.get("/clients/9999")

    assert response.status_code == 404


def test_get_client_read_only_for_assistant(api_client, acting_user, assistant, client_record):
    acting_user["user"] = assistant

    response = api_client.get(f"/clients/{client_record.id}")

    assert response.status_code == 200
    assert response.json()["canEdit"] is False
