from __future__ import annotations

from dataclasses import replace

import pytest

from src.team_tasks.team_tasks.core.exceptions import DuplicateEmail, ValidationError


def test_get_me_includes_team(container, team):
    manager, _ = team
    me = container.profile_service.get_me(manager.user)
    assert me["email"] == "alice@x.com"
    assert me["team_name"] == "Alice's Team"
    assert me["manager_code"] == manager.team.manager_code


def test_update_profile(container, team):
    _, employee = team
    updated = container.profile_service.update_profile(employee.user, name="Bobby", email="bobby@x.com")
    assert updated["name"] == "Bobby"
    assert updated["email"] == "bobby@x.com"


def test_update_profile_keeps_own_email(container, team):
    _, employee = team
    updated = container.profile_service.update_profile(employee.user, name="Bobby", email="bob@x.com")
    assert updated["email"] == "bob@x.com"


def test_update_profile_rejects_email_of_other_user(container, team):
    _, employee = team
    with pytest.raises(DuplicateEmail):
        container.profile_service.update_profile(employee.user, name="Bob", email="alice@x.com")


def test_change_password(container, team):
    _, employee = team
    profile = container.profile_service

    with pytest.raises(ValidationError):
        profile.change_password(employee.user, current_password="wrong-one", new_password="newpass1")
    with pytest.raises(ValidationError):
        profile.change_password(employee.user, current_password="secret2", new_password="123")

    profile.change_password(employee.user, current_password="secret2", new_password="newpass1")
    result = container.auth_service.login(email="bob@x.com", password="newpass1", role="employee")
    assert result.user.id == employee.user.id


def test_change_password_with_unreadable_stored_hash(container, team, fake_db):
    _, employee = team
    fake_db.users[employee.user.id] = replace(fake_db.users[employee.user.id], password_hash="bogus$salt$value")
    user = fake_db.users[employee.user.id]

    with pytest.raises(ValidationError):
        container.profile_service.change_password(user, current_password="secret2", new_password="newpass1")
