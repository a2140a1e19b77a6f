"""Unit tests for the owner-or-admin access rule."""

from types import SimpleNamespace

import pytest
from taskmanager.services._shared.policies.common import DELETE, READ, UPDATE, can

TASK = SimpleNamespace(user_id=1)


@pytest.mark.parametrize("action", [READ, UPDATE, DELETE])
def test_owner_is_allowed(action):
    assert can(SimpleNamespace(id=1, role="user"), action, TASK)


@pytest.mark.parametrize("action", [READ, UPDATE, DELETE])
def test_admin_is_allowed_on_any_task(action):
    assert can(SimpleNamespace(id=99, role="admin"), action, TASK)


@pytest.mark.parametrize("action", [READ, UPDATE, DELETE])
def test_other_user_is_denied(action):
    assert not can(SimpleNamespace(id=2, role="user"), action, TASK)


def test_anonymous_is_denied():
    assert not can(None, READ, TASK)


def test_unknown_action_raises():
    with pytest.raises(ValueError):
        can(SimpleNamespace(id=1, role="user"), "archive", TASK)


def test_ids_compare_across_types():
    """Token subjects are strings; row ids are ints."""
    assert can(SimpleNamespace(id="1", role="user"), READ, TASK)
