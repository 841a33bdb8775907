"""
Tests for durable profile persistence.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import pytest

from vbunker.application.booking_flow_state import BookingFlowState
from vbunker.application.exceptions import ProfileStoreError
from vbunker.application.ports.profile_store import (
    KEY_AVATAR_IMAGE_DATA,
    KEY_FIRST_NAME,
    KEY_IS_LOGGED_IN,
    KEY_USER_PHONE,
    KEY_USER_ROLE,
)
from vbunker.domain.entities.profile import UserRole
from vbunker.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from vbunker.infrastructure.store.json_store import JsonProfileStore
from vbunker.infrastructure.store.memory_store import MemoryProfileStore


def test_json_store_persistence():
    """Test that JSON store persists and retrieves values correctly."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonProfileStore(data_dir=tmpdir)

        store.set(KEY_USER_PHONE, "+7 900 000-00-00")
        store.set(KEY_IS_LOGGED_IN, True)

        # A second instance reads the same file
        reopened = JsonProfileStore(data_dir=tmpdir)
        assert reopened.get_string(KEY_USER_PHONE) == "+7 900 000-00-00"
        assert reopened.get_bool(KEY_IS_LOGGED_IN) is True


def test_json_store_keeps_bytes():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonProfileStore(data_dir=tmpdir)
        avatar = b"\x89PNG\r\n\x1a\n\x00\xff"

        store.set(KEY_AVATAR_IMAGE_DATA, avatar)

        assert JsonProfileStore(data_dir=tmpdir).get_data(KEY_AVATAR_IMAGE_DATA) == avatar


def test_setting_none_removes_key():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonProfileStore(data_dir=tmpdir)
        store.set(KEY_AVATAR_IMAGE_DATA, b"img")
        store.set(KEY_AVATAR_IMAGE_DATA, None)

        data = json.loads((Path(tmpdir) / "profile.json").read_text(encoding="utf-8"))
        assert KEY_AVATAR_IMAGE_DATA not in data
        assert store.get_data(KEY_AVATAR_IMAGE_DATA) is None


def test_corrupted_file_reads_as_fresh_install():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "profile.json").write_text("{not json", encoding="utf-8")
        store = JsonProfileStore(data_dir=tmpdir)

        assert store.get(KEY_USER_PHONE) is None
        assert store.get_bool(KEY_IS_LOGGED_IN) is False

        # Next write replaces the broken file
        store.set(KEY_USER_PHONE, "123")
        assert JsonProfileStore(data_dir=tmpdir).get_string(KEY_USER_PHONE) == "123"


def test_wrong_types_fall_back_to_defaults():
    store = MemoryProfileStore({KEY_USER_PHONE: 42, KEY_AVATAR_IMAGE_DATA: "not bytes"})

    assert store.get_string(KEY_USER_PHONE) == ""
    assert store.get_data(KEY_AVATAR_IMAGE_DATA) is None
    assert store.get_bool(KEY_IS_LOGGED_IN) is False


def test_profile_survives_restart():
    """Profile scalars written by one session are loaded by the next."""
    with tempfile.TemporaryDirectory() as tmpdir:
        catalog = ServiceCatalogStore()
        first = BookingFlowState(JsonProfileStore(data_dir=tmpdir), catalog)
        first.log_in(" 79001234567 ")
        first.complete_profile("Анна", "Смирнова")
        first.toggle_role()

        second = BookingFlowState(JsonProfileStore(data_dir=tmpdir), catalog)
        assert second.is_logged_in is True
        assert second.is_profile_completed is True
        assert second.phone == "79001234567"
        assert second.first_name == "Анна"
        assert second.last_name == "Смирнова"
        assert second.role == UserRole.admin


def test_fresh_install_defaults():
    state = BookingFlowState(MemoryProfileStore(), ServiceCatalogStore())

    assert state.is_logged_in is False
    assert state.is_profile_completed is False
    assert state.phone == ""
    assert state.email == ""
    assert state.avatar_image_data is None
    assert state.role == UserRole.user


def test_unknown_role_falls_back_to_user():
    store = MemoryProfileStore({KEY_USER_ROLE: "superuser", KEY_FIRST_NAME: "Олег"})
    state = BookingFlowState(store, ServiceCatalogStore())

    assert state.role == UserRole.user
    assert state.first_name == "Олег"


def test_log_out_keeps_identity_fields():
    store = MemoryProfileStore()
    state = BookingFlowState(store, ServiceCatalogStore())
    state.log_in("79001234567")
    state.complete_profile("Анна")

    state.log_out()

    assert store.get(KEY_IS_LOGGED_IN) is False
    assert store.get(KEY_USER_PHONE) == "79001234567"
    assert state.is_registered("79001234567")


class FailingStore(MemoryProfileStore):
    """Store whose disk is gone after startup."""

    def set(self, key, value):
        raise ProfileStoreError("disk full")


def test_failed_write_leaves_profile_unchanged():
    store = FailingStore({KEY_FIRST_NAME: "Олег"})
    state = BookingFlowState(store, ServiceCatalogStore())
    topics: list[str] = []
    state.subscribe(topics.append)

    with pytest.raises(ProfileStoreError):
        state.first_name = "Иван"
    with pytest.raises(ProfileStoreError):
        state.toggle_role()

    assert state.first_name == "Олег"
    assert state.role == UserRole.user
    assert store.get(KEY_FIRST_NAME) == "Олег"
    assert topics == []
