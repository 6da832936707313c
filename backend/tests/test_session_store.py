"""
Tests for the state store and scoped state bags.
"""

from bookbot.services.session_store import InMemorySessionStore, ScopedState


class TestInMemoryStore:
    """Test the in-memory backend."""

    def test_stored_value_is_a_copy(self, store: InMemorySessionStore):
        data = {"user_profile": {"name": "Jane"}}
        store.set("user:1", data)
        data["user_profile"]["name"] = "changed"

        loaded = store.get("user:1")
        loaded["user_profile"]["name"] = "also changed"

        assert store.get("user:1") == {"user_profile": {"name": "Jane"}}

    def test_expired_entries_disappear(self, store: InMemorySessionStore):
        store.set("conversation:1", {"x": 1}, ttl_hours=-1)

        assert store.get("conversation:1") is None
        assert store.exists("conversation:1") is False

    def test_delete(self, store: InMemorySessionStore):
        store.set("user:1", {"x": 1})

        assert store.delete("user:1") is True
        assert store.delete("user:1") is False
        assert store.exists("user:1") is False


class TestScopedState:
    """Test state bags loaded per scope id."""

    def test_get_stores_default_until_saved(self, store):
        scope = ScopedState(store, "conversation", ttl_hours=24)
        bag = scope.load("conv-1")

        data = bag.get("conversation_data", {"step": "ask_name"})
        data["step"] = "ask_address"

        assert bag.get("conversation_data") == {"step": "ask_address"}
        assert store.get("conversation:conv-1") is None

        bag.save()
        assert store.get("conversation:conv-1") == {"conversation_data": {"step": "ask_address"}}

    def test_default_is_copied(self, store):
        default = {"name": ""}
        bag = ScopedState(store, "user", ttl_hours=24).load("u1")

        bag.get("user_profile", default)["name"] = "Jane"

        assert default == {"name": ""}

    def test_missing_key_without_default_is_none(self, store):
        bag = ScopedState(store, "user", ttl_hours=24).load("u1")

        assert bag.get("user_profile") is None

    def test_scopes_do_not_collide(self, store):
        user_bag = ScopedState(store, "user", 24).load("same-id")
        user_bag.set("value", "user")
        user_bag.save()
        conversation_bag = ScopedState(store, "conversation", 24).load("same-id")
        conversation_bag.set("value", "conversation")
        conversation_bag.save()

        assert store.get("user:same-id") == {"value": "user"}
        assert store.get("conversation:same-id") == {"value": "conversation"}

    def test_saving_twice_stores_the_same_value(self, store):
        bag = ScopedState(store, "user", ttl_hours=24).load("u1")
        bag.set("user_profile", {"name": "Jane", "address": "", "email": "", "book": ""})

        bag.save()
        first = store.get("user:u1")
        bag.save()

        assert store.get("user:u1") == first
        assert ScopedState(store, "user", ttl_hours=24).load("u1").get("user_profile")["name"] == "Jane"

    def test_exists_only_after_save(self, store):
        scope = ScopedState(store, "conversation", ttl_hours=24)
        bag = scope.load("conv-1")
        bag.set("conversation_data", {"step": "ask_name"})

        assert scope.exists("conv-1") is False
        bag.save()
        assert scope.exists("conv-1") is True
