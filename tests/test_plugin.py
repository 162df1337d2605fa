"""End-to-end tests for the denormalizer plugin."""

import inspect

import pytest

from denormalizer import (
    Denormalizer,
    MissingGetOneError,
    MissingTypeConfigError,
    NotFinalizedError,
    build_api,
    denormalizer,
)
from denormalizer.runtime.context import ResolutionContext

from .conftest import MESSAGE_X, MESSAGE_Y, EntityStore


class TestSingleResult:
    @pytest.mark.asyncio
    async def test_resolves_simple_id_fields(self, entity_configs):
        api = build_api(entity_configs)
        message = await api["message"]["get_message"]("x")

        assert message["author"] == {"id": "peter"}
        assert message["recipient"] == {"id": "gernot"}

    @pytest.mark.asyncio
    async def test_resolves_lists_of_ids(self, entity_configs):
        api = build_api(entity_configs)
        message = await api["message"]["get_message"]("x")

        assert message["visibleTo"] == [{"id": "robin"}]

    @pytest.mark.asyncio
    async def test_resolves_nested_data(self, entity_configs):
        api = build_api(entity_configs)
        message = await api["message"]["get_message"]("x")

        assert message["nestedData"]["comments"] == [{"id": "a"}, {"id": "b"}]

    @pytest.mark.asyncio
    async def test_end_to_end_shape(self, entity_configs):
        api = build_api(entity_configs)
        message = await api["message"]["get_message"]("x")

        assert message == {
            "id": "x",
            "author": {"id": "peter"},
            "recipient": {"id": "gernot"},
            "visibleTo": [{"id": "robin"}],
            "nestedData": {"comments": [{"id": "a"}, {"id": "b"}]},
        }
        # stored message is untouched
        assert MESSAGE_X["author"] == "peter"

    @pytest.mark.asyncio
    async def test_missing_result_passes_through(self, entity_configs):
        api = build_api(entity_configs)
        assert await api["message"]["get_message"]("nope") is None


class TestListResult:
    @pytest.mark.asyncio
    async def test_resolves_each_item(self, entity_configs):
        api = build_api(entity_configs)
        first, second = await api["message"]["get_messages"]()

        assert first["author"] == {"id": "peter"}
        assert first["recipient"] == {"id": "gernot"}
        assert second["author"] == {"id": "gernot"}
        assert second["recipient"] == {"id": "peter"}
        assert second["visibleTo"] == []

    @pytest.mark.asyncio
    async def test_shared_user_is_fetched_once(self, entity_configs, users):
        api = build_api(entity_configs)
        await api["message"]["get_messages"]()

        fetched = [c[1] for c in users.calls_to("get_one")]
        assert sorted(fetched) == ["gernot", "peter", "robin"]

    @pytest.mark.asyncio
    async def test_threshold_uses_get_all(self, entity_configs, users, messages):
        crowd = [{"id": f"u{i}"} for i in range(6)]
        users.entities.update({u["id"]: u for u in crowd})
        messages.entities["z"] = {**MESSAGE_Y, "id": "z", "visibleTo": [u["id"] for u in crowd]}

        api = build_api(entity_configs)
        message = await api["message"]["get_message"]("z")

        assert users.calls_to("get_all") == [("get_all",)]
        assert users.calls_to("get_one") == []
        assert message["visibleTo"] == crowd


class TestPassThrough:
    @pytest.mark.asyncio
    async def test_entity_without_schema_is_unchanged(self, entity_configs, users):
        api = build_api(entity_configs)
        assert await api["user"]["get_user"]("peter") == {"id": "peter"}

    def test_signature_is_preserved(self, entity_configs, messages):
        api = build_api(entity_configs)
        wrapped = api["message"]["get_message"]

        assert inspect.signature(wrapped) == inspect.signature(messages.get_one)
        assert wrapped.__wrapped__ == messages.get_one


class TestDepth:
    @pytest.mark.asyncio
    async def test_max_depth_zero_returns_raw_ids(self, entity_configs, users):
        api = build_api(entity_configs, {"max_depth": 0})
        message = await api["message"]["get_message"]("x")

        assert message == MESSAGE_X
        assert users.calls == []

    @pytest.mark.asyncio
    async def test_entity_max_depth_overrides_global(self, entity_configs):
        entity_configs["message"]["plugins"]["denormalizer"]["maxDepth"] = 0
        api = build_api(entity_configs, {"max_depth": 5})

        assert await api["message"]["get_message"]("x") == MESSAGE_X

    def _chain_configs(self):
        # node -> parent -> parent -> ... (each node references the next)
        nodes = EntityStore([{"id": i, "parent": i + 1} for i in range(5)] + [{"id": 5, "parent": None}])
        return nodes, {
            "node": {
                "api": {"get_node": nodes.get_one},
                "plugins": {"denormalizer": {"schema": {"parent": "node"}, "get_one": "get_node"}},
            }
        }

    @pytest.mark.asyncio
    async def test_nested_references_resolve_recursively(self):
        nodes, configs = self._chain_configs()
        api = build_api(configs)
        node = await api["node"]["get_node"](0)

        assert node["parent"]["parent"]["parent"]["id"] == 3
        assert node["parent"]["parent"]["parent"]["parent"]["parent"] == {"id": 5, "parent": None}

    @pytest.mark.asyncio
    async def test_recursion_stops_at_max_depth(self):
        nodes, configs = self._chain_configs()
        api = build_api(configs, {"max_depth": 2})
        node = await api["node"]["get_node"](0)

        # level 0 resolves node 1, level 1 resolves node 2, level 2 stops
        assert node["parent"]["id"] == 1
        assert node["parent"]["parent"] == {"id": 2, "parent": 3}

    @pytest.mark.asyncio
    async def test_two_argument_decoration_uses_api_key(self):
        nodes, configs = self._chain_configs()
        plugin = Denormalizer(configs)
        # the function's __name__ is "get_one", its api key is "get_node"
        get_node = plugin("node", configs["node"]["api"]["get_node"])
        plugin.finalize()

        node = await get_node(0)

        assert get_node.fn_name == "get_node"
        assert isinstance(node["parent"]["parent"], dict)
        assert node["parent"]["parent"]["parent"]["id"] == 3

    @pytest.mark.asyncio
    async def test_two_argument_decoration_matches_equal_bound_method(self):
        nodes, configs = self._chain_configs()
        plugin = Denormalizer(configs)
        get_node = plugin("node", nodes.get_one)
        plugin.finalize()

        node = await get_node(0)

        assert node["parent"]["parent"]["id"] == 2
        assert isinstance(node["parent"]["parent"]["parent"], dict)

    @pytest.mark.asyncio
    async def test_invoke_with_explicit_context(self):
        nodes, configs = self._chain_configs()
        api = build_api(configs)
        node = await api["node"]["get_node"].invoke(ResolutionContext(level=0, max_depth=1), 0)

        assert node == {"id": 0, "parent": {"id": 1, "parent": 2}}


class TestBuild:
    def test_missing_type_config_fails_at_build(self, entity_configs):
        del entity_configs["comment"]["plugins"]
        with pytest.raises(MissingTypeConfigError):
            build_api(entity_configs)

    def test_missing_get_one_fails_at_build(self, entity_configs):
        del entity_configs["user"]["plugins"]["denormalizer"]["getOne"]
        with pytest.raises(MissingGetOneError):
            denormalizer()(entity_configs)

    @pytest.mark.asyncio
    async def test_resolving_before_finalize_raises(self, entity_configs, messages):
        plugin = Denormalizer(entity_configs)
        get_message = plugin("message", messages.get_one, "get_message")

        with pytest.raises(NotFinalizedError):
            await get_message("x")

    @pytest.mark.asyncio
    async def test_two_phase_build(self, entity_configs, users, comments, messages):
        plugin = denormalizer({"threshold": 10})(entity_configs)
        get_message = plugin({"name": "message"}, messages.get_one, "get_message")
        plugin("user", users.get_one, "get_user")
        plugin("comment", comments.get_one, "get_comment")

        assert plugin.finalize() is plugin
        assert plugin.finalize().finalized

        message = await get_message("x")
        assert message["nestedData"]["comments"] == [{"id": "a"}, {"id": "b"}]

    @pytest.mark.asyncio
    async def test_fetch_errors_propagate(self, entity_configs):
        async def broken_user(id):
            raise ConnectionError("user service unavailable")

        entity_configs["user"]["api"]["get_user"] = broken_user
        api = build_api(entity_configs)

        with pytest.raises(ConnectionError):
            await api["message"]["get_message"]("x")
