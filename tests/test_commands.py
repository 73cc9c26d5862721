"""Tests for the command router."""

import pytest

from acquia_cloud import NotImplementedCall, execute_command, initialize
from acquia_cloud.main import COMMAND_ALIASES, COMMANDS, CloudApiClient


class TestExecuteCommand:
    def test_routes_full_name(self, client, stub_server):
        stub_server.routes[("GET", "/v1/sites/demo/envs/prod/dbs.json")] = (
            200, {}, [{"name": "g76"}],
        )

        result = execute_command(client, "list_databases", {"site": "demo", "env": "prod"})

        assert result == [{"name": "g76"}]

    def test_routes_alias_case_insensitive(self, client, stub_server):
        stub_server.routes[("GET", "/v1/sites/demo/tasks.json")] = (200, {}, [])

        assert execute_command(client, "  TASKS ", {"site": "demo"}) == []

    def test_numeric_ids_accepted(self, client, stub_server):
        stub_server.routes[("GET", "/v1/sites/demo/tasks/42.json")] = (200, {}, {"id": 42})

        assert execute_command(client, "task", {"site": "demo", "task": 42}) == {"id": 42}

    def test_optional_arguments_passed(self, client, stub_server):
        stub_server.routes[("DELETE", "/v1/sites/demo/dbs/g76.json")] = (200, {}, {})

        execute_command(client, "delete_database", {"site": "demo", "db": "g76", "backup": False})

        assert stub_server.requests[0]["query"] == "backup=0"

    def test_unknown_command(self, client):
        with pytest.raises(ValueError, match="Unknown command"):
            execute_command(client, "format_disk")

    @pytest.mark.parametrize("args", [None, {}, {"site": ""}, {"site": "  "}, {"site": ["demo"]}])
    def test_missing_required_argument(self, client, args):
        with pytest.raises(ValueError, match="'site'"):
            execute_command(client, "sites", args)

    def test_move_domains_requires_domains(self, client):
        with pytest.raises(ValueError, match="domains"):
            execute_command(
                client, "move_domains",
                {"site": "demo", "from_env": "dev", "to_env": "prod"},
            )

    def test_install_environment_refused(self, client):
        with pytest.raises(NotImplementedCall):
            execute_command(client, "install_environment", {
                "site": "demo", "env": "prod",
                "distro_type": "distro_name", "source": "x",
            })


class TestCommandTable:
    def test_every_command_is_a_client_method(self):
        for name in COMMANDS:
            assert callable(getattr(CloudApiClient, name))

    def test_every_alias_targets_a_command(self):
        assert set(COMMAND_ALIASES.values()) <= set(COMMANDS)

    def test_initialize_lists_commands(self):
        info = initialize()

        assert info["name"] == "Acquia Cloud API"
        assert len(info["commands"]) == len(COMMANDS)
        assert any(line.startswith("get_tasks / tasks") for line in info["commands"])
