"""
Tests for environment-variable interpolation.
"""

from meld.core.config.interpolate import interpolate_env, interpolate_value

from tests.builders import make_config


class TestInterpolateValue:
    def test_mixed_resolution(self):
        warnings: list[str] = []
        value = interpolate_value("${FOUND}/${NOT_FOUND}", {"FOUND": "yes"}, warnings)
        assert value == "yes/${NOT_FOUND}"
        assert warnings == ["Environment variable not set: NOT_FOUND"]

    def test_each_occurrence_warns(self):
        warnings: list[str] = []
        interpolate_value(["${A}", {"k": "${A}"}], {}, warnings)
        assert warnings == ["Environment variable not set: A"] * 2

    def test_non_strings_untouched(self):
        warnings: list[str] = []
        value = {"n": 1, "f": 1.5, "b": True, "none": None}
        assert interpolate_value(value, {"n": "x"}, warnings) == value
        assert warnings == []

    def test_keys_not_interpolated(self):
        warnings: list[str] = []
        value = interpolate_value({"${KEY}": "${VAL}"}, {"KEY": "k", "VAL": "v"}, warnings)
        assert value == {"${KEY}": "v"}

    def test_invalid_names_ignored(self):
        warnings: list[str] = []
        text = "$HOME ${1BAD} ${} ${A-B}"
        assert interpolate_value(text, {"HOME": "/h"}, warnings) == text
        assert warnings == []

    def test_empty_value_substituted(self):
        warnings: list[str] = []
        assert interpolate_value("a${E}b", {"E": ""}, warnings) == "ab"
        assert warnings == []


class TestInterpolateEnv:
    def test_resolves_mcp_values(self):
        config = make_config(mcp={
            "remote": {
                "type": "http",
                "url": "https://${HOST}/mcp",
                "headers": {"Authorization": "Bearer ${TOKEN}"},
            },
        })
        result = interpolate_env(config, {"HOST": "example.com"})

        server = result.config.mcp["remote"]
        assert server.url == "https://example.com/mcp"
        assert server.headers == {"Authorization": "Bearer ${TOKEN}"}
        assert result.warnings == ["Environment variable not set: TOKEN"]

    def test_original_config_untouched(self):
        config = make_config(projects={"app": {"path": "${ROOT}/app", "aliases": []}})
        result = interpolate_env(config, {"ROOT": "/src"})
        assert result.config.projects["app"].path == "/src/app"
        assert config.projects["app"].path == "${ROOT}/app"

    def test_stdio_variant_preserved(self):
        config = make_config(mcp={"local": {"command": "${BIN}", "args": ["${ARG}"]}})
        result = interpolate_env(config, {"BIN": "npx", "ARG": "-y"})
        assert result.config.mcp["local"].command == "npx"
        assert result.config.mcp["local"].args == ["-y"]
        assert result.config.mcp["local"].type == "stdio"

    def test_workspace_name_alias_round_trips(self):
        config = make_config(ide={"default": "code", "workspaceName": "${HUB}"})
        result = interpolate_env(config, {"HUB": "main"})
        assert result.config.ide.workspace_name == "main"

    def test_defaults_to_process_env(self, monkeypatch):
        monkeypatch.setenv("MELD_TEST_HOST", "from-env")
        config = make_config(projects={"a": {"path": "${MELD_TEST_HOST}", "aliases": []}})
        assert interpolate_env(config).config.projects["a"].path == "from-env"
