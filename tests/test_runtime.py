import pytest

from mcpgateway.runtime import (
    base_args,
    capabilities_summary,
    expand_env,
    expand_env_list,
    is_tool_enabled,
    mount_args,
)


def test_expand_env_plain_and_braced():
    env = ["API_KEY=placeholder", "HOST=example.com"]
    assert expand_env("$HOST", env) == "example.com"
    assert expand_env("${HOST}/path", env) == "example.com/path"
    assert expand_env("key=$API_KEY", env) == "key=placeholder"


def test_expand_env_first_entry_wins():
    assert expand_env("$A", ["A=first", "A=second"]) == "first"


def test_expand_env_unknown_is_empty():
    assert expand_env("x$MISSING", ["A=1"]) == "x"


def test_expand_env_prefix_must_match_whole_name():
    assert expand_env("$AB", ["A=1"]) == ""


def test_expand_env_lone_dollar_kept():
    assert expand_env("cost $ 5", []) == "cost $ 5"
    assert expand_env("trailing$", []) == "trailing$"


def test_expand_env_bad_syntax_eaten():
    assert expand_env("a${b", []) == "ab"
    assert expand_env("a${}b", []) == "ab"


def test_expand_env_special_variable():
    assert expand_env("$1x", ["1=one"]) == "onex"


def test_expand_env_accepts_mapping():
    assert expand_env("${NAME}", {"NAME": "value"}) == "value"


def test_expand_env_without_variables_unchanged():
    assert expand_env("no variables here", ["A=1"]) == "no variables here"


def test_expand_env_list():
    env = ["A=1", "B=2"]
    assert expand_env_list(["$A", "${B}", "c"], env) == ["1", "2", "c"]
    assert expand_env_list([], env) == []


def test_expand_env_list_consumes_env_iterator_once():
    env = iter(["A=1"])
    assert expand_env_list(["$A", "$A"], env) == ["1", "1"]


def test_base_args_defaults():
    assert base_args("git", in_dind=False) == [
        "run", "--rm", "-i", "--init", "--security-opt", "no-new-privileges",
        "--pull", "never",
        "-l", "docker-mcp=true",
        "-l", "docker-mcp-tool-type=mcp",
        "-l", "docker-mcp-name=git",
        "-l", "docker-mcp-transport=stdio",
    ]


def test_base_args_limits_and_dind():
    args = base_args("git", cpus=2, memory="2Gb", in_dind=True)
    assert args[args.index("--cpus") + 1] == "2"
    assert args[args.index("--memory") + 1] == "2Gb"
    assert "--privileged" in args
    assert args.index("--privileged") > args.index("never")


def test_base_args_dind_from_environment(monkeypatch):
    monkeypatch.setenv("DOCKER_MCP_IN_DIND", "1")
    assert "--privileged" in base_args("x")
    monkeypatch.setenv("DOCKER_MCP_IN_DIND", "0")
    assert "--privileged" not in base_args("x")


def test_base_args_zero_cpus_omitted():
    assert "--cpus" not in base_args("x", cpus=0, in_dind=False)


def test_mount_args():
    assert mount_args(["/a:/a", "", "/b:/b"]) == ["-v", "/a:/a", "-v", "/b:/b"]


def test_mount_args_read_only():
    assert mount_args(["/a:/a", "/b:/b:ro"], read_only=True) == [
        "-v", "/a:/a:ro", "-v", "/b:/b:ro",
    ]
    assert mount_args(["/a:/a"], read_only=False) == ["-v", "/a:/a"]


def test_tool_enabled_without_filter():
    server_tools = {"git": ["commit"]}
    assert is_tool_enabled(server_tools, "other", "", "anything", [])
    assert is_tool_enabled(server_tools, "git", "", "commit", [])
    assert not is_tool_enabled(server_tools, "git", "", "push", [])


@pytest.mark.parametrize(
    "enabled",
    [["*"], ["COMMIT"], ["git:commit"], ["Git:*"], ["mcp/git:commit"], ["mcp/git:*"]],
)
def test_tool_enabled_with_filter(enabled):
    assert is_tool_enabled({}, "git", "mcp/git", "commit", enabled)


def test_tool_disabled_with_filter():
    assert not is_tool_enabled({}, "git", "mcp/git", "commit", ["push", "other:*"])


def test_image_patterns_need_image():
    assert not is_tool_enabled({}, "git", "", "commit", ["mcp/git:*"])


def test_filter_overrides_server_tools():
    assert is_tool_enabled({"git": []}, "git", "", "push", ["git:push"])


def test_capabilities_summary():
    assert capabilities_summary(3, 0, 1, 0) == " (3 tools) (1 resources)"
    assert capabilities_summary([], [], [], ["t"]) == " (1 resourceTemplates)"
    assert capabilities_summary(0, 0, 0, 0) == ""
    assert capabilities_summary(["a", "b"], ["p"], 0, 0) == " (2 tools) (1 prompts)"