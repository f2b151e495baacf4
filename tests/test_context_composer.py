"""
Tests for the context composer — hub directories in, ComposedContext out.
"""

from pathlib import Path

from meld.core.services.context_composer import compose_context, parse_skill

from tests.builders import make_config


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


# ═══════════════════════════════════════════════════════════════════
#  Root context
# ═══════════════════════════════════════════════════════════════════


class TestRootContext:
    def test_sorted_and_joined(self, hub_dir: Path):
        _write(hub_dir / "context" / "b-second.md", "Second")
        _write(hub_dir / "context" / "a-first.md", "First")

        ctx = compose_context(hub_dir, make_config())
        assert ctx.context == "First\n\nSecond"

    def test_missing_directory(self, hub_dir: Path):
        ctx = compose_context(hub_dir, make_config())
        assert ctx.context == ""
        assert ctx.context_files == []

    def test_custom_context_path(self, hub_dir: Path):
        _write(hub_dir / "my-context" / "rules.md", "My rules")

        ctx = compose_context(hub_dir, make_config(context="./my-context/"))
        assert ctx.context == "My rules"

    def test_only_markdown_files(self, hub_dir: Path):
        _write(hub_dir / "context" / "rules.md", "Rules")
        _write(hub_dir / "context" / "notes.txt", "Notes")

        ctx = compose_context(hub_dir, make_config())
        assert ctx.context == "Rules"

    def test_trailing_newlines_do_not_widen_separator(self, hub_dir: Path):
        _write(hub_dir / "context" / "a.md", "A\n")
        _write(hub_dir / "context" / "b.md", "B\n")

        ctx = compose_context(hub_dir, make_config())
        assert ctx.context == "A\n\nB"


# ═══════════════════════════════════════════════════════════════════
#  Context subfolders
# ═══════════════════════════════════════════════════════════════════


class TestContextFiles:
    def test_no_subfolders(self, hub_dir: Path):
        _write(hub_dir / "context" / "rules.md", "Rules")

        ctx = compose_context(hub_dir, make_config())
        assert ctx.context_files == []

    def test_relative_paths(self, hub_dir: Path):
        _write(hub_dir / "context" / "reference" / "api.md", "API docs")
        _write(hub_dir / "context" / "reference" / "patterns.md", "Patterns")

        ctx = compose_context(hub_dir, make_config())
        assert [(f.path, f.content) for f in ctx.context_files] == [
            ("reference/api.md", b"API docs"),
            ("reference/patterns.md", b"Patterns"),
        ]

    def test_nested_and_any_extension(self, hub_dir: Path):
        _write(hub_dir / "context" / "reference" / "api" / "endpoints.md", "Endpoints")
        _write(hub_dir / "context" / "assets" / "config.json", '{"key": "value"}')

        ctx = compose_context(hub_dir, make_config())
        paths = {f.path: f.content for f in ctx.context_files}
        assert paths == {
            "reference/api/endpoints.md": b"Endpoints",
            "assets/config.json": b'{"key": "value"}',
        }

    def test_binary_file_kept_as_bytes(self, hub_dir: Path):
        png = b"\x89PNG\r\n\x1a\n\x00\xff"
        (hub_dir / "context" / "assets").mkdir(parents=True)
        (hub_dir / "context" / "assets" / "logo.png").write_bytes(png)

        ctx = compose_context(hub_dir, make_config())
        assert [(f.path, f.content) for f in ctx.context_files] == [("assets/logo.png", png)]

    def test_root_files_not_in_file_list(self, hub_dir: Path):
        _write(hub_dir / "context" / "01-rules.md", "Rules")
        _write(hub_dir / "context" / "guides" / "setup.md", "Setup guide")

        ctx = compose_context(hub_dir, make_config())
        assert ctx.context == "Rules"
        assert [f.path for f in ctx.context_files] == ["guides/setup.md"]


# ═══════════════════════════════════════════════════════════════════
#  Commands and skills
# ═══════════════════════════════════════════════════════════════════


class TestCommands:
    def test_reads_markdown_commands(self, hub_dir: Path):
        _write(hub_dir / "commands" / "review.md", "Do a review")
        _write(hub_dir / "commands" / "README.txt", "ignored")
        _write(hub_dir / "commands" / "nested" / "deep.md", "ignored")

        ctx = compose_context(hub_dir, make_config())
        assert [(c.name, c.content) for c in ctx.commands] == [("review", "Do a review")]


SKILL_TEXT = "\n".join([
    "---",
    "name: deep-review",
    "description: Thorough code review",
    "model:",
    "  claude-code: claude-opus-4-6",
    "  codex-cli: o3",
    "user-invocable: true",
    "tools: [Read, Grep]",
    "---",
    "",
    "Review the code thoroughly.",
])


class TestSkills:
    def test_reads_skill(self, hub_dir: Path):
        _write(hub_dir / "skills" / "deep-review" / "SKILL.md", SKILL_TEXT)

        ctx = compose_context(hub_dir, make_config())
        assert len(ctx.skills) == 1
        skill = ctx.skills[0]
        assert skill.name == "deep-review"
        assert skill.frontmatter["description"] == "Thorough code review"
        assert skill.frontmatter["model"] == {"claude-code": "claude-opus-4-6", "codex-cli": "o3"}
        assert skill.frontmatter["user-invocable"] is True
        assert skill.frontmatter["tools"] == ["Read", "Grep"]
        assert "Review the code thoroughly." in skill.body

    def test_skips_folder_without_skill_file(self, hub_dir: Path):
        (hub_dir / "skills" / "empty").mkdir(parents=True)

        ctx = compose_context(hub_dir, make_config())
        assert ctx.skills == []

    def test_skips_skill_without_frontmatter(self, hub_dir: Path):
        _write(hub_dir / "skills" / "plain" / "SKILL.md", "Just a body")

        ctx = compose_context(hub_dir, make_config())
        assert ctx.skills == []

    def test_parse_requires_closing_delimiter(self):
        assert parse_skill("x", "---\nname: x\nbody") is None

    def test_parse_rejects_non_mapping(self):
        assert parse_skill("x", "---\n- a\n- b\n---\nbody") is None

    def test_parse_rejects_line_without_colon(self):
        assert parse_skill("x", "---\nname: x\njust words\n---\nbody") is None

    def test_colon_inside_value(self, hub_dir: Path):
        _write(
            hub_dir / "skills" / "review" / "SKILL.md",
            "---\nname: review\ndescription: Review code: bugs first\n---\n\nBody\n",
        )

        ctx = compose_context(hub_dir, make_config())
        assert [s.name for s in ctx.skills] == ["review"]
        assert ctx.skills[0].frontmatter["description"] == "Review code: bugs first"

    def test_scalars_keep_source_text(self):
        skill = parse_skill("v", "---\nversion: 1.10\nsince: 2024-01-01\nretries: 3\n---\nbody")
        assert skill is not None
        assert skill.frontmatter == {"version": "1.10", "since": "2024-01-01", "retries": "3"}

    def test_quoted_values_unquoted(self):
        skill = parse_skill("q", "---\ntitle: \"Step: one\"\nnote: 'it''s'\n---\nbody")
        assert skill is not None
        assert skill.frontmatter == {"title": "Step: one", "note": "it's"}

    def test_block_list(self):
        skill = parse_skill("l", "---\ntools:\n  - Read\n  - Grep\n---\nbody")
        assert skill is not None
        assert skill.frontmatter == {"tools": ["Read", "Grep"]}

    def test_body_may_contain_rule_lines(self):
        skill = parse_skill("r", "---\nname: r\n---\n\nTop\n\n---\n\nBottom\n")
        assert skill is not None
        assert skill.body == "Top\n\n---\n\nBottom\n"

    def test_parse_empty_frontmatter(self):
        skill = parse_skill("x", "---\n---\n\nBody text\n")
        assert skill is not None
        assert skill.frontmatter == {}
        assert skill.body == "Body text\n"


# ═══════════════════════════════════════════════════════════════════
#  Synthesized sections
# ═══════════════════════════════════════════════════════════════════


class TestSynthesized:
    def test_hub_preamble(self, hub_dir: Path):
        ctx = compose_context(hub_dir, make_config())
        for expected in (
            "test-hub", "meld hub", "## Hub Structure", "meld.jsonc",
            "context/", "commands/", "skills/", "artifacts/", "scratch/",
            "agents/", "do not edit", "meld gen",
        ):
            assert expected in ctx.hub_preamble, expected

    def test_project_table(self, hub_dir: Path):
        config = make_config(projects={
            "myapp": {"path": "~/myapp", "aliases": ["app", "my"], "repo": "org/myapp"},
            "lib": {"path": "/src/lib", "aliases": []},
        })
        ctx = compose_context(hub_dir, config)
        assert "| myapp | app, my | ~/myapp | org/myapp |" in ctx.project_table
        assert "| lib |  | /src/lib |  |" in ctx.project_table

    def test_project_table_empty_without_projects(self, hub_dir: Path):
        assert compose_context(hub_dir, make_config()).project_table == ""

    def test_artifacts_section(self, hub_dir: Path):
        ctx = compose_context(hub_dir, make_config())
        assert "artifacts/hub/" in ctx.artifacts_section
        assert "artifacts/projects/{project-name}/" in ctx.artifacts_section
        assert "scratch/" in ctx.artifacts_section

    def test_hub_dir_recorded(self, hub_dir: Path):
        assert compose_context(hub_dir, make_config()).hub_dir == str(hub_dir)
