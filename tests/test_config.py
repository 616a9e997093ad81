"""Tests for configuration loading."""

from pathlib import Path

from blog_migrator.config import AppConfig, FetchConfig, get_api_token, load_config


def test_load_config_without_path_returns_defaults():
    cfg = load_config(None)

    assert cfg == AppConfig()
    assert cfg.output.directory == "posts"
    assert cfg.output.extension == ".html"
    assert cfg.links.template == "../{date}"
    assert cfg.links.legacy_parity is False


def test_load_config_merges_sections(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "links:\n"
        "  host_prefix: https://wiki.example.org/x/\n"
        "  legacy_parity: true\n"
        "output:\n"
        "  directory: site/posts\n"
        "unknown_section:\n"
        "  ignored: 1\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.links.host_prefix == "https://wiki.example.org/x/"
    assert cfg.links.legacy_parity is True
    assert cfg.links.template == "../{date}"
    assert cfg.output.directory == "site/posts"
    assert cfg.logging.level == "INFO"


def test_load_config_does_not_share_state_between_calls(tmp_path: Path):
    first = load_config(None)
    first.output.directory = "changed"

    assert load_config(None).output.directory == "posts"


def test_empty_config_file_uses_defaults(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(str(path)) == AppConfig()


def test_get_api_token_reads_file_and_drops_trailing_newline(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("BLOG_MIGRATOR_TOKEN", raising=False)
    token_file = tmp_path / "token"
    token_file.write_text("secret-token\n", encoding="utf-8")

    assert get_api_token(FetchConfig(token_path=str(token_file))) == "secret-token"


def test_get_api_token_prefers_environment(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("BLOG_MIGRATOR_TOKEN", "from-env")

    assert get_api_token(FetchConfig(token_path=str(tmp_path / "missing"))) == "from-env"
