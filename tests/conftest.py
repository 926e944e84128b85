import pytest


@pytest.fixture(autouse=True)
def isolate_user_config(tmp_path, monkeypatch):
    """Keep tests away from the real ``~/.ccommit`` config and API key.

    Some tests expect no user-level config and no ``ANTHROPIC_API_KEY``.
    The config directory is redirected to a temporary path and the
    environment variable is removed for the duration of each test.
    """
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.setattr(
        "commit_suggester.config.loader._get_config_directory",
        lambda: tmp_path / ".ccommit",
    )
    yield
