import pytest

import latentchat.utils as utils


class EmptyKeyring:
    @staticmethod
    def get_password(service, key):
        return None


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the real app-data dir, env key and OS keyring."""
    monkeypatch.setenv("LATENTCHAT_HOME", str(tmp_path / "home"))
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.setattr(utils, "keyring", EmptyKeyring)
