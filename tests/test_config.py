"""环境变量配置单元测试."""

import pytest

from elasticlink.config import ElasticLinkSettings


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """避免读取本地 .env 和已有的 ELASTICLINK_ 环境变量."""
    monkeypatch.chdir(tmp_path)
    for key in (
        "CLUSTER_NODES",
        "NAMESPACE",
        "USER",
        "PASSWORD",
        "REQUEST_TIMEOUT",
        "BULK_ACTIONS",
        "FLUSH_INTERVAL",
    ):
        monkeypatch.delenv(f"ELASTICLINK_{key}", raising=False)


class TestElasticLinkSettings:
    """ElasticLinkSettings 测试."""

    def test_defaults(self) -> None:
        settings = ElasticLinkSettings()
        assert settings.cluster_nodes == "localhost:9200"
        assert settings.namespace == ""
        assert settings.user is None
        assert settings.bulk_actions == 1000

    def test_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("ELASTICLINK_CLUSTER_NODES", "es1:9200,es2:9200")
        monkeypatch.setenv("ELASTICLINK_NAMESPACE", "prod")
        monkeypatch.setenv("ELASTICLINK_USER", "elastic")
        monkeypatch.setenv("ELASTICLINK_PASSWORD", "changeme")
        monkeypatch.setenv("ELASTICLINK_BULK_ACTIONS", "500")
        monkeypatch.setenv("ELASTICLINK_FLUSH_INTERVAL", "2.5")

        settings = ElasticLinkSettings()

        assert settings.cluster_nodes == "es1:9200,es2:9200"
        assert settings.namespace == "prod"
        assert settings.user == "elastic"
        assert settings.password == "changeme"
        assert settings.bulk_actions == 500
        assert settings.flush_interval == 2.5

    def test_from_dotenv(self, tmp_path) -> None:
        (tmp_path / ".env").write_text("ELASTICLINK_NAMESPACE=staging\n")
        assert ElasticLinkSettings().namespace == "staging"

    def test_connection_config(self) -> None:
        config = ElasticLinkSettings(request_timeout=5, scheme="https").connection_config()
        assert config.request_timeout == 5
        assert config.scheme == "https"

    def test_bulk_config(self) -> None:
        config = ElasticLinkSettings(
            bulk_actions=10, bulk_size=1, flush_interval=3, concurrent_requests=0
        ).bulk_config()
        assert config.bulk_actions == 10
        assert config.bulk_size == 1
        assert config.flush_interval == 3
        assert config.concurrent_requests == 0
        assert config.backoff.delays() == pytest.approx([0.1, 0.2, 0.4])
