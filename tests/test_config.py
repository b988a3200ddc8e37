import pytest
from botocore.exceptions import ClientError

from airtrack import config
from airtrack.config import Settings, get_adsb_api_key


class FakeSSMClient:
    def __init__(self, value: str | None = "key-123", error: Exception | None = None):
        self.value = value
        self.error = error
        self.calls: list[str] = []

    def get_parameter(self, Name: str, WithDecryption: bool):
        self.calls.append(Name)
        if self.error:
            raise self.error
        return {"Parameter": {"Value": self.value}}


@pytest.fixture(autouse=True)
def _clear_key_cache():
    get_adsb_api_key.cache_clear()
    yield
    get_adsb_api_key.cache_clear()


def test_api_key_is_optional():
    assert Settings(adsb_api_key_param=None).adsb_api_key() is None


def test_api_key_is_read_from_ssm_once(monkeypatch):
    client = FakeSSMClient()
    monkeypatch.setattr(config, "_get_ssm_client", lambda: client)
    configured = Settings(adsb_api_key_param="/airtrack/adsb/api_key")

    assert configured.adsb_api_key() == "key-123"
    assert configured.adsb_api_key() == "key-123"
    assert client.calls == ["/airtrack/adsb/api_key"]


def test_api_key_failures_raise(monkeypatch):
    error = ClientError({"Error": {"Code": "ParameterNotFound"}}, "GetParameter")
    monkeypatch.setattr(config, "_get_ssm_client", lambda: FakeSSMClient(error=error))

    with pytest.raises(RuntimeError):
        get_adsb_api_key("/missing")


def test_empty_api_key_raises(monkeypatch):
    monkeypatch.setattr(config, "_get_ssm_client", lambda: FakeSSMClient(value=""))

    with pytest.raises(RuntimeError):
        get_adsb_api_key("/empty")
