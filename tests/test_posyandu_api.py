from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
import requests

import posyandu_api
from posyandu_api import (
    ApiError, ApiTimeout, KelurahanOption, PosyanduApi, SupabasePosyanduApi, create_api,
)
from posyandu_form import MSG_UPDATE_GAGAL, EditPosyanduController
from posyandu_settings import Settings


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, bad_json=False):
        self.status_code = status_code
        self._json_data = json_data
        self._bad_json = bad_json

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value")
        return self._json_data


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.response


def make_api(**session_kwargs):
    session = FakeSession(**session_kwargs)
    return PosyanduApi("http://dashboard.local/", timeout=4.5, session=session), session


# ==============================================================================
# BACKEND REST
# ==============================================================================

def test_get_posyandu_requests_entity_with_timeout(melati):
    api, session = make_api(response=FakeResponse(json_data=melati))

    assert api.get_posyandu("5") == melati
    assert session.calls == [("GET", "http://dashboard.local/api/posyandu/5", {"timeout": 4.5})]


def test_list_wilayah_kerja_parses_options():
    api, session = make_api(response=FakeResponse(json_data=[{"id": 3, "nama": "Sukaluyu"}, {"id": "7", "nama": "Tamansari"}]))

    assert api.list_wilayah_kerja() == [KelurahanOption(3, "Sukaluyu"), KelurahanOption(7, "Tamansari")]
    assert session.calls[0][1] == "http://dashboard.local/api/wilayah-kerja"


def test_list_wilayah_kerja_rejects_bad_rows():
    api, _ = make_api(response=FakeResponse(json_data=[{"nama": "tanpa id"}]))
    with pytest.raises(ApiError):
        api.list_wilayah_kerja()


def test_list_posyandu_requires_array():
    api, _ = make_api(response=FakeResponse(json_data={"data": []}))
    with pytest.raises(ApiError):
        api.list_posyandu()


def test_update_posyandu_sends_json_body():
    api, session = make_api(response=FakeResponse(status_code=204))
    payload = {"nama": "Posyandu Melati", "kelurahanId": 3, "longitude": 107.6, "latitude": -6.9}

    assert api.update_posyandu("5", payload) is None
    assert session.calls == [("PUT", "http://dashboard.local/api/posyandu/5", {"timeout": 4.5, "json": payload})]


@pytest.mark.parametrize("status", [400, 404, 500])
def test_non_success_status_raises_api_error(status):
    api, _ = make_api(response=FakeResponse(status_code=status, json_data={}))

    with pytest.raises(ApiError) as excinfo:
        api.get_posyandu("5")

    assert excinfo.value.status_code == status
    assert not isinstance(excinfo.value, ApiTimeout)


def test_timeout_raises_api_timeout():
    api, _ = make_api(error=requests.ReadTimeout("read timed out"))
    with pytest.raises(ApiTimeout):
        api.update_posyandu("5", {})


def test_connection_error_raises_api_error():
    api, _ = make_api(error=requests.ConnectionError("connection refused"))
    with pytest.raises(ApiError) as excinfo:
        api.get_posyandu("5")
    assert excinfo.value.status_code is None


def test_invalid_json_raises_api_error():
    api, _ = make_api(response=FakeResponse(bad_json=True))
    with pytest.raises(ApiError):
        api.get_posyandu("5")


# ==============================================================================
# BACKEND SUPABASE
# ==============================================================================

def test_supabase_get_posyandu(melati):
    client = MagicMock()
    query = client.table.return_value.select.return_value.eq.return_value
    query.execute.return_value = SimpleNamespace(data=[melati])

    api = SupabasePosyanduApi(client, posyandu_table="posyandu")

    assert api.get_posyandu("5") == melati
    client.table.assert_called_with("posyandu")
    client.table.return_value.select.return_value.eq.assert_called_with("id", "5")


def test_supabase_get_posyandu_not_found():
    client = MagicMock()
    client.table.return_value.select.return_value.eq.return_value.execute.return_value = SimpleNamespace(data=[])

    with pytest.raises(ApiError) as excinfo:
        SupabasePosyanduApi(client).get_posyandu("5")
    assert excinfo.value.status_code == 404


def test_supabase_list_wilayah_kerja():
    client = MagicMock()
    query = client.table.return_value.select.return_value.order.return_value
    query.execute.return_value = SimpleNamespace(data=[{"id": 1, "nama": "Cihapit"}])

    api = SupabasePosyanduApi(client, kelurahan_table="kelurahan")

    assert api.list_wilayah_kerja() == [KelurahanOption(1, "Cihapit")]
    client.table.assert_called_with("kelurahan")


def test_supabase_update_posyandu():
    client = MagicMock()
    payload = {"nama": "Posyandu Melati", "kelurahanId": 3}
    client.table.return_value.update.return_value.eq.return_value.execute.return_value = SimpleNamespace(data=[payload])

    SupabasePosyanduApi(client).update_posyandu("5", payload)

    client.table.return_value.update.assert_called_once_with(payload)
    client.table.return_value.update.return_value.eq.assert_called_once_with("id", "5")
    client.table.return_value.update.return_value.eq.return_value.execute.assert_called_once()



def test_supabase_update_with_no_changed_row_raises_not_found():
    client = MagicMock()
    client.table.return_value.update.return_value.eq.return_value.execute.return_value = SimpleNamespace(data=[])

    with pytest.raises(ApiError) as excinfo:
        SupabasePosyanduApi(client).update_posyandu("5", {"nama": "Posyandu Melati"})
    assert excinfo.value.status_code == 404


def test_submit_reports_failure_when_supabase_updates_nothing(melati, notifier, navigator):
    client = MagicMock()
    table = client.table.return_value
    table.select.return_value.eq.return_value.execute.return_value = SimpleNamespace(data=[melati])
    table.select.return_value.order.return_value.execute.return_value = SimpleNamespace(data=[{"id": 3, "nama": "Sukaluyu"}])
    table.update.return_value.eq.return_value.execute.return_value = SimpleNamespace(data=[])
    controller = EditPosyanduController(SupabasePosyanduApi(client), notifier, navigator)

    controller.load("5")
    assert controller.submit() is False

    assert notifier.of("error") == [MSG_UPDATE_GAGAL]
    assert notifier.of("success") == []
    assert navigator.to_list_calls == 0

def test_supabase_errors_are_wrapped():
    client = MagicMock()
    client.table.return_value.update.return_value.eq.return_value.execute.side_effect = RuntimeError("permission denied")

    with pytest.raises(ApiError) as excinfo:
        SupabasePosyanduApi(client).update_posyandu("5", {})
    assert "permission denied" in str(excinfo.value)


def test_supabase_timeout_is_api_timeout():
    client = MagicMock()
    client.table.return_value.select.return_value.order.return_value.execute.side_effect = httpx.ReadTimeout("timed out")

    with pytest.raises(ApiTimeout):
        SupabasePosyanduApi(client).list_posyandu()


# ==============================================================================
# PEMILIHAN BACKEND
# ==============================================================================

def test_create_api_rest_backend():
    api = create_api(Settings(api_base_url="http://api.local", request_timeout=3.0))

    assert isinstance(api, PosyanduApi)
    assert api.base_url == "http://api.local"
    assert api.timeout == 3.0


def test_create_api_supabase_backend(monkeypatch):
    created = {}

    def fake_create_client(url, key, options=None):
        created.update(url=url, key=key, options=options)
        return MagicMock()

    monkeypatch.setattr(posyandu_api, "create_client", fake_create_client)
    settings = Settings(
        api_backend="supabase", supabase_url="https://xyz.supabase.co", supabase_key="anon",
        posyandu_table="tbl_posyandu", request_timeout=7.0,
    )

    api = create_api(settings)

    assert isinstance(api, SupabasePosyanduApi)
    assert api.posyandu_table == "tbl_posyandu"
    assert created["url"] == "https://xyz.supabase.co"
    assert created["options"].postgrest_client_timeout == 7.0
