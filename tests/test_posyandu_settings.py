import pytest

from posyandu_settings import BACKEND_REST, BACKEND_SUPABASE, Settings, load_settings


def test_defaults_when_secrets_empty():
    settings = load_settings({})

    assert settings == Settings()
    assert settings.api_backend == BACKEND_REST
    assert settings.request_timeout == 10.0


def test_reads_values_from_secrets():
    settings = load_settings({
        "API_BACKEND": "Supabase",
        "SUPABASE_URL": "https://xyz.supabase.co",
        "SUPABASE_KEY": "service-key",
        "SUPABASE_POSYANDU_TABLE": "tbl_posyandu",
        "REQUEST_TIMEOUT": "2.5",
        "LOG_LEVEL": "debug",
    })

    assert settings.api_backend == BACKEND_SUPABASE
    assert settings.posyandu_table == "tbl_posyandu"
    assert settings.kelurahan_table == "kelurahan"
    assert settings.request_timeout == 2.5
    assert settings.log_level == "DEBUG"


def test_base_url_trailing_slash_removed():
    assert load_settings({"API_BASE_URL": "https://posyandu.example.id/"}).api_base_url == "https://posyandu.example.id"


@pytest.mark.parametrize("secrets", [
    {"API_BACKEND": "graphql"},
    {"REQUEST_TIMEOUT": "cepat"},
    {"REQUEST_TIMEOUT": 0},
    {"REQUEST_TIMEOUT": "inf"},
    {"REQUEST_TIMEOUT": "nan"},
    {"LOG_LEVEL": "verbose"},
    {"API_BACKEND": "supabase", "SUPABASE_URL": "https://xyz.supabase.co"},
])
def test_invalid_settings_raise_value_error(secrets):
    with pytest.raises(ValueError):
        load_settings(secrets)


def test_log_level_accepts_lowercase_known_level():
    assert load_settings({"LOG_LEVEL": "warning"}).log_level == "WARNING"
