# posyandu_settings.py

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import streamlit as st

logger = logging.getLogger(__name__)

BACKEND_REST = "rest"
BACKEND_SUPABASE = "supabase"


@dataclass(frozen=True)
class Settings:
    """Konfigurasi aplikasi yang dibaca dari Streamlit Secrets."""
    api_backend: str = BACKEND_REST
    api_base_url: str = "http://localhost:3000"
    request_timeout: float = 10.0
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    posyandu_table: str = "posyandu"
    kelurahan_table: str = "kelurahan"
    log_level: str = "INFO"


def load_settings(secrets: Mapping[str, Any]) -> Settings:
    """
    Membangun objek Settings dari mapping secrets.

    Args:
        secrets (Mapping): Isi st.secrets (atau dict biasa saat testing).

    Returns:
        Settings: Konfigurasi yang sudah divalidasi.

    Raises:
        ValueError: Jika nilai konfigurasi tidak valid.
    """
    backend = str(secrets.get("API_BACKEND", BACKEND_REST)).strip().lower()
    if backend not in (BACKEND_REST, BACKEND_SUPABASE):
        raise ValueError(f"API_BACKEND tidak dikenal: {backend!r} (pilih 'rest' atau 'supabase')")

    try:
        timeout = float(secrets.get("REQUEST_TIMEOUT", 10))
    except (TypeError, ValueError):
        raise ValueError(f"REQUEST_TIMEOUT harus berupa angka, bukan {secrets.get('REQUEST_TIMEOUT')!r}")
    if not math.isfinite(timeout) or timeout <= 0:
        raise ValueError(f"REQUEST_TIMEOUT harus angka positif yang terhingga, bukan {timeout!r}")

    settings = Settings(
        api_backend=backend,
        api_base_url=str(secrets.get("API_BASE_URL", Settings.api_base_url)).rstrip("/"),
        request_timeout=timeout,
        supabase_url=secrets.get("SUPABASE_URL"),
        supabase_key=secrets.get("SUPABASE_KEY"),
        posyandu_table=secrets.get("SUPABASE_POSYANDU_TABLE", Settings.posyandu_table),
        kelurahan_table=secrets.get("SUPABASE_KELURAHAN_TABLE", Settings.kelurahan_table),
        log_level=str(secrets.get("LOG_LEVEL", Settings.log_level)).upper(),
    )

    # getLevelName mengembalikan int hanya untuk nama level yang dikenal
    if not isinstance(logging.getLevelName(settings.log_level), int):
        raise ValueError(f"LOG_LEVEL tidak dikenal: {settings.log_level!r}")

    if settings.api_backend == BACKEND_SUPABASE and not (settings.supabase_url and settings.supabase_key):
        raise ValueError("SUPABASE_URL dan SUPABASE_KEY wajib diisi untuk backend supabase")
    return settings


def read_streamlit_secrets() -> Mapping[str, Any]:
    """Mengambil st.secrets; mengembalikan dict kosong jika secrets.toml belum ada."""
    try:
        return dict(st.secrets)
    except Exception as e:
        # st.secrets melempar error jika secrets.toml belum ada
        logger.warning("Secrets tidak dapat dibaca (%s), memakai konfigurasi bawaan", e)
        return {}
