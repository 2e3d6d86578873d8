# posyandu_api.py

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
import requests
from supabase import Client, create_client
from supabase.client import ClientOptions

from posyandu_settings import BACKEND_SUPABASE, Settings

logger = logging.getLogger(__name__)


# ==============================================================================
# ERROR & TIPE DATA
# ==============================================================================

class ApiError(Exception):
    """Kegagalan jaringan, status non-sukses, atau respons yang tidak bisa dibaca."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ApiTimeout(ApiError):
    """Permintaan melebihi batas waktu (REQUEST_TIMEOUT)."""


@dataclass(frozen=True)
class KelurahanOption:
    """Satu pilihan kelurahan untuk selector (wire: {id, nama})."""
    id: int
    label: str

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "KelurahanOption":
        try:
            return cls(id=int(data["id"]), label=str(data.get("nama") or ""))
        except (KeyError, TypeError, ValueError) as e:
            raise ApiError(f"Format data kelurahan tidak valid: {data!r}") from e


def _parse_options(rows: Any) -> List[KelurahanOption]:
    if not isinstance(rows, list):
        raise ApiError("Daftar kelurahan harus berupa array")
    return [KelurahanOption.from_json(row) for row in rows]


# ==============================================================================
# BACKEND REST (requests)
# ==============================================================================

class PosyanduApi:
    """Client untuk REST API dashboard (/api/posyandu, /api/wilayah-kerja)."""

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            res = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            raise ApiTimeout(f"{method} {path} melebihi batas waktu {self.timeout:g} detik") from e
        except requests.RequestException as e:
            raise ApiError(f"{method} {path} gagal: {e}") from e

        if not res.ok:
            raise ApiError(f"{method} {path} gagal dengan status {res.status_code}", status_code=res.status_code)
        return res

    def _get_json(self, path: str) -> Any:
        res = self._request("GET", path)
        try:
            return res.json()
        except ValueError as e:
            raise ApiError(f"GET {path}: respons bukan JSON yang valid", status_code=res.status_code) from e

    def get_posyandu(self, posyandu_id) -> Dict[str, Any]:
        data = self._get_json(f"/api/posyandu/{posyandu_id}")
        if not isinstance(data, dict):
            raise ApiError(f"Data posyandu {posyandu_id} harus berupa objek")
        return data

    def list_posyandu(self) -> List[Dict[str, Any]]:
        data = self._get_json("/api/posyandu")
        if not isinstance(data, list):
            raise ApiError("Daftar posyandu harus berupa array")
        return data

    def list_wilayah_kerja(self) -> List[KelurahanOption]:
        return _parse_options(self._get_json("/api/wilayah-kerja"))

    def update_posyandu(self, posyandu_id, payload: Dict[str, Any]) -> None:
        # Body respons tidak dipakai, cukup status sukses
        self._request("PUT", f"/api/posyandu/{posyandu_id}", json=payload)


# ==============================================================================
# BACKEND SUPABASE
# ==============================================================================

class SupabasePosyanduApi:
    """Antarmuka yang sama dengan PosyanduApi, langsung ke tabel Supabase."""

    def __init__(self, client: Client, posyandu_table: str = "posyandu", kelurahan_table: str = "kelurahan"):
        self.client = client
        self.posyandu_table = posyandu_table
        self.kelurahan_table = kelurahan_table

    def _execute(self, query, action: str):
        try:
            return query.execute()
        except httpx.TimeoutException as e:
            raise ApiTimeout(f"{action} melebihi batas waktu") from e
        except Exception as e:
            raise ApiError(f"{action} gagal: {e}") from e

    def get_posyandu(self, posyandu_id) -> Dict[str, Any]:
        query = self.client.table(self.posyandu_table).select("*").eq("id", posyandu_id)
        response = self._execute(query, f"Ambil posyandu {posyandu_id}")
        if not response.data:
            raise ApiError(f"Posyandu {posyandu_id} tidak ditemukan", status_code=404)
        return response.data[0]

    def list_posyandu(self) -> List[Dict[str, Any]]:
        query = self.client.table(self.posyandu_table).select("*").order("id")
        return self._execute(query, "Ambil daftar posyandu").data or []

    def list_wilayah_kerja(self) -> List[KelurahanOption]:
        query = self.client.table(self.kelurahan_table).select("id, nama").order("id")
        return _parse_options(self._execute(query, "Ambil daftar kelurahan").data or [])

    def update_posyandu(self, posyandu_id, payload: Dict[str, Any]) -> None:
        query = self.client.table(self.posyandu_table).update(payload).eq("id", posyandu_id)
        response = self._execute(query, f"Update posyandu {posyandu_id}")
        # Tidak ada baris yang berubah: data sudah dihapus atau ditolak RLS
        if not response.data:
            raise ApiError(f"Posyandu {posyandu_id} tidak ditemukan atau tidak boleh diubah", status_code=404)


def create_api(settings: Settings):
    """Membuat client API sesuai API_BACKEND di konfigurasi."""
    if settings.api_backend == BACKEND_SUPABASE:
        logger.info("Memakai backend Supabase: %s", settings.supabase_url)
        client = create_client(
            settings.supabase_url,
            settings.supabase_key,
            options=ClientOptions(postgrest_client_timeout=settings.request_timeout),
        )
        return SupabasePosyanduApi(client, settings.posyandu_table, settings.kelurahan_table)

    logger.info("Memakai backend REST: %s", settings.api_base_url)
    return PosyanduApi(settings.api_base_url, timeout=settings.request_timeout)
