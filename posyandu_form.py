# posyandu_form.py

import logging
import math
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from posyandu_api import ApiError, ApiTimeout, KelurahanOption

logger = logging.getLogger(__name__)

# --- PESAN NOTIFIKASI UNTUK PENGGUNA ---
MSG_LOAD_GAGAL = "Gagal memuat data posyandu"
MSG_KELURAHAN_GAGAL = "Gagal memuat daftar kelurahan"
MSG_WAJIB_DIISI = "Semua field wajib diisi!"
MSG_KOORDINAT_TIDAK_VALID = "Longitude dan Latitude harus berupa angka desimal."
MSG_KELURAHAN_TIDAK_VALID = "Kelurahan tidak valid."
MSG_AKREDITASI_TIDAK_VALID = "Akreditasi tidak valid."
MSG_UPDATE_BERHASIL = "Data berhasil diupdate!"
MSG_UPDATE_GAGAL = "Terjadi kesalahan saat mengupdate data."
MSG_UPDATE_TIMEOUT = "Server tidak merespons, silakan coba lagi."


class Akreditasi(str, Enum):
    """Status akreditasi posyandu (himpunan tertutup)."""
    PARIPURNA = "PARIPURNA"
    PRATAMA = "PRATAMA"
    MADYA = "MADYA"
    PURNAMA = "PURNAMA"
    MANDIRI = "MANDIRI"
    BELUM_AKREDITASI = "BELUM_AKREDITASI"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


# ==============================================================================
# ERROR
# ==============================================================================

class PosyanduError(Exception):
    """Induk semua error pada alur edit posyandu."""


class LoadError(PosyanduError):
    def __init__(self, posyandu_id, cause: ApiError):
        super().__init__(MSG_LOAD_GAGAL)
        self.posyandu_id = posyandu_id
        self.cause = cause


class ValidationKind(Enum):
    REQUIRED_FIELD_MISSING = "required_field_missing"
    NOT_A_NUMBER = "not_a_number"
    INVALID_REFERENCE = "invalid_reference"
    INVALID_CHOICE = "invalid_choice"


VALIDATION_MESSAGES = {
    ValidationKind.REQUIRED_FIELD_MISSING: MSG_WAJIB_DIISI,
    ValidationKind.NOT_A_NUMBER: MSG_KOORDINAT_TIDAK_VALID,
    ValidationKind.INVALID_REFERENCE: MSG_KELURAHAN_TIDAK_VALID,
    ValidationKind.INVALID_CHOICE: MSG_AKREDITASI_TIDAK_VALID,
}


class ValidationError(PosyanduError):
    def __init__(self, kind: ValidationKind, field: Optional[str] = None):
        super().__init__(VALIDATION_MESSAGES[kind])
        self.kind = kind
        self.field = field


class SubmitError(PosyanduError):
    def __init__(self, posyandu_id, cause: ApiError):
        self.timed_out = isinstance(cause, ApiTimeout)
        super().__init__(MSG_UPDATE_TIMEOUT if self.timed_out else MSG_UPDATE_GAGAL)
        self.posyandu_id = posyandu_id
        self.cause = cause


# ==============================================================================
# MODEL DATA FORM
# ==============================================================================

# Nama atribut Python -> nama kunci JSON di API
WIRE_FIELDS: Dict[str, str] = {
    "nama": "nama",
    "alamat": "alamat",
    "wilayah": "wilayah",
    "kelurahan_id": "kelurahanId",
    "penanggung_jawab": "penanggungJawab",
    "no_hp": "noHp",
    "akreditasi": "akreditasi",
    "longitude": "longitude",
    "latitude": "latitude",
}


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class PosyanduForm:
    """State form edit. Semua field disimpan sebagai teks, persis seperti yang diketik."""
    nama: str = ""
    alamat: str = ""
    wilayah: str = ""
    kelurahan_id: str = ""
    penanggung_jawab: str = ""
    no_hp: str = ""
    akreditasi: str = ""
    longitude: str = ""
    latitude: str = ""

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "PosyanduForm":
        """Memetakan record API ke form; field yang tidak ada menjadi string kosong."""
        return cls(**{name: _as_text(data.get(key)) for name, key in WIRE_FIELDS.items()})

    def empty_fields(self) -> List[str]:
        return [f.name for f in fields(self) if not getattr(self, f.name).strip()]


@dataclass(frozen=True)
class PosyanduPayload:
    """Body PUT /api/posyandu/{id}: field numerik sudah bertipe angka."""
    nama: str
    alamat: str
    wilayah: str
    kelurahan_id: int
    penanggung_jawab: str
    no_hp: str
    akreditasi: str
    longitude: float
    latitude: float

    def to_json(self) -> Dict[str, Any]:
        return {WIRE_FIELDS[f.name]: getattr(self, f.name) for f in fields(self)}


def _parse_decimal(text: str) -> Optional[float]:
    # float() dan int() menerima pemisah digit "_" (1_0 == 10)
    if "_" in text:
        return None
    try:
        value = float(text.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def validate_form(form: PosyanduForm, options: Optional[List[KelurahanOption]] = None) -> PosyanduPayload:
    """
    Memvalidasi form dan mengubah field numerik ke tipe angka.

    Args:
        form (PosyanduForm): State form saat ini.
        options (list, optional): Daftar kelurahan yang berhasil dimuat. Jika None,
            keanggotaan kelurahan_id tidak diperiksa.

    Returns:
        PosyanduPayload: Data siap dikirim ke API.

    Raises:
        ValidationError: Urutan pemeriksaan: field kosong, koordinat, kelurahan,
            lalu akreditasi.
    """
    missing = form.empty_fields()
    if missing:
        raise ValidationError(ValidationKind.REQUIRED_FIELD_MISSING, field=missing[0])

    longitude = _parse_decimal(form.longitude)
    latitude = _parse_decimal(form.latitude)
    if longitude is None:
        raise ValidationError(ValidationKind.NOT_A_NUMBER, field="longitude")
    if latitude is None:
        raise ValidationError(ValidationKind.NOT_A_NUMBER, field="latitude")

    try:
        if "_" in form.kelurahan_id:
            raise ValueError(form.kelurahan_id)
        kelurahan_id = int(form.kelurahan_id.strip())
    except ValueError:
        raise ValidationError(ValidationKind.INVALID_REFERENCE, field="kelurahan_id")
    if options is not None and kelurahan_id not in {opt.id for opt in options}:
        raise ValidationError(ValidationKind.INVALID_REFERENCE, field="kelurahan_id")

    if form.akreditasi not in {a.value for a in Akreditasi}:
        raise ValidationError(ValidationKind.INVALID_CHOICE, field="akreditasi")

    return PosyanduPayload(
        nama=form.nama,
        alamat=form.alamat,
        wilayah=form.wilayah,
        kelurahan_id=kelurahan_id,
        penanggung_jawab=form.penanggung_jawab,
        no_hp=form.no_hp,
        akreditasi=form.akreditasi,
        longitude=longitude,
        latitude=latitude,
    )


# ==============================================================================
# CONTROLLER FORM EDIT
# ==============================================================================

class FormState(Enum):
    EMPTY = "empty"
    LOADING = "loading"
    POPULATED = "populated"
    EDITING = "editing"
    SUBMITTING = "submitting"
    DONE = "done"


class EditPosyanduController:
    """
    Mengatur siklus muat -> edit -> validasi -> simpan untuk satu posyandu.

    Notifikasi dan navigasi diserahkan ke objek `notifier` (success/error/warning)
    dan `navigator` (to_list), sehingga controller tidak bergantung pada Streamlit.
    Error yang terakhir terjadi disimpan di `self.error`.
    """

    def __init__(self, api, notifier, navigator):
        self.api = api
        self.notifier = notifier
        self.navigator = navigator

        self.posyandu_id = None
        self.form = PosyanduForm()
        self.options: List[KelurahanOption] = []
        self.options_loaded = False
        self.state = FormState.EMPTY
        self.busy = False
        self.error: Optional[PosyanduError] = None

    def load(self, posyandu_id) -> bool:
        """Alur saat halaman dibuka: data posyandu dulu, lalu daftar kelurahan."""
        if not self.load_entity(posyandu_id):
            return False
        self.load_reference_options()
        return True

    def load_entity(self, posyandu_id) -> bool:
        self.posyandu_id = posyandu_id
        self.state = FormState.LOADING
        try:
            data = self.api.get_posyandu(posyandu_id)
        except ApiError as e:
            logger.exception("Gagal memuat posyandu %s", posyandu_id)
            self.error = LoadError(posyandu_id, e)
            self.state = FormState.EMPTY
            self.notifier.error(str(self.error))
            self.navigator.to_list()
            return False

        self.form = PosyanduForm.from_api(data)
        self.error = None
        self.state = FormState.POPULATED
        return True

    def load_reference_options(self) -> bool:
        try:
            options = self.api.list_wilayah_kerja()
        except ApiError as e:
            # Halaman tetap terbuka dengan selector kosong
            logger.warning("Gagal memuat daftar kelurahan: %s", e)
            self.options = []
            self.options_loaded = False
            self.notifier.warning(MSG_KELURAHAN_GAGAL)
            return False

        self.options = options
        self.options_loaded = True
        return True

    def update_field(self, name: str, value: str) -> None:
        if name not in WIRE_FIELDS:
            raise KeyError(f"Field tidak dikenal: {name}")
        if getattr(self.form, name) == value:
            return
        self.form = replace(self.form, **{name: value})
        if self.state == FormState.POPULATED:
            self.state = FormState.EDITING

    def update_fields(self, values: Mapping[str, str]) -> None:
        for name, value in values.items():
            self.update_field(name, value)

    def selected_option(self) -> Optional[KelurahanOption]:
        return next((opt for opt in self.options if str(opt.id) == self.form.kelurahan_id.strip()), None)

    def submit(self) -> bool:
        if self.busy:
            logger.warning("Submit posyandu %s diabaikan: permintaan sebelumnya belum selesai", self.posyandu_id)
            return False

        try:
            payload = validate_form(self.form, self.options if self.options_loaded else None)
        except ValidationError as e:
            logger.info("Validasi gagal (%s) pada field %s", e.kind.value, e.field)
            self.error = e
            self.notifier.error(str(e))
            return False

        state_sebelum = self.state
        self.state = FormState.SUBMITTING
        self.busy = True
        try:
            self.api.update_posyandu(self.posyandu_id, payload.to_json())
        except ApiError as e:
            logger.exception("Gagal mengupdate posyandu %s", self.posyandu_id)
            self.error = SubmitError(self.posyandu_id, e)
            self.state = state_sebelum
            self.notifier.error(str(self.error))
            return False
        finally:
            self.busy = False

        logger.info("Posyandu %s berhasil diupdate", self.posyandu_id)
        self.error = None
        self.state = FormState.DONE
        self.notifier.success(MSG_UPDATE_BERHASIL)
        self.navigator.to_list()
        return True

    def cancel(self) -> None:
        self.navigator.to_list()
