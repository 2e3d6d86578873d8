# posyandu_shell.py

import logging
from dataclasses import dataclass
from typing import List, MutableMapping, Optional, Tuple

import streamlit as st

from posyandu_api import create_api
from posyandu_settings import Settings, load_settings, read_streamlit_secrets

logger = logging.getLogger(__name__)

HOME_PAGE = "posyandu_admin_app.py"
LIST_PAGE = "pages/2_Data_Posyandu.py"
EDIT_PAGE = "pages/5_Edit_Posyandu.py"

FLASH_KEY = "flash_messages"
EDIT_ID_KEY = "edit_posyandu_id"
CONTROLLER_KEY = "edit_posyandu_controller"


@dataclass(frozen=True)
class Tab:
    name: str
    page: str


TABS: List[Tab] = [
    Tab("Wilayah Kerja Puskesmas", "pages/1_Wilayah_Kerja.py"),
    Tab("Manajemen Posyandu", LIST_PAGE),
    Tab("GIS Sebaran Posyandu", "pages/3_GIS_Sebaran_Posyandu.py"),
    Tab("Grafik Statistik Posyandu", "pages/4_Statistik_Posyandu.py"),
]

# (label, ikon, halaman) pada menu profil; autentikasi belum ada, Keluar kembali ke beranda
PROFILE_MENU: List[Tuple[str, str, str]] = [
    ("Profil", "👤", HOME_PAGE),
    ("Keluar", "🚪", HOME_PAGE),
]

NOTIFICATIONS: List[str] = [
    "💉 Jadwal imunisasi besok pukul 08:00",
    "🔔 Kegiatan Posyandu minggu depan",
]


# ==============================================================================
# KONEKSI & SETUP HALAMAN
# ==============================================================================

def init_connection():
    """Membuat client API sekali per sesi dan menyimpannya di session_state."""
    if "api_client" not in st.session_state:
        try:
            settings = load_settings(read_streamlit_secrets())
            st.session_state.api_client = create_api(settings)
        except Exception as e:
            logger.exception("Gagal menyiapkan client API")
            st.error(f"Gagal menyiapkan koneksi API: {e}")
            st.info("Pastikan API_BASE_URL (atau SUPABASE_URL dan SUPABASE_KEY) sudah diatur di Streamlit Secrets.")
            return None
    return st.session_state.api_client


def setup_page(page_title: str, page_icon: str):
    """Konfigurasi halaman, logging, navbar atas, dan notifikasi tertunda."""
    st.set_page_config(page_title=page_title, page_icon=page_icon, layout="wide")
    try:
        log_level = load_settings(read_streamlit_secrets()).log_level
    except ValueError:
        # Konfigurasi salah dilaporkan oleh init_connection
        log_level = Settings.log_level
    logging.basicConfig(level=log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    render_top_navbar()
    render_flash()


# ==============================================================================
# NAVBAR & TAB
# ==============================================================================

def render_top_navbar(notifications: List[str] = NOTIFICATIONS, user_name: str = "Administrator"):
    col_judul, col_notif, col_profil = st.columns([6, 1, 2])
    with col_judul:
        st.subheader("Dashboard")

    # st.popover menutup sendiri saat pengguna klik di luar menu
    with col_notif:
        with st.popover(f"🔔 {len(notifications)}"):
            st.markdown("**Notifikasi Terbaru**")
            for item in notifications:
                st.write(item)
            st.caption("Lihat semua notifikasi")

    with col_profil:
        with st.popover(f"👤 {user_name}"):
            for label, icon, page in PROFILE_MENU:
                st.page_link(page, label=label, icon=icon)


def active_tab(current_page: str) -> Optional[Tab]:
    return next((tab for tab in TABS if tab.page == current_page), None)


def render_tabs(current_page: str):
    aktif = active_tab(current_page)
    for col, tab in zip(st.columns(len(TABS)), TABS):
        with col:
            if tab == aktif:
                st.markdown(f":violet-background[**{tab.name}**]")
            else:
                st.page_link(tab.page, label=tab.name)
    st.divider()


# ==============================================================================
# NOTIFIKASI & NAVIGASI
# ==============================================================================

class StreamlitNotifier:
    """
    Menyimpan notifikasi di session_state agar tetap tampil setelah
    st.switch_page / st.rerun. Ditampilkan oleh render_flash().
    """

    def __init__(self, state: Optional[MutableMapping] = None):
        self.state = st.session_state if state is None else state

    def _push(self, level: str, message: str):
        self.state.setdefault(FLASH_KEY, []).append((level, message))

    def success(self, message: str):
        self._push("success", message)

    def error(self, message: str):
        self._push("error", message)

    def warning(self, message: str):
        self._push("warning", message)


def pop_flash(state: Optional[MutableMapping] = None) -> list:
    state = st.session_state if state is None else state
    return state.pop(FLASH_KEY, [])


def render_flash():
    tampil = {"success": st.success, "error": st.error, "warning": st.warning}
    for level, message in pop_flash():
        tampil[level](message)


class StreamlitNavigator:
    def __init__(self, list_page: str = LIST_PAGE):
        self.list_page = list_page

    def to_list(self):
        st.switch_page(self.list_page)


def open_edit_page(posyandu_id):
    st.session_state[EDIT_ID_KEY] = posyandu_id
    # Form selalu dimuat ulang dari server saat dibuka dari daftar
    st.session_state.pop(CONTROLLER_KEY, None)
    st.switch_page(EDIT_PAGE)
