# pages/1_Wilayah_Kerja.py

import streamlit as st

from data_utils import kelurahan_dataframe
from posyandu_api import ApiError
from posyandu_shell import init_connection, render_tabs, setup_page

PAGE = "pages/1_Wilayah_Kerja.py"

setup_page("Wilayah Kerja Puskesmas", "🗺️")
api = init_connection()


def page_wilayah_kerja():
    render_tabs(PAGE)
    st.header("🗺️ Wilayah Kerja Puskesmas")
    if not api: return

    try:
        options = api.list_wilayah_kerja()
    except ApiError as e:
        st.error(f"Gagal mengambil daftar kelurahan: {e}")
        return

    if not options:
        st.info("Belum ada data kelurahan.")
        return

    st.metric("Jumlah Kelurahan", len(options))
    st.dataframe(kelurahan_dataframe(options), use_container_width=True, hide_index=True)


# --- JALANKAN HALAMAN ---
page_wilayah_kerja()
