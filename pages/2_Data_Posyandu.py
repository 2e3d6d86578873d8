# pages/2_Data_Posyandu.py

import streamlit as st

from data_utils import pilihan_edit, posyandu_dataframe, tabel_posyandu
from posyandu_api import ApiError
from posyandu_shell import LIST_PAGE, init_connection, open_edit_page, render_tabs, setup_page

setup_page("Manajemen Posyandu", "🏥")
api = init_connection()


def page_data_posyandu():
    render_tabs(LIST_PAGE)
    st.header("🏥 Data Posyandu")
    if not api: return

    try:
        records = api.list_posyandu()
    except ApiError as e:
        st.error(f"Gagal mengambil data posyandu: {e}")
        return

    if not records:
        st.info("Belum ada data posyandu yang terdaftar.")
        return

    # Nama kelurahan hanya pelengkap tabel, daftar tetap tampil jika gagal
    try:
        options = api.list_wilayah_kerja()
    except ApiError as e:
        st.warning(f"Nama kelurahan tidak dapat dimuat: {e}")
        options = []

    df_posyandu = posyandu_dataframe(records, options)
    st.dataframe(tabel_posyandu(df_posyandu), use_container_width=True, hide_index=True)

    st.divider()
    df_pilihan = pilihan_edit(df_posyandu)
    posyandu_to_edit = st.selectbox(
        "Pilih posyandu untuk diedit:",
        options=df_pilihan["display_name"], index=None, placeholder="Pilih posyandu...",
    )

    if st.button("✏️ Edit Data Posyandu", disabled=posyandu_to_edit is None):
        selected = df_pilihan[df_pilihan["display_name"] == posyandu_to_edit].iloc[0]
        open_edit_page(selected["id_teks"])


# --- JALANKAN HALAMAN ---
page_data_posyandu()
