# pages/3_GIS_Sebaran_Posyandu.py

import streamlit as st

from data_utils import koordinat_posyandu, posyandu_dataframe
from posyandu_api import ApiError
from posyandu_shell import init_connection, render_tabs, setup_page

PAGE = "pages/3_GIS_Sebaran_Posyandu.py"

setup_page("GIS Sebaran Posyandu", "📍")
api = init_connection()


def page_gis_posyandu():
    render_tabs(PAGE)
    st.header("📍 GIS Sebaran Posyandu")
    if not api: return

    try:
        records = api.list_posyandu()
    except ApiError as e:
        st.error(f"Gagal mengambil data posyandu: {e}")
        return

    df_map = koordinat_posyandu(posyandu_dataframe(records))
    tanpa_koordinat = len(records) - len(df_map)
    if tanpa_koordinat > 0:
        st.warning(f"{tanpa_koordinat} posyandu tidak memiliki koordinat yang valid dan tidak ditampilkan di peta.")

    if df_map.empty:
        st.info("Belum ada posyandu dengan koordinat untuk ditampilkan.")
        return

    st.map(df_map, latitude="lat", longitude="lon")
    with st.expander("Daftar Koordinat"):
        st.dataframe(df_map, use_container_width=True, hide_index=True)


# --- JALANKAN HALAMAN ---
page_gis_posyandu()
