# pages/4_Statistik_Posyandu.py

import plotly.express as px
import streamlit as st

from data_utils import hitung_akreditasi, posyandu_dataframe
from posyandu_api import ApiError
from posyandu_shell import init_connection, render_tabs, setup_page

PAGE = "pages/4_Statistik_Posyandu.py"

setup_page("Grafik Statistik Posyandu", "📊")
api = init_connection()


def page_statistik_posyandu():
    render_tabs(PAGE)
    st.header("📊 Grafik Statistik Posyandu")
    if not api: return

    try:
        records = api.list_posyandu()
    except ApiError as e:
        st.error(f"Gagal mengambil data posyandu: {e}")
        return

    if not records:
        st.info("Belum ada data posyandu.")
        return

    df_akreditasi = hitung_akreditasi(posyandu_dataframe(records))

    col1, col2 = st.columns(2)
    col1.metric("Total Posyandu", len(records))
    col2.metric("Belum Terakreditasi", int(df_akreditasi["Jumlah"].iloc[-1]))

    fig = px.bar(
        df_akreditasi, x="Akreditasi", y="Jumlah", text="Jumlah",
        color="Akreditasi", title="Jumlah Posyandu per Status Akreditasi",
    )
    fig.update_layout(showlegend=False, yaxis_title="Jumlah Posyandu", xaxis_title=None)
    st.plotly_chart(fig, use_container_width=True)


# --- JALANKAN HALAMAN ---
page_statistik_posyandu()
