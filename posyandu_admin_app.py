# posyandu_admin_app.py

import streamlit as st

from posyandu_shell import TABS, init_connection, setup_page

# ==============================================================================
# HALAMAN UTAMA
# ==============================================================================

def main_page():
    """Menampilkan halaman beranda dashboard manajemen posyandu."""
    st.title("Dashboard Manajemen Posyandu")
    st.markdown("Silakan pilih halaman yang ingin Anda akses dari menu di bawah atau navigasi di sebelah kiri.")

    for tab in TABS:
        st.page_link(tab.page, label=tab.name, icon="📁")

    if init_connection() is not None:
        st.sidebar.success("Koneksi API siap.")

# ==============================================================================
# ALUR UTAMA APLIKASI
# ==============================================================================

setup_page("Manajemen Posyandu", "🏥")
main_page()
