# pages/5_Edit_Posyandu.py

import streamlit as st

from posyandu_form import Akreditasi, EditPosyanduController, FormState
from posyandu_shell import (
    CONTROLLER_KEY, EDIT_ID_KEY, LIST_PAGE, StreamlitNavigator, StreamlitNotifier,
    init_connection, render_flash, setup_page,
)

setup_page("Edit Posyandu", "✏️")
api = init_connection()


def get_controller(posyandu_id) -> EditPosyanduController:
    """Controller disimpan per sesi; dimuat ulang jika ID berubah atau alur sebelumnya selesai."""
    controller = st.session_state.get(CONTROLLER_KEY)
    if (
        controller is None
        or controller.posyandu_id != posyandu_id
        or controller.state in (FormState.EMPTY, FormState.DONE)
    ):
        controller = EditPosyanduController(api, StreamlitNotifier(), StreamlitNavigator())
        st.session_state[CONTROLLER_KEY] = controller
        with st.spinner("Memuat data posyandu..."):
            controller.load(posyandu_id)
        # Peringatan daftar kelurahan (jika ada) langsung ditampilkan
        render_flash()
    return controller


def pilihan_kelurahan(controller: EditPosyanduController):
    """Mengembalikan (mapping id -> nama kelurahan, id yang sedang terpilih)."""
    pilihan = {opt.id: opt.label for opt in controller.options}
    try:
        current_id = int(controller.form.kelurahan_id.strip())
    except ValueError:
        return pilihan, None
    # ID yang tersimpan tetap bisa dipilih walau daftar kelurahan gagal dimuat
    pilihan.setdefault(current_id, f"Kelurahan #{current_id}")
    return pilihan, current_id


def page_edit_posyandu():
    st.header("✏️ Edit Data Posyandu")
    if not api: return

    posyandu_id = st.query_params.get("id") or st.session_state.get(EDIT_ID_KEY)
    if not posyandu_id:
        st.error("ID posyandu tidak ditemukan. Silakan pilih posyandu dari daftar.")
        st.page_link(LIST_PAGE, label="Kembali ke Data Posyandu", icon="⬅️")
        return

    controller = get_controller(str(posyandu_id))
    form = controller.form

    kelurahan, current_id = pilihan_kelurahan(controller)
    kelurahan_ids = [None] + list(kelurahan)

    akreditasi_values = [""] + [a.value for a in Akreditasi]

    with st.form("edit_posyandu_form"):
        nama = st.text_input("Nama Posyandu", value=form.nama, placeholder="Contoh: Posyandu Melati")

        col1, col2 = st.columns(2)
        with col1: alamat = st.text_input("Alamat", value=form.alamat, placeholder="Contoh: Jl. Mawar No. 10")
        with col2: wilayah = st.text_input("Wilayah", value=form.wilayah, placeholder="Contoh: RW 01")

        col1, col2 = st.columns(2)
        with col1: penanggung_jawab = st.text_input("Penanggung Jawab", value=form.penanggung_jawab, placeholder="Contoh: Aisyah")
        with col2: no_hp = st.text_input("No. HP", value=form.no_hp, placeholder="Contoh: 081234567890")

        col1, col2 = st.columns(2)
        with col1: longitude = st.text_input("Longitude", value=form.longitude, placeholder="Contoh: 107.619123")
        with col2: latitude = st.text_input("Latitude", value=form.latitude, placeholder="Contoh: -6.903449")

        col1, col2 = st.columns(2)
        with col1:
            kelurahan_id = st.selectbox(
                "Kelurahan", kelurahan_ids,
                index=kelurahan_ids.index(current_id),
                format_func=lambda v: "-- Pilih Kelurahan --" if v is None else kelurahan[v],
            )
        with col2:
            akreditasi = st.selectbox(
                "Akreditasi", akreditasi_values,
                index=akreditasi_values.index(form.akreditasi) if form.akreditasi in akreditasi_values else 0,
                format_func=lambda v: "-- Pilih Akreditasi --" if not v else Akreditasi(v).label,
            )

        col_batal, col_update, _ = st.columns([1, 1, 4])
        with col_batal: batal = st.form_submit_button("Batal")
        with col_update: update = st.form_submit_button("Update", type="primary")

    if batal:
        controller.cancel()

    if update:
        controller.update_fields({
            "nama": nama, "alamat": alamat, "wilayah": wilayah,
            "kelurahan_id": "" if kelurahan_id is None else str(kelurahan_id),
            "penanggung_jawab": penanggung_jawab, "no_hp": no_hp,
            "akreditasi": akreditasi, "longitude": longitude, "latitude": latitude,
        })
        with st.spinner("Menyimpan perubahan..."):
            controller.submit()
        # Hanya sampai di sini jika submit gagal; form tetap terisi untuk dicoba lagi
        render_flash()


# --- JALANKAN HALAMAN ---
page_edit_posyandu()
