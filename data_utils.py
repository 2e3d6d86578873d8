# data_utils.py

from typing import Any, Dict, Iterable, List

import pandas as pd

from posyandu_api import KelurahanOption
from posyandu_form import Akreditasi

KOLOM_POSYANDU = ["id", "nama", "alamat", "wilayah", "kelurahanId", "penanggungJawab", "noHp", "akreditasi", "longitude", "latitude"]


def posyandu_dataframe(records: List[Dict[str, Any]], options: Iterable[KelurahanOption] = ()) -> pd.DataFrame:
    """
    Mengubah daftar record posyandu dari API menjadi DataFrame.

    Args:
        records (list): Record posyandu (format JSON API).
        options (iterable): Daftar kelurahan, dipakai untuk mengisi kolom 'kelurahan'.

    Returns:
        pd.DataFrame: Semua kolom di KOLOM_POSYANDU selalu ada, ditambah kolom 'kelurahan'.
    """
    df = pd.DataFrame(records).reindex(columns=KOLOM_POSYANDU)
    nama_kelurahan = {opt.id: opt.label for opt in options}

    def cari_nama(kelurahan_id):
        try:
            return nama_kelurahan.get(int(kelurahan_id), "-")
        except (TypeError, ValueError):
            return "-"

    df["kelurahan"] = df["kelurahanId"].map(cari_nama)
    return df


def tabel_posyandu(df: pd.DataFrame) -> pd.DataFrame:
    """Tabel ringkas untuk ditampilkan, dengan nama kolom yang ramah pengguna."""
    df_tampil = df[["id", "nama", "alamat", "wilayah", "kelurahan", "penanggungJawab", "noHp", "akreditasi"]]
    return df_tampil.rename(columns={
        "id": "ID",
        "nama": "Nama Posyandu",
        "alamat": "Alamat",
        "wilayah": "Wilayah",
        "kelurahan": "Kelurahan",
        "penanggungJawab": "Penanggung Jawab",
        "noHp": "No. HP",
        "akreditasi": "Akreditasi",
    })


def id_posyandu(value) -> str:
    """ID sebagai teks untuk URL; float utuh hasil kolom pandas (5.0) dikembalikan ke '5'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def pilihan_edit(df: pd.DataFrame) -> pd.DataFrame:
    """Baris yang bisa diedit (id tidak kosong) dengan kolom 'id_teks' dan 'display_name' untuk selector."""
    df_pilihan = df[df["id"].notna()]
    id_teks = df_pilihan["id"].map(id_posyandu).astype(str)
    nama = df_pilihan["nama"].fillna("(tanpa nama)").astype(str)
    return pd.DataFrame({
        "id_teks": id_teks,
        "display_name": nama + " (ID " + id_teks + ")",
    }).reset_index(drop=True)


def kelurahan_dataframe(options: Iterable[KelurahanOption]) -> pd.DataFrame:
    return pd.DataFrame([{"ID": opt.id, "Nama Kelurahan": opt.label} for opt in options], columns=["ID", "Nama Kelurahan"])


def koordinat_posyandu(df: pd.DataFrame) -> pd.DataFrame:
    """Kolom lat/lon untuk st.map; baris dengan koordinat kosong atau di luar jangkauan dibuang."""
    df_map = pd.DataFrame({
        "nama": df["nama"],
        "lat": pd.to_numeric(df["latitude"], errors="coerce"),
        "lon": pd.to_numeric(df["longitude"], errors="coerce"),
    }).dropna(subset=["lat", "lon"])
    valid = df_map["lat"].between(-90, 90) & df_map["lon"].between(-180, 180)
    return df_map[valid].reset_index(drop=True)


def hitung_akreditasi(df: pd.DataFrame) -> pd.DataFrame:
    """Jumlah posyandu per status akreditasi, urut sesuai enum (status tanpa posyandu bernilai 0)."""
    urutan = [a.value for a in Akreditasi]
    jumlah = df["akreditasi"].value_counts().reindex(urutan, fill_value=0)
    return pd.DataFrame({
        "Akreditasi": [Akreditasi(v).label for v in urutan],
        "Jumlah": jumlah.astype(int).tolist(),
    })
