"""Buku simpanan anggota: upload setoran, monitoring tagihan, detail saldo."""
import logging
from datetime import datetime

from kopssi import database as db
from kopssi.config import get_config
from kopssi.perhitungan import (
    KoperasiError,
    cocok_pencarian,
    hitung_saldo_simpanan,
    kelompokkan_tagihan_simpanan,
    parse_angka,
)

logger = logging.getLogger(__name__)

STATUS_AKTIF = ["active", "approved"]


def anggota_aktif():
    return db.fetch_rows(
        "personal_data",
        "id, full_name, nik, no_npp, company, work_unit",
        filters=[("in_", "status", STATUS_AKTIF)],
        order="full_name",
    )


def anggota_aktif_untuk_template():
    """Baris template upload simpanan untuk semua anggota aktif."""
    wajib = get_config().SIMPANAN_WAJIB_DEFAULT
    return [
        {"nik": a.get("nik"), "full_name": a.get("full_name"), "pokok": 0, "wajib": wajib, "sukarela": 0}
        for a in anggota_aktif()
    ]


def cocokkan_upload_simpanan(daftar_baris):
    """Cocokkan baris Excel dengan anggota aktif berdasarkan NIK.

    Setiap baris diberi status VALID atau INVALID.
    """
    anggota_by_nik = {str(a.get("nik") or "").strip(): a for a in anggota_aktif() if a.get("nik")}
    hasil = []
    for baris in daftar_baris:
        nik = str(baris.get("nik") or "").strip()
        anggota = anggota_by_nik.get(nik)
        hasil.append({
            "nik": nik,
            "nama": anggota["full_name"] if anggota else baris.get("nama"),
            "personal_data_id": anggota["id"] if anggota else None,
            "pokok": parse_angka(baris.get("pokok")),
            "wajib": parse_angka(baris.get("wajib")),
            "sukarela": parse_angka(baris.get("sukarela")),
            "status": "VALID" if anggota else "INVALID",
            "keterangan": "" if anggota else "NIK tidak ditemukan / anggota tidak aktif",
        })
    return hasil


def _parse_periode(periode):
    try:
        return datetime.strptime(periode, "%Y-%m")
    except (TypeError, ValueError) as e:
        raise KoperasiError("Periode harus berformat YYYY-MM.") from e


def proses_upload_simpanan(items, periode):
    """Tulis setoran untuk item VALID; satu insert per jenis simpanan bernilai > 0.

    Tidak ada transaksi: jika gagal di tengah jalan, baris sebelumnya tetap tersimpan.
    """
    tgl_periode = _parse_periode(periode)
    valid = [i for i in items if i.get("status") == "VALID" and i.get("personal_data_id")]
    if not valid:
        raise KoperasiError("Tidak ada data valid untuk diproses.")

    sekarang = datetime.now().isoformat()
    jumlah = 0
    for item in valid:
        for jenis, key in (("POKOK", "pokok"), ("WAJIB", "wajib"), ("SUKARELA", "sukarela")):
            nominal = parse_angka(item.get(key))
            if nominal <= 0:
                continue
            db.append_data_to_db("simpanan", {
                "personal_data_id": item["personal_data_id"],
                "type": jenis,
                "amount": nominal,
                "status": "PAID",
                "transaction_type": "SETOR",
                "bulan_ke": tgl_periode.month,
                "jatuh_tempo": f"{periode}-01",
                "created_at": sekarang,
            })
            jumlah += 1
    logger.info("Upload simpanan periode %s: %s transaksi tersimpan", periode, jumlah)
    return jumlah


def monitor_simpanan(bulan_awal, bulan_akhir, cari=""):
    """Tagihan simpanan dengan jatuh tempo di antara dua bulan (YYYY-MM)."""
    awal = _parse_periode(bulan_awal)
    akhir = _parse_periode(bulan_akhir)
    if akhir < awal:
        raise KoperasiError("Bulan akhir tidak boleh sebelum bulan awal.")
    batas_akhir = datetime(akhir.year + (akhir.month // 12), akhir.month % 12 + 1, 1)

    rows = db.fetch_rows(
        "simpanan",
        filters=[
            ("gte", "jatuh_tempo", awal.strftime("%Y-%m-%d")),
            ("lt", "jatuh_tempo", batas_akhir.strftime("%Y-%m-%d")),
        ],
        order="jatuh_tempo",
        desc=True,
    )
    tagihan = kelompokkan_tagihan_simpanan(rows)

    ids = list({t["personal_data_id"] for t in tagihan})
    anggota_by_id = {}
    if ids:
        for a in db.fetch_rows("personal_data", "id, full_name, nik, no_npp, company", filters=[("in_", "id", ids)]):
            anggota_by_id[a["id"]] = a

    hasil = []
    for t in tagihan:
        anggota = anggota_by_id.get(t["personal_data_id"], {})
        t.update({
            "nama": anggota.get("full_name", "-"),
            "nik": anggota.get("nik", "-"),
            "no_npp": anggota.get("no_npp", "-"),
        })
        if cocok_pencarian(t, cari, ["nama", "nik", "no_npp"]):
            hasil.append(t)
    return hasil


def detail_simpanan(personal_data_id):
    anggota = db.fetch_one("personal_data", [("eq", "id", personal_data_id)])
    if not anggota:
        raise KoperasiError("Data anggota tidak ditemukan.")
    riwayat = db.fetch_rows(
        "simpanan",
        filters=[("eq", "personal_data_id", personal_data_id)],
        order="created_at",
        desc=True,
    )
    return {"anggota": anggota, "riwayat": riwayat, "saldo": hitung_saldo_simpanan(riwayat)}
