"""Statistik dashboard admin, daftar transaksi, dan laporan."""
import logging
from datetime import datetime, timedelta

from kopssi import database as db
from kopssi.perhitungan import (
    cocok_pencarian,
    gabung_transaksi,
    hitung_portofolio,
    hitung_saldo_simpanan,
    ke_tanggal,
    ringkasan_keuangan,
)

logger = logging.getLogger(__name__)


def statistik_dashboard():
    return {
        "total_anggota": db.hitung_baris("personal_data"),
        "pinjaman_aktif": db.hitung_baris("pinjaman", [("eq", "status", "DICAIRKAN")]),
        "pengajuan_pinjaman": db.hitung_baris("pinjaman", [("eq", "status", "PENGAJUAN")]),
        "angsuran_bermasalah": db.hitung_baris("angsuran", [("neq", "status", "LUNAS")]),
        "menunggu_persetujuan": db.hitung_baris("personal_data", [("eq", "status", "DONE VERIFIKASI")]),
    }


def anggota_baru(hari=30, sekarang=None):
    sejak = (sekarang or datetime.now()) - timedelta(days=hari)
    return db.fetch_rows(
        "personal_data",
        "id, full_name, nik, work_unit, created_at",
        filters=[("gte", "created_at", sejak.isoformat())],
        order="created_at",
        desc=True,
    )


def _dalam_periode(nilai, awal):
    tgl = ke_tanggal(nilai)
    return tgl is not None and tgl >= awal


def laporan_bulanan(sekarang=None):
    """Pendapatan & pengeluaran bulan berjalan plus ringkasan portofolio."""
    sekarang = sekarang or datetime.now()
    awal_bulan = sekarang.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    simpanan_bulan_ini = db.fetch_rows(
        "simpanan",
        "amount, transaction_type",
        filters=[("gte", "created_at", awal_bulan.isoformat())],
    )
    angsuran_paid = [
        a for a in db.fetch_rows("angsuran", "amount, tanggal_bayar", filters=[("eq", "status", "PAID")])
        if _dalam_periode(a.get("tanggal_bayar"), awal_bulan)
    ]
    pinjaman_aktif = db.fetch_rows(
        "pinjaman", "id, personal_data_id, jumlah_pinjaman, disbursed_at", filters=[("eq", "status", "DICAIRKAN")]
    )
    pinjaman_cair = [p for p in pinjaman_aktif if _dalam_periode(p.get("disbursed_at"), awal_bulan)]

    stats = ringkasan_keuangan(simpanan_bulan_ini, angsuran_paid, pinjaman_cair)
    baru = anggota_baru(30, sekarang)
    semua_simpanan = db.fetch_rows("simpanan", "type, amount, transaction_type")
    stats.update({
        "periode": awal_bulan,
        "anggota_baru": baru,
        "jumlah_anggota_baru": len(baru),
        "total_pinjaman_aktif": sum(float(p.get("jumlah_pinjaman") or 0) for p in pinjaman_aktif),
        "total_saldo_simpanan": hitung_saldo_simpanan(semua_simpanan)["total"],
    })
    return stats


def data_portofolio():
    anggota = db.fetch_rows("personal_data", "id, full_name, nik", order="full_name")
    simpanan = db.fetch_rows("simpanan", "personal_data_id, amount, transaction_type")
    pinjaman_aktif = db.fetch_rows(
        "pinjaman", "id, personal_data_id, jumlah_pinjaman", filters=[("eq", "status", "DICAIRKAN")]
    )
    return hitung_portofolio(anggota, simpanan, pinjaman_aktif)


def daftar_transaksi(bulan="", status="ALL", company="", cari=""):
    """Simpanan & angsuran dalam satu daftar, terbaru di atas.

    `bulan` berformat YYYY-MM; kosong berarti semua bulan.
    """
    simpanan = db.fetch_rows("simpanan", order="created_at", desc=True)
    angsuran = db.fetch_rows("angsuran", order="created_at", desc=True)
    pinjaman_by_id = {p["id"]: p for p in db.fetch_rows("pinjaman", "id, no_pinjaman, personal_data_id")}
    anggota_by_id = {a["id"]: a for a in db.fetch_rows("personal_data", "id, full_name, nik, no_npp, company")}

    transaksi = gabung_transaksi(simpanan, angsuran, anggota_by_id, pinjaman_by_id)
    hasil = []
    for t in transaksi:
        if bulan and not str(t.get("date") or "").startswith(bulan):
            continue
        if status and status != "ALL" and t.get("status") != status:
            continue
        if company and t.get("company") != company:
            continue
        if cocok_pencarian(t, cari, ["member", "nik", "reference"]):
            hasil.append(t)
    return hasil
