"""Realisasi: pembayaran anggota keluar dan penyaluran dana pinjaman."""
import logging
from datetime import datetime

from kopssi import database as db
from kopssi.config import get_config
from kopssi.perhitungan import (
    KoperasiError,
    hitung_realisasi_keluar,
    hitung_total_bunga,
    rincian_potongan_pencairan,
)

logger = logging.getLogger(__name__)


def _filter_tanggal(kolom, awal, akhir):
    filters = []
    if awal:
        filters.append(("gte", kolom, awal))
    if akhir:
        filters.append(("lte", kolom, f"{akhir}T23:59:59"))
    return filters


def _konfirmasi(tabel, ids, data, label):
    if not ids:
        raise KoperasiError("Pilih minimal satu data untuk dikonfirmasi.")
    berhasil = 0
    gagal = 0
    for row_id in ids:
        try:
            db.update_db(tabel, data, [("eq", "id", row_id)])
            berhasil += 1
        except Exception:
            logger.exception("Gagal konfirmasi %s id=%s", label, row_id)
            gagal += 1
    logger.info("Konfirmasi %s: berhasil %s, gagal %s", label, berhasil, gagal)
    return berhasil, gagal


# ---------------- Realisasi Karyawan (anggota keluar) ----------------
def daftar_realisasi_keluar(tab="BELUM", awal=None, akhir=None):
    """Hitung realisasi setiap anggota NON_ACTIVE.

    Tab BELUM: exit_realisasi_status PENDING, disaring tanggal_keluar.
    Tab SUDAH: exit_realisasi_status SENT, disaring exit_realisasi_date.
    """
    if tab == "SUDAH":
        filters = [("eq", "status", "NON_ACTIVE"), ("eq", "exit_realisasi_status", "SENT")]
        filters += _filter_tanggal("exit_realisasi_date", awal, akhir)
    else:
        filters = [("eq", "status", "NON_ACTIVE"), ("eq", "exit_realisasi_status", "PENDING")]
        filters += _filter_tanggal("tanggal_keluar", awal, akhir)

    anggota = db.fetch_rows("personal_data", filters=filters, order="tanggal_keluar", desc=True)
    if not anggota:
        return []
    ids = [a["id"] for a in anggota]

    simpanan_per_anggota = {}
    for s in db.fetch_rows("simpanan", filters=[("in_", "personal_data_id", ids)]):
        simpanan_per_anggota.setdefault(s["personal_data_id"], []).append(s)

    pinjaman_by_id = {
        p["id"]: p for p in db.fetch_rows("pinjaman", filters=[("in_", "personal_data_id", ids)])
    }
    angsuran_per_anggota = {}
    if pinjaman_by_id:
        belum_bayar = db.fetch_rows(
            "angsuran",
            filters=[("in_", "pinjaman_id", list(pinjaman_by_id)), ("eq", "status", "UNPAID")],
        )
        for a in belum_bayar:
            pinjaman = pinjaman_by_id[a["pinjaman_id"]]
            a["pinjaman"] = pinjaman
            angsuran_per_anggota.setdefault(pinjaman["personal_data_id"], []).append(a)

    biaya_admin = get_config().BIAYA_ADMIN
    return [
        hitung_realisasi_keluar(
            a,
            simpanan_per_anggota.get(a["id"], []),
            angsuran_per_anggota.get(a["id"], []),
            biaya_admin,
        )
        for a in anggota
    ]


def konfirmasi_realisasi_keluar(ids):
    return _konfirmasi(
        "personal_data",
        ids,
        {"exit_realisasi_status": "SENT", "exit_realisasi_date": datetime.now().isoformat()},
        "realisasi karyawan",
    )


# ---------------- Realisasi Pinjaman (penyaluran dana) ----------------
def daftar_realisasi_pinjaman(awal=None, akhir=None, status="ALL"):
    """Pinjaman DICAIRKAN beserta rincian potongan dan dana bersih yang disalurkan."""
    filters = [("eq", "status", "DICAIRKAN")] + _filter_tanggal("disbursed_at", awal, akhir)
    pinjaman = db.fetch_rows("pinjaman", filters=filters, order="disbursed_at", desc=True)
    if status == "SUDAH":
        pinjaman = [p for p in pinjaman if p.get("delivery_status") == "SENT"]
    elif status == "BELUM":
        pinjaman = [p for p in pinjaman if p.get("delivery_status") != "SENT"]
    if not pinjaman:
        return []

    anggota_by_id = {
        a["id"]: a
        for a in db.fetch_rows(
            "personal_data",
            filters=[("in_", "id", list({p["personal_data_id"] for p in pinjaman}))],
        )
    }

    # Angsuran yang dilunasi lewat potong pencairan beserta pinjaman induknya
    dipotong = db.fetch_rows("angsuran", filters=[("eq", "metode_bayar", "POTONG_PENCAIRAN")])
    induk_ids = list({a["pinjaman_id"] for a in dipotong})
    induk_by_id = {}
    if induk_ids:
        induk_by_id = {p["id"]: p for p in db.fetch_rows("pinjaman", filters=[("in_", "id", induk_ids)])}
    for a in dipotong:
        a["pinjaman"] = induk_by_id.get(a["pinjaman_id"])

    biaya_admin = get_config().BIAYA_ADMIN
    hasil = []
    for p in pinjaman:
        no = p.get("no_pinjaman") or ""
        potongan = [a for a in dipotong if no and no in (a.get("keterangan") or "")]
        rincian = rincian_potongan_pencairan(p, potongan, biaya_admin)
        anggota = anggota_by_id.get(p["personal_data_id"], {})
        plafon = float(p.get("jumlah_pinjaman") or 0)
        hasil.append({
            "id": p["id"],
            "no_pinjaman": no,
            "nama": anggota.get("full_name"),
            "nik": anggota.get("nik"),
            "no_npp": anggota.get("no_npp"),
            "no_anggota": anggota.get("no_anggota"),
            "lokasi": anggota.get("lokasi"),
            "company": anggota.get("company"),
            "unit_kerja": anggota.get("work_unit"),
            "created_at": p.get("created_at"),
            "jumlah_pengajuan": float(p.get("jumlah_pengajuan") or plafon),
            "plafon": plafon,
            "tenor": p.get("tenor_bulan"),
            "bunga": round(hitung_total_bunga(plafon, p.get("tenor_bulan"), p.get("tipe_bunga"), p.get("nilai_bunga"))),
            "outs_pokok": rincian["outs_pokok"],
            "outs_bunga": rincian["outs_bunga"],
            "biaya": rincian["biaya"],
            "diterima": rincian["diterima"],
            "keperluan": p.get("keperluan"),
            "rek_gaji": anggota.get("rek_gaji"),
            "bank_gaji": anggota.get("bank_gaji"),
            "phone": anggota.get("phone"),
            "no_rek": f"{anggota.get('rek_gaji') or '-'} ({anggota.get('bank_gaji') or '-'})",
            "disbursed_at": p.get("disbursed_at"),
            "delivery_status": p.get("delivery_status") or "PENDING",
            "delivery_date": p.get("delivery_date"),
        })
    return hasil


def konfirmasi_realisasi_pinjaman(ids):
    return _konfirmasi(
        "pinjaman",
        ids,
        {"delivery_status": "SENT", "delivery_date": datetime.now().isoformat()},
        "realisasi pinjaman",
    )
