"""Pengajuan, penilaian, pencairan pinjaman, dan angsurannya."""
import logging
import time
from datetime import datetime

from kopssi import database as db
from kopssi.perhitungan import (
    KoperasiError,
    buat_jadwal_angsuran,
    cocok_pencarian,
    hitung_cicilan_bulanan,
    hitung_potongan_pencairan,
    hitung_saldo_simpanan,
    hitung_sisa_pinjaman,
    hitung_total_bunga,
    generate_no_pinjaman,
    ke_tanggal,
    parse_angka,
)

logger = logging.getLogger(__name__)

STATUS_BERJALAN = ["DISETUJUI", "DICAIRKAN"]
STATUS_BAYAR_UPLOAD = ("PAID", "LUNAS")
METODE_POTONG = "POTONG_PENCAIRAN"


def _sekarang():
    return datetime.now().isoformat()


def _lampirkan_anggota(rows):
    """Tambahkan dict `personal_data` ke setiap pinjaman."""
    ids = list({r["personal_data_id"] for r in rows if r.get("personal_data_id")})
    anggota_by_id = {}
    if ids:
        for a in db.fetch_rows("personal_data", filters=[("in_", "id", ids)]):
            anggota_by_id[a["id"]] = a
    for r in rows:
        r["personal_data"] = anggota_by_id.get(r.get("personal_data_id"), {})
    return rows


def _angsuran_per_pinjaman(pinjaman_ids, status=None):
    if not pinjaman_ids:
        return {}
    filters = [("in_", "pinjaman_id", list(pinjaman_ids))]
    if status:
        filters.append(("eq", "status", status))
    hasil = {}
    for a in db.fetch_rows("angsuran", filters=filters, order="bulan_ke"):
        hasil.setdefault(a["pinjaman_id"], []).append(a)
    return hasil


def ambil_pinjaman(pinjaman_id):
    pinjaman = db.fetch_one("pinjaman", [("eq", "id", pinjaman_id)])
    if not pinjaman:
        raise KoperasiError("Data pinjaman tidak ditemukan.")
    return _lampirkan_anggota([pinjaman])[0]


def daftar_pinjaman(status=None, cari="", tanggal_awal=None, tanggal_akhir=None):
    filters = []
    if isinstance(status, (list, tuple)):
        filters.append(("in_", "status", list(status)))
    elif status and status != "ALL":
        filters.append(("eq", "status", status))
    if tanggal_awal:
        filters.append(("gte", "created_at", tanggal_awal))
    if tanggal_akhir:
        filters.append(("lte", "created_at", f"{tanggal_akhir}T23:59:59"))
    rows = _lampirkan_anggota(db.fetch_rows("pinjaman", filters=filters, order="created_at", desc=True))
    return [
        r for r in rows
        if cocok_pencarian(
            {**r["personal_data"], "no_pinjaman": r.get("no_pinjaman")},
            cari,
            ["full_name", "nik", "no_npp", "no_pinjaman"],
        )
    ]


# ---------------- Pengajuan oleh Anggota ----------------
def ajukan_pinjaman(user_id, jumlah, tenor, kategori, keperluan):
    anggota = db.fetch_one("personal_data", [("eq", "user_id", user_id)])
    if not anggota:
        raise KoperasiError("Data personal tidak ditemukan")
    jumlah = parse_angka(jumlah)
    try:
        tenor = int(tenor)
    except (TypeError, ValueError) as e:
        raise KoperasiError("Tenor tidak valid.") from e
    if jumlah <= 0:
        raise KoperasiError("Jumlah pinjaman harus lebih dari 0.")
    if tenor <= 0:
        raise KoperasiError("Tenor harus lebih dari 0 bulan.")
    kategori = (kategori or "UANG").strip().upper()

    pinjaman = db.append_data_to_db("pinjaman", {
        "personal_data_id": anggota["id"],
        "no_pinjaman": generate_no_pinjaman(),
        "jumlah_pinjaman": jumlah,
        "jumlah_pengajuan": jumlah,
        "tenor_bulan": tenor,
        "status": "PENGAJUAN",
        "kategori": kategori,
        "jenis_pinjaman": "BIASA" if kategori == "UANG" else "BARANG",
        "keperluan": (keperluan or "").strip(),
        "tipe_bunga": None,
        "nilai_bunga": 0,
        "created_at": _sekarang(),
    })
    logger.info("Pengajuan pinjaman %s oleh %s", pinjaman.get("no_pinjaman"), anggota.get("no_npp"))
    return pinjaman


def riwayat_pengajuan(user_id):
    anggota = db.fetch_one("personal_data", [("eq", "user_id", user_id)])
    if not anggota:
        return []
    return db.fetch_rows(
        "pinjaman",
        filters=[("eq", "personal_data_id", anggota["id"])],
        order="created_at",
        desc=True,
    )


def pinjaman_milik_user(user_id, pinjaman_id):
    """Pinjaman milik anggota yang sedang login; selain itu ditolak."""
    pinjaman = ambil_pinjaman(pinjaman_id)
    if pinjaman["personal_data"].get("user_id") != user_id:
        raise KoperasiError("Data pinjaman tidak ditemukan.")
    return pinjaman


# ---------------- Penilaian (Assessment) ----------------
def _syarat_bunga(pakai_bunga, tipe_bunga, nilai_bunga):
    if not pakai_bunga:
        return "NONE", 0
    tipe = tipe_bunga if tipe_bunga in ("PERSENAN", "NOMINAL") else "PERSENAN"
    return tipe, parse_angka(nilai_bunga)


def _pastikan_bisa_dinilai(pinjaman):
    if pinjaman.get("status") != "PENGAJUAN":
        raise KoperasiError(f"Pinjaman berstatus {pinjaman.get('status')} tidak dapat dinilai lagi.")


def simpan_draft(pinjaman_id, jumlah, pakai_bunga, tipe_bunga, nilai_bunga):
    pinjaman = ambil_pinjaman(pinjaman_id)
    _pastikan_bisa_dinilai(pinjaman)
    tipe, nilai = _syarat_bunga(pakai_bunga, tipe_bunga, nilai_bunga)
    db.update_db(
        "pinjaman",
        {"jumlah_pinjaman": parse_angka(jumlah), "tipe_bunga": tipe, "nilai_bunga": nilai},
        [("eq", "id", pinjaman_id)],
    )


def setujui_pinjaman(pinjaman_id, jumlah, pakai_bunga, tipe_bunga, nilai_bunga):
    pinjaman = ambil_pinjaman(pinjaman_id)
    _pastikan_bisa_dinilai(pinjaman)
    jumlah = parse_angka(jumlah)
    if jumlah <= 0:
        raise KoperasiError("Jumlah pinjaman yang disetujui harus lebih dari 0.")
    tipe, nilai = _syarat_bunga(pakai_bunga, tipe_bunga, nilai_bunga)
    if pakai_bunga and nilai <= 0:
        raise KoperasiError("Nilai bunga harus lebih dari 0.")
    db.update_db(
        "pinjaman",
        {"jumlah_pinjaman": jumlah, "tipe_bunga": tipe, "nilai_bunga": nilai, "status": "DISETUJUI"},
        [("eq", "id", pinjaman_id)],
    )
    logger.info("Pinjaman %s disetujui", pinjaman.get("no_pinjaman"))


def tolak_pinjaman(pinjaman_id):
    pinjaman = ambil_pinjaman(pinjaman_id)
    _pastikan_bisa_dinilai(pinjaman)
    db.update_db("pinjaman", {"status": "DITOLAK"}, [("eq", "id", pinjaman_id)])
    logger.info("Pinjaman %s ditolak", pinjaman.get("no_pinjaman"))


def simulasi_pinjaman(pokok, tenor, tipe_bunga, nilai_bunga):
    bunga = round(hitung_total_bunga(pokok, tenor, tipe_bunga, nilai_bunga))
    return {
        "total_bunga": bunga,
        "total_bayar": float(pokok or 0) + bunga,
        "cicilan": hitung_cicilan_bulanan(pokok, tenor, tipe_bunga, nilai_bunga),
    }


def pinjaman_berjalan(personal_data_id, kecuali=None):
    rows = db.fetch_rows(
        "pinjaman",
        filters=[("eq", "personal_data_id", personal_data_id), ("in_", "status", STATUS_BERJALAN)],
        order="created_at",
        desc=True,
    )
    return [r for r in rows if r["id"] != kecuali]


def data_analisa(pinjaman):
    """Data pendukung PDF analisa: saldo simpanan & outstanding pinjaman lain."""
    simpanan_rows = db.fetch_rows("simpanan", filters=[("eq", "personal_data_id", pinjaman["personal_data_id"])])
    aktif = [
        p for p in db.fetch_rows(
            "pinjaman",
            filters=[("eq", "personal_data_id", pinjaman["personal_data_id"]), ("eq", "status", "DICAIRKAN")],
        )
        if p["id"] != pinjaman["id"]
    ]
    angsuran = _angsuran_per_pinjaman([p["id"] for p in aktif])
    outstanding = []
    for p in aktif:
        tenor = int(p.get("tenor_bulan") or 1)
        terbayar = len([a for a in angsuran.get(p["id"], []) if a.get("status") == "PAID"])
        sisa = hitung_sisa_pinjaman(p, max(tenor - terbayar, 0))
        outstanding.append({
            "no_pinjaman": p.get("no_pinjaman"),
            "jenis_pinjaman": (p.get("jenis_pinjaman") or "BIASA").upper(),
            "terbayar": f"{terbayar}/{tenor}",
            "outstanding": sisa["pokok"],
            "bunga_outstanding": sisa["bunga"],
            "angsuran_bulanan": hitung_cicilan_bulanan(
                p.get("jumlah_pinjaman"), tenor, p.get("tipe_bunga"), p.get("nilai_bunga")
            ),
        })
    return {"saldo": hitung_saldo_simpanan(simpanan_rows), "outstanding": outstanding}


# ---------------- Pencairan ----------------
def calon_potongan(pinjaman):
    """Angsuran UNPAID dari pinjaman lain (DICAIRKAN) milik anggota yang sama."""
    lain = [
        p for p in db.fetch_rows(
            "pinjaman",
            filters=[("eq", "personal_data_id", pinjaman["personal_data_id"]), ("eq", "status", "DICAIRKAN")],
        )
        if p["id"] != pinjaman["id"]
    ]
    angsuran = _angsuran_per_pinjaman([p["id"] for p in lain])
    hasil = []
    for p in lain:
        semua = angsuran.get(p["id"], [])
        tenor = int(p.get("tenor_bulan") or 1)
        terbayar = len([a for a in semua if a.get("status") == "PAID"])
        if terbayar >= tenor:
            continue
        belum = [a for a in semua if a.get("status") == "UNPAID"]
        hasil.append({
            "pinjaman": p,
            "terbayar": terbayar,
            "angsuran": belum,
            "sisa": hitung_sisa_pinjaman(p, len(belum)),
        })
    return hasil


def cairkan_pinjaman(pinjaman_id, angsuran_ids=None, mulai=None):
    """Cairkan pinjaman DISETUJUI, potong angsuran pinjaman lain yang dipilih.

    Langkah-langkahnya ditulis satu per satu tanpa transaksi.
    """
    pinjaman = ambil_pinjaman(pinjaman_id)
    if pinjaman.get("status") != "DISETUJUI":
        raise KoperasiError("Hanya pinjaman berstatus DISETUJUI yang dapat dicairkan.")

    # 1. Validasi angsuran yang akan dipotong
    angsuran_ids = [str(i) for i in (angsuran_ids or [])]
    boleh = {}
    for calon in calon_potongan(pinjaman):
        for a in calon["angsuran"]:
            boleh[str(a["id"])] = a
    dipilih = []
    for a_id in angsuran_ids:
        if a_id not in boleh:
            raise KoperasiError("Angsuran yang dipilih tidak valid untuk dipotong.")
        dipilih.append(boleh[a_id])

    hitung = hitung_potongan_pencairan(pinjaman, dipilih)
    if hitung["bersih"] < 0:
        raise KoperasiError("Total potongan melebihi jumlah pinjaman.")

    sekarang = _sekarang()

    # 2. Update status pinjaman
    db.update_db(
        "pinjaman",
        {"status": "DICAIRKAN", "disbursed_at": sekarang, "outstanding": hitung["potongan"]},
        [("eq", "id", pinjaman_id)],
    )

    # 3. Lunasi angsuran yang dipotong
    for a in dipilih:
        db.update_db(
            "angsuran",
            {
                "status": "PAID",
                "tanggal_bayar": sekarang,
                "metode_bayar": METODE_POTONG,
                "keterangan": f"Dipotong dari pencairan pinjaman {pinjaman['no_pinjaman']}",
            },
            [("eq", "id", a["id"])],
        )

    # 4. Jadwal angsuran pinjaman baru
    jadwal = buat_jadwal_angsuran(
        pinjaman_id,
        pinjaman.get("jumlah_pinjaman"),
        pinjaman.get("tenor_bulan"),
        pinjaman.get("tipe_bunga"),
        pinjaman.get("nilai_bunga"),
        mulai=mulai,
    )
    for baris in jadwal:
        baris["created_at"] = sekarang
    db.insert_batch("angsuran", jadwal)

    for induk_id in {a["pinjaman_id"] for a in dipilih}:
        tandai_lunas_jika_selesai(induk_id)

    logger.info(
        "Pinjaman %s dicairkan. Potongan: %s, bersih: %s",
        pinjaman["no_pinjaman"], hitung["potongan"], hitung["bersih"],
    )
    return hitung


def tandai_lunas_jika_selesai(pinjaman_id):
    """Pinjaman DICAIRKAN tanpa angsuran UNPAID tersisa menjadi LUNAS."""
    pinjaman = db.fetch_one("pinjaman", [("eq", "id", pinjaman_id)])
    if not pinjaman or pinjaman.get("status") != "DICAIRKAN":
        return False
    semua = db.fetch_rows("angsuran", filters=[("eq", "pinjaman_id", pinjaman_id)])
    if semua and all(a.get("status") == "PAID" for a in semua):
        db.update_db("pinjaman", {"status": "LUNAS"}, [("eq", "id", pinjaman_id)])
        logger.info("Pinjaman %s lunas", pinjaman.get("no_pinjaman"))
        return True
    return False


def upload_spk(pinjaman_id, nama_file, konten, content_type, oleh="admin"):
    pinjaman = ambil_pinjaman(pinjaman_id)
    if not konten:
        raise KoperasiError("File SPK wajib dipilih.")
    ekstensi = nama_file.rsplit(".", 1)[-1].lower() if "." in (nama_file or "") else "pdf"
    path = f"spk/spk_signed_{oleh}_{pinjaman['no_pinjaman']}_{int(time.time() * 1000)}.{ekstensi}"
    url = db.upload_file(path, konten, content_type or "application/pdf")
    db.update_db("pinjaman", {"link_spk_signed": url}, [("eq", "id", pinjaman_id)])
    return url


# ---------------- Angsuran ----------------
def _lampirkan_pinjaman(angsuran_rows):
    pinjaman_ids = list({a["pinjaman_id"] for a in angsuran_rows})
    pinjaman_by_id = {}
    if pinjaman_ids:
        rows = _lampirkan_anggota(db.fetch_rows("pinjaman", filters=[("in_", "id", pinjaman_ids)]))
        pinjaman_by_id = {p["id"]: p for p in rows}
    for a in angsuran_rows:
        a["pinjaman"] = pinjaman_by_id.get(a["pinjaman_id"], {"personal_data": {}})
    return angsuran_rows


def monitor_angsuran(status="ALL", tanggal_awal=None, tanggal_akhir=None, cari="", company=""):
    filters = []
    if status in ("PAID", "UNPAID"):
        filters.append(("eq", "status", status))
    if tanggal_awal:
        filters.append(("gte", "created_at", tanggal_awal))
    if tanggal_akhir:
        filters.append(("lte", "created_at", f"{tanggal_akhir}T23:59:59"))
    rows = _lampirkan_pinjaman(db.fetch_rows("angsuran", filters=filters, order="tanggal_bayar"))
    hasil = []
    for a in rows:
        anggota = a["pinjaman"].get("personal_data", {})
        kunci = {**anggota, "no_pinjaman": a["pinjaman"].get("no_pinjaman")}
        if company and anggota.get("company") != company:
            continue
        if cocok_pencarian(kunci, cari, ["full_name", "nik", "no_npp", "no_pinjaman"]):
            hasil.append(a)
    return hasil


def bayar_angsuran(angsuran_id, metode="MANUAL"):
    angsuran = db.fetch_one("angsuran", [("eq", "id", angsuran_id)])
    if not angsuran:
        raise KoperasiError("Data angsuran tidak ditemukan.")
    if angsuran.get("status") == "PAID":
        raise KoperasiError("Angsuran sudah dibayar.")
    db.update_db(
        "angsuran",
        {"status": "PAID", "tanggal_bayar": _sekarang(), "metode_bayar": metode},
        [("eq", "id", angsuran_id)],
    )
    tandai_lunas_jika_selesai(angsuran["pinjaman_id"])


def cocokkan_upload_angsuran(daftar_baris):
    """Cocokkan baris Excel (status PAID/LUNAS) dengan angsuran UNPAID.

    Kunci: NIK + No Pinjaman + Angsuran Ke. Angsuran Ke kosong berarti
    angsuran UNPAID paling awal dari pinjaman tersebut.
    """
    belum_bayar = _lampirkan_pinjaman(db.fetch_rows("angsuran", filters=[("eq", "status", "UNPAID")], order="bulan_ke"))
    terpakai = set()
    hasil = []
    for baris in daftar_baris:
        nik = str(baris.get("nik") or "").strip()
        no_pinjaman = str(baris.get("no_pinjaman") or "").strip()
        status_excel = str(baris.get("status") or "").strip().upper()
        angsuran_ke = baris.get("angsuran_ke")
        item = {
            "nik": nik,
            "no_pinjaman": no_pinjaman,
            "angsuran_ke": angsuran_ke,
            "status_excel": status_excel,
            "angsuran_id": None,
            "nama": "-",
            "amount": 0,
        }
        if status_excel not in STATUS_BAYAR_UPLOAD:
            item["status"] = "SKIPPED"
            hasil.append(item)
            continue

        cocok = None
        for a in belum_bayar:
            if a["id"] in terpakai:
                continue
            pinjaman = a["pinjaman"]
            if str(pinjaman.get("personal_data", {}).get("nik") or "").strip() != nik:
                continue
            if str(pinjaman.get("no_pinjaman") or "").strip() != no_pinjaman:
                continue
            if angsuran_ke not in (None, "") and int(parse_angka(angsuran_ke)) != int(a.get("bulan_ke") or 0):
                continue
            cocok = a
            break

        if cocok:
            terpakai.add(cocok["id"])
            item.update({
                "status": "MATCHED",
                "angsuran_id": cocok["id"],
                "angsuran_ke": cocok.get("bulan_ke"),
                "nama": cocok["pinjaman"].get("personal_data", {}).get("full_name", "-"),
                "amount": float(cocok.get("amount") or 0),
            })
        else:
            item["status"] = "UNMATCHED"
        hasil.append(item)
    return hasil


def proses_upload_angsuran(angsuran_ids):
    """Bayar angsuran hasil pencocokan; mengembalikan (berhasil, gagal)."""
    if not angsuran_ids:
        raise KoperasiError("Tidak ada angsuran yang cocok untuk diproses.")
    berhasil = 0
    gagal = 0
    for a_id in angsuran_ids:
        try:
            bayar_angsuran(a_id, metode="UPLOAD")
            berhasil += 1
        except Exception:
            logger.exception("Gagal memproses angsuran id=%s", a_id)
            gagal += 1
    logger.info("Upload angsuran selesai. Berhasil: %s, Gagal: %s", berhasil, gagal)
    return berhasil, gagal


# ---------------- Halaman Anggota ----------------
def ringkasan_member(user_id):
    anggota = db.fetch_one("personal_data", [("eq", "user_id", user_id)])
    if not anggota:
        raise KoperasiError("Data personal tidak ditemukan")

    simpanan = db.fetch_rows(
        "simpanan", filters=[("eq", "personal_data_id", anggota["id"])], order="created_at", desc=True
    )
    pinjaman = db.fetch_rows(
        "pinjaman", filters=[("eq", "personal_data_id", anggota["id"])], order="created_at", desc=True
    )
    angsuran = []
    per_pinjaman = _angsuran_per_pinjaman([p["id"] for p in pinjaman])
    pinjaman_by_id = {p["id"]: p for p in pinjaman}
    for p_id, rows in per_pinjaman.items():
        for a in rows:
            a["no_pinjaman"] = pinjaman_by_id[p_id].get("no_pinjaman")
            angsuran.append(a)
    angsuran.sort(key=lambda a: ke_tanggal(a.get("tanggal_bayar")) or datetime.max)

    belum_bayar = [a for a in angsuran if a.get("status") == "UNPAID"]
    return {
        "anggota": anggota,
        "simpanan": simpanan,
        "saldo": hitung_saldo_simpanan(simpanan),
        "pinjaman": pinjaman,
        "angsuran": angsuran,
        "total_pinjaman_aktif": sum(
            float(p.get("jumlah_pinjaman") or 0) for p in pinjaman if p.get("status") == "DICAIRKAN"
        ),
        "angsuran_berikutnya": belum_bayar[0] if belum_bayar else None,
    }
