"""Perhitungan bisnis koperasi (tanpa akses database).

Semua fungsi di sini menerima data yang sudah diambil dari Supabase
(list of dict) dan mengembalikan angka atau struktur siap tampil.
"""
import math
import random
import re
from datetime import date, datetime

import pandas as pd
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

JENIS_SIMPANAN = ["POKOK", "WAJIB", "SUKARELA"]
STATUS_LOGIN_DIIZINKAN = ("active", "approved")

NAMA_BULAN = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]


class KoperasiError(Exception):
    """Pelanggaran aturan bisnis; pesannya ditampilkan ke pengguna."""


# --- Fungsi Format ---
def format_rupiah(value):
    """Format angka menjadi string Rupiah 'Rp 1.000.000'."""
    try:
        angka = int(round(float(value)))
    except (ValueError, TypeError):
        return "Rp 0"
    tanda = "-" if angka < 0 else ""
    return f"{tanda}Rp {abs(angka):,}".replace(",", ".")


def format_angka(value):
    """1250000 -> '1.250.000' (tanpa prefix Rp)."""
    try:
        return f"{int(round(float(value))):,}".replace(",", ".")
    except (ValueError, TypeError):
        return "0"


def parse_angka(value):
    """Membaca nominal dari form/Excel: 'Rp 1.250.000', '75000', 75000.0, NaN."""
    if value is None:
        return 0
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return 0
        return float(value)
    teks = str(value).replace("Rp", "").replace(" ", "").strip()
    if not teks or teks.lower() == "nan":
        return 0
    # Format Indonesia: titik sebagai pemisah ribuan, koma sebagai desimal
    if "," in teks:
        teks = teks.replace(".", "").replace(",", ".")
    elif teks.count(".") > 1 or re.fullmatch(r"\d{1,3}(\.\d{3})+", teks):
        teks = teks.replace(".", "")
    try:
        return float(teks)
    except ValueError:
        return 0


def ke_tanggal(value):
    """Mengubah string ISO / date / datetime menjadi datetime naive, atau None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return date_parser.parse(str(value)).replace(tzinfo=None)
    except (ValueError, OverflowError):
        return None


def format_tanggal(value, kosong="-"):
    """'2024-03-05' -> '5 Maret 2024'."""
    tgl = ke_tanggal(value)
    if tgl is None:
        return kosong
    return f"{tgl.day} {NAMA_BULAN[tgl.month - 1]} {tgl.year}"


def format_bulan_tahun(value, kosong="-"):
    tgl = ke_tanggal(value)
    if tgl is None:
        return kosong
    return f"{NAMA_BULAN[tgl.month - 1]} {tgl.year}"


def terbilang(angka):
    """Menyebut bilangan bulat dalam Bahasa Indonesia (1250 -> 'Seribu Dua Ratus Lima Puluh')."""
    n = int(angka or 0)
    if n == 0:
        return "Nol"
    if n < 0:
        return "Minus " + terbilang(-n)
    return " ".join(_terbilang(n).split())


def _terbilang(n):
    satuan = ["", "Satu", "Dua", "Tiga", "Empat", "Lima", "Enam", "Tujuh",
              "Delapan", "Sembilan", "Sepuluh", "Sebelas"]
    if n < 12:
        return satuan[n]
    if n < 20:
        return _terbilang(n - 10) + " Belas"
    if n < 100:
        return _terbilang(n // 10) + " Puluh " + _terbilang(n % 10)
    if n < 200:
        return "Seratus " + _terbilang(n - 100)
    if n < 1000:
        return _terbilang(n // 100) + " Ratus " + _terbilang(n % 100)
    if n < 2000:
        return "Seribu " + _terbilang(n - 1000)
    if n < 1_000_000:
        return _terbilang(n // 1000) + " Ribu " + _terbilang(n % 1000)
    if n < 1_000_000_000:
        return _terbilang(n // 1_000_000) + " Juta " + _terbilang(n % 1_000_000)
    if n < 1_000_000_000_000:
        return _terbilang(n // 1_000_000_000) + " Miliar " + _terbilang(n % 1_000_000_000)
    return str(n)


# --- Nomor Anggota & Nomor Pinjaman ---
def prefix_no_anggota(tanggal):
    """KS + bulan (2 digit) + tahun (2 digit), contoh KS0324."""
    tgl = ke_tanggal(tanggal) or datetime.now()
    return f"KS{tgl.month:02d}{tgl.strftime('%y')}"


def generate_no_anggota(tanggal, nomor_terpakai):
    """Nomor anggota berikutnya untuk bulan/tahun `tanggal`.

    `nomor_terpakai` adalah nomor anggota yang sudah ada. Hanya yang berawalan
    prefix yang sama yang dihitung; urutan diambil dari 4 digit terakhir.
    Tidak ada penguncian: dua admin yang menyimpan bersamaan bisa mendapat
    nomor yang sama.
    """
    prefix = prefix_no_anggota(tanggal)
    urutan = []
    for nomor in nomor_terpakai or []:
        nomor = str(nomor or "")
        if not nomor.startswith(prefix):
            continue
        ekor = nomor[-4:]
        if ekor.isdigit():
            urutan.append(int(ekor))
    berikutnya = max(urutan) + 1 if urutan else 1
    return f"{prefix}{berikutnya:04d}"


def generate_no_pinjaman(tanggal=None, rng=None):
    """RS + YYYYMMDD + '-' + 4 digit acak."""
    tgl = ke_tanggal(tanggal) or datetime.now()
    acak = (rng or random).randint(1000, 9999)
    return f"RS{tgl.strftime('%Y%m%d')}-{acak}"


# --- Status ---
def status_boleh_login(status):
    return str(status or "").strip().lower() in STATUS_LOGIN_DIIZINKAN


def label_status_anggota(status):
    s = str(status or "").strip()
    if not s or s.lower() == "pending":
        return "BELUM TERVERIFIKASI"
    if s.lower() == "non_active":
        return "NON AKTIF"
    return s.upper()


# --- Bunga & Angsuran ---
def hitung_total_bunga(pokok, tenor, tipe_bunga, nilai_bunga):
    pokok = float(pokok or 0)
    tenor = int(tenor or 0)
    nilai = float(nilai_bunga or 0)
    if tipe_bunga == "PERSENAN":
        return pokok * (nilai / 100) * (tenor / 12)
    if tipe_bunga == "NOMINAL":
        return nilai
    return 0.0


def hitung_cicilan_bulanan(pokok, tenor, tipe_bunga, nilai_bunga):
    """ceil((pokok + total bunga) / tenor)."""
    tenor = int(tenor or 0)
    if tenor <= 0:
        return 0
    total = float(pokok or 0) + hitung_total_bunga(pokok, tenor, tipe_bunga, nilai_bunga)
    return int(math.ceil(total / tenor))


def bunga_per_bulan(pinjaman):
    tenor = int(pinjaman.get("tenor_bulan") or 1)
    pokok = float(pinjaman.get("jumlah_pinjaman") or 0)
    tipe = pinjaman.get("tipe_bunga")
    if tipe == "PERSENAN":
        return pokok * float(pinjaman.get("nilai_bunga") or 0) / 100 / 12
    if tipe == "NOMINAL":
        return float(pinjaman.get("nilai_bunga") or 0) / tenor
    return 0.0


def hitung_pokok_angsuran(amount, pinjaman):
    """Bagian pokok dari satu angsuran = nominal - bunga bulanan."""
    return float(amount or 0) - bunga_per_bulan(pinjaman)


def buat_jadwal_angsuran(pinjaman_id, pokok, tenor, tipe_bunga, nilai_bunga, mulai=None):
    """Baris-baris angsuran UNPAID; jatuh tempo bulan ke-i dari tanggal mulai."""
    mulai = ke_tanggal(mulai) or datetime.now()
    cicilan = hitung_cicilan_bulanan(pokok, tenor, tipe_bunga, nilai_bunga)
    jadwal = []
    for i in range(1, int(tenor) + 1):
        jatuh_tempo = mulai + relativedelta(months=i)
        jadwal.append({
            "pinjaman_id": pinjaman_id,
            "bulan_ke": i,
            "amount": cicilan,
            "tanggal_bayar": jatuh_tempo.strftime("%Y-%m-%d"),
            "status": "UNPAID",
        })
    return jadwal


def porsi_per_angsuran(pinjaman):
    """(pokok/tenor, bunga/tenor) untuk satu pinjaman."""
    tenor = int(pinjaman.get("tenor_bulan") or 1) or 1
    pokok = float(pinjaman.get("jumlah_pinjaman") or 0)
    bunga = hitung_total_bunga(pokok, tenor, pinjaman.get("tipe_bunga"), pinjaman.get("nilai_bunga"))
    return pokok / tenor, bunga / tenor


def hitung_sisa_pinjaman(pinjaman, jumlah_belum_bayar):
    """Outstanding pokok & bunga sebuah pinjaman berdasarkan jumlah angsuran belum bayar."""
    porsi_pokok, porsi_bunga = porsi_per_angsuran(pinjaman)
    return {
        "pokok": round(porsi_pokok * jumlah_belum_bayar),
        "bunga": round(porsi_bunga * jumlah_belum_bayar),
    }


def hitung_outstanding_angsuran(angsuran_belum_bayar):
    """Jumlahkan porsi pokok & bunga tiap angsuran UNPAID.

    Setiap item wajib membawa dict `pinjaman` (pinjaman induknya).
    """
    total_pokok = 0.0
    total_bunga = 0.0
    for angsuran in angsuran_belum_bayar or []:
        pinjaman = angsuran.get("pinjaman")
        if not pinjaman:
            continue
        porsi_pokok, porsi_bunga = porsi_per_angsuran(pinjaman)
        total_pokok += porsi_pokok
        total_bunga += porsi_bunga
    return round(total_pokok), round(total_bunga)


# --- Simpanan ---
def hitung_saldo_simpanan(rows, hanya_paid=False):
    """Saldo bersih per jenis: SETOR menambah, TARIK mengurangi."""
    saldo = {jenis: 0.0 for jenis in JENIS_SIMPANAN}
    df = pd.DataFrame(rows or [])
    if not df.empty:
        if hanya_paid and "status" in df.columns:
            df = df[df["status"] == "PAID"]
        df = df[df["transaction_type"].isin(["SETOR", "TARIK"])].copy()
        if not df.empty:
            df["amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0)
            df["nilai"] = df["amount"].where(df["transaction_type"] == "SETOR", -df["amount"])
            for jenis, total in df.groupby("type")["nilai"].sum().items():
                saldo[jenis] = saldo.get(jenis, 0.0) + float(total)
    saldo["total"] = sum(saldo[jenis] for jenis in JENIS_SIMPANAN)
    return saldo


def kelompokkan_tagihan_simpanan(rows):
    """Kelompokkan simpanan per (anggota, bulan_ke) dengan kolom POKOK/WAJIB/SUKARELA."""
    kolom = ["personal_data_id", "bulan_ke", "jatuh_tempo", "status",
             "amount_pokok", "amount_wajib", "amount_sukarela", "total"]
    df = pd.DataFrame(rows or [])
    if df.empty:
        return []
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0)
    hasil = []
    if "bulan_ke" not in df.columns:
        df["bulan_ke"] = None
    for (pd_id, bulan_ke), grup in df.groupby(["personal_data_id", "bulan_ke"], sort=False, dropna=False):
        per_jenis = grup.groupby("type")["amount"].sum()
        item = {
            "personal_data_id": pd_id,
            "bulan_ke": None if pd.isna(bulan_ke) else int(bulan_ke),
            "jatuh_tempo": grup["jatuh_tempo"].iloc[0] if "jatuh_tempo" in grup else None,
            "status": "PAID" if (grup["status"] == "PAID").all() else "UNPAID",
            "amount_pokok": float(per_jenis.get("POKOK", 0)),
            "amount_wajib": float(per_jenis.get("WAJIB", 0)),
            "amount_sukarela": float(per_jenis.get("SUKARELA", 0)),
        }
        item["total"] = item["amount_pokok"] + item["amount_wajib"] + item["amount_sukarela"]
        hasil.append({k: item[k] for k in kolom})
    return hasil


# --- Realisasi Keluar Anggota ---
def hitung_realisasi_keluar(anggota, simpanan_rows, angsuran_belum_bayar, biaya_admin=5000):
    """Satu baris realisasi untuk anggota yang keluar.

    Diterima = total simpanan (PAID) - outstanding pokok - outstanding bunga - biaya admin.
    """
    saldo = hitung_saldo_simpanan(simpanan_rows, hanya_paid=True)
    outs_pokok, outs_bunga = hitung_outstanding_angsuran(angsuran_belum_bayar)
    jumlah = saldo["POKOK"] + saldo["WAJIB"] + saldo["SUKARELA"]
    return {
        "id": anggota.get("id"),
        "nama": anggota.get("full_name"),
        "no_ref": anggota.get("no_npp"),
        "uraian": "UNDUR DIRI",
        "unit_kerja": anggota.get("work_unit"),
        "company": anggota.get("company"),
        "masuk": 0,
        "keluar": 0,
        "simp_pokok": saldo["POKOK"],
        "simp_wajib": saldo["WAJIB"],
        "simp_sukarela": saldo["SUKARELA"],
        "jumlah": jumlah,
        "outs_pokok": outs_pokok,
        "outs_bunga": outs_bunga,
        "admin": biaya_admin,
        "diterima": jumlah - outs_pokok - outs_bunga - biaya_admin,
        "no_rek": f"{anggota.get('rek_gaji') or '-'} ({anggota.get('bank_gaji') or '-'})",
        "tgl_keluar": anggota.get("tanggal_keluar"),
        "tgl_real": anggota.get("exit_realisasi_date"),
        "status": anggota.get("exit_realisasi_status") or "PENDING",
    }


# --- Pencairan ---
def hitung_potongan_pencairan(pinjaman, angsuran_dipilih):
    """Potongan = jumlah angsuran pinjaman lain yang dilunasi saat pencairan."""
    potongan = sum(float(a.get("amount") or 0) for a in angsuran_dipilih or [])
    pokok = float(pinjaman.get("jumlah_pinjaman") or 0)
    return {"potongan": potongan, "bersih": pokok - potongan}


def rincian_potongan_pencairan(pinjaman, angsuran_dipotong, biaya_admin=0):
    """Pecah potongan pencairan menjadi pokok & bunga.

    `angsuran_dipotong` adalah angsuran (dengan dict `pinjaman` induknya) yang
    dibayar lewat POTONG_PENCAIRAN. Jika pinjaman menyimpan `outstanding`,
    kedua porsi diskalakan agar totalnya sama dengan nilai tersebut.
    Dana diterima = plafon - outstanding pokok - outstanding bunga - biaya admin.
    """
    pokok = 0.0
    bunga = 0.0
    for angsuran in angsuran_dipotong or []:
        induk = angsuran.get("pinjaman")
        if not induk:
            continue
        porsi_pokok, porsi_bunga = porsi_per_angsuran(induk)
        pokok += porsi_pokok
        bunga += porsi_bunga

    tersimpan = float(pinjaman.get("outstanding") or 0)
    terhitung = pokok + bunga
    if tersimpan > 0 and terhitung > 0:
        rasio = tersimpan / terhitung
        pokok *= rasio
        bunga *= rasio

    outs_pokok = round(pokok)
    outs_bunga = round(bunga)
    plafon = float(pinjaman.get("jumlah_pinjaman") or 0)
    return {
        "outs_pokok": outs_pokok,
        "outs_bunga": outs_bunga,
        "total_potongan": outs_pokok + outs_bunga,
        "biaya": biaya_admin,
        "diterima": plafon - outs_pokok - outs_bunga - biaya_admin,
    }


# --- Laporan ---
def ringkasan_keuangan(simpanan_rows, angsuran_paid, pinjaman_cair):
    simpanan_setor = sum(float(s.get("amount") or 0) for s in simpanan_rows if s.get("transaction_type") == "SETOR")
    simpanan_tarik = sum(float(s.get("amount") or 0) for s in simpanan_rows if s.get("transaction_type") == "TARIK")
    total_angsuran = sum(float(a.get("amount") or 0) for a in angsuran_paid)
    total_pencairan = sum(float(p.get("jumlah_pinjaman") or 0) for p in pinjaman_cair)
    pendapatan = simpanan_setor + total_angsuran
    pengeluaran = simpanan_tarik + total_pencairan
    return {
        "simpanan_setor": simpanan_setor,
        "simpanan_tarik": simpanan_tarik,
        "total_angsuran": total_angsuran,
        "total_pencairan": total_pencairan,
        "pendapatan": pendapatan,
        "pengeluaran": pengeluaran,
        "cashflow": pendapatan - pengeluaran,
    }


def hitung_portofolio(anggota_rows, simpanan_rows, pinjaman_aktif):
    """Saldo simpanan & hutang berjalan per anggota (hanya yang salah satunya > 0)."""
    df_simp = pd.DataFrame(simpanan_rows or [], columns=["personal_data_id", "amount", "transaction_type"])
    df_simp["amount"] = pd.to_numeric(df_simp["amount"], errors="coerce").fillna(0)
    df_simp["nilai"] = df_simp["amount"] * df_simp["transaction_type"].map({"SETOR": 1, "TARIK": -1}).fillna(0)
    saldo = df_simp.groupby("personal_data_id")["nilai"].sum().to_dict()

    df_pinj = pd.DataFrame(pinjaman_aktif or [], columns=["personal_data_id", "jumlah_pinjaman"])
    df_pinj["jumlah_pinjaman"] = pd.to_numeric(df_pinj["jumlah_pinjaman"], errors="coerce").fillna(0)
    hutang = df_pinj.groupby("personal_data_id")["jumlah_pinjaman"].sum().to_dict()

    hasil = []
    for anggota in anggota_rows or []:
        saldo_simpanan = float(saldo.get(anggota["id"], 0))
        hutang_berjalan = float(hutang.get(anggota["id"], 0))
        if saldo_simpanan > 0 or hutang_berjalan > 0:
            hasil.append({
                "full_name": anggota.get("full_name"),
                "nik": anggota.get("nik"),
                "saldo_simpanan": saldo_simpanan,
                "hutang_berjalan": hutang_berjalan,
            })
    return hasil


def gabung_transaksi(simpanan_rows, angsuran_rows, anggota_by_id, pinjaman_by_id):
    """Gabungkan simpanan & angsuran menjadi satu daftar transaksi, terbaru di atas."""
    transaksi = []
    for s in simpanan_rows or []:
        anggota = anggota_by_id.get(s.get("personal_data_id"), {})
        transaksi.append({
            "id": f"S-{s.get('id')}",
            "type": "SIMPANAN",
            "category": f"{s.get('type')} ({s.get('transaction_type')})",
            "amount": float(s.get("amount") or 0),
            "status": s.get("status"),
            "date": s.get("created_at"),
            "member": anggota.get("full_name"),
            "nik": anggota.get("nik"),
            "company": anggota.get("company"),
            "reference": f"Bulan ke-{s.get('bulan_ke')}" if s.get("bulan_ke") else "-",
        })
    for a in angsuran_rows or []:
        pinjaman = pinjaman_by_id.get(a.get("pinjaman_id"), {})
        anggota = anggota_by_id.get(pinjaman.get("personal_data_id"), {})
        transaksi.append({
            "id": f"A-{a.get('id')}",
            "type": "ANGSURAN",
            "category": f"Angsuran ke-{a.get('bulan_ke')}",
            "amount": float(a.get("amount") or 0),
            "status": a.get("status"),
            "date": a.get("tanggal_bayar") or a.get("created_at"),
            "member": anggota.get("full_name"),
            "nik": anggota.get("nik"),
            "company": anggota.get("company"),
            "reference": pinjaman.get("no_pinjaman") or "-",
        })
    transaksi.sort(key=lambda t: ke_tanggal(t["date"]) or datetime.min, reverse=True)
    return transaksi


def cocok_pencarian(row, kata_kunci, kolom):
    """True jika kata kunci (case-insensitive) ada di salah satu kolom."""
    kata_kunci = (kata_kunci or "").strip().lower()
    if not kata_kunci:
        return True
    return any(kata_kunci in str(row.get(k) or "").lower() for k in kolom)


def selisih_bulan(awal, akhir):
    a = ke_tanggal(awal)
    b = ke_tanggal(akhir)
    if a is None or b is None:
        return 0
    return (b.year - a.year) * 12 + (b.month - a.month)


def hitung_usia(tanggal_lahir, pada=None):
    lahir = ke_tanggal(tanggal_lahir)
    if lahir is None:
        return None
    return relativedelta(ke_tanggal(pada) or datetime.now(), lahir).years
