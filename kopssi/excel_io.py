"""Template, import, dan export Excel (pandas + openpyxl)."""
import logging
import re
from datetime import datetime
from io import BytesIO

import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from kopssi.perhitungan import KoperasiError, ke_tanggal, parse_angka

logger = logging.getLogger(__name__)

MIMETYPE_XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# --- Template Anggota ---
JUDUL_TEMPLATE_ANGGOTA = "NEW MEMBER KOPSSI"
NAMA_FILE_TEMPLATE_ANGGOTA = "Template_Upload_Anggota.xlsx"

# Header kolom -> field form tambah anggota
KOLOM_ANGGOTA = {
    "Nama Lengkap": "full_name",
    "NPP": "no_npp",
    "Unit Kerja": "work_unit",
    "Jabatan": "jabatan",
    "PT": "company",
    "OPS": "ops",
    "Lokasi": "lokasi",
    "Tagihan Parkir (Y/N)": "tagihan_parkir",
    "Tempat Lahir": "tempat_lahir",
    "Tgl Lahir (YYYY-MM-DD)": "tanggal_lahir",
    "Alamat": "address",
    "Alamat Tinggal": "alamat_tinggal",
    "NIK": "no_ktp",
    "Telp Rumah 1": "telp_rumah_1",
    "Telp Rumah 2": "telp_rumah_2",
    "Email": "email",
    "Hp 1": "hp_1",
    "Hp 2": "hp_2",
    "Rek Pribadi": "rek_pribadi",
    "Rek Gaji": "rek_gaji",
    "Bank Gaji": "bank_gaji",
    "Jenis Kelamin (Laki-laki/Perempuan)": "jenis_kelamin",
}
HEADER_TEMPLATE_ANGGOTA = list(KOLOM_ANGGOTA)

HEADER_TEMPLATE_SIMPANAN = ["NIK", "Nama Lengkap", "Simpanan Pokok", "Simpanan Wajib", "Simpanan Sukarela"]
HEADER_MONITOR_SIMPANAN = [
    "NIK", "Nama", "Referensi", "Status", "Bulan Ke", "Jatuh Tempo",
    "Simp. Pokok", "Simp. Wajib", "Simp. Sukarela", "Total",
]
HEADER_MONITOR_PINJAMAN = ["NIK", "Nama", "No Pinjaman", "Plafon", "Tenor", "Tgl Pengajuan", "Status"]
HEADER_MONITOR_ANGSURAN = ["NIK", "Nama", "No Pinjaman", "Angsuran Ke", "Status", "Nominal", "Tgl Bayar"]
HEADER_REALISASI_PINJAMAN = [
    "No", "No Pinjaman", "Nama", "NPP", "No Anggota", "Lokasi", "Tgl Pinjam", "Tgl Setuju",
    "Tenor", "Jml. Pengajuan", "Jumlah Pinjam", "Bunga", "Outs. Pokok", "Outs. Bunga",
    "Biaya", "Diterima", "NoRek", "NoHP", "Keperluan", "Bank", "Tgl Realisasi",
]
HEADER_REALISASI_KELUAR = [
    "No", "Nama", "NPP", "Uraian", "Unit Kerja",
    "Masuk", "Keluar", "Simp. Pokok", "Simp. Wajib", "Simp. Sukarela",
    "Jumlah", "Outs. Pokok", "Outs. Bunga", "Admin", "Diterima", "No Rek", "Tgl Realisasi",
]
HEADER_PORTOFOLIO = ["Nama Anggota", "NIK", "Saldo Simpanan", "Hutang Berjalan"]
HEADER_ANGGOTA_BARU = ["Nama Lengkap", "NIK", "Unit Kerja", "Tanggal Daftar"]


def _tgl_pendek(value):
    tgl = ke_tanggal(value)
    return tgl.strftime("%d/%m/%Y") if tgl else "-"


def _teks(value):
    """Nilai sel sebagai teks bersih ('' untuk sel kosong)."""
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    teks = str(value).strip()
    if teks.lower() == "nan":
        return ""
    # Angka yang terbaca sebagai float: '3171234567.0' -> '3171234567'
    if re.fullmatch(r"\d+\.0+", teks):
        teks = teks.split(".")[0]
    # Tanggal dari sel bertipe date: '1990-01-31 00:00:00' -> '1990-01-31'
    if re.fullmatch(r"\d{4}-\d{2}-\d{2} 00:00:00", teks):
        teks = teks[:10]
    return teks


def _baca_grid(file):
    """Sheet pertama sebagai list of list berisi teks."""
    try:
        df = pd.read_excel(file, sheet_name=0, header=None, dtype=str, engine="openpyxl")
    except Exception as e:
        logger.warning("Gagal membaca file Excel: %s", e)
        raise KoperasiError("File Excel tidak dapat dibaca. Pastikan formatnya .xlsx") from e
    return [[_teks(v) for v in row] for row in df.itertuples(index=False)]


def _ke_records(grid, baris_header):
    header = [h.strip() for h in grid[baris_header]]
    records = []
    for row in grid[baris_header + 1:]:
        if not any(row):
            continue
        records.append({h: row[i] if i < len(row) else "" for i, h in enumerate(header) if h})
    return records


def _tulis_workbook(sheet, baris, baris_header=0, lebar=None):
    """Tulis list of list ke workbook .xlsx dan kembalikan bytes-nya."""
    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        pd.DataFrame(baris).to_excel(writer, sheet_name=sheet, index=False, header=False)
        worksheet = writer.sheets[sheet]

        header_fill = PatternFill(start_color="DC2626", end_color="DC2626", fill_type="solid")
        header_font = Font(bold=True, color="FFFFFF")
        jumlah_kolom = max((len(b) for b in baris), default=0)
        for col_num in range(1, jumlah_kolom + 1):
            cell = worksheet.cell(row=baris_header + 1, column=col_num)
            if cell.value not in (None, ""):
                cell.fill = header_fill
                cell.font = header_font
                cell.alignment = Alignment(horizontal="center", vertical="center")
            worksheet.column_dimensions[get_column_letter(col_num)].width = (lebar or {}).get(col_num, 18)
    return output.getvalue()


# ---------------- Anggota ----------------
def buat_template_anggota():
    baris = [[JUDUL_TEMPLATE_ANGGOTA], HEADER_TEMPLATE_ANGGOTA]
    return _tulis_workbook("Template", baris, baris_header=1)


def baca_excel_anggota(file):
    """Baris data upload anggota; baris judul dilewati jika A1 = judul template."""
    grid = _baca_grid(file)
    if not grid:
        return []
    baris_header = 1 if grid[0] and grid[0][0] == JUDUL_TEMPLATE_ANGGOTA else 0
    if len(grid) <= baris_header:
        return []
    return _ke_records(grid, baris_header)


def map_baris_anggota(baris):
    """Header template -> field form anggota; sel kosong tidak diikutkan."""
    data = {}
    for header, field in KOLOM_ANGGOTA.items():
        nilai = _teks(baris.get(header))
        if nilai:
            data[field] = nilai
    data.setdefault("status_simp_anggota", "AKTIF")
    data.setdefault("tagihan_parkir", "N")
    data["keluar_anggota"] = "N"
    return data


# ---------------- Simpanan ----------------
def buat_template_simpanan(anggota):
    baris = [HEADER_TEMPLATE_SIMPANAN]
    for a in anggota:
        baris.append([a.get("nik"), a.get("full_name"), a.get("pokok", 0), a.get("wajib", 0), a.get("sukarela", 0)])
    return _tulis_workbook("Simpanan", baris)


def baca_excel_simpanan(file):
    grid = _baca_grid(file)
    if not grid:
        return []
    records = _ke_records(grid, 0)
    if records and "NIK" not in records[0]:
        raise KoperasiError("Kolom NIK tidak ditemukan pada file.")
    return [
        {
            "nik": r.get("NIK", ""),
            "nama": r.get("Nama Lengkap", ""),
            "pokok": parse_angka(r.get("Simpanan Pokok")),
            "wajib": parse_angka(r.get("Simpanan Wajib")),
            "sukarela": parse_angka(r.get("Simpanan Sukarela")),
        }
        for r in records
    ]


def ekspor_monitor_simpanan(tagihan):
    baris = [HEADER_MONITOR_SIMPANAN]
    for t in tagihan:
        baris.append([
            t.get("nik"), t.get("nama"), t.get("no_npp"), t.get("status"), t.get("bulan_ke"),
            _tgl_pendek(t.get("jatuh_tempo")), t.get("amount_pokok", 0), t.get("amount_wajib", 0),
            t.get("amount_sukarela", 0), t.get("total", 0),
        ])
    return _tulis_workbook("Simpanan", baris)


# ---------------- Pinjaman & Angsuran ----------------
def ekspor_monitor_pinjaman(pinjaman):
    baris = [HEADER_MONITOR_PINJAMAN]
    for p in pinjaman:
        anggota = p.get("personal_data") or {}
        baris.append([
            anggota.get("nik"), anggota.get("full_name"), p.get("no_pinjaman"),
            float(p.get("jumlah_pinjaman") or 0), p.get("tenor_bulan"),
            _tgl_pendek(p.get("created_at")), p.get("status"),
        ])
    return _tulis_workbook("Pinjaman", baris)


def ekspor_monitor_angsuran(angsuran):
    """Export monitoring angsuran; formatnya sekaligus template upload angsuran."""
    baris = [HEADER_MONITOR_ANGSURAN]
    for a in angsuran:
        pinjaman = a.get("pinjaman") or {}
        anggota = pinjaman.get("personal_data") or {}
        baris.append([
            anggota.get("nik"), anggota.get("full_name"), pinjaman.get("no_pinjaman"),
            a.get("bulan_ke"), a.get("status"), float(a.get("amount") or 0),
            _tgl_pendek(a.get("tanggal_bayar")),
        ])
    return _tulis_workbook("Angsuran", baris)


def baca_excel_angsuran(file):
    """Cari baris header yang memuat sel 'NIK', lalu baca baris di bawahnya."""
    grid = _baca_grid(file)
    baris_header = next(
        (i for i, row in enumerate(grid) if any(sel.strip().upper() == "NIK" for sel in row)),
        None,
    )
    if baris_header is None:
        raise KoperasiError("Header 'NIK' tidak ditemukan pada file.")
    return [
        {
            "nik": r.get("NIK", ""),
            "nama": r.get("Nama", ""),
            "no_pinjaman": r.get("No Pinjaman", ""),
            "angsuran_ke": r.get("Angsuran Ke", ""),
            "status": r.get("Status", ""),
        }
        for r in _ke_records(grid, baris_header)
    ]


# ---------------- Realisasi ----------------
def ekspor_realisasi_pinjaman(data, tanggal=None):
    tanggal = tanggal or datetime.now()
    baris = [["", "", tanggal.strftime("%d-%b-%y")], HEADER_REALISASI_PINJAMAN]
    total = [0.0] * 7
    for i, r in enumerate(data, start=1):
        angka = [
            r.get("jumlah_pengajuan", 0), r.get("plafon", 0), r.get("bunga", 0),
            r.get("outs_pokok", 0), r.get("outs_bunga", 0), r.get("biaya", 0), r.get("diterima", 0),
        ]
        total = [t + float(a or 0) for t, a in zip(total, angka)]
        baris.append([
            i, r.get("no_pinjaman") or "-", r.get("nama") or "-", r.get("no_npp") or "-",
            r.get("no_anggota") or "-", r.get("lokasi") or "-", _tgl_pendek(r.get("created_at")),
            _tgl_pendek(r.get("created_at")), r.get("tenor"), *angka,
            r.get("rek_gaji") or "-", r.get("phone") or "-", r.get("keperluan") or "-",
            r.get("bank_gaji") or "-", _tgl_pendek(r.get("delivery_date")),
        ])
    baris.append(["", "", "", "", "", "", "", "", "TOTAL", *total, "", "", "", "", ""])
    return _tulis_workbook("Realisasi Pinjaman", baris, baris_header=1)


def ekspor_realisasi_keluar(data, tanggal=None):
    tanggal = tanggal or datetime.now()
    baris = [[f"TANGGAL CETAK: {tanggal.strftime('%d/%m/%Y')}"], HEADER_REALISASI_KELUAR]
    total = [0.0] * 10
    for i, r in enumerate(data, start=1):
        angka = [
            r.get("masuk", 0), r.get("keluar", 0), r.get("simp_pokok", 0), r.get("simp_wajib", 0),
            r.get("simp_sukarela", 0), r.get("jumlah", 0), r.get("outs_pokok", 0),
            r.get("outs_bunga", 0), r.get("admin", 0), r.get("diterima", 0),
        ]
        total = [t + float(a or 0) for t, a in zip(total, angka)]
        baris.append([
            i, r.get("nama") or "-", r.get("no_ref") or "-", r.get("uraian") or "-",
            r.get("unit_kerja") or "-", *angka, r.get("no_rek") or "-", _tgl_pendek(r.get("tgl_real")),
        ])
    baris.append(["", "", "", "", "TOTAL", *total, "", ""])
    return _tulis_workbook("Realisasi Karyawan", baris, baris_header=1)


# ---------------- Laporan ----------------
def ekspor_laporan_keuangan(stats):
    periode = stats.get("periode") or datetime.now()
    baris = [
        ["LAPORAN KEUANGAN BULANAN"],
        [f"Periode: {periode.strftime('%m/%Y')}"],
        [""],
        ["Kategori", "Keterangan", "Jumlah"],
        ["PENDAPATAN", "Total Simpanan Masuk (Setor)", stats["simpanan_setor"]],
        ["PENDAPATAN", "Total Angsuran Pinjaman (Paid)", stats["total_angsuran"]],
        ["", "TOTAL PENDAPATAN", stats["pendapatan"]],
        [""],
        ["PENGELUARAN", "Total Penarikan Simpanan (Tarik)", stats["simpanan_tarik"]],
        ["PENGELUARAN", "Total Pencairan Pinjaman Baru", stats["total_pencairan"]],
        ["", "TOTAL PENGELUARAN", stats["pengeluaran"]],
        [""],
        ["CASHFLOW", "Arus Kas Bersih", stats["cashflow"]],
    ]
    return _tulis_workbook("Laporan Keuangan", baris, baris_header=3, lebar={1: 15, 2: 38, 3: 18})


def ekspor_portofolio(data):
    baris = [HEADER_PORTOFOLIO]
    for item in data:
        baris.append([item.get("full_name"), item.get("nik"), item.get("saldo_simpanan", 0), item.get("hutang_berjalan", 0)])
    return _tulis_workbook("Portofolio", baris)


def ekspor_anggota_baru(data):
    baris = [HEADER_ANGGOTA_BARU]
    for a in data:
        baris.append([a.get("full_name"), a.get("nik"), a.get("work_unit"), _tgl_pendek(a.get("created_at"))])
    return _tulis_workbook("Anggota Baru", baris)
