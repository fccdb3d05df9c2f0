"""Dokumen PDF: formulir pendaftaran, SPK, analisa pinjaman, dan laporan."""
import logging
import math
from datetime import datetime
from io import BytesIO

import requests
from fpdf import FPDF
from fpdf.enums import XPos, YPos

from kopssi.perhitungan import (
    format_angka,
    format_bulan_tahun,
    format_rupiah,
    format_tanggal,
    hitung_total_bunga,
    hitung_usia,
    selisih_bulan,
    terbilang,
)

logger = logging.getLogger(__name__)

NAMA_KOPERASI = "Koperasi Simpan Pinjam Swadharma"
NAMA_KOPERASI_SPK = "KOPERASI JASA PEGAWAI SWADHARMA SARANA INFORMATIKA"
ALAMAT_KANTOR = "Bellagio Office Park Unit OUG 31-32"
PENGURUS_SPK = "R. LIZA SARASWATI"


def _aman(teks):
    """Font inti Helvetica hanya mendukung latin-1."""
    return str(teks if teks is not None else "-").encode("latin-1", "replace").decode("latin-1")


def unduh_gambar(url, timeout=10):
    """Ambil gambar (foto / tanda tangan) dari storage; None jika gagal."""
    if not url:
        return None
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        return response.content
    except requests.RequestException as e:
        logger.warning("Gambar gagal dimuat dari %s: %s", url, e)
        return None


def _pasang_gambar(pdf, data, x, y, w, h):
    if not data:
        return
    try:
        pdf.image(BytesIO(data), x=x, y=y, w=w, h=h)
    except Exception as e:
        logger.warning("Gambar tidak dapat disisipkan ke PDF: %s", e)


class _DokumenKoperasi(FPDF):
    def tulis(self, teks, h=5, style="", size=10, align="L", w=0):
        self.set_font("Helvetica", style=style, size=size)
        self.multi_cell(w, h, _aman(teks), align=align, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def label_nilai(self, label, nilai, lebar_label=40, h=6):
        self.set_font("Helvetica", size=10)
        self.cell(lebar_label, h, _aman(label))
        self.cell(5, h, ":")
        self.multi_cell(0, h, _aman(nilai), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def tabel(self, header, baris, lebar, align=None, footer=None):
        align = align or ["L"] * len(header)
        self.set_font("Helvetica", style="B", size=8)
        self.set_fill_color(200, 200, 200)
        for judul, w in zip(header, lebar):
            self.cell(w, 7, _aman(judul), border=1, align="C", fill=True)
        self.ln()
        self.set_font("Helvetica", size=8)
        for row in baris:
            for nilai, w, a in zip(row, lebar, align):
                self.cell(w, 6, _aman(nilai), border=1, align=a)
            self.ln()
        if footer:
            self.set_font("Helvetica", style="B", size=8)
            for nilai, w, a in zip(footer, lebar, align):
                self.cell(w, 7, _aman(nilai), border=1, align=a, fill=True)
            self.ln()

    def hasil(self):
        return bytes(self.output())


# ---------------- Formulir Pendaftaran Anggota ----------------
def pdf_pendaftaran_anggota(anggota, foto=None, tanda_tangan=None):
    """Surat permohonan menjadi anggota, lengkap dengan pas foto & tanda tangan.

    `foto` dan `tanda_tangan` berupa bytes gambar; jika None akan diunduh
    dari URL yang tersimpan di data anggota.
    """
    if foto is None:
        foto = unduh_gambar(anggota.get("photo_34_file_path"))
    if tanda_tangan is None:
        tanda_tangan = unduh_gambar(anggota.get("signature_image"))

    pdf = _DokumenKoperasi()
    pdf.set_margins(20, 14, 20)
    pdf.add_page()

    # Kop surat
    pdf.set_font("Helvetica", style="B", size=14)
    pdf.cell(100, 8, "KOPSSI")
    pdf.set_font("Helvetica", style="I", size=8)
    pdf.multi_cell(0, 4, _aman(f"{ALAMAT_KANTOR}\nJl. Mega Kuningan Barat Kav.E.4-3"), align="R",
                   new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_line_width(1.2)
    pdf.line(20, pdf.get_y() + 2, pdf.w - 20, pdf.get_y() + 2)
    pdf.set_line_width(0.2)
    pdf.ln(8)

    pdf.tulis(f"Jakarta, {format_tanggal(anggota.get('created_at'), '....................')}", align="R")
    pdf.tulis("Hal : Pendaftaran anggota KOPSSI")
    pdf.tulis("Lamp. : 1 (satu) lembar fotokopi KTP")
    pdf.ln(5)

    pdf.set_x(60)
    pdf.tulis("Kepada")
    pdf.set_x(60)
    pdf.tulis(NAMA_KOPERASI, style="B")
    pdf.set_x(60)
    pdf.tulis(ALAMAT_KANTOR)
    pdf.tulis("Setiabudi, Kuningan - Jakarta Selatan")
    pdf.ln(6)

    pdf.tulis("Yang bertanda tangan di bawah ini:")
    pdf.ln(2)
    for label, nilai in (
        ("Nama / NPP", f"{anggota.get('full_name') or '-'} / {anggota.get('no_npp') or '-'}"),
        ("Perusahaan", anggota.get("company") or "-"),
        ("Status pegawai", anggota.get("employment_status") or "-"),
        ("Unit kerja", anggota.get("work_unit") or "-"),
    ):
        pdf.set_x(35)
        pdf.label_nilai(f"- {label}", nilai)
    pdf.ln(4)

    pdf.tulis(
        "dengan ini mengajukan permohonan menjadi anggota Koperasi Simpan Pinjam Swadharma (KOPSSI) "
        "dan bersedia mematuhi ketentuan-ketentuan yang ditetapkan dalam Anggaran Dasar dan "
        "Anggaran Rumah Tangga KOPSSI."
    )
    pdf.ln(3)
    pdf.tulis("Sesuai dengan persyaratan yang telah ditetapkan, kami bersedia membayar:")
    pdf.tulis("1. Simpanan Pokok sebesar Rp. 200.000,00 (Dua ratus ribu rupiah) yang diangsur sebanyak 3 (tiga) kali/bulan.")
    pdf.tulis("2. Simpanan Wajib sebesar Rp. 75.000,00 (tujuh puluh lima ribu rupiah) per bulan.")
    pdf.ln(3)
    pdf.tulis(
        "Simpanan Pokok dan Simpanan Wajib tersebut di atas dapat langsung dipotong dari gaji saya "
        f"setiap bulan, terhitung mulai bulan {format_bulan_tahun(anggota.get('created_at'), '....................')}"
    )
    pdf.ln(3)
    pdf.tulis("Bersama ini kami sampaikan 1 (satu) lembar fotokopi identitas atas nama saya.")
    pdf.ln(3)
    pdf.tulis("Demikianlah permohonan menjadi anggota KOPSSI ini dibuat dengan sebenarnya.")
    pdf.ln(10)

    # Pas foto 3x4 & tanda tangan
    y = pdf.get_y()
    pdf.rect(45, y, 30, 40)
    _pasang_gambar(pdf, foto, 47, y + 2, 26, 36)
    pdf.set_font("Helvetica", size=9)
    pdf.text(45, y + 45, "*Pas Foto")

    x_ttd = 130
    pdf.set_font("Helvetica", size=10)
    pdf.text(x_ttd, y - 2, _aman(format_tanggal(anggota.get("created_at"), "....................")))
    _pasang_gambar(pdf, tanda_tangan, x_ttd + 5, y + 18, 45, 20)
    pdf.text(x_ttd, y + 40, "(..............................................)")
    pdf.set_xy(x_ttd, y + 42)
    pdf.cell(58, 6, _aman(anggota.get("full_name") or ""), align="C")

    return pdf.hasil()


# ---------------- Surat Perjanjian Kredit ----------------
def pdf_spk(pinjaman, tanggal=None):
    anggota = pinjaman.get("personal_data") or {}
    tanggal = tanggal or datetime.now()
    jumlah = int(float(pinjaman.get("jumlah_pinjaman") or 0))
    tenor = int(pinjaman.get("tenor_bulan") or 0)

    pdf = _DokumenKoperasi()
    pdf.set_margins(15, 15, 15)
    pdf.add_page()

    pdf.tulis("Koperasi Jasa Pegawai Swadharma Sarana Informatika", style="B")
    pdf.tulis(f"PERJANJIAN PINJAMAN ANGGOTA {NAMA_KOPERASI_SPK}", style="B", size=11)
    pdf.tulis(f"Nomor : {pinjaman.get('no_pinjaman')}", style="B")
    pdf.ln(4)

    pdf.tulis("Yang bertanda tangan dibawah ini :", size=9)
    pdf.tulis(f"I. {PENGURUS_SPK}", style="B", size=9)
    pdf.tulis(
        f"selaku Pengurus {NAMA_KOPERASI_SPK}, oleh karena demikian berwenang bertindak untuk dan atas nama "
        f"{NAMA_KOPERASI_SPK}. Untuk selanjutnya disebut ---- KOPSSI ----",
        size=9,
    )
    pdf.ln(2)
    pdf.tulis(
        f"II. NAMA : {anggota.get('full_name') or '-'}\n"
        f"NPP : {anggota.get('no_npp') or '-'}\n"
        f"UNIT : {anggota.get('work_unit') or '-'}\n"
        f"No. Anggota : {anggota.get('no_anggota') or '-'}\n"
        f"KTP : {anggota.get('nik') or '-'}\n"
        "untuk selanjutnya disebut :\n"
        "---------------- PEMINJAM ----------------",
        size=9,
    )
    pdf.ln(2)
    pdf.tulis(
        "Kedua belah pihak setuju dan sepakat menandatangani Perjanjian Pinjaman dengan syarat-syarat "
        "serta ketentuan-ketentuan sebagai berikut :",
        size=9,
    )
    pdf.ln(2)

    bunga_bulanan = float(pinjaman.get("nilai_bunga") or 0) / 12 if pinjaman.get("tipe_bunga") == "PERSENAN" else 0
    pasal = [
        ("Pasal 1\nMAKSIMUM & TUJUAN PINJAMAN",
         f"1. Maksimum Pinjaman sebesar Rp {format_angka(jumlah)} ({terbilang(jumlah)} Rupiah).\n"
         f"Maksimum Pinjaman adalah fasilitas pinjaman tertinggi yang dapat ditarik oleh PEMINJAM setelah "
         f"memenuhi semua syarat yang ditetapkan oleh {NAMA_KOPERASI_SPK}.\n"
         f"2. Tujuan Pinjaman untuk : {pinjaman.get('keperluan') or '-'}"),
        ("Pasal 2\nJANGKA WAKTU PINJAMAN",
         f"Jangka waktu pinjaman adalah {tenor} ({terbilang(tenor)}) bulan."),
        ("Pasal 3\nSUKU BUNGA PINJAMAN & PROVISI",
         f"Bunga Pinjaman sebesar {bunga_bulanan:.2f} % per bulan."),
        ("Pasal 4\nCARA PEMBAYARAN ANGSURAN",
         "Pembayaran dilakukan melalui potong gaji Pegawai ALIH DAYA JST tanggal 25 setiap bulannya."),
        ("Pasal 5\nJAMINAN", "Gaji, simpanan, dan/atau jaminan tambahan apabila diperlukan."),
        ("Pasal 6\nPELUNASAN",
         "Pinjaman wajib dilunasi apabila PEMINJAM berhenti bekerja atau keluar dari keanggotaan KOPSSI."),
        ("Pasal 7\nPASAL TAMBAHAN", "PEMINJAM wajib memberitahukan perubahan alamat atau pekerjaan."),
        ("Pasal 8\nPENYELESAIAN PERSELISIHAN",
         "Perselisihan diselesaikan secara musyawarah dan apabila tidak tercapai, diselesaikan melalui "
         "Pengadilan Negeri Jakarta Selatan."),
    ]
    for judul, isi in pasal:
        pdf.tulis(judul, style="B", align="C")
        pdf.tulis(isi, size=9)
        pdf.ln(2)

    pdf.ln(2)
    pdf.tulis(f"Perjanjian ini dibuat di Jakarta, {format_tanggal(tanggal)}", size=9)
    pdf.ln(4)

    y = pdf.get_y()
    pdf.set_font("Helvetica", style="B", size=10)
    pdf.set_xy(15, y)
    pdf.multi_cell(85, 5, "KOPERASI JASA PEGAWAI\nSWADHARMA SARANA\nINFORMATIKA", align="C")
    pdf.set_xy(110, y)
    pdf.multi_cell(85, 5, "PEMINJAM", align="C")
    pdf.set_xy(15, y + 35)
    pdf.cell(85, 5, PENGURUS_SPK, align="C")
    pdf.set_xy(110, y + 35)
    pdf.cell(85, 5, _aman((anggota.get("full_name") or "").upper()), align="C")

    return pdf.hasil()


# ---------------- Perangkat Analisa Pinjaman ----------------
def pdf_analisa_pinjaman(pinjaman, analisa, analis="Admin", syarat=None, tanggal=None):
    """Lembar analisa pinjaman.

    `analisa` berasal dari pinjaman.data_analisa(); `syarat` (opsional) berisi
    jumlah / pakai_bunga / tipe_bunga / nilai_bunga yang sedang dinilai.
    """
    anggota = pinjaman.get("personal_data") or {}
    tanggal = tanggal or datetime.now()
    tenor = int(pinjaman.get("tenor_bulan") or 1)

    if syarat:
        pokok = float(syarat.get("jumlah") or pinjaman.get("jumlah_pinjaman") or 0)
        tipe = syarat.get("tipe_bunga") if syarat.get("pakai_bunga") else "NONE"
        nilai = syarat.get("nilai_bunga") if syarat.get("pakai_bunga") else 0
    else:
        pokok = float(pinjaman.get("jumlah_pinjaman") or 0)
        tipe = pinjaman.get("tipe_bunga") or "NONE"
        nilai = pinjaman.get("nilai_bunga") or 0
    total_bunga = round(hitung_total_bunga(pokok, tenor, tipe, nilai))
    cicilan = math.ceil((pokok + total_bunga) / tenor) if tenor else 0

    pdf = _DokumenKoperasi()
    pdf.set_margins(15, 15, 15)
    pdf.add_page()

    pdf.set_font("Helvetica", size=10)
    pdf.cell(0, 5, _aman(f"Analis: {analis}"), align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.cell(0, 5, _aman(format_tanggal(tanggal)), align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(6)
    pdf.tulis("Perangkat Analisa Pinjaman", style="B", size=14, align="C")
    pdf.line(15, pdf.get_y() + 1, pdf.w - 15, pdf.get_y() + 1)
    pdf.ln(4)

    pdf.label_nilai("No Permohonan", pinjaman.get("no_pinjaman"))
    pdf.label_nilai("Tgl Permohonan", format_tanggal(pinjaman.get("created_at")))
    pdf.ln(2)

    usia = hitung_usia(anggota.get("tanggal_lahir"), tanggal)
    for label, nilai in (
        ("No Anggota", anggota.get("no_anggota") or "-"),
        ("NPP", anggota.get("no_npp") or "-"),
        ("Nama Lengkap", anggota.get("full_name") or "-"),
        ("Alamat", anggota.get("address") or "-"),
        ("Tempat / Tgl Lahir",
         f"{anggota.get('tempat_lahir') or '-'}, {format_tanggal(anggota.get('tanggal_lahir'))}"
         + (f"  (Usia {usia} Tahun)" if usia is not None else "")),
        ("Unit Kerja", anggota.get("work_unit") or "-"),
        ("Status Pegawai", anggota.get("employment_status") or "-"),
        ("Tgl Keanggotaan",
         f"{format_tanggal(anggota.get('created_at'))}  "
         f"(Lama Keanggotaan : {selisih_bulan(anggota.get('created_at'), tanggal)} Bulan)"),
    ):
        pdf.label_nilai(label, nilai)

    saldo = analisa["saldo"]
    pdf.ln(3)
    pdf.tulis("Data Simpanan", style="U")
    pdf.label_nilai("Pokok", format_angka(saldo["POKOK"]))
    pdf.label_nilai("Wajib", format_angka(saldo["WAJIB"]))
    pdf.label_nilai("Total Simpanan", format_angka(saldo["POKOK"] + saldo["WAJIB"]))

    pdf.ln(3)
    pdf.tulis("Data Pinjaman", style="U")
    outstanding = analisa["outstanding"]
    pdf.tabel(
        ["No Pinjaman", "Jenis Pinjaman", "Angsuran Terbayar", "Outstanding", "Bunga Outstanding", "Angsuran / Bln"],
        [
            [o["no_pinjaman"], o["jenis_pinjaman"], o["terbayar"], format_angka(o["outstanding"]),
             format_angka(o["bunga_outstanding"]), format_angka(o["angsuran_bulanan"])]
            for o in outstanding
        ],
        [36, 28, 28, 30, 30, 28],
        align=["L", "L", "C", "R", "R", "R"],
        footer=[
            "TOTAL", "", "",
            format_angka(sum(o["outstanding"] for o in outstanding)),
            format_angka(sum(o["bunga_outstanding"] for o in outstanding)),
            format_angka(sum(o["angsuran_bulanan"] for o in outstanding)),
        ],
    )

    pdf.ln(4)
    pdf.tulis("Permohonan Pinjaman", style="U")
    pdf.label_nilai("Jumlah Pinjaman", f"Rp.{format_angka(pokok)} ({terbilang(pokok).upper()})")
    pdf.label_nilai("Jangka Waktu", f"{tenor} Bulan")

    pdf.ln(3)
    pdf.tulis("Data Angsuran", style="U")
    pdf.label_nilai("Angsuran dilunasi", "0")
    pdf.label_nilai("Total Angsuran", format_angka(cicilan))
    pdf.label_nilai("Total Bunga", format_angka(total_bunga))
    pdf.label_nilai("Jangka Waktu", f"{tenor} Bulan")
    pdf.label_nilai("Jenis Pinjaman", (pinjaman.get("jenis_pinjaman") or "BARANG").upper())
    pdf.label_nilai("Untuk Keperluan", pinjaman.get("keperluan") or "-")

    pdf.ln(3)
    pdf.tulis("Pendapat Analis Kredit : -", style="U")
    pdf.ln(3)
    pdf.tulis("Disposisi :")
    pdf.ln(18)
    lebar = (pdf.w - 30) / 3
    pdf.set_font("Helvetica", size=10)
    for jabatan in ("Ketua", "Bendahara", "Sekretaris"):
        pdf.cell(lebar, 6, jabatan, align="C")
    pdf.ln()

    return pdf.hasil()


# ---------------- Laporan ----------------
def pdf_laporan_bulanan(stats, dicetak=None):
    dicetak = dicetak or datetime.now()
    pdf = _DokumenKoperasi()
    pdf.set_margins(15, 15, 15)
    pdf.add_page()

    pdf.tulis("LAPORAN KEUANGAN BULANAN", style="B", size=16, align="C")
    pdf.tulis(f"Periode: {format_bulan_tahun(stats.get('periode') or dicetak)}", align="C")
    pdf.line(15, pdf.get_y() + 2, pdf.w - 15, pdf.get_y() + 2)
    pdf.ln(8)

    pdf.tabel(
        ["Kategori", "Keterangan", "Jumlah"],
        [
            ["PENDAPATAN", "Total Simpanan Masuk (Setor)", format_rupiah(stats["simpanan_setor"])],
            ["PENDAPATAN", "Total Angsuran Pinjaman (Paid)", format_rupiah(stats["total_angsuran"])],
            ["", "TOTAL PENDAPATAN", format_rupiah(stats["pendapatan"])],
            ["PENGELUARAN", "Total Penarikan Simpanan (Tarik)", format_rupiah(stats["simpanan_tarik"])],
            ["PENGELUARAN", "Total Pencairan Pinjaman Baru", format_rupiah(stats["total_pencairan"])],
            ["", "TOTAL PENGELUARAN", format_rupiah(stats["pengeluaran"])],
        ],
        [40, 90, 50],
        align=["L", "L", "R"],
    )

    pdf.ln(8)
    pdf.set_font("Helvetica", style="B", size=11)
    pdf.cell(130, 7, "Arus Kas Bersih (Net Cashflow):")
    if stats["cashflow"] >= 0:
        pdf.set_text_color(16, 185, 129)
    else:
        pdf.set_text_color(220, 38, 38)
    pdf.cell(50, 7, _aman(format_rupiah(stats["cashflow"])), align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(0, 0, 0)

    pdf.ln(15)
    pdf.tulis(f"Dicetak pada: {dicetak.strftime('%d/%m/%Y %H:%M')}", style="I", size=8)
    return pdf.hasil()


def pdf_portofolio(data, tanggal=None):
    tanggal = tanggal or datetime.now()
    pdf = _DokumenKoperasi()
    pdf.set_margins(15, 15, 15)
    pdf.add_page()

    pdf.tulis("REKAPITULASI PINJAMAN & SIMPANAN AKTIF", style="B", size=16, align="C")
    pdf.tulis(f"Per Tanggal: {format_tanggal(tanggal)}", align="C")
    pdf.line(15, pdf.get_y() + 2, pdf.w - 15, pdf.get_y() + 2)
    pdf.ln(8)

    pdf.tabel(
        ["Nama Anggota", "NIK", "Saldo Simpanan", "Hutang Berjalan"],
        [
            [item.get("full_name"), item.get("nik"), format_rupiah(item["saldo_simpanan"]),
             format_rupiah(item["hutang_berjalan"])]
            for item in data
        ],
        [60, 40, 40, 40],
        align=["L", "L", "R", "R"],
    )
    return pdf.hasil()


def nama_file_bulanan(prefix, tanggal=None):
    return f"{prefix}_{format_bulan_tahun(tanggal or datetime.now()).replace(' ', '_')}.pdf"

