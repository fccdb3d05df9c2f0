"""
Tests for Excel templates, uploads and exports.
"""

from datetime import datetime
from io import BytesIO

import pytest
from openpyxl import Workbook, load_workbook

from kopssi import excel_io
from kopssi.perhitungan import KoperasiError


def buat_xlsx(baris):
    wb = Workbook()
    ws = wb.active
    for row in baris:
        ws.append(row)
    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output


def baca_sheet(data):
    ws = load_workbook(BytesIO(data)).active
    return [list(row) for row in ws.iter_rows(values_only=True)]


class TestAnggotaExcel:

    def test_template_layout(self):
        isi = baca_sheet(excel_io.buat_template_anggota())

        assert isi[0][0] == "NEW MEMBER KOPSSI"
        assert isi[1] == excel_io.HEADER_TEMPLATE_ANGGOTA
        assert len(isi) == 2

    def test_read_template_with_title_row(self):
        header = excel_io.HEADER_TEMPLATE_ANGGOTA
        data = {"Nama Lengkap": "Andi", "NPP": 8801, "NIK": 3171000000000009, "Tgl Lahir (YYYY-MM-DD)": "1990-01-31"}
        file = buat_xlsx([
            ["NEW MEMBER KOPSSI"],
            header,
            [data.get(h) for h in header],
            [None] * len(header),
        ])

        records = excel_io.baca_excel_anggota(file)

        assert len(records) == 1
        assert records[0]["Nama Lengkap"] == "Andi"
        mapped = excel_io.map_baris_anggota(records[0])
        assert mapped["full_name"] == "Andi"
        assert mapped["no_npp"] == "8801"
        assert mapped["no_ktp"] == "3171000000000009"
        assert mapped["tanggal_lahir"] == "1990-01-31"
        assert mapped["status_simp_anggota"] == "AKTIF"
        assert mapped["tagihan_parkir"] == "N"
        assert mapped["keluar_anggota"] == "N"
        assert "email" not in mapped

    def test_read_without_title_row(self):
        file = buat_xlsx([["Nama Lengkap", "NPP"], ["Citra", "9901"]])
        assert excel_io.baca_excel_anggota(file) == [{"Nama Lengkap": "Citra", "NPP": "9901"}]

    def test_not_an_excel_file(self):
        with pytest.raises(KoperasiError, match="tidak dapat dibaca"):
            excel_io.baca_excel_anggota(BytesIO(b"bukan excel"))


class TestSimpananExcel:

    def test_template_round_trip(self):
        data = excel_io.buat_template_simpanan([
            {"nik": "3171000000000001", "full_name": "Budi", "pokok": 0, "wajib": 75000, "sukarela": 0},
        ])

        baris = excel_io.baca_excel_simpanan(BytesIO(data))

        assert baris == [{"nik": "3171000000000001", "nama": "Budi", "pokok": 0, "wajib": 75000, "sukarela": 0}]

    def test_requires_nik_column(self):
        file = buat_xlsx([["Nama", "Wajib"], ["Budi", 75000]])
        with pytest.raises(KoperasiError, match="NIK"):
            excel_io.baca_excel_simpanan(file)

    def test_monitoring_export(self):
        isi = baca_sheet(excel_io.ekspor_monitor_simpanan([{
            "nik": "1", "nama": "Budi", "no_npp": "12345", "status": "PAID", "bulan_ke": 3,
            "jatuh_tempo": "2024-03-01", "amount_pokok": 0, "amount_wajib": 75000, "amount_sukarela": 0,
            "total": 75000,
        }]))

        assert isi[0] == excel_io.HEADER_MONITOR_SIMPANAN
        assert isi[1][5] == "01/03/2024"
        assert isi[1][9] == 75000


class TestAngsuranExcel:

    def test_header_found_below_title(self):
        file = buat_xlsx([
            ["DATA ANGSURAN JUNI"],
            [],
            ["NIK", "Nama", "No Pinjaman", "Angsuran Ke", "Status"],
            ["3171000000000001", "Budi", "RS20230101-1111", 11, "PAID"],
            ["3171000000000001", "Budi", "RS20230101-1111", None, "UNPAID"],
        ])

        baris = excel_io.baca_excel_angsuran(file)

        assert baris[0] == {"nik": "3171000000000001", "nama": "Budi", "no_pinjaman": "RS20230101-1111",
                            "angsuran_ke": "11", "status": "PAID"}
        assert baris[1]["angsuran_ke"] == ""

    def test_missing_header(self):
        with pytest.raises(KoperasiError, match="NIK"):
            excel_io.baca_excel_angsuran(buat_xlsx([["Nama"], ["Budi"]]))

    def test_export_doubles_as_upload_template(self):
        data = excel_io.ekspor_monitor_angsuran([{
            "bulan_ke": 11, "status": "UNPAID", "amount": 101000, "tanggal_bayar": "2024-11-01",
            "pinjaman": {"no_pinjaman": "RS1", "personal_data": {"nik": "3171", "full_name": "Budi"}},
        }])

        baris = excel_io.baca_excel_angsuran(BytesIO(data))

        assert baris == [{"nik": "3171", "nama": "Budi", "no_pinjaman": "RS1", "angsuran_ke": "11",
                          "status": "UNPAID"}]


class TestRealisasiExcel:

    def test_loan_delivery_totals(self):
        baris = {"no_pinjaman": "RS1", "nama": "Budi", "jumlah_pengajuan": 6_000_000, "plafon": 5_000_000,
                 "bunga": 250_000, "outs_pokok": 200_000, "outs_bunga": 2_000, "biaya": 5000,
                 "diterima": 4_793_000, "tenor": 10, "created_at": "2024-06-01"}
        isi = baca_sheet(excel_io.ekspor_realisasi_pinjaman([baris, baris], tanggal=datetime(2024, 6, 3)))

        assert isi[0][2] == "03-Jun-24"
        assert isi[1] == excel_io.HEADER_REALISASI_PINJAMAN
        assert isi[2][0] == 1
        total = isi[-1]
        assert total[8] == "TOTAL"
        assert total[15] == 9_586_000

    def test_exit_payout_totals(self):
        baris = {"nama": "Rina", "no_ref": "321", "uraian": "UNDUR DIRI", "jumlah": 450_000,
                 "admin": 5000, "diterima": 243_000}
        isi = baca_sheet(excel_io.ekspor_realisasi_keluar([baris], tanggal=datetime(2024, 6, 3)))

        assert isi[0][0] == "TANGGAL CETAK: 03/06/2024"
        assert isi[1] == excel_io.HEADER_REALISASI_KELUAR
        assert isi[-1][4] == "TOTAL"
        assert isi[-1][14] == 243_000


class TestLaporanExcel:

    def test_financial_report(self):
        stats = {"periode": datetime(2024, 6, 1), "simpanan_setor": 100_000, "total_angsuran": 100_000,
                 "pendapatan": 200_000, "simpanan_tarik": 30_000, "total_pencairan": 2_000_000,
                 "pengeluaran": 2_030_000, "cashflow": -1_830_000}
        isi = baca_sheet(excel_io.ekspor_laporan_keuangan(stats))

        assert isi[0][0] == "LAPORAN KEUANGAN BULANAN"
        assert isi[1][0] == "Periode: 06/2024"
        assert isi[-1] == ["CASHFLOW", "Arus Kas Bersih", -1_830_000]

    def test_portfolio_and_new_members(self):
        porto = baca_sheet(excel_io.ekspor_portofolio([{"full_name": "Budi", "nik": "1", "saldo_simpanan": 70_000,
                                                       "hutang_berjalan": 0}]))
        baru = baca_sheet(excel_io.ekspor_anggota_baru([{"full_name": "Ani", "nik": "2", "work_unit": "IT",
                                                        "created_at": "2024-06-10T08:00:00"}]))

        assert porto == [excel_io.HEADER_PORTOFOLIO, ["Budi", "1", 70_000, 0]]
        assert baru == [excel_io.HEADER_ANGGOTA_BARU, ["Ani", "2", "IT", "10/06/2024"]]
