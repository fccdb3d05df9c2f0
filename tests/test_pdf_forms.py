"""
Smoke tests for the generated PDF documents.
"""

from datetime import datetime

import requests

from kopssi import pdf_forms

ANGGOTA = {
    "full_name": "Budi Santoso",
    "no_npp": "12345",
    "no_anggota": "KS03240001",
    "nik": "3171000000000001",
    "company": "PT SSI",
    "work_unit": "IT",
    "employment_status": "Staff",
    "tempat_lahir": "Jakarta",
    "tanggal_lahir": "1990-06-15",
    "address": "Jl. Mawar No. 1",
    "created_at": "2024-03-01T08:00:00",
}

PINJAMAN = {
    "id": "pin-1",
    "no_pinjaman": "RS20240601-2222",
    "jumlah_pinjaman": 5_000_000,
    "tenor_bulan": 10,
    "tipe_bunga": "PERSENAN",
    "nilai_bunga": 12,
    "keperluan": "Renovasi rumah",
    "jenis_pinjaman": "BIASA",
    "created_at": "2024-06-01T09:00:00",
    "personal_data": ANGGOTA,
}


class TestDokumen:

    def test_membership_form(self):
        data = pdf_forms.pdf_pendaftaran_anggota(ANGGOTA, foto=b"", tanda_tangan=b"")
        assert data.startswith(b"%PDF")

    def test_membership_form_with_broken_image(self):
        data = pdf_forms.pdf_pendaftaran_anggota(ANGGOTA, foto=b"bukan gambar", tanda_tangan=b"")
        assert data.startswith(b"%PDF")

    def test_loan_agreement(self):
        assert pdf_forms.pdf_spk(PINJAMAN, tanggal=datetime(2024, 6, 3)).startswith(b"%PDF")

    def test_loan_analysis(self):
        analisa = {
            "saldo": {"POKOK": 200_000, "WAJIB": 750_000, "SUKARELA": 0, "total": 950_000},
            "outstanding": [{
                "no_pinjaman": "RS20230101-1111", "jenis_pinjaman": "BIASA", "terbayar": "10/12",
                "outstanding": 200_000, "bunga_outstanding": 2_000, "angsuran_bulanan": 101_000,
            }],
        }
        syarat = {"jumlah": 4_500_000, "pakai_bunga": True, "tipe_bunga": "NOMINAL", "nilai_bunga": 250_000}

        data = pdf_forms.pdf_analisa_pinjaman(PINJAMAN, analisa, analis="Admin", syarat=syarat,
                                              tanggal=datetime(2024, 6, 3))

        assert data.startswith(b"%PDF")

    def test_reports(self):
        stats = {"periode": datetime(2024, 6, 1), "simpanan_setor": 100_000, "total_angsuran": 100_000,
                 "pendapatan": 200_000, "simpanan_tarik": 30_000, "total_pencairan": 2_000_000,
                 "pengeluaran": 2_030_000, "cashflow": -1_830_000}

        assert pdf_forms.pdf_laporan_bulanan(stats).startswith(b"%PDF")
        assert pdf_forms.pdf_portofolio([{"full_name": "Budi", "nik": "1", "saldo_simpanan": 70_000,
                                          "hutang_berjalan": 0}]).startswith(b"%PDF")

    def test_monthly_file_name(self):
        assert pdf_forms.nama_file_bulanan("Laporan_Keuangan", datetime(2024, 6, 1)) == "Laporan_Keuangan_Juni_2024.pdf"


class TestUnduhGambar:

    def test_empty_url(self):
        assert pdf_forms.unduh_gambar(None) is None

    def test_network_error_returns_none(self, monkeypatch):
        def gagal(url, timeout):
            raise requests.ConnectionError("offline")

        monkeypatch.setattr(pdf_forms.requests, "get", gagal)
        assert pdf_forms.unduh_gambar("https://storage.test/documents/photos/a.jpg") is None

    def test_downloads_content(self, monkeypatch):
        class Respon:
            content = b"\x89PNG"

            def raise_for_status(self):
                pass

        monkeypatch.setattr(pdf_forms.requests, "get", lambda url, timeout: Respon())
        assert pdf_forms.unduh_gambar("https://storage.test/documents/photos/a.png") == b"\x89PNG"
