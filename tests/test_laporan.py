"""
Tests for admin dashboard counters, transaction listing and reports.
"""

from datetime import datetime

import pytest

from kopssi import laporan as svc

SEKARANG = datetime(2024, 6, 15, 12, 0, 0)


@pytest.fixture
def koperasi(fake_db, member):
    fake_db.seed("personal_data",
                 {"id": "pd-2", "full_name": "Ani", "nik": "2", "company": "PT ABC", "status": "DONE VERIFIKASI",
                  "created_at": "2024-06-10T08:00:00"},
                 {"id": "pd-3", "full_name": "Cici", "nik": "3", "company": "PT SSI", "status": "active",
                  "created_at": "2023-01-01T08:00:00"})
    fake_db.seed(
        "simpanan",
        {"id": "s1", "personal_data_id": "pd-m1", "type": "WAJIB", "amount": 100_000, "transaction_type": "SETOR",
         "status": "PAID", "bulan_ke": 6, "created_at": "2024-06-02T08:00:00"},
        {"id": "s2", "personal_data_id": "pd-m1", "type": "SUKARELA", "amount": 30_000, "transaction_type": "TARIK",
         "status": "PAID", "bulan_ke": 6, "created_at": "2024-06-05T08:00:00"},
        {"id": "s3", "personal_data_id": "pd-2", "type": "POKOK", "amount": 50_000, "transaction_type": "SETOR",
         "status": "UNPAID", "bulan_ke": 5, "created_at": "2024-05-20T08:00:00"},
    )
    fake_db.seed(
        "pinjaman",
        {"id": "p1", "personal_data_id": "pd-m1", "no_pinjaman": "RS20240601-1234", "jumlah_pinjaman": 2_000_000,
         "status": "DICAIRKAN", "disbursed_at": "2024-06-01T10:00:00"},
        {"id": "p2", "personal_data_id": "pd-3", "no_pinjaman": "RS20240101-9999", "jumlah_pinjaman": 1_000_000,
         "status": "DICAIRKAN", "disbursed_at": "2024-01-01T10:00:00"},
        {"id": "p3", "personal_data_id": "pd-3", "jumlah_pinjaman": 500_000, "status": "PENGAJUAN"},
    )
    fake_db.seed(
        "angsuran",
        {"id": "a1", "pinjaman_id": "p2", "bulan_ke": 5, "amount": 100_000, "status": "PAID",
         "tanggal_bayar": "2024-06-01", "created_at": "2024-01-01"},
        {"id": "a2", "pinjaman_id": "p2", "bulan_ke": 6, "amount": 100_000, "status": "UNPAID",
         "tanggal_bayar": "2024-07-01", "created_at": "2024-01-01"},
        {"id": "a3", "pinjaman_id": "p2", "bulan_ke": 1, "amount": 100_000, "status": "LUNAS",
         "tanggal_bayar": "2024-02-01", "created_at": "2024-01-01"},
    )


class TestDashboard:

    def test_counters(self, koperasi):
        assert svc.statistik_dashboard() == {
            "total_anggota": 3,
            "pinjaman_aktif": 2,
            "pengajuan_pinjaman": 1,
            "angsuran_bermasalah": 2,
            "menunggu_persetujuan": 1,
        }

    def test_new_members_last_30_days(self, koperasi):
        baru = svc.anggota_baru(30, SEKARANG)
        assert [a["full_name"] for a in baru] == ["Ani"]


class TestLaporan:

    def test_monthly_report(self, koperasi):
        stats = svc.laporan_bulanan(SEKARANG)

        assert stats["simpanan_setor"] == 100_000
        assert stats["simpanan_tarik"] == 30_000
        assert stats["total_angsuran"] == 100_000
        assert stats["total_pencairan"] == 2_000_000
        assert stats["pendapatan"] == 200_000
        assert stats["pengeluaran"] == 2_030_000
        assert stats["cashflow"] == -1_830_000
        assert stats["jumlah_anggota_baru"] == 1
        assert stats["total_pinjaman_aktif"] == 3_000_000
        assert stats["total_saldo_simpanan"] == 120_000
        assert stats["periode"] == datetime(2024, 6, 1)

    def test_portfolio(self, koperasi):
        hasil = {p["full_name"]: p for p in svc.data_portofolio()}

        assert set(hasil) == {"Ani", "Budi Santoso", "Cici"}
        assert hasil["Budi Santoso"]["saldo_simpanan"] == 70_000
        assert hasil["Budi Santoso"]["hutang_berjalan"] == 2_000_000
        assert hasil["Cici"]["hutang_berjalan"] == 1_000_000


class TestTransaksi:

    def test_all_transactions_newest_first(self, koperasi):
        hasil = svc.daftar_transaksi()

        assert len(hasil) == 6
        assert hasil[0]["id"] == "A-a2"
        assert {t["type"] for t in hasil} == {"SIMPANAN", "ANGSURAN"}

    def test_filters(self, koperasi):
        juni = svc.daftar_transaksi(bulan="2024-06")
        assert {t["id"] for t in juni} == {"S-s1", "S-s2", "A-a1"}

        assert {t["id"] for t in svc.daftar_transaksi(status="UNPAID")} == {"S-s3", "A-a2"}
        assert {t["id"] for t in svc.daftar_transaksi(company="PT ABC")} == {"S-s3"}
        assert {t["id"] for t in svc.daftar_transaksi(cari="RS20240101")} == {"A-a1", "A-a2", "A-a3"}
