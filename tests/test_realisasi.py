"""
Tests for exit payouts of departing members and loan fund delivery.
"""

import pytest

from kopssi import realisasi as svc
from kopssi.perhitungan import KoperasiError


@pytest.fixture
def keluar(fake_db):
    """Anggota NON_ACTIVE dengan simpanan dan dua angsuran belum bayar."""
    anggota = fake_db.seed("personal_data", {
        "id": "pd-k1", "full_name": "Rina", "no_npp": "321", "work_unit": "HR", "company": "PT SSI",
        "status": "NON_ACTIVE", "exit_realisasi_status": "PENDING", "tanggal_keluar": "2024-05-10T10:00:00",
        "rek_gaji": "0099", "bank_gaji": "BCA",
    })
    fake_db.seed(
        "simpanan",
        {"personal_data_id": "pd-k1", "type": "POKOK", "amount": 100_000, "transaction_type": "SETOR", "status": "PAID"},
        {"personal_data_id": "pd-k1", "type": "WAJIB", "amount": 300_000, "transaction_type": "SETOR", "status": "PAID"},
        {"personal_data_id": "pd-k1", "type": "SUKARELA", "amount": 50_000, "transaction_type": "SETOR", "status": "PAID"},
    )
    fake_db.seed("pinjaman", {"id": "pin-k1", "personal_data_id": "pd-k1", "jumlah_pinjaman": 1_200_000,
                              "tenor_bulan": 12, "tipe_bunga": "PERSENAN", "nilai_bunga": 1, "status": "DICAIRKAN"})
    fake_db.seed(
        "angsuran",
        {"pinjaman_id": "pin-k1", "bulan_ke": 11, "amount": 101_000, "status": "UNPAID"},
        {"pinjaman_id": "pin-k1", "bulan_ke": 12, "amount": 101_000, "status": "UNPAID"},
        {"pinjaman_id": "pin-k1", "bulan_ke": 10, "amount": 101_000, "status": "PAID"},
    )
    return anggota


class TestRealisasiKaryawan:

    def test_pending_payout(self, keluar):
        hasil = svc.daftar_realisasi_keluar("BELUM")

        assert len(hasil) == 1
        baris = hasil[0]
        assert baris["nama"] == "Rina"
        assert baris["jumlah"] == 450_000
        assert baris["outs_pokok"] == 200_000
        assert baris["outs_bunga"] == 2_000
        assert baris["diterima"] == 243_000
        assert baris["no_rek"] == "0099 (BCA)"

    def test_date_filter_on_exit_date(self, keluar):
        assert svc.daftar_realisasi_keluar("BELUM", awal="2024-05-01", akhir="2024-05-10")
        assert svc.daftar_realisasi_keluar("BELUM", awal="2024-06-01") == []

    def test_confirm_moves_to_sent_tab(self, fake_db, keluar):
        assert svc.konfirmasi_realisasi_keluar(["pd-k1"]) == (1, 0)

        row = fake_db.get("personal_data", "pd-k1")
        assert row["exit_realisasi_status"] == "SENT"
        assert row["exit_realisasi_date"]
        assert svc.daftar_realisasi_keluar("BELUM") == []
        assert [r["status"] for r in svc.daftar_realisasi_keluar("SUDAH")] == ["SENT"]

    def test_confirm_requires_selection(self):
        with pytest.raises(KoperasiError, match="Pilih minimal satu"):
            svc.konfirmasi_realisasi_keluar([])

    def test_no_departing_members(self, member):
        assert svc.daftar_realisasi_keluar("BELUM") == []


@pytest.fixture
def dicairkan(fake_db, member):
    """Pinjaman baru yang dicairkan dengan memotong dua angsuran pinjaman lama."""
    fake_db.seed("pinjaman", {"id": "pin-lama", "personal_data_id": "pd-m1", "no_pinjaman": "RS20230101-1111",
                              "jumlah_pinjaman": 1_200_000, "tenor_bulan": 12, "tipe_bunga": "PERSENAN",
                              "nilai_bunga": 1, "status": "LUNAS"})
    fake_db.seed("pinjaman", {"id": "pin-baru", "personal_data_id": "pd-m1", "no_pinjaman": "RS20240601-2222",
                              "jumlah_pinjaman": 5_000_000, "jumlah_pengajuan": 6_000_000, "tenor_bulan": 10,
                              "tipe_bunga": "NOMINAL", "nilai_bunga": 250_000, "status": "DICAIRKAN",
                              "disbursed_at": "2024-06-03T10:00:00", "keperluan": "Renovasi"})
    fake_db.seed(
        "angsuran",
        {"pinjaman_id": "pin-lama", "bulan_ke": 11, "amount": 101_000, "status": "PAID",
         "metode_bayar": "POTONG_PENCAIRAN", "keterangan": "Dipotong dari pencairan RS20240601-2222"},
        {"pinjaman_id": "pin-lama", "bulan_ke": 12, "amount": 101_000, "status": "PAID",
         "metode_bayar": "POTONG_PENCAIRAN", "keterangan": "Dipotong dari pencairan RS20240601-2222"},
    )


class TestRealisasiPinjaman:

    def test_net_amount_after_deductions_and_fee(self, dicairkan):
        hasil = svc.daftar_realisasi_pinjaman()

        assert len(hasil) == 1
        baris = hasil[0]
        assert baris["nama"] == "Budi Santoso"
        assert baris["jumlah_pengajuan"] == 6_000_000
        assert baris["plafon"] == 5_000_000
        assert baris["bunga"] == 250_000
        assert baris["outs_pokok"] == 200_000
        assert baris["outs_bunga"] == 2_000
        assert baris["biaya"] == 5000
        assert baris["diterima"] == 4_793_000
        assert baris["delivery_status"] == "PENDING"

    def test_status_filter(self, fake_db, dicairkan):
        assert svc.daftar_realisasi_pinjaman(status="SUDAH") == []

        svc.konfirmasi_realisasi_pinjaman(["pin-baru"])

        assert fake_db.get("pinjaman", "pin-baru")["delivery_status"] == "SENT"
        assert svc.daftar_realisasi_pinjaman(status="BELUM") == []
        assert len(svc.daftar_realisasi_pinjaman(status="SUDAH")) == 1

    def test_date_filter_on_disbursement(self, dicairkan):
        assert svc.daftar_realisasi_pinjaman(awal="2024-06-01", akhir="2024-06-03")
        assert svc.daftar_realisasi_pinjaman(akhir="2024-05-31") == []
