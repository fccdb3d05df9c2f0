"""
Tests for the savings ledger: Excel upload matching, posting, monitoring.
"""

import pytest

from kopssi import simpanan as svc
from kopssi.perhitungan import KoperasiError


@pytest.fixture
def buku(fake_db, member):
    fake_db.seed("personal_data", {"id": "pd-x", "full_name": "Keluar", "nik": "999", "status": "NON_ACTIVE"})
    fake_db.seed(
        "simpanan",
        {"personal_data_id": "pd-m1", "type": "POKOK", "amount": 100_000, "transaction_type": "SETOR",
         "status": "PAID", "bulan_ke": 3, "jatuh_tempo": "2024-03-01", "created_at": "2024-03-01T09:00:00"},
        {"personal_data_id": "pd-m1", "type": "WAJIB", "amount": 75_000, "transaction_type": "SETOR",
         "status": "PAID", "bulan_ke": 3, "jatuh_tempo": "2024-03-01", "created_at": "2024-03-01T09:00:01"},
        {"personal_data_id": "pd-m1", "type": "WAJIB", "amount": 75_000, "transaction_type": "SETOR",
         "status": "UNPAID", "bulan_ke": 4, "jatuh_tempo": "2024-04-01", "created_at": "2024-04-01T09:00:00"},
        {"personal_data_id": "pd-m1", "type": "SUKARELA", "amount": 20_000, "transaction_type": "TARIK",
         "status": "PAID", "bulan_ke": 5, "jatuh_tempo": "2024-05-01", "created_at": "2024-05-02T09:00:00"},
    )
    return member


class TestUploadSimpanan:

    def test_template_lists_active_members_with_default_wajib(self, buku):
        baris = svc.anggota_aktif_untuk_template()

        assert baris == [{"nik": "3171000000000001", "full_name": "Budi Santoso",
                          "pokok": 0, "wajib": 75_000, "sukarela": 0}]

    def test_match_by_nik(self, buku):
        hasil = svc.cocokkan_upload_simpanan([
            {"nik": "3171000000000001", "nama": "budi", "pokok": "0", "wajib": "75.000", "sukarela": 10000},
            {"nik": "999", "nama": "Keluar", "wajib": 75000},
            {"nik": "123", "nama": "Asing"},
        ])

        assert [h["status"] for h in hasil] == ["VALID", "INVALID", "INVALID"]
        assert hasil[0]["nama"] == "Budi Santoso"
        assert hasil[0]["personal_data_id"] == "pd-m1"
        assert hasil[0]["wajib"] == 75_000
        assert hasil[2]["keterangan"]

    def test_post_only_valid_and_positive_amounts(self, fake_db, buku):
        awal = len(fake_db.rows("simpanan"))
        items = [
            {"personal_data_id": "pd-m1", "status": "VALID", "pokok": 0, "wajib": 75_000, "sukarela": 10_000},
            {"personal_data_id": None, "status": "INVALID", "pokok": 0, "wajib": 75_000, "sukarela": 0},
        ]

        jumlah = svc.proses_upload_simpanan(items, "2024-06")

        assert jumlah == 2
        baru = fake_db.rows("simpanan")[awal:]
        assert {b["type"] for b in baru} == {"WAJIB", "SUKARELA"}
        assert {b["jatuh_tempo"] for b in baru} == {"2024-06-01"}
        assert {b["bulan_ke"] for b in baru} == {6}
        assert {b["status"] for b in baru} == {"PAID"}
        assert {b["transaction_type"] for b in baru} == {"SETOR"}

    def test_nothing_valid(self, buku):
        with pytest.raises(KoperasiError, match="Tidak ada data valid"):
            svc.proses_upload_simpanan([{"status": "INVALID"}], "2024-06")

    def test_bad_period(self, buku):
        with pytest.raises(KoperasiError, match="YYYY-MM"):
            svc.proses_upload_simpanan([{"status": "VALID", "personal_data_id": "pd-m1"}], "06/2024")


class TestMonitorSimpanan:

    def test_range_groups_per_month(self, buku):
        hasil = svc.monitor_simpanan("2024-03", "2024-04")

        assert [t["bulan_ke"] for t in hasil] == [4, 3]
        maret = hasil[1]
        assert maret["total"] == 175_000
        assert maret["status"] == "PAID"
        assert maret["nama"] == "Budi Santoso"
        assert hasil[0]["status"] == "UNPAID"

    def test_search(self, buku):
        assert svc.monitor_simpanan("2024-03", "2024-05", cari="siti") == []
        assert len(svc.monitor_simpanan("2024-03", "2024-05", cari="12345")) == 3

    def test_end_before_start(self, buku):
        with pytest.raises(KoperasiError, match="tidak boleh sebelum"):
            svc.monitor_simpanan("2024-05", "2024-03")

    def test_december_range(self, fake_db, member):
        fake_db.seed("simpanan", {"personal_data_id": "pd-m1", "type": "WAJIB", "amount": 75_000,
                                  "transaction_type": "SETOR", "status": "PAID", "bulan_ke": 12,
                                  "jatuh_tempo": "2024-12-01"})
        assert len(svc.monitor_simpanan("2024-12", "2024-12")) == 1


class TestDetailSimpanan:

    def test_balance_and_history(self, buku):
        detail = svc.detail_simpanan("pd-m1")

        assert detail["anggota"]["full_name"] == "Budi Santoso"
        assert len(detail["riwayat"]) == 4
        assert detail["riwayat"][0]["type"] == "SUKARELA"
        assert detail["saldo"]["WAJIB"] == 150_000
        assert detail["saldo"]["SUKARELA"] == -20_000
        assert detail["saldo"]["total"] == 230_000

    def test_unknown_member(self):
        with pytest.raises(KoperasiError):
            svc.detail_simpanan("tidak-ada")
