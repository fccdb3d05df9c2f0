"""
Tests for the loan lifecycle: submission, assessment, disbursement with
deductions, installment payments and the installment Excel upload.
"""

from datetime import datetime
import re

import pytest

from kopssi import pinjaman as svc
from kopssi.perhitungan import KoperasiError

NIK = "3171000000000001"
NO_LAMA = "RS20230101-1111"
NO_BARU = "RS20240601-2222"


@pytest.fixture
def pengajuan(fake_db, member):
    return fake_db.seed("pinjaman", {
        "id": "pin-aju", "personal_data_id": "pd-m1", "no_pinjaman": "RS20240610-3333",
        "jumlah_pinjaman": 3_000_000, "jumlah_pengajuan": 3_000_000, "tenor_bulan": 12,
        "status": "PENGAJUAN", "kategori": "UANG", "created_at": "2024-06-10T09:00:00",
    })


@pytest.fixture
def berjalan(fake_db, member):
    """Pinjaman lama dengan dua angsuran tersisa dan pinjaman baru yang sudah disetujui."""
    fake_db.seed("pinjaman", {
        "id": "pin-lama", "personal_data_id": "pd-m1", "no_pinjaman": NO_LAMA, "jumlah_pinjaman": 1_200_000,
        "tenor_bulan": 12, "tipe_bunga": "PERSENAN", "nilai_bunga": 1, "status": "DICAIRKAN",
        "jenis_pinjaman": "BIASA", "created_at": "2023-01-01T09:00:00",
    })
    fake_db.seed("angsuran", *[
        {"id": f"ang-{b}", "pinjaman_id": "pin-lama", "bulan_ke": b, "amount": 101_000,
         "status": "PAID" if b <= 10 else "UNPAID", "tanggal_bayar": f"2024-{b:02d}-01"}
        for b in range(1, 13)
    ])
    fake_db.seed("pinjaman", {
        "id": "pin-baru", "personal_data_id": "pd-m1", "no_pinjaman": NO_BARU, "jumlah_pinjaman": 5_000_000,
        "tenor_bulan": 10, "tipe_bunga": "NOMINAL", "nilai_bunga": 250_000, "status": "DISETUJUI",
        "created_at": "2024-06-01T09:00:00",
    })


# --- Pengajuan ---

class TestPengajuan:

    def test_submit(self, fake_db, member):
        pinjaman = svc.ajukan_pinjaman("users-m1", "5.000.000", "10", "uang", " Renovasi ")

        assert pinjaman["status"] == "PENGAJUAN"
        assert pinjaman["jumlah_pinjaman"] == 5_000_000
        assert pinjaman["jumlah_pengajuan"] == 5_000_000
        assert pinjaman["tenor_bulan"] == 10
        assert pinjaman["jenis_pinjaman"] == "BIASA"
        assert pinjaman["keperluan"] == "Renovasi"
        assert re.fullmatch(r"RS\d{8}-\d{4}", pinjaman["no_pinjaman"])

    def test_goods_loan(self, member):
        assert svc.ajukan_pinjaman("users-m1", 1_000_000, 6, "barang", "")["jenis_pinjaman"] == "BARANG"

    @pytest.mark.parametrize("jumlah, tenor, pesan", [
        ("0", "10", "lebih dari 0"),
        ("1000000", "abc", "Tenor tidak valid"),
        ("1000000", "0", "Tenor harus"),
    ])
    def test_invalid(self, member, jumlah, tenor, pesan):
        with pytest.raises(KoperasiError, match=pesan):
            svc.ajukan_pinjaman("users-m1", jumlah, tenor, "UANG", "")

    def test_unknown_user(self):
        with pytest.raises(KoperasiError, match="Data personal"):
            svc.ajukan_pinjaman("users-x", 1_000_000, 6, "UANG", "")

    def test_history_newest_first(self, berjalan):
        assert [p["id"] for p in svc.riwayat_pengajuan("users-m1")] == ["pin-baru", "pin-lama"]
        assert svc.riwayat_pengajuan("users-x") == []

    def test_other_members_loan_hidden(self, berjalan):
        assert svc.pinjaman_milik_user("users-m1", "pin-baru")["no_pinjaman"] == NO_BARU
        with pytest.raises(KoperasiError, match="tidak ditemukan"):
            svc.pinjaman_milik_user("users-lain", "pin-baru")

    def test_list_with_search(self, pengajuan, berjalan):
        assert [p["id"] for p in svc.daftar_pinjaman("PENGAJUAN")] == ["pin-aju"]
        assert len(svc.daftar_pinjaman(["DISETUJUI", "DICAIRKAN"], cari="budi")) == 2
        assert svc.daftar_pinjaman("ALL", cari="siti") == []
        assert [p["id"] for p in svc.daftar_pinjaman(cari=NO_LAMA)] == ["pin-lama"]


# --- Assessment ---

class TestAssesment:

    def test_draft_keeps_status(self, fake_db, pengajuan):
        svc.simpan_draft("pin-aju", "2.500.000", False, "PERSENAN", "1")

        row = fake_db.get("pinjaman", "pin-aju")
        assert row["status"] == "PENGAJUAN"
        assert row["jumlah_pinjaman"] == 2_500_000
        assert row["tipe_bunga"] == "NONE"
        assert row["nilai_bunga"] == 0

    def test_approve_with_interest(self, fake_db, pengajuan):
        svc.setujui_pinjaman("pin-aju", "2.500.000", True, "PERSENAN", "1,5")

        row = fake_db.get("pinjaman", "pin-aju")
        assert row["status"] == "DISETUJUI"
        assert row["tipe_bunga"] == "PERSENAN"
        assert row["nilai_bunga"] == 1.5
        assert row["jumlah_pengajuan"] == 3_000_000

    def test_approve_requires_interest_value(self, pengajuan):
        with pytest.raises(KoperasiError, match="Nilai bunga"):
            svc.setujui_pinjaman("pin-aju", 2_500_000, True, "NOMINAL", "")

    def test_approve_zero_amount_rejected(self, fake_db, pengajuan):
        with pytest.raises(KoperasiError, match="harus lebih dari 0"):
            svc.setujui_pinjaman("pin-aju", 0, False, "PERSENAN", "")

        row = fake_db.get("pinjaman", "pin-aju")
        assert row["status"] == "PENGAJUAN"
        assert row["jumlah_pinjaman"] == 3_000_000

    def test_reject(self, fake_db, pengajuan):
        svc.tolak_pinjaman("pin-aju")
        assert fake_db.get("pinjaman", "pin-aju")["status"] == "DITOLAK"

    def test_decided_loan_cannot_be_assessed_again(self, berjalan):
        with pytest.raises(KoperasiError, match="tidak dapat dinilai"):
            svc.tolak_pinjaman("pin-baru")

    def test_simulation(self):
        assert svc.simulasi_pinjaman(1_200_000, 12, "PERSENAN", 1) == {
            "total_bunga": 12_000,
            "total_bayar": 1_212_000,
            "cicilan": 101_000,
        }

    def test_analysis_lists_other_active_loans(self, berjalan):
        analisa = svc.data_analisa(svc.ambil_pinjaman("pin-baru"))

        assert analisa["saldo"]["total"] == 0
        assert analisa["outstanding"] == [{
            "no_pinjaman": NO_LAMA,
            "jenis_pinjaman": "BIASA",
            "terbayar": "10/12",
            "outstanding": 200_000,
            "bunga_outstanding": 2_000,
            "angsuran_bulanan": 101_000,
        }]


# --- Pencairan ---

class TestPencairan:

    def test_deduction_candidates(self, berjalan):
        calon = svc.calon_potongan(svc.ambil_pinjaman("pin-baru"))

        assert len(calon) == 1
        assert calon[0]["terbayar"] == 10
        assert [a["id"] for a in calon[0]["angsuran"]] == ["ang-11", "ang-12"]
        assert calon[0]["sisa"] == {"pokok": 200_000, "bunga": 2_000}

    def test_disburse_with_deduction(self, fake_db, berjalan):
        hasil = svc.cairkan_pinjaman("pin-baru", ["ang-11", "ang-12"], mulai=datetime(2024, 6, 3))

        assert hasil == {"potongan": 202_000, "bersih": 4_798_000}
        baru = fake_db.get("pinjaman", "pin-baru")
        assert baru["status"] == "DICAIRKAN"
        assert baru["outstanding"] == 202_000
        assert baru["disbursed_at"]

        for a_id in ("ang-11", "ang-12"):
            angsuran = fake_db.get("angsuran", a_id)
            assert angsuran["status"] == "PAID"
            assert angsuran["metode_bayar"] == "POTONG_PENCAIRAN"
            assert NO_BARU in angsuran["keterangan"]
        assert fake_db.get("pinjaman", "pin-lama")["status"] == "LUNAS"

        jadwal = [a for a in fake_db.rows("angsuran") if a["pinjaman_id"] == "pin-baru"]
        assert len(jadwal) == 10
        assert {a["amount"] for a in jadwal} == {525_000}
        assert jadwal[0]["tanggal_bayar"] == "2024-07-03"

    def test_disburse_without_deduction(self, fake_db, berjalan):
        assert svc.cairkan_pinjaman("pin-baru") == {"potongan": 0, "bersih": 5_000_000}
        assert fake_db.get("pinjaman", "pin-lama")["status"] == "DICAIRKAN"

    def test_invalid_installment_selected(self, fake_db, berjalan):
        with pytest.raises(KoperasiError, match="tidak valid"):
            svc.cairkan_pinjaman("pin-baru", ["ang-3"])
        assert fake_db.get("pinjaman", "pin-baru")["status"] == "DISETUJUI"

    def test_deduction_larger_than_loan(self, fake_db, berjalan):
        fake_db.get("pinjaman", "pin-baru")["jumlah_pinjaman"] = 100_000
        with pytest.raises(KoperasiError, match="melebihi"):
            svc.cairkan_pinjaman("pin-baru", ["ang-11", "ang-12"])

    def test_only_approved_loans(self, pengajuan):
        with pytest.raises(KoperasiError, match="DISETUJUI"):
            svc.cairkan_pinjaman("pin-aju")

    def test_upload_signed_agreement(self, fake_db, berjalan):
        url = svc.upload_spk("pin-baru", "spk.PDF", b"%PDF-1.4", "application/pdf")

        assert url.startswith(f"https://storage.test/documents/spk/spk_signed_admin_{NO_BARU}_")
        assert url.endswith(".pdf")
        assert fake_db.get("pinjaman", "pin-baru")["link_spk_signed"] == url

    def test_upload_requires_file(self, berjalan):
        with pytest.raises(KoperasiError, match="wajib"):
            svc.upload_spk("pin-baru", "spk.pdf", b"", "application/pdf")


# --- Angsuran ---

class TestAngsuran:

    def test_pay_marks_loan_paid_off_on_last_installment(self, fake_db, berjalan):
        svc.bayar_angsuran("ang-11")
        assert fake_db.get("angsuran", "ang-11")["metode_bayar"] == "MANUAL"
        assert fake_db.get("pinjaman", "pin-lama")["status"] == "DICAIRKAN"

        svc.bayar_angsuran("ang-12")
        assert fake_db.get("pinjaman", "pin-lama")["status"] == "LUNAS"

    def test_pay_twice(self, berjalan):
        with pytest.raises(KoperasiError, match="sudah dibayar"):
            svc.bayar_angsuran("ang-1")

    def test_monitoring_filters(self, berjalan):
        assert [a["id"] for a in svc.monitor_angsuran("UNPAID")] == ["ang-11", "ang-12"]
        assert len(svc.monitor_angsuran("PAID", cari=NO_LAMA)) == 10
        assert svc.monitor_angsuran(company="PT ABC") == []
        assert svc.monitor_angsuran("UNPAID")[0]["pinjaman"]["personal_data"]["full_name"] == "Budi Santoso"

    def test_upload_matching(self, berjalan):
        kunci = {"nik": NIK, "no_pinjaman": NO_LAMA}
        hasil = svc.cocokkan_upload_angsuran([
            {**kunci, "angsuran_ke": "", "status": "Lunas"},
            {**kunci, "angsuran_ke": None, "status": "PAID"},
            {**kunci, "angsuran_ke": None, "status": "PAID"},
            {"nik": "000", "no_pinjaman": NO_LAMA, "status": "PAID"},
            {**kunci, "status": "BELUM"},
        ])

        assert [h["status"] for h in hasil] == ["MATCHED", "MATCHED", "UNMATCHED", "UNMATCHED", "SKIPPED"]
        assert [h["angsuran_id"] for h in hasil[:2]] == ["ang-11", "ang-12"]
        assert hasil[0]["nama"] == "Budi Santoso"
        assert hasil[0]["amount"] == 101_000

    def test_upload_matching_by_installment_number(self, berjalan):
        hasil = svc.cocokkan_upload_angsuran([{"nik": NIK, "no_pinjaman": NO_LAMA, "angsuran_ke": "12", "status": "PAID"}])
        assert hasil[0]["angsuran_id"] == "ang-12"

    def test_process_upload(self, fake_db, berjalan):
        assert svc.proses_upload_angsuran(["ang-11", "ang-12"]) == (2, 0)
        assert fake_db.get("angsuran", "ang-11")["metode_bayar"] == "UPLOAD"
        assert fake_db.get("pinjaman", "pin-lama")["status"] == "LUNAS"

        assert svc.proses_upload_angsuran(["ang-11"]) == (0, 1)

    def test_process_upload_empty(self):
        with pytest.raises(KoperasiError):
            svc.proses_upload_angsuran([])


class TestRingkasanMember:

    def test_dashboard_summary(self, fake_db, berjalan):
        fake_db.seed("simpanan", {"personal_data_id": "pd-m1", "type": "WAJIB", "amount": 75_000,
                                  "transaction_type": "SETOR", "status": "PAID", "created_at": "2024-06-01"})

        ringkasan = svc.ringkasan_member("users-m1")

        assert ringkasan["anggota"]["id"] == "pd-m1"
        assert ringkasan["saldo"]["total"] == 75_000
        assert len(ringkasan["pinjaman"]) == 2
        assert len(ringkasan["angsuran"]) == 12
        assert ringkasan["angsuran"][0]["no_pinjaman"] == NO_LAMA
        assert ringkasan["total_pinjaman_aktif"] == 1_200_000
        assert ringkasan["angsuran_berikutnya"]["id"] == "ang-11"

    def test_unknown_user(self):
        with pytest.raises(KoperasiError):
            svc.ringkasan_member("users-x")
