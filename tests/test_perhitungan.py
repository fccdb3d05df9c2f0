"""
Tests for the pure calculations: formatting, numbering, interest,
savings balances and the exit payout formula.
"""

import random
import re
from datetime import datetime

import pytest

from kopssi.perhitungan import (
    buat_jadwal_angsuran,
    cocok_pencarian,
    format_rupiah,
    format_tanggal,
    gabung_transaksi,
    generate_no_anggota,
    generate_no_pinjaman,
    hitung_cicilan_bulanan,
    hitung_outstanding_angsuran,
    hitung_portofolio,
    hitung_potongan_pencairan,
    hitung_realisasi_keluar,
    hitung_saldo_simpanan,
    hitung_total_bunga,
    hitung_usia,
    kelompokkan_tagihan_simpanan,
    label_status_anggota,
    parse_angka,
    prefix_no_anggota,
    rincian_potongan_pencairan,
    ringkasan_keuangan,
    selisih_bulan,
    status_boleh_login,
    terbilang,
)

PINJAMAN_BERBUNGA = {"jumlah_pinjaman": 1_200_000, "tenor_bulan": 12, "tipe_bunga": "PERSENAN", "nilai_bunga": 1}


def simpanan(jenis, arah, amount, status="PAID", **extra):
    return {"type": jenis, "transaction_type": arah, "amount": amount, "status": status, **extra}


# --- Format ---

class TestFormat:

    def test_format_rupiah_uses_dot_separator(self):
        assert format_rupiah(1_250_000) == "Rp 1.250.000"

    def test_format_rupiah_negative(self):
        assert format_rupiah(-5000) == "-Rp 5.000"

    def test_format_rupiah_invalid_is_zero(self):
        assert format_rupiah("abc") == "Rp 0"
        assert format_rupiah(None) == "Rp 0"

    @pytest.mark.parametrize("masukan, hasil", [
        ("Rp 1.250.000", 1_250_000),
        ("75000", 75_000),
        ("1.500", 1_500),
        ("2,5", 2.5),
        (75000.0, 75_000),
        (float("nan"), 0),
        ("", 0),
        (None, 0),
    ])
    def test_parse_angka(self, masukan, hasil):
        assert parse_angka(masukan) == hasil

    def test_format_tanggal_indonesian_month(self):
        assert format_tanggal("2024-03-05") == "5 Maret 2024"
        assert format_tanggal("2024-12-31T10:00:00+07:00") == "31 Desember 2024"

    def test_format_tanggal_empty(self):
        assert format_tanggal(None) == "-"
        assert format_tanggal("", kosong="") == ""

    @pytest.mark.parametrize("angka, teks", [
        (0, "Nol"),
        (11, "Sebelas"),
        (15, "Lima Belas"),
        (100, "Seratus"),
        (1250, "Seribu Dua Ratus Lima Puluh"),
        (2_500_000, "Dua Juta Lima Ratus Ribu"),
    ])
    def test_terbilang(self, angka, teks):
        assert terbilang(angka) == teks


# --- Numbering ---

class TestNomorAnggota:

    def test_prefix_uses_month_and_two_digit_year(self):
        assert prefix_no_anggota(datetime(2024, 3, 5)) == "KS0324"

    def test_first_number_of_month(self):
        assert generate_no_anggota(datetime(2024, 3, 5), []) == "KS03240001"

    def test_next_number_follows_highest_sequence(self):
        terpakai = ["KS03240001", "KS03240007", "KS02240099", None, "bukan-nomor"]
        assert generate_no_anggota(datetime(2024, 3, 5), terpakai) == "KS03240008"

    def test_other_months_do_not_count(self):
        assert generate_no_anggota(datetime(2024, 4, 1), ["KS03240012"]) == "KS04240001"


class TestNomorPinjaman:

    def test_format(self):
        nomor = generate_no_pinjaman(datetime(2024, 3, 5), rng=random.Random(1))
        assert re.fullmatch(r"RS20240305-\d{4}", nomor)


# --- Status ---

class TestStatusLogin:

    @pytest.mark.parametrize("status", ["active", "Active", "approved", " APPROVED "])
    def test_allowed(self, status):
        assert status_boleh_login(status)

    @pytest.mark.parametrize("status", ["pending", "DONE VERIFIKASI", "PASIF", "NON_ACTIVE", None, ""])
    def test_rejected(self, status):
        assert not status_boleh_login(status)

    def test_labels(self):
        assert label_status_anggota("pending") == "BELUM TERVERIFIKASI"
        assert label_status_anggota(None) == "BELUM TERVERIFIKASI"
        assert label_status_anggota("NON_ACTIVE") == "NON AKTIF"
        assert label_status_anggota("active") == "ACTIVE"


# --- Interest & installments ---

class TestBunga:

    def test_percentage_is_monthly_rate_over_tenor(self):
        assert hitung_total_bunga(1_200_000, 12, "PERSENAN", 1) == pytest.approx(12_000)

    def test_nominal_is_total_interest(self):
        assert hitung_total_bunga(1_200_000, 12, "NOMINAL", 50_000) == 50_000

    def test_no_interest(self):
        assert hitung_total_bunga(1_200_000, 12, "NONE", 10) == 0
        assert hitung_total_bunga(1_200_000, 12, None, 10) == 0

    def test_monthly_installment_rounds_up(self):
        assert hitung_cicilan_bulanan(1_000_000, 3, "NONE", 0) == 333_334

    def test_zero_tenor(self):
        assert hitung_cicilan_bulanan(1_000_000, 0, "NONE", 0) == 0


class TestJadwalAngsuran:

    def test_schedule_rows(self):
        jadwal = buat_jadwal_angsuran("p1", 1_200_000, 3, "PERSENAN", 1, mulai=datetime(2024, 1, 31))

        assert [a["bulan_ke"] for a in jadwal] == [1, 2, 3]
        assert {a["amount"] for a in jadwal} == {401_000}
        assert {a["status"] for a in jadwal} == {"UNPAID"}
        assert {a["pinjaman_id"] for a in jadwal} == {"p1"}

    def test_due_dates_clamp_to_month_end(self):
        jadwal = buat_jadwal_angsuran("p1", 300_000, 3, "NONE", 0, mulai=datetime(2024, 1, 31))
        assert [a["tanggal_bayar"] for a in jadwal] == ["2024-02-29", "2024-03-31", "2024-04-30"]

    def test_outstanding_per_unpaid_installment(self):
        belum = [{"pinjaman": PINJAMAN_BERBUNGA}, {"pinjaman": PINJAMAN_BERBUNGA}, {"pinjaman": None}]
        assert hitung_outstanding_angsuran(belum) == (200_000, 2_000)


# --- Savings ---

class TestSaldoSimpanan:

    ROWS = [
        simpanan("POKOK", "SETOR", 100_000),
        simpanan("WAJIB", "SETOR", 75_000),
        simpanan("WAJIB", "SETOR", 75_000, status="UNPAID"),
        simpanan("SUKARELA", "SETOR", 50_000),
        simpanan("SUKARELA", "TARIK", 20_000),
        simpanan("WAJIB", "KOREKSI", 999),
    ]

    def test_setor_adds_and_tarik_subtracts(self):
        saldo = hitung_saldo_simpanan(self.ROWS)

        assert saldo["POKOK"] == 100_000
        assert saldo["WAJIB"] == 150_000
        assert saldo["SUKARELA"] == 30_000
        assert saldo["total"] == 280_000

    def test_only_paid(self):
        saldo = hitung_saldo_simpanan(self.ROWS, hanya_paid=True)
        assert saldo["WAJIB"] == 75_000
        assert saldo["total"] == 205_000

    def test_empty(self):
        assert hitung_saldo_simpanan([]) == {"POKOK": 0, "WAJIB": 0, "SUKARELA": 0, "total": 0}

    def test_unknown_type_not_in_total(self):
        saldo = hitung_saldo_simpanan([simpanan("WAJIB", "SETOR", 100), simpanan("LAIN", "SETOR", 900)])

        assert saldo["total"] == 100
        assert saldo["total"] == saldo["POKOK"] + saldo["WAJIB"] + saldo["SUKARELA"]

    def test_group_bills_per_member_month(self):
        rows = [
            simpanan("POKOK", "SETOR", 100_000, personal_data_id="a1", bulan_ke=3, jatuh_tempo="2024-03-01"),
            simpanan("WAJIB", "SETOR", 75_000, personal_data_id="a1", bulan_ke=3, jatuh_tempo="2024-03-01"),
            simpanan("WAJIB", "SETOR", 75_000, status="UNPAID", personal_data_id="a1", bulan_ke=4,
                     jatuh_tempo="2024-04-01"),
        ]
        tagihan = kelompokkan_tagihan_simpanan(rows)

        assert len(tagihan) == 2
        maret = next(t for t in tagihan if t["bulan_ke"] == 3)
        assert maret["total"] == 175_000
        assert maret["amount_pokok"] == 100_000
        assert maret["status"] == "PAID"
        april = next(t for t in tagihan if t["bulan_ke"] == 4)
        assert april["status"] == "UNPAID"

    def test_bill_without_month_is_kept(self):
        rows = [
            simpanan("WAJIB", "SETOR", 75_000, personal_data_id="a1", bulan_ke=None, jatuh_tempo="2024-03-01"),
            simpanan("WAJIB", "SETOR", 75_000, personal_data_id="a1", bulan_ke=3, jatuh_tempo="2024-03-01"),
        ]
        tagihan = kelompokkan_tagihan_simpanan(rows)

        assert sorted(t["bulan_ke"] or 0 for t in tagihan) == [0, 3]
        tanpa_bulan = next(t for t in tagihan if t["bulan_ke"] is None)
        assert tanpa_bulan["amount_wajib"] == 75_000


# --- Exit payout ---

class TestRealisasiKeluar:

    ANGGOTA = {
        "id": "a1", "full_name": "Siti", "no_npp": "777", "work_unit": "HR",
        "rek_gaji": "0011", "bank_gaji": "BNI 46", "tanggal_keluar": "2024-05-01",
    }

    def test_payout_formula(self):
        rows = [
            simpanan("POKOK", "SETOR", 100_000),
            simpanan("WAJIB", "SETOR", 300_000),
            simpanan("SUKARELA", "SETOR", 50_000),
            simpanan("WAJIB", "SETOR", 75_000, status="UNPAID"),
        ]
        belum = [{"pinjaman": PINJAMAN_BERBUNGA}, {"pinjaman": PINJAMAN_BERBUNGA}]

        hasil = hitung_realisasi_keluar(self.ANGGOTA, rows, belum, biaya_admin=5000)

        assert hasil["jumlah"] == 450_000
        assert hasil["outs_pokok"] == 200_000
        assert hasil["outs_bunga"] == 2_000
        assert hasil["admin"] == 5000
        assert hasil["diterima"] == 243_000
        assert hasil["uraian"] == "UNDUR DIRI"
        assert hasil["no_rek"] == "0011 (BNI 46)"
        assert hasil["status"] == "PENDING"

    def test_payout_can_be_negative(self):
        hasil = hitung_realisasi_keluar(self.ANGGOTA, [], [{"pinjaman": PINJAMAN_BERBUNGA}])
        assert hasil["diterima"] == -106_000


# --- Disbursement ---

class TestPotonganPencairan:

    def test_net_amount(self):
        hasil = hitung_potongan_pencairan({"jumlah_pinjaman": 5_000_000}, [{"amount": 401_000}, {"amount": 401_000}])
        assert hasil == {"potongan": 802_000, "bersih": 4_198_000}

    def test_breakdown_with_admin_fee(self):
        dipotong = [{"pinjaman": PINJAMAN_BERBUNGA}, {"pinjaman": PINJAMAN_BERBUNGA}]
        hasil = rincian_potongan_pencairan({"jumlah_pinjaman": 5_000_000}, dipotong, biaya_admin=5000)

        assert hasil["outs_pokok"] == 200_000
        assert hasil["outs_bunga"] == 2_000
        assert hasil["diterima"] == 4_793_000

    def test_breakdown_scaled_to_saved_outstanding(self):
        dipotong = [{"pinjaman": PINJAMAN_BERBUNGA}, {"pinjaman": PINJAMAN_BERBUNGA}]
        hasil = rincian_potongan_pencairan({"jumlah_pinjaman": 5_000_000, "outstanding": 303_000}, dipotong)

        assert hasil["outs_pokok"] == 300_000
        assert hasil["outs_bunga"] == 3_000
        assert hasil["total_potongan"] == 303_000


# --- Reports ---

class TestLaporan:

    def test_financial_summary(self):
        rows = [simpanan("WAJIB", "SETOR", 100_000), simpanan("SUKARELA", "SETOR", 50_000),
                simpanan("SUKARELA", "TARIK", 30_000)]
        hasil = ringkasan_keuangan(rows, [{"amount": 401_000}], [{"jumlah_pinjaman": 2_000_000}])

        assert hasil["pendapatan"] == 551_000
        assert hasil["pengeluaran"] == 2_030_000
        assert hasil["cashflow"] == -1_479_000

    def test_portfolio_skips_members_without_balance(self):
        anggota = [{"id": "a1", "full_name": "A"}, {"id": "a2", "full_name": "B"}, {"id": "a3", "full_name": "C"}]
        rows = [
            {"personal_data_id": "a1", "amount": 100_000, "transaction_type": "SETOR"},
            {"personal_data_id": "a1", "amount": 20_000, "transaction_type": "TARIK"},
        ]
        hasil = hitung_portofolio(anggota, rows, [{"personal_data_id": "a2", "jumlah_pinjaman": 1_000_000}])

        assert [h["full_name"] for h in hasil] == ["A", "B"]
        assert hasil[0]["saldo_simpanan"] == 80_000
        assert hasil[1]["hutang_berjalan"] == 1_000_000

    def test_transactions_newest_first(self):
        anggota_by_id = {"a1": {"full_name": "Budi", "nik": "1", "company": "PT"}}
        pinjaman_by_id = {"p1": {"personal_data_id": "a1", "no_pinjaman": "RS1"}}
        hasil = gabung_transaksi(
            [{"id": 1, "personal_data_id": "a1", "type": "WAJIB", "transaction_type": "SETOR",
              "amount": 75_000, "status": "PAID", "created_at": "2024-03-01", "bulan_ke": 3}],
            [{"id": 2, "pinjaman_id": "p1", "bulan_ke": 1, "amount": 401_000, "status": "PAID",
              "tanggal_bayar": "2024-04-01"}],
            anggota_by_id,
            pinjaman_by_id,
        )

        assert [t["type"] for t in hasil] == ["ANGSURAN", "SIMPANAN"]
        assert hasil[0]["reference"] == "RS1"
        assert hasil[1]["member"] == "Budi"


class TestHelpers:

    def test_search_is_case_insensitive(self):
        row = {"full_name": "Budi Santoso", "nik": "3171"}
        assert cocok_pencarian(row, "budi", ["full_name", "nik"])
        assert cocok_pencarian(row, "", ["full_name"])
        assert not cocok_pencarian(row, "siti", ["full_name", "nik"])

    def test_month_difference(self):
        assert selisih_bulan("2024-01-15", "2024-03-01") == 2

    def test_age(self):
        assert hitung_usia("1990-06-15", pada="2024-06-14") == 33
        assert hitung_usia(None) is None
