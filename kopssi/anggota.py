"""Login, data anggota, verifikasi keanggotaan, dan master data."""
import base64
import hmac
import logging
import secrets
import time
from datetime import datetime

from werkzeug.security import check_password_hash, generate_password_hash

from kopssi import database as db
from kopssi.perhitungan import (
    KoperasiError,
    cocok_pencarian,
    generate_no_anggota,
    label_status_anggota,
    prefix_no_anggota,
    status_boleh_login,
)

logger = logging.getLogger(__name__)

KATEGORI_MASTER = {
    "company": "Perusahaan (PT)",
    "work_unit": "Unit Kerja",
    "lokasi": "Lokasi",
    "loan_category": "Kategori Pinjaman",
}

# Pilihan tetap di form tambah anggota
OPSI_JABATAN = ["Staff", "Supervisor", "Manager", "Director"]
OPSI_OPS = ["OPS A", "OPS B"]
OPSI_BANK = ["BNI 46", "BCA", "MANDIRI", "BRI"]
OPSI_JENIS_KELAMIN = ["Laki-laki", "Perempuan"]

DEFAULT_FORM_ANGGOTA = {
    "status_simp_anggota": "AKTIF",
    "bank_gaji": "BNI 46",
    "jenis_kelamin": "Laki-laki",
    "tagihan_parkir": "N",
    "keluar_anggota": "N",
}

STATUS_PENGAJUAN = ["pending", "DONE VERIFIKASI"]

_PREFIX_HASH = ("scrypt:", "pbkdf2:")


def _sekarang():
    return datetime.now().isoformat()


def cek_password(tersimpan, password):
    """Cocokkan password; hash werkzeug atau nilai lama yang masih plaintext."""
    if not tersimpan or not password:
        return False
    if tersimpan.startswith(_PREFIX_HASH):
        return check_password_hash(tersimpan, password)
    return hmac.compare_digest(str(tersimpan), str(password))


# ---------------- Login ----------------
def login(no_npp, password):
    """Autentikasi dengan NPP + password, mengembalikan payload sesi."""
    no_npp = (no_npp or "").strip()
    user = db.fetch_one("users", [("eq", "no_npp", no_npp)]) if no_npp else None
    if not user or not cek_password(user.get("password"), password):
        logger.info("Login gagal untuk NPP %s", no_npp)
        raise KoperasiError("NPP atau password salah")

    personal = db.fetch_one("personal_data", [("eq", "user_id", user["id"])])

    if user.get("role") == "ADMIN":
        nama = (personal or {}).get("full_name") or "Administrator"
        logger.info("Admin %s login", no_npp)
        return {"id": user["id"], "no_npp": user["no_npp"], "role": "ADMIN", "name": nama}

    if not personal:
        raise KoperasiError("Data personal tidak ditemukan")
    if not status_boleh_login(personal.get("status")):
        raise KoperasiError("Akun Anda belum aktif / belum disetujui")

    logger.info("Anggota %s login", no_npp)
    return {
        "id": user["id"],
        "no_npp": user["no_npp"],
        "role": user.get("role") or "MEMBER",
        "name": personal.get("full_name"),
        "personal_data_id": personal["id"],
    }


def ubah_password(user_id, password_lama, password_baru):
    user = db.fetch_one("users", [("eq", "id", user_id)])
    if not user or not cek_password(user.get("password"), password_lama):
        raise KoperasiError("Password lama salah.")
    if len(password_baru or "") < 6:
        raise KoperasiError("Password baru minimal 6 karakter.")
    db.update_db("users", {"password": generate_password_hash(password_baru)}, [("eq", "id", user_id)])


# ---------------- Master Data ----------------
def ambil_master_data():
    """Master data dikelompokkan per kategori: {kategori: [row, ...]}."""
    rows = db.fetch_rows("master_data", order="value")
    hasil = {kategori: [] for kategori in KATEGORI_MASTER}
    for row in rows:
        hasil.setdefault(row.get("category"), []).append(row)
    return hasil


def opsi_master_data():
    return {kategori: [r["value"] for r in rows] for kategori, rows in ambil_master_data().items()}


def tambah_master_data(kategori, nilai):
    nilai = (nilai or "").strip()
    if kategori not in KATEGORI_MASTER:
        raise KoperasiError("Kategori master data tidak dikenal.")
    if not nilai:
        raise KoperasiError("Nilai tidak boleh kosong.")
    return db.append_data_to_db("master_data", {"category": kategori, "value": nilai})


def hapus_master_data(master_id):
    db.delete_db("master_data", master_id)


# ---------------- Data Anggota ----------------
def generate_no_anggota_db(tanggal=None):
    """Nomor anggota berikutnya berdasarkan nomor yang sudah tersimpan."""
    tanggal = tanggal or datetime.now()
    prefix = prefix_no_anggota(tanggal)
    rows = db.fetch_rows("personal_data", "no_anggota", filters=[("ilike", "no_anggota", f"{prefix}%")])
    return generate_no_anggota(tanggal, [r.get("no_anggota") for r in rows])


def buat_payload_anggota(data, user_id, no_anggota):
    """Petakan field form tambah anggota ke kolom tabel personal_data."""
    def ambil(key):
        nilai = data.get(key)
        if nilai is None:
            nilai = DEFAULT_FORM_ANGGOTA.get(key, "")
        return str(nilai).strip()

    sekarang = _sekarang()
    return {
        "user_id": user_id,
        "no_anggota": no_anggota,
        "full_name": ambil("full_name"),
        "nik": ambil("no_ktp"),
        "no_npp": ambil("no_npp"),
        "jenis_kelamin": ambil("jenis_kelamin"),
        "tempat_lahir": ambil("tempat_lahir"),
        "tanggal_lahir": ambil("tanggal_lahir") or None,
        "no_sim": ambil("no_ktp"),
        "phone": ambil("hp_1"),
        "address": ambil("address"),
        "alamat_tinggal": ambil("alamat_tinggal"),
        "email": ambil("email"),
        "telp_rumah_1": ambil("telp_rumah_1"),
        "telp_rumah_2": ambil("telp_rumah_2"),
        "hp_1": ambil("hp_1"),
        "hp_2": ambil("hp_2"),
        "company": ambil("company"),
        "work_unit": ambil("work_unit"),
        "employment_status": ambil("jabatan"),
        "ops": ambil("ops"),
        "lokasi": ambil("lokasi"),
        "status_simp_anggota": ambil("status_simp_anggota"),
        "tagihan_parkir": ambil("tagihan_parkir").upper() == "Y",
        "rek_pribadi": ambil("rek_pribadi"),
        "rek_gaji": ambil("rek_gaji"),
        "bank_gaji": ambil("bank_gaji"),
        "keluar_anggota": ambil("keluar_anggota").upper() == "Y",
        "tanggal_keluar": ambil("tanggal_keluar") or None,
        "sebab_keluar": ambil("sebab_keluar"),
        "keterangan": ambil("keterangan"),
        "last_update": sekarang,
        "status": "pending",
        "created_at": sekarang,
    }


def simpan_anggota(data, no_anggota):
    """Simpan anggota baru (status pending) beserta akun user-nya."""
    nama = (data.get("full_name") or "").strip()
    no_npp = str(data.get("no_npp") or "").strip()
    if not nama or not no_npp:
        raise KoperasiError("Nama lengkap dan NPP wajib diisi.")

    # 1. Cari user dengan NPP yang sama, buat baru jika belum ada
    user = db.fetch_one("users", [("eq", "no_npp", no_npp)])
    if not user:
        user = db.append_data_to_db("users", {
            "no_npp": no_npp,
            "password": generate_password_hash(secrets.token_urlsafe(12)),
            "role": "MEMBER",
            "email": (data.get("email") or "").strip() or None,
        })

    # 2. Simpan data personal
    payload = buat_payload_anggota(data, user["id"], no_anggota)
    anggota = db.append_data_to_db("personal_data", payload)
    logger.info("Anggota baru %s (%s) disimpan", no_anggota, no_npp)
    return anggota


def impor_anggota(daftar_baris):
    """Simpan baris-baris hasil upload Excel satu per satu.

    Baris yang gagal dicatat dan dilewati; baris yang sudah tersimpan tidak
    dibatalkan. Mengembalikan (berhasil, gagal).
    """
    berhasil = 0
    gagal = 0
    for baris in daftar_baris:
        if not isinstance(baris, dict):
            logger.warning("Baris impor anggota tidak valid: %r", baris)
            gagal += 1
            continue
        try:
            no_anggota = generate_no_anggota_db(datetime.now())
            simpan_anggota(baris, no_anggota)
            berhasil += 1
        except Exception:
            logger.exception("Gagal impor anggota NPP %s", baris.get("no_npp"))
            gagal += 1
    logger.info("Impor anggota selesai. Berhasil: %s, Gagal: %s", berhasil, gagal)
    return berhasil, gagal


def _dengan_label(rows):
    for row in rows:
        row["status_label"] = label_status_anggota(row.get("status"))
    return rows


def daftar_anggota(cari="", company=""):
    rows = db.fetch_rows("personal_data", order="created_at", desc=True)
    rows = [
        r for r in rows
        if cocok_pencarian(r, cari, ["full_name", "no_npp", "nik"])
        and (not company or r.get("company") == company)
    ]
    return _dengan_label(rows)


def daftar_pengajuan_anggota(cari="", company=""):
    rows = db.fetch_rows(
        "personal_data",
        filters=[("in_", "status", STATUS_PENGAJUAN)],
        order="created_at",
        desc=True,
    )
    rows = [
        r for r in rows
        if cocok_pencarian(r, cari, ["full_name", "nik", "phone"])
        and (not company or r.get("company") == company)
    ]
    return _dengan_label(rows)


def ambil_anggota(personal_data_id):
    anggota = db.fetch_one("personal_data", [("eq", "id", personal_data_id)])
    if not anggota:
        raise KoperasiError("Data anggota tidak ditemukan.")
    anggota["status_label"] = label_status_anggota(anggota.get("status"))
    return anggota


def ambil_anggota_by_user(user_id):
    anggota = db.fetch_one("personal_data", [("eq", "user_id", user_id)])
    if not anggota:
        raise KoperasiError("Data personal tidak ditemukan")
    return anggota


def hitung_pending_verifikasi():
    return db.hitung_baris("personal_data", [("eq", "status", "DONE VERIFIKASI")])


def setujui_anggota(personal_data_id):
    anggota = ambil_anggota(personal_data_id)
    if anggota.get("status") != "DONE VERIFIKASI":
        raise KoperasiError("Anggota belum menyelesaikan verifikasi.")
    if anggota.get("user_id"):
        db.update_db("users", {"role": "MEMBER"}, [("eq", "id", anggota["user_id"])])
    db.update_db(
        "personal_data",
        {"status": "active", "last_update": _sekarang()},
        [("eq", "id", personal_data_id)],
    )
    logger.info("Anggota %s disetujui", anggota.get("no_npp"))


def pasifkan_anggota(personal_data_id):
    db.update_db(
        "personal_data",
        {"status": "PASIF", "last_update": _sekarang()},
        [("eq", "id", personal_data_id)],
    )


def nonaktifkan_anggota(personal_data_id):
    """Anggota keluar; masuk antrian realisasi karyawan (PENDING)."""
    sekarang = _sekarang()
    db.update_db(
        "personal_data",
        {
            "status": "NON_ACTIVE",
            "keluar_anggota": True,
            "tanggal_keluar": sekarang,
            "sebab_keluar": "NONAKTIFKAN OLEH ADMIN",
            "exit_realisasi_status": "PENDING",
            "last_update": sekarang,
        },
        [("eq", "id", personal_data_id)],
    )
    logger.info("Anggota id=%s dinonaktifkan", personal_data_id)


# ---------------- Verifikasi Keanggotaan ----------------
def tampilan_verifikasi(status):
    """Tampilan yang sesuai status: 'done', 'active', atau 'form'."""
    s = str(status or "").strip().lower()
    if s == "done verifikasi":
        return "done"
    if s in ("active", "verified", "approved"):
        return "active"
    return "form"


def cari_untuk_verifikasi(no_npp):
    no_npp = (no_npp or "").strip()
    if not no_npp:
        raise KoperasiError("NPP wajib diisi.")
    anggota = db.fetch_one("personal_data", [("eq", "no_npp", no_npp)])
    if not anggota:
        raise KoperasiError("Data NPP tidak ditemukan. Silakan hubungi admin untuk pendaftaran.")
    if not anggota.get("user_id"):
        raise KoperasiError("Data user belum terintegrasi. Silakan hubungi admin.")
    return anggota, tampilan_verifikasi(anggota.get("status"))


def decode_data_url(data_url):
    """'data:image/png;base64,....' -> bytes."""
    try:
        header, isi = data_url.split(",", 1)
        if ";base64" not in header:
            raise ValueError("bukan base64")
        return base64.b64decode(isi, validate=True)
    except (ValueError, AttributeError) as e:
        raise KoperasiError("Format tanda tangan tidak valid.") from e


def kirim_verifikasi(no_npp, ttd_data_url, foto, password):
    """Simpan password, tanda tangan, dan foto 3x4; status -> DONE VERIFIKASI.

    `foto` adalah tuple (nama_file, konten_bytes, content_type).
    """
    anggota, tampilan = cari_untuk_verifikasi(no_npp)
    if tampilan != "form":
        raise KoperasiError("Data Anda sudah diverifikasi.")
    if not ttd_data_url:
        raise KoperasiError("Tanda tangan wajib diisi.")
    if not foto or not foto[1]:
        raise KoperasiError("Foto 3x4 wajib diunggah.")
    if len(password or "") < 6:
        raise KoperasiError("Password minimal 6 karakter.")

    ttd_bytes = decode_data_url(ttd_data_url)
    nama_foto, isi_foto, tipe_foto = foto
    ekstensi = nama_foto.rsplit(".", 1)[-1].lower() if "." in nama_foto else "jpg"
    ts = int(time.time() * 1000)

    # 1. Password baru
    db.update_db("users", {"password": generate_password_hash(password)}, [("eq", "id", anggota["user_id"])])

    # 2. Upload dokumen
    url_ttd = db.upload_file(f"signatures/sig_{anggota['no_npp']}_{ts}.png", ttd_bytes, "image/png")
    url_foto = db.upload_file(
        f"photos/photo_{anggota['no_npp']}_{ts}.{ekstensi}",
        isi_foto,
        tipe_foto or "image/jpeg",
    )

    # 3. Tandai selesai verifikasi
    db.update_db(
        "personal_data",
        {
            "signature_image": url_ttd,
            "photo_34_file_path": url_foto,
            "status": "DONE VERIFIKASI",
            "last_update": _sekarang(),
        },
        [("eq", "id", anggota["id"])],
    )
    logger.info("Verifikasi NPP %s selesai", anggota["no_npp"])
    return anggota
