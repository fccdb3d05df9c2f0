"""
Shared test fixtures.

Every test runs against an in-memory stand-in for the Supabase client,
so no network and no real project are needed. The fake implements the
query builder calls the app uses: select (with count), filters, order,
limit, insert, update, delete, execute, and storage uploads.
"""

import copy
import itertools
import re

import pytest

from kopssi import database


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


def _sama(nilai, target):
    return nilai == target or (nilai is not None and str(nilai) == str(target))


def _bisa_dibanding(nilai):
    return nilai is not None and nilai != ""


def _kunci_urut(nilai):
    # Angka diurutkan sebagai angka, selain itu sebagai teks; None paling akhir
    if isinstance(nilai, (int, float)) and not isinstance(nilai, bool):
        return (False, 0, nilai, "")
    return (nilai is None, 1, 0, str(nilai or ""))


class FakeQuery:
    def __init__(self, db, tabel):
        self.db = db
        self.tabel = tabel
        self.aksi = "select"
        self.kolom = "*"
        self.count = None
        self.payload = None
        self.filters = []
        self.urutan = []
        self.batas = None
        self.satu = False

    # --- aksi ---
    def select(self, kolom="*", count=None):
        self.aksi = "select"
        self.kolom = kolom
        self.count = count
        return self

    def insert(self, data):
        self.aksi = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.aksi = "update"
        self.payload = data
        return self

    def delete(self):
        self.aksi = "delete"
        return self

    # --- filter ---
    def eq(self, kolom, nilai):
        self.filters.append(lambda r: _sama(r.get(kolom), nilai))
        return self

    def neq(self, kolom, nilai):
        self.filters.append(lambda r: not _sama(r.get(kolom), nilai))
        return self

    def in_(self, kolom, nilai):
        daftar = [str(v) for v in nilai]
        self.filters.append(lambda r: r.get(kolom) is not None and str(r.get(kolom)) in daftar)
        return self

    def ilike(self, kolom, pola):
        regex = re.compile("^" + ".*".join(re.escape(p) for p in pola.split("%")) + "$", re.IGNORECASE)
        self.filters.append(lambda r: r.get(kolom) is not None and bool(regex.match(str(r.get(kolom)))))
        return self

    def gte(self, kolom, nilai):
        self.filters.append(lambda r: _bisa_dibanding(r.get(kolom)) and str(r.get(kolom)) >= str(nilai))
        return self

    def lt(self, kolom, nilai):
        self.filters.append(lambda r: _bisa_dibanding(r.get(kolom)) and str(r.get(kolom)) < str(nilai))
        return self

    def lte(self, kolom, nilai):
        self.filters.append(lambda r: _bisa_dibanding(r.get(kolom)) and str(r.get(kolom)) <= str(nilai))
        return self

    def order(self, kolom, desc=False):
        self.urutan.append((kolom, desc))
        return self

    def limit(self, n):
        self.batas = n
        return self

    def single(self):
        self.satu = True
        return self

    # --- eksekusi ---
    def _cocok(self, row):
        return all(f(row) for f in self.filters)

    def _proyeksi(self, row):
        if self.kolom.strip() == "*":
            return copy.deepcopy(row)
        kolom = [k.strip() for k in self.kolom.split(",")]
        return {k: copy.deepcopy(row.get(k)) for k in kolom}

    def execute(self):
        rows = self.db.tables.setdefault(self.tabel, [])

        if self.aksi == "insert":
            baru = self.payload if isinstance(self.payload, list) else [self.payload]
            hasil = [self.db.simpan(self.tabel, row) for row in baru]
            return FakeResponse(copy.deepcopy(hasil))

        if self.aksi == "update":
            hasil = []
            for row in rows:
                if self._cocok(row):
                    row.update(copy.deepcopy(self.payload))
                    hasil.append(copy.deepcopy(row))
            return FakeResponse(hasil)

        if self.aksi == "delete":
            hapus = [r for r in rows if self._cocok(r)]
            self.db.tables[self.tabel] = [r for r in rows if not self._cocok(r)]
            return FakeResponse(copy.deepcopy(hapus))

        hasil = [r for r in rows if self._cocok(r)]
        for kolom, desc in reversed(self.urutan):
            hasil.sort(key=lambda r: _kunci_urut(r.get(kolom)), reverse=desc)
        total = len(hasil)
        if self.batas is not None:
            hasil = hasil[:self.batas]
        data = [self._proyeksi(r) for r in hasil]
        if self.satu:
            data = data[0] if data else None
        return FakeResponse(data, count=total if self.count else None)


class FakeBucket:
    def __init__(self, storage, nama):
        self.storage = storage
        self.nama = nama

    def upload(self, path, file, file_options=None):
        self.storage.files[(self.nama, path)] = (file, file_options or {})
        return {"path": path}

    def get_public_url(self, path):
        return f"https://storage.test/{self.nama}/{path}"


class FakeStorage:
    def __init__(self):
        self.files = {}

    def from_(self, nama):
        return FakeBucket(self, nama)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.storage = FakeStorage()
        self._id = itertools.count(1)

    def table(self, nama):
        return FakeQuery(self, nama)

    from_ = table

    def simpan(self, tabel, row):
        row = copy.deepcopy(row)
        row.setdefault("id", f"{tabel}-{next(self._id)}")
        self.tables.setdefault(tabel, []).append(row)
        return row

    def seed(self, tabel, *rows):
        hasil = [self.simpan(tabel, row) for row in rows]
        return hasil[0] if len(hasil) == 1 else hasil

    def rows(self, tabel):
        return self.tables.get(tabel, [])

    def get(self, tabel, row_id):
        return next((r for r in self.rows(tabel) if r["id"] == row_id), None)


@pytest.fixture(autouse=True)
def fake_db(monkeypatch):
    """Fresh fake Supabase for every test."""
    fake = FakeSupabase()
    monkeypatch.setattr(database, "supabase", fake)
    return fake


@pytest.fixture
def app():
    from kopssi.app import app as flask_app
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    with client.session_transaction() as sess:
        sess["user"] = {"id": "users-admin", "no_npp": "ADM01", "role": "ADMIN", "name": "Administrator"}
    return client


@pytest.fixture
def member(fake_db):
    """Anggota aktif lengkap dengan akun user-nya."""
    user = fake_db.seed("users", {"id": "users-m1", "no_npp": "12345", "password": "rahasia", "role": "MEMBER"})
    anggota = fake_db.seed("personal_data", {
        "id": "pd-m1",
        "user_id": user["id"],
        "full_name": "Budi Santoso",
        "no_npp": "12345",
        "nik": "3171000000000001",
        "no_anggota": "KS03240001",
        "company": "PT SSI",
        "work_unit": "IT",
        "status": "active",
        "rek_gaji": "0011223344",
        "bank_gaji": "BNI 46",
        "created_at": "2024-03-01T08:00:00",
    })
    return anggota


@pytest.fixture
def member_client(client, member):
    with client.session_transaction() as sess:
        sess["user"] = {
            "id": member["user_id"],
            "no_npp": member["no_npp"],
            "role": "MEMBER",
            "name": member["full_name"],
            "personal_data_id": member["id"],
        }
    return client
