import logging

import pandas as pd
from supabase import create_client, Client

from kopssi.config import get_config

logger = logging.getLogger(__name__)

# Klien dibuat saat pertama kali dibutuhkan (test mengganti variabel ini)
supabase: Client = None


def get_supabase() -> Client:
    """Mengembalikan klien Supabase, membuatnya bila belum ada."""
    global supabase
    if supabase is None:
        config = get_config()
        if not config.SUPABASE_URL or not config.SUPABASE_KEY:
            raise RuntimeError("SUPABASE_URL dan SUPABASE_KEY belum diatur.")
        supabase = create_client(config.SUPABASE_URL, config.SUPABASE_KEY)
        logger.info("Berhasil konek ke Supabase")
    return supabase


def _terapkan_filter(query, filters):
    # filters: list of (operator, kolom, nilai), contoh ("eq", "status", "PAID")
    for operator, kolom, nilai in filters or []:
        query = getattr(query, operator)(kolom, nilai)
    return query


def fetch_rows(tabel, kolom="*", filters=None, order=None, desc=False, limit=None):
    """Mengambil baris dari tabel Supabase sebagai list of dict."""
    try:
        query = get_supabase().from_(tabel).select(kolom)
        query = _terapkan_filter(query, filters)
        if order:
            query = query.order(order, desc=desc)
        if limit:
            query = query.limit(limit)
        response = query.execute()
        return response.data or []
    except Exception:
        logger.exception("Error fetch_rows (%s)", tabel)
        raise


def load_data_from_db(tabel, kolom="*", filters=None, order=None, desc=False):
    """Mengambil data dari tabel Supabase dan mengembalikan DataFrame."""
    rows = fetch_rows(tabel, kolom, filters=filters, order=order, desc=desc)
    return pd.DataFrame(rows) if rows else pd.DataFrame()


def fetch_one(tabel, filters):
    """Satu baris pertama yang cocok, atau None."""
    rows = fetch_rows(tabel, filters=filters, limit=1)
    return rows[0] if rows else None


def hitung_baris(tabel, filters=None):
    try:
        query = get_supabase().from_(tabel).select("id", count="exact")
        response = _terapkan_filter(query, filters).execute()
        return response.count or 0
    except Exception:
        logger.exception("Error hitung_baris (%s)", tabel)
        raise


def append_data_to_db(tabel, data):
    """Menyimpan data (dictionary) ke tabel Supabase dan mengembalikan baris baru."""
    try:
        response = get_supabase().from_(tabel).insert(data).execute()
        return response.data[0] if response.data else None
    except Exception:
        logger.exception("Error append_data_to_db (%s)", tabel)
        raise


def insert_batch(tabel, rows):
    if not rows:
        return []
    try:
        response = get_supabase().from_(tabel).insert(rows).execute()
        return response.data or []
    except Exception:
        logger.exception("Error insert_batch (%s)", tabel)
        raise


def update_db(tabel, data, filters):
    """Update semua baris yang cocok dengan filter."""
    try:
        query = get_supabase().from_(tabel).update(data)
        response = _terapkan_filter(query, filters).execute()
        return response.data or []
    except Exception:
        logger.exception("Error update_db (%s)", tabel)
        raise


def delete_db(tabel, db_id):
    try:
        get_supabase().from_(tabel).delete().eq("id", db_id).execute()
    except Exception:
        logger.exception("Error delete_db (%s, %s)", tabel, db_id)
        raise


def upload_file(path, konten, content_type):
    """Upload file ke storage bucket dan mengembalikan public URL-nya."""
    bucket = get_config().STORAGE_BUCKET
    try:
        storage = get_supabase().storage.from_(bucket)
        storage.upload(
            path=path,
            file=konten,
            file_options={"content-type": content_type, "upsert": "true"},
        )
        return storage.get_public_url(path)
    except Exception:
        logger.exception("Gagal upload file ke %s/%s", bucket, path)
        raise
