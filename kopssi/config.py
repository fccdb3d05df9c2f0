import os
from functools import lru_cache

from dotenv import load_dotenv

# Baca file .env (jika ada) sebelum konfigurasi dibentuk
load_dotenv()


class Config:
    """Konfigurasi aplikasi yang diambil dari environment variable."""

    def __init__(self):
        # --- KONEKSI KE SUPABASE ---
        self.SUPABASE_URL = os.getenv("SUPABASE_URL", "")
        self.SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")
        self.STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "documents")

        # --- Flask ---
        self.SECRET_KEY = os.getenv("SECRET_KEY", "kopssi-kunci-rahasia-lokal")
        self.DEBUG = os.getenv("FLASK_DEBUG", "true").lower() in ("1", "true", "yes")
        self.PORT = int(os.getenv("PORT", "5001"))
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # --- Aturan koperasi ---
        self.BIAYA_ADMIN = int(os.getenv("BIAYA_ADMIN", "5000"))
        self.SIMPANAN_WAJIB_DEFAULT = int(os.getenv("SIMPANAN_WAJIB_DEFAULT", "75000"))


@lru_cache
def get_config() -> Config:
    return Config()
