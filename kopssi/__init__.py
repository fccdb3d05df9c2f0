"""KOPSSI - aplikasi manajemen anggota Koperasi Konsumen Swadharma Sarana Informatika."""

__version__ = "1.0.0"
