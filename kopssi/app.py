import json
import logging
from datetime import datetime
from functools import wraps
from io import BytesIO

from flask import (
    Flask,
    abort,
    flash,
    jsonify,
    redirect,
    render_template_string,
    request,
    send_file,
    session,
    url_for,
)
from werkzeug.exceptions import HTTPException

from kopssi import anggota as svc_anggota
from kopssi import excel_io, laporan, pdf_forms, pinjaman as svc_pinjaman, realisasi, simpanan as svc_simpanan
from kopssi.config import get_config
from kopssi.perhitungan import (
    KoperasiError,
    format_angka,
    format_bulan_tahun,
    format_rupiah,
    format_tanggal,
    parse_angka,
)
from kopssi.tampilan import (
    HTML_ADMIN_DASHBOARD,
    HTML_ASSESMENT,
    HTML_ASSESMENT_DETAIL,
    HTML_BERANDA,
    HTML_CEK_KEANGGOTAAN,
    HTML_DATA_ANGGOTA,
    HTML_DETAIL_ANGGOTA,
    HTML_DETAIL_SIMPANAN,
    HTML_ERROR,
    HTML_LAPORAN,
    HTML_LAYOUT,
    HTML_LOGIN,
    HTML_MASTER_DATA,
    HTML_MEMBER_ANGSURAN,
    HTML_MEMBER_DASHBOARD,
    HTML_MEMBER_DETAIL_PENGAJUAN,
    HTML_MEMBER_PENGAJUAN,
    HTML_MEMBER_PINJAMAN,
    HTML_MEMBER_PROFIL,
    HTML_MEMBER_RIWAYAT,
    HTML_MEMBER_SIMPANAN,
    HTML_MONITOR_ANGSURAN,
    HTML_MONITOR_PINJAMAN,
    HTML_MONITOR_SIMPANAN,
    HTML_PENCAIRAN,
    HTML_PENCAIRAN_DETAIL,
    HTML_PENGAJUAN_ANGGOTA,
    HTML_REALISASI_KARYAWAN,
    HTML_REALISASI_PINJAMAN,
    HTML_TAMBAH_ANGGOTA,
    HTML_TRANSAKSI,
    HTML_UPLOAD_ANGSURAN,
    HTML_UPLOAD_SIMPANAN,
)

config = get_config()

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# ---------------- Inisialisasi Flask ----------------
app = Flask(__name__)
app.secret_key = config.SECRET_KEY

app.jinja_env.filters['rupiah'] = format_rupiah
app.jinja_env.filters['angka'] = format_angka
app.jinja_env.filters['tanggal'] = format_tanggal
app.jinja_env.filters['bulan_tahun'] = format_bulan_tahun


# ---------------- Helper Functions ----------------
def render_halaman(konten, **context):
    full_html = HTML_LAYOUT.replace('{% block content %}{% endblock %}', konten)
    return render_template_string(full_html, **context)


def user_login():
    return session.get('user') or {}


def kirim_pdf(konten, nama_file):
    """?preview=1 membuka PDF di tab browser, selain itu diunduh."""
    preview = request.args.get('preview') == '1'
    return send_file(
        BytesIO(konten),
        mimetype='application/pdf',
        as_attachment=not preview,
        download_name=nama_file,
    )


def kirim_excel(konten, nama_file):
    return send_file(
        BytesIO(konten),
        mimetype=excel_io.MIMETYPE_XLSX,
        as_attachment=True,
        download_name=nama_file,
    )


def file_upload(nama_field):
    file = request.files.get(nama_field)
    if not file or file.filename == '':
        raise KoperasiError("Pilih file terlebih dahulu.")
    return file


def json_dari_form(nama_field):
    try:
        data = json.loads(request.form.get(nama_field) or '[]')
    except ValueError as e:
        raise KoperasiError("Data preview tidak valid, silakan upload ulang.") from e
    if not isinstance(data, list):
        raise KoperasiError("Data preview tidak valid, silakan upload ulang.")
    return data


def tanggal_file():
    return datetime.now().strftime('%Y%m%d')


def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user' not in session:
            flash("Silakan login terlebih dahulu.", "danger")
            return redirect(url_for('login_page'))
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if user_login().get('role') != 'ADMIN':
            flash("Halaman ini khusus admin.", "danger")
            return redirect(url_for('member_dashboard_page'))
        return f(*args, **kwargs)
    return decorated_function


# ---------------- Halaman Publik ----------------
@app.route('/')
def beranda_page():
    return render_halaman(HTML_BERANDA, title="Beranda")


@app.route('/login', methods=['GET', 'POST'])
def login_page():
    if 'user' in session:
        return redirect(url_for('admin_dashboard_page' if user_login().get('role') == 'ADMIN' else 'member_dashboard_page'))

    no_npp = ''
    if request.method == 'POST':
        no_npp = request.form.get('no_npp', '').strip()
        try:
            payload = svc_anggota.login(no_npp, request.form.get('password', ''))
        except KoperasiError as e:
            flash(str(e), "danger")
        else:
            session.clear()
            session['user'] = payload
            flash(f"Selamat datang, {payload['name']}!", "success")
            if payload['role'] == 'ADMIN':
                return redirect(url_for('admin_dashboard_page'))
            return redirect(url_for('member_dashboard_page'))
    return render_halaman(HTML_LOGIN, title="Login", no_npp=no_npp)


@app.route('/logout')
def logout_page():
    session.clear()
    flash("Anda telah logout.", "success")
    return redirect(url_for('login_page'))


@app.route('/cek-keanggotaan')
def cek_keanggotaan_page():
    no_npp = request.args.get('no_npp', '').strip()
    anggota = None
    tampilan = None
    if no_npp:
        try:
            anggota, tampilan = svc_anggota.cari_untuk_verifikasi(no_npp)
        except KoperasiError as e:
            flash(str(e), "danger")
    return render_halaman(
        HTML_CEK_KEANGGOTAAN, title="Cek Keanggotaan", no_npp=no_npp, anggota=anggota, tampilan=tampilan
    )


@app.route('/cek-keanggotaan/verifikasi', methods=['POST'])
def verifikasi_page():
    no_npp = request.form.get('no_npp', '').strip()
    try:
        foto = request.files.get('foto')
        data_foto = (foto.filename, foto.read(), foto.mimetype) if foto and foto.filename else None
        svc_anggota.kirim_verifikasi(
            no_npp,
            request.form.get('tanda_tangan', ''),
            data_foto,
            request.form.get('password', ''),
        )
        flash("Verifikasi berhasil dikirim. Tunggu persetujuan admin.", "success")
    except KoperasiError as e:
        flash(str(e), "danger")
    except Exception:
        logger.exception("Verifikasi NPP %s gagal", no_npp)
        flash("Gagal mengirim verifikasi. Silakan coba lagi.", "danger")
    return redirect(url_for('cek_keanggotaan_page', no_npp=no_npp))


# ---------------- Halaman Anggota ----------------
@app.route('/dashboard')
@login_required
def member_dashboard_page():
    if user_login().get('role') == 'ADMIN':
        return redirect(url_for('admin_dashboard_page'))
    try:
        data = svc_pinjaman.ringkasan_member(user_login()['id'])
    except KoperasiError as e:
        flash(str(e), "danger")
        return redirect(url_for('logout_page'))
    return render_halaman(HTML_MEMBER_DASHBOARD, title="Dashboard", data=data)


def halaman_ringkasan(konten, title):
    try:
        data = svc_pinjaman.ringkasan_member(user_login()['id'])
    except KoperasiError as e:
        flash(str(e), "danger")
        return redirect(url_for('member_dashboard_page'))
    return render_halaman(konten, title=title, data=data)


@app.route('/dashboard/simpanan')
@login_required
def member_simpanan_page():
    return halaman_ringkasan(HTML_MEMBER_SIMPANAN, "Simpanan")


@app.route('/dashboard/pinjaman')
@login_required
def member_pinjaman_page():
    return halaman_ringkasan(HTML_MEMBER_PINJAMAN, "Pinjaman")


@app.route('/dashboard/angsuran')
@login_required
def member_angsuran_page():
    return halaman_ringkasan(HTML_MEMBER_ANGSURAN, "Angsuran")


@app.route('/dashboard/pengajuan-pinjaman', methods=['GET', 'POST'])
@login_required
def member_pengajuan_page():
    if request.method == 'POST':
        try:
            pinjaman = svc_pinjaman.ajukan_pinjaman(
                user_login()['id'],
                request.form.get('jumlah'),
                request.form.get('tenor'),
                request.form.get('kategori'),
                request.form.get('keperluan'),
            )
            flash(f"Pengajuan {pinjaman['no_pinjaman']} berhasil dikirim.", "success")
            return redirect(url_for('member_riwayat_page'))
        except KoperasiError as e:
            flash(str(e), "danger")
    return render_halaman(HTML_MEMBER_PENGAJUAN, title="Ajukan Pinjaman")


@app.route('/dashboard/riwayat-pengajuan')
@login_required
def member_riwayat_page():
    riwayat = svc_pinjaman.riwayat_pengajuan(user_login()['id'])
    return render_halaman(HTML_MEMBER_RIWAYAT, title="Riwayat Pengajuan", riwayat=riwayat)


@app.route('/dashboard/riwayat-pengajuan/<pinjaman_id>', methods=['GET', 'POST'])
@login_required
def member_detail_pengajuan_page(pinjaman_id):
    try:
        pinjaman = svc_pinjaman.pinjaman_milik_user(user_login()['id'], pinjaman_id)
    except KoperasiError as e:
        flash(str(e), "danger")
        return redirect(url_for('member_riwayat_page'))

    if request.method == 'POST':
        try:
            file = file_upload('spk')
            svc_pinjaman.upload_spk(pinjaman_id, file.filename, file.read(), file.mimetype, oleh="member")
            flash("SPK berhasil diupload.", "success")
        except KoperasiError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Upload SPK anggota gagal (pinjaman %s)", pinjaman_id)
            flash("Gagal upload SPK.", "danger")
        return redirect(url_for('member_detail_pengajuan_page', pinjaman_id=pinjaman_id))

    return render_halaman(HTML_MEMBER_DETAIL_PENGAJUAN, title="Detail Pengajuan", pinjaman=pinjaman)


@app.route('/dashboard/riwayat-pengajuan/<pinjaman_id>/spk.pdf')
@login_required
def member_spk_pdf(pinjaman_id):
    try:
        pinjaman = svc_pinjaman.pinjaman_milik_user(user_login()['id'], pinjaman_id)
    except KoperasiError:
        abort(404)
    return kirim_pdf(pdf_forms.pdf_spk(pinjaman), f"SPK_Pinjaman_{pinjaman['no_pinjaman']}.pdf")


@app.route('/dashboard/profil', methods=['GET', 'POST'])
@login_required
def member_profil_page():
    if request.method == 'POST':
        try:
            svc_anggota.ubah_password(
                user_login()['id'],
                request.form.get('password_lama', ''),
                request.form.get('password_baru', ''),
            )
            flash("Password berhasil diubah.", "success")
        except KoperasiError as e:
            flash(str(e), "danger")
        return redirect(url_for('member_profil_page'))

    anggota = svc_anggota.ambil_anggota_by_user(user_login()['id'])
    return render_halaman(HTML_MEMBER_PROFIL, title="Profil", anggota=anggota)


# ---------------- Admin: Dashboard ----------------
@app.route('/admin')
@admin_required
def admin_dashboard_page():
    return render_halaman(HTML_ADMIN_DASHBOARD, title="Dashboard Admin", stats=laporan.statistik_dashboard())


@app.route('/admin/api/pending-count')
@admin_required
def api_pending_count():
    return jsonify(count=svc_anggota.hitung_pending_verifikasi())


# ---------------- Admin: Anggota ----------------
@app.route('/admin/pengajuan-anggota')
@admin_required
def pengajuan_anggota_page():
    cari = request.args.get('cari', '')
    company = request.args.get('company', '')
    return render_halaman(
        HTML_PENGAJUAN_ANGGOTA,
        title="Pengajuan Anggota",
        anggota=svc_anggota.daftar_pengajuan_anggota(cari, company),
        opsi=svc_anggota.opsi_master_data(),
        cari=cari,
        company=company,
    )


@app.route('/admin/anggota/<anggota_id>')
@admin_required
def detail_anggota_page(anggota_id):
    try:
        anggota = svc_anggota.ambil_anggota(anggota_id)
    except KoperasiError as e:
        flash(str(e), "danger")
        return redirect(url_for('data_anggota_page'))
    return render_halaman(HTML_DETAIL_ANGGOTA, title="Detail Anggota", anggota=anggota)


@app.route('/admin/anggota/<anggota_id>/setujui', methods=['POST'])
@admin_required
def aktifkan_anggota_action(anggota_id):
    try:
        svc_anggota.setujui_anggota(anggota_id)
        flash("Anggota berhasil disetujui.", "success")
    except KoperasiError as e:
        flash(str(e), "danger")
    return redirect(url_for('pengajuan_anggota_page'))


@app.route('/admin/anggota/<anggota_id>/formulir.pdf')
@admin_required
def formulir_anggota_pdf(anggota_id):
    try:
        anggota = svc_anggota.ambil_anggota(anggota_id)
    except KoperasiError:
        abort(404)
    return kirim_pdf(pdf_forms.pdf_pendaftaran_anggota(anggota), f"Pendaftaran_Anggota_{anggota.get('nik')}.pdf")


@app.route('/admin/data-anggota')
@admin_required
def data_anggota_page():
    cari = request.args.get('cari', '')
    company = request.args.get('company', '')
    return render_halaman(
        HTML_DATA_ANGGOTA,
        title="Data Anggota",
        anggota=svc_anggota.daftar_anggota(cari, company),
        opsi=svc_anggota.opsi_master_data(),
        cari=cari,
        company=company,
    )


@app.route('/admin/anggota/<anggota_id>/pasif', methods=['POST'])
@admin_required
def pasifkan_anggota_action(anggota_id):
    svc_anggota.pasifkan_anggota(anggota_id)
    flash("Status anggota diubah menjadi PASIF.", "success")
    return redirect(url_for('data_anggota_page'))


@app.route('/admin/anggota/<anggota_id>/nonaktif', methods=['POST'])
@admin_required
def nonaktifkan_anggota_action(anggota_id):
    svc_anggota.nonaktifkan_anggota(anggota_id)
    flash("Anggota dinonaktifkan dan masuk antrian realisasi karyawan.", "success")
    return redirect(url_for('data_anggota_page'))


def _render_tambah_anggota(form=None, preview=None):
    return render_halaman(
        HTML_TAMBAH_ANGGOTA,
        title="Tambah Anggota",
        form=form or dict(svc_anggota.DEFAULT_FORM_ANGGOTA),
        no_anggota=svc_anggota.generate_no_anggota_db(),
        opsi=svc_anggota.opsi_master_data(),
        opsi_jabatan=svc_anggota.OPSI_JABATAN,
        opsi_ops=svc_anggota.OPSI_OPS,
        opsi_bank=svc_anggota.OPSI_BANK,
        opsi_jenis_kelamin=svc_anggota.OPSI_JENIS_KELAMIN,
        preview=preview,
        preview_json=json.dumps(preview or []),
    )


@app.route('/admin/tambah-anggota', methods=['GET', 'POST'])
@admin_required
def tambah_anggota_page():
    if request.method == 'POST':
        form = request.form.to_dict()
        try:
            no_anggota = svc_anggota.generate_no_anggota_db()
            svc_anggota.simpan_anggota(form, no_anggota)
            flash(f"Anggota {form.get('full_name')} tersimpan dengan nomor {no_anggota}.", "success")
            return redirect(url_for('data_anggota_page'))
        except KoperasiError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Gagal menyimpan anggota %s", form.get('no_npp'))
            flash("Gagal menyimpan data anggota.", "danger")
        return _render_tambah_anggota(form=form)
    return _render_tambah_anggota()


@app.route('/admin/tambah-anggota/template')
@admin_required
def template_anggota_download():
    return kirim_excel(excel_io.buat_template_anggota(), excel_io.NAMA_FILE_TEMPLATE_ANGGOTA)


@app.route('/admin/tambah-anggota/upload', methods=['POST'])
@admin_required
def upload_anggota_excel():
    try:
        file = file_upload('file')
        baris = excel_io.baca_excel_anggota(BytesIO(file.read()))
        preview = [excel_io.map_baris_anggota(b) for b in baris]
        preview = [p for p in preview if p.get('full_name') or p.get('no_npp')]
        if not preview:
            raise KoperasiError("File tidak berisi data anggota.")
    except KoperasiError as e:
        flash(str(e), "danger")
        return redirect(url_for('tambah_anggota_page'))
    return _render_tambah_anggota(preview=preview)


@app.route('/admin/tambah-anggota/simpan-excel', methods=['POST'])
@admin_required
def simpan_anggota_excel():
    try:
        berhasil, gagal = svc_anggota.impor_anggota(json_dari_form('items'))
        flash(f"Impor selesai. Berhasil: {berhasil}, Gagal: {gagal}", "success" if not gagal else "danger")
    except KoperasiError as e:
        flash(str(e), "danger")
    return redirect(url_for('data_anggota_page'))


# ---------------- Admin: Pinjaman ----------------
def _filter_pinjaman():
    return (
        request.args.get('cari', ''),
        request.args.get('awal') or None,
        request.args.get('akhir') or None,
    )


@app.route('/admin/assesment')
@admin_required
def assesment_page():
    cari, awal, akhir = _filter_pinjaman()
    return render_halaman(
        HTML_ASSESMENT,
        title="Assesment",
        pinjaman=svc_pinjaman.daftar_pinjaman("PENGAJUAN", cari, awal, akhir),
        cari=cari,
        awal=awal,
        akhir=akhir,
    )


def _syarat_dari_pinjaman(pinjaman):
    tipe = pinjaman.get('tipe_bunga')
    return {
        'jumlah': float(pinjaman.get('jumlah_pinjaman') or 0),
        'pakai_bunga': tipe not in (None, '', 'NONE'),
        'tipe_bunga': tipe if tipe in ('PERSENAN', 'NOMINAL') else 'PERSENAN',
        'nilai_bunga': pinjaman.get('nilai_bunga') or 0,
    }


def _syarat_dari_form(pinjaman):
    # Field kosong berarti tetap memakai jumlah tersimpan; 0 diteruskan apa adanya
    jumlah = request.form.get('jumlah')
    if jumlah is None or not jumlah.strip():
        jumlah = pinjaman.get('jumlah_pinjaman')
    return {
        'jumlah': parse_angka(jumlah),
        'pakai_bunga': bool(request.form.get('pakai_bunga')),
        'tipe_bunga': request.form.get('tipe_bunga') or 'PERSENAN',
        'nilai_bunga': parse_angka(request.form.get('nilai_bunga')),
    }


@app.route('/admin/assesment/<pinjaman_id>', methods=['GET', 'POST'])
@admin_required
def assesment_detail_page(pinjaman_id):
    try:
        pinjaman = svc_pinjaman.ambil_pinjaman(pinjaman_id)
    except KoperasiError as e:
        flash(str(e), "danger")
        return redirect(url_for('assesment_page'))

    syarat = _syarat_dari_pinjaman(pinjaman)
    if request.method == 'POST':
        syarat = _syarat_dari_form(pinjaman)
        aksi = request.form.get('aksi', 'hitung')
        argumen = (syarat['jumlah'], syarat['pakai_bunga'], syarat['tipe_bunga'], syarat['nilai_bunga'])
        try:
            if aksi == 'pdf':
                analisa = svc_pinjaman.data_analisa(pinjaman)
                konten = pdf_forms.pdf_analisa_pinjaman(pinjaman, analisa, analis=user_login().get('name'), syarat=syarat)
                return send_file(BytesIO(konten), mimetype='application/pdf',
                                 download_name=f"Analisa_Pinjaman_{pinjaman['no_pinjaman']}.pdf")
            if aksi == 'draft':
                svc_pinjaman.simpan_draft(pinjaman_id, *argumen)
                flash("Draft penilaian tersimpan.", "success")
            elif aksi == 'setujui':
                svc_pinjaman.setujui_pinjaman(pinjaman_id, *argumen)
                flash(f"Pinjaman {pinjaman['no_pinjaman']} disetujui.", "success")
                return redirect(url_for('assesment_page'))
            elif aksi == 'tolak':
                svc_pinjaman.tolak_pinjaman(pinjaman_id)
                flash(f"Pinjaman {pinjaman['no_pinjaman']} ditolak.", "success")
                return redirect(url_for('assesment_page'))
        except KoperasiError as e:
            flash(str(e), "danger")

    tipe = syarat['tipe_bunga'] if syarat['pakai_bunga'] else 'NONE'
    nilai = syarat['nilai_bunga'] if syarat['pakai_bunga'] else 0
    return render_halaman(
        HTML_ASSESMENT_DETAIL,
        title="Penilaian Pinjaman",
        pinjaman=pinjaman,
        analisa=svc_pinjaman.data_analisa(pinjaman),
        syarat=syarat,
        simulasi=svc_pinjaman.simulasi_pinjaman(syarat['jumlah'], pinjaman.get('tenor_bulan'), tipe, nilai),
    )


@app.route('/admin/assesment/<pinjaman_id>/analisa.pdf')
@admin_required
def analisa_pdf(pinjaman_id):
    try:
        pinjaman = svc_pinjaman.ambil_pinjaman(pinjaman_id)
    except KoperasiError:
        abort(404)
    konten = pdf_forms.pdf_analisa_pinjaman(pinjaman, svc_pinjaman.data_analisa(pinjaman), analis=user_login().get('name'))
    return kirim_pdf(konten, f"Analisa_Pinjaman_{pinjaman['no_pinjaman']}.pdf")


@app.route('/admin/pencairan')
@admin_required
def pencairan_page():
    cari, awal, akhir = _filter_pinjaman()
    return render_halaman(
        HTML_PENCAIRAN,
        title="Pencairan",
        pinjaman=svc_pinjaman.daftar_pinjaman(["DISETUJUI", "DICAIRKAN"], cari, awal, akhir),
        cari=cari,
        awal=awal,
        akhir=akhir,
    )


@app.route('/admin/pencairan/<pinjaman_id>', methods=['GET', 'POST'])
@admin_required
def pencairan_detail_page(pinjaman_id):
    try:
        pinjaman = svc_pinjaman.ambil_pinjaman(pinjaman_id)
    except KoperasiError as e:
        flash(str(e), "danger")
        return redirect(url_for('pencairan_page'))

    if request.method == 'POST':
        try:
            hasil = svc_pinjaman.cairkan_pinjaman(pinjaman_id, request.form.getlist('angsuran_ids'))
            flash(
                f"Pinjaman dicairkan. Potongan {format_rupiah(hasil['potongan'])}, "
                f"dana bersih {format_rupiah(hasil['bersih'])}.",
                "success",
            )
            return redirect(url_for('pencairan_page'))
        except KoperasiError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Pencairan pinjaman %s gagal", pinjaman_id)
            flash("Pencairan gagal diproses. Periksa data pinjaman.", "danger")
        return redirect(url_for('pencairan_detail_page', pinjaman_id=pinjaman_id))

    calon = svc_pinjaman.calon_potongan(pinjaman) if pinjaman.get('status') == 'DISETUJUI' else []
    return render_halaman(HTML_PENCAIRAN_DETAIL, title="Detail Pencairan", pinjaman=pinjaman, calon=calon)


@app.route('/admin/pencairan/<pinjaman_id>/spk', methods=['POST'])
@admin_required
def upload_spk_action(pinjaman_id):
    try:
        file = file_upload('spk')
        svc_pinjaman.upload_spk(pinjaman_id, file.filename, file.read(), file.mimetype)
        flash("SPK bertanda tangan berhasil diupload.", "success")
    except KoperasiError as e:
        flash(str(e), "danger")
    except Exception:
        logger.exception("Upload SPK admin gagal (pinjaman %s)", pinjaman_id)
        flash("Gagal upload SPK.", "danger")
    return redirect(url_for('pencairan_detail_page', pinjaman_id=pinjaman_id))


@app.route('/admin/pencairan/<pinjaman_id>/spk.pdf')
@admin_required
def spk_pdf(pinjaman_id):
    try:
        pinjaman = svc_pinjaman.ambil_pinjaman(pinjaman_id)
    except KoperasiError:
        abort(404)
    return kirim_pdf(pdf_forms.pdf_spk(pinjaman), f"SPK_Pinjaman_{pinjaman['no_pinjaman']}.pdf")


@app.route('/admin/realisasi-pinjaman', methods=['GET', 'POST'])
@admin_required
def realisasi_pinjaman_page():
    if request.method == 'POST':
        try:
            berhasil, gagal = realisasi.konfirmasi_realisasi_pinjaman(request.form.getlist('ids'))
            flash(f"Konfirmasi penyaluran. Berhasil: {berhasil}, Gagal: {gagal}", "success" if not gagal else "danger")
        except KoperasiError as e:
            flash(str(e), "danger")
        return redirect(url_for('realisasi_pinjaman_page', **request.args))

    awal = request.args.get('awal') or None
    akhir = request.args.get('akhir') or None
    status = request.args.get('status', 'ALL')
    return render_halaman(
        HTML_REALISASI_PINJAMAN,
        title="Realisasi Pinjaman",
        data=realisasi.daftar_realisasi_pinjaman(awal, akhir, status),
        awal=awal,
        akhir=akhir,
        status=status,
    )


@app.route('/admin/realisasi-pinjaman/export')
@admin_required
def realisasi_pinjaman_export():
    data = realisasi.daftar_realisasi_pinjaman(
        request.args.get('awal') or None,
        request.args.get('akhir') or None,
        request.args.get('status', 'ALL'),
    )
    return kirim_excel(excel_io.ekspor_realisasi_pinjaman(data), f"Realisasi_Pinjaman_{tanggal_file()}.xlsx")


# ---------------- Admin: Monitoring ----------------
def _filter_bulan():
    bulan_ini = datetime.now().strftime('%Y-%m')
    return (
        request.args.get('bulan_awal') or bulan_ini,
        request.args.get('bulan_akhir') or bulan_ini,
        request.args.get('cari', ''),
    )


@app.route('/admin/monitoring/simpanan')
@admin_required
def monitor_simpanan_page():
    bulan_awal, bulan_akhir, cari = _filter_bulan()
    try:
        tagihan = svc_simpanan.monitor_simpanan(bulan_awal, bulan_akhir, cari)
    except KoperasiError as e:
        flash(str(e), "danger")
        tagihan = []
    return render_halaman(
        HTML_MONITOR_SIMPANAN,
        title="Monitoring Simpanan",
        tagihan=tagihan,
        bulan_awal=bulan_awal,
        bulan_akhir=bulan_akhir,
        cari=cari,
    )


@app.route('/admin/monitoring/simpanan/export')
@admin_required
def monitor_simpanan_export():
    bulan_awal, bulan_akhir, cari = _filter_bulan()
    try:
        tagihan = svc_simpanan.monitor_simpanan(bulan_awal, bulan_akhir, cari)
    except KoperasiError as e:
        flash(str(e), "danger")
        return redirect(url_for('monitor_simpanan_page'))
    return kirim_excel(excel_io.ekspor_monitor_simpanan(tagihan), f"Monitoring_Simpanan_{bulan_awal}_{bulan_akhir}.xlsx")


@app.route('/admin/monitoring/simpanan/template')
@admin_required
def template_simpanan_download():
    konten = excel_io.buat_template_simpanan(svc_simpanan.anggota_aktif_untuk_template())
    return kirim_excel(konten, "Template_Upload_Simpanan.xlsx")


@app.route('/admin/monitoring/simpanan/<anggota_id>')
@admin_required
def detail_simpanan_page(anggota_id):
    try:
        data = svc_simpanan.detail_simpanan(anggota_id)
    except KoperasiError as e:
        flash(str(e), "danger")
        return redirect(url_for('monitor_simpanan_page'))
    return render_halaman(HTML_DETAIL_SIMPANAN, title="Detail Simpanan", data=data)


def _daftar_monitor_pinjaman():
    status = request.args.get('status', 'ALL')
    cari, awal, akhir = _filter_pinjaman()
    return status, cari, awal, akhir, svc_pinjaman.daftar_pinjaman(status, cari, awal, akhir)


@app.route('/admin/monitoring/pinjaman')
@admin_required
def monitor_pinjaman_page():
    status, cari, awal, akhir, pinjaman = _daftar_monitor_pinjaman()
    return render_halaman(
        HTML_MONITOR_PINJAMAN,
        title="Monitoring Pinjaman",
        pinjaman=pinjaman,
        status=status,
        cari=cari,
        awal=awal,
        akhir=akhir,
    )


@app.route('/admin/monitoring/pinjaman/export')
@admin_required
def monitor_pinjaman_export():
    pinjaman = _daftar_monitor_pinjaman()[-1]
    return kirim_excel(excel_io.ekspor_monitor_pinjaman(pinjaman), f"Monitoring_Pinjaman_{tanggal_file()}.xlsx")


def _daftar_monitor_angsuran():
    status = request.args.get('status', 'ALL')
    company = request.args.get('company', '')
    cari, awal, akhir = _filter_pinjaman()
    angsuran = svc_pinjaman.monitor_angsuran(status, awal, akhir, cari, company)
    return status, company, cari, awal, akhir, angsuran


@app.route('/admin/monitoring/angsuran')
@admin_required
def monitor_angsuran_page():
    status, company, cari, awal, akhir, angsuran = _daftar_monitor_angsuran()
    return render_halaman(
        HTML_MONITOR_ANGSURAN,
        title="Monitoring Angsuran",
        angsuran=angsuran,
        opsi=svc_anggota.opsi_master_data(),
        status=status,
        company=company,
        cari=cari,
        awal=awal,
        akhir=akhir,
    )


@app.route('/admin/monitoring/angsuran/export')
@admin_required
def monitor_angsuran_export():
    angsuran = _daftar_monitor_angsuran()[-1]
    return kirim_excel(excel_io.ekspor_monitor_angsuran(angsuran), f"Monitoring_Angsuran_{tanggal_file()}.xlsx")


@app.route('/admin/monitoring/angsuran/<angsuran_id>/bayar', methods=['POST'])
@admin_required
def bayar_angsuran_action(angsuran_id):
    try:
        svc_pinjaman.bayar_angsuran(angsuran_id)
        flash("Angsuran ditandai sudah dibayar.", "success")
    except KoperasiError as e:
        flash(str(e), "danger")
    return redirect(request.referrer or url_for('monitor_angsuran_page'))


@app.route('/admin/monitoring/transaksi')
@admin_required
def transaksi_page():
    bulan = request.args.get('bulan', '')
    status = request.args.get('status', 'ALL')
    company = request.args.get('company', '')
    cari = request.args.get('cari', '')
    return render_halaman(
        HTML_TRANSAKSI,
        title="Transaksi",
        transaksi=laporan.daftar_transaksi(bulan, status, company, cari),
        opsi=svc_anggota.opsi_master_data(),
        bulan=bulan,
        status=status,
        company=company,
        cari=cari,
    )


# ---------------- Admin: Upload ----------------
@app.route('/admin/upload-simpanan', methods=['GET', 'POST'])
@admin_required
def upload_simpanan_page():
    items = None
    if request.method == 'POST':
        try:
            file = file_upload('file')
            baris = excel_io.baca_excel_simpanan(BytesIO(file.read()))
            if not baris:
                raise KoperasiError("File tidak berisi data simpanan.")
            items = svc_simpanan.cocokkan_upload_simpanan(baris)
        except KoperasiError as e:
            flash(str(e), "danger")
    return render_halaman(
        HTML_UPLOAD_SIMPANAN,
        title="Upload Simpanan",
        items=items,
        items_json=json.dumps(items or []),
        jumlah_valid=len([i for i in items or [] if i['status'] == 'VALID']),
        periode=datetime.now().strftime('%Y-%m'),
    )


@app.route('/admin/upload-simpanan/proses', methods=['POST'])
@admin_required
def proses_upload_simpanan_action():
    try:
        jumlah = svc_simpanan.proses_upload_simpanan(json_dari_form('items'), request.form.get('periode'))
        flash(f"{jumlah} transaksi simpanan berhasil disimpan.", "success")
    except KoperasiError as e:
        flash(str(e), "danger")
    except Exception:
        logger.exception("Proses upload simpanan gagal")
        flash("Sebagian data mungkin gagal disimpan. Periksa monitoring simpanan.", "danger")
    return redirect(url_for('upload_simpanan_page'))


@app.route('/admin/upload-angsuran', methods=['GET', 'POST'])
@admin_required
def upload_angsuran_page():
    items = None
    if request.method == 'POST':
        try:
            file = file_upload('file')
            baris = excel_io.baca_excel_angsuran(BytesIO(file.read()))
            items = svc_pinjaman.cocokkan_upload_angsuran(baris)
        except KoperasiError as e:
            flash(str(e), "danger")
    angsuran_ids = [i['angsuran_id'] for i in items or [] if i['status'] == 'MATCHED']
    return render_halaman(
        HTML_UPLOAD_ANGSURAN,
        title="Upload Angsuran",
        items=items,
        angsuran_ids=angsuran_ids,
        angsuran_ids_json=json.dumps(angsuran_ids),
    )


@app.route('/admin/upload-angsuran/proses', methods=['POST'])
@admin_required
def proses_upload_angsuran_action():
    try:
        berhasil, gagal = svc_pinjaman.proses_upload_angsuran(json_dari_form('angsuran_ids'))
        flash(f"Upload angsuran selesai. Berhasil: {berhasil}, Gagal: {gagal}", "success" if not gagal else "danger")
    except KoperasiError as e:
        flash(str(e), "danger")
    return redirect(url_for('upload_angsuran_page'))


# ---------------- Admin: Realisasi Karyawan ----------------
def _filter_realisasi_karyawan():
    tab = 'SUDAH' if request.args.get('tab') == 'SUDAH' else 'BELUM'
    return tab, request.args.get('awal') or None, request.args.get('akhir') or None


@app.route('/admin/realisasi-karyawan', methods=['GET', 'POST'])
@admin_required
def realisasi_karyawan_page():
    if request.method == 'POST':
        try:
            berhasil, gagal = realisasi.konfirmasi_realisasi_keluar(request.form.getlist('ids'))
            flash(f"Konfirmasi realisasi. Berhasil: {berhasil}, Gagal: {gagal}", "success" if not gagal else "danger")
        except KoperasiError as e:
            flash(str(e), "danger")
        return redirect(url_for('realisasi_karyawan_page', **request.args))

    tab, awal, akhir = _filter_realisasi_karyawan()
    return render_halaman(
        HTML_REALISASI_KARYAWAN,
        title="Realisasi Karyawan",
        data=realisasi.daftar_realisasi_keluar(tab, awal, akhir),
        tab=tab,
        awal=awal,
        akhir=akhir,
    )


@app.route('/admin/realisasi-karyawan/export')
@admin_required
def realisasi_karyawan_export():
    tab, awal, akhir = _filter_realisasi_karyawan()
    data = realisasi.daftar_realisasi_keluar(tab, awal, akhir)
    return kirim_excel(excel_io.ekspor_realisasi_keluar(data), f"Realisasi_Karyawan_{tanggal_file()}.xlsx")


# ---------------- Admin: Laporan ----------------
@app.route('/admin/laporan')
@admin_required
def laporan_page():
    return render_halaman(HTML_LAPORAN, title="Laporan", stats=laporan.laporan_bulanan())


@app.route('/admin/laporan/<jenis>.<ekstensi>')
@admin_required
def laporan_download(jenis, ekstensi):
    if jenis == 'keuangan':
        stats = laporan.laporan_bulanan()
        if ekstensi == 'pdf':
            return kirim_pdf(pdf_forms.pdf_laporan_bulanan(stats), pdf_forms.nama_file_bulanan("Laporan_Keuangan"))
        if ekstensi == 'xlsx':
            return kirim_excel(excel_io.ekspor_laporan_keuangan(stats), f"Laporan_Keuangan_{tanggal_file()}.xlsx")
    elif jenis == 'portofolio':
        data = laporan.data_portofolio()
        if ekstensi == 'pdf':
            return kirim_pdf(pdf_forms.pdf_portofolio(data), f"Portofolio_{tanggal_file()}.pdf")
        if ekstensi == 'xlsx':
            return kirim_excel(excel_io.ekspor_portofolio(data), f"Portofolio_{tanggal_file()}.xlsx")
    elif jenis == 'anggota-baru' and ekstensi == 'xlsx':
        return kirim_excel(excel_io.ekspor_anggota_baru(laporan.anggota_baru()), f"Anggota_Baru_{tanggal_file()}.xlsx")
    abort(404)


# ---------------- Admin: Master Data ----------------
@app.route('/admin/master-data', methods=['GET', 'POST'])
@admin_required
def master_data_page():
    if request.method == 'POST':
        try:
            svc_anggota.tambah_master_data(request.form.get('kategori'), request.form.get('nilai'))
            flash("Master data ditambahkan.", "success")
        except KoperasiError as e:
            flash(str(e), "danger")
        return redirect(url_for('master_data_page'))
    return render_halaman(
        HTML_MASTER_DATA,
        title="Master Data",
        master=svc_anggota.ambil_master_data(),
        kategori_master=svc_anggota.KATEGORI_MASTER,
    )


@app.route('/admin/master-data/<master_id>/hapus', methods=['POST'])
@admin_required
def hapus_master_data_action(master_id):
    svc_anggota.hapus_master_data(master_id)
    flash("Master data dihapus.", "success")
    return redirect(url_for('master_data_page'))


# ---------------- Error Handler ----------------
@app.errorhandler(404)
def halaman_tidak_ditemukan(e):
    return render_halaman(
        HTML_ERROR,
        title="Tidak Ditemukan",
        judul="Halaman Tidak Ditemukan",
        pesan="Halaman yang Anda cari tidak tersedia.",
        ikon="fa-search",
    ), 404


@app.errorhandler(Exception)
def handle_error(e):
    if isinstance(e, HTTPException):
        return e
    logger.exception("Error tidak terduga pada %s", request.path)
    return render_halaman(
        HTML_ERROR,
        title="Error",
        judul="Terjadi Kesalahan",
        pesan="Maaf, terjadi kesalahan saat memproses permintaan Anda. Silakan coba lagi.",
    ), 500


# ---------------- Menjalankan Aplikasi ----------------
if __name__ == "__main__":
    app.run(debug=config.DEBUG, port=config.PORT)
