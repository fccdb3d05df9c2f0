"""Template HTML (Tailwind CDN) untuk seluruh halaman KOPSSI."""

# ---------------- Layout Utama ----------------
HTML_LAYOUT = """
<!DOCTYPE html>
<html lang="id">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ title }} - KOPSSI</title>
    <script src="https://cdn.tailwindcss.com"></script>
    <link rel="stylesheet" href="https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.4.0/css/all.min.css">
    <style>
        .card-white {
            background: white;
            border-radius: 16px;
            box-shadow: 0 4px 6px -1px rgba(0, 0, 0, 0.05);
            border: 1px solid #f1f5f9;
        }
        .btn-consistent {
            display: inline-flex;
            align-items: center;
            justify-content: center;
            padding: 0.55rem 1.1rem;
            border-radius: 10px;
            font-weight: 600;
            font-size: 0.875rem;
            transition: all 0.2s ease;
        }
        .btn-primary { background: #059669; color: white; }
        .btn-primary:hover { background: #047857; }
        .btn-secondary { background: white; color: #374151; border: 1px solid #d1d5db; }
        .btn-secondary:hover { background: #f9fafb; }
        .btn-danger { background: #dc2626; color: white; }
        .btn-danger:hover { background: #b91c1c; }
        .nav-btn-elegant {
            display: inline-flex;
            align-items: center;
            gap: 0.4rem;
            padding: 0.5rem 0.75rem;
            border-radius: 8px;
            color: #374151;
            font-weight: 500;
            font-size: 0.875rem;
        }
        .nav-btn-elegant:hover { background: #ecfdf5; color: #047857; }
        .dropdown-elegant {
            background: white;
            border-radius: 12px;
            box-shadow: 0 10px 25px -5px rgba(0, 0, 0, 0.12);
            border: 1px solid #f1f5f9;
            padding: 0.4rem 0;
            z-index: 40;
        }
        .dropdown-item-elegant {
            display: flex;
            align-items: center;
            padding: 0.55rem 1rem;
            font-size: 0.875rem;
            color: #374151;
        }
        .dropdown-item-elegant:hover { background: #ecfdf5; color: #047857; }
        .input-elegant {
            width: 100%;
            border: 1px solid #d1d5db;
            border-radius: 10px;
            padding: 0.55rem 0.8rem;
            font-size: 0.875rem;
        }
        .input-elegant:focus { outline: none; border-color: #059669; box-shadow: 0 0 0 3px rgba(5, 150, 105, 0.15); }
        .table-elegant { width: 100%; font-size: 0.85rem; }
        .table-elegant th {
            background: #f8fafc;
            text-align: left;
            padding: 0.7rem 0.8rem;
            font-size: 0.7rem;
            text-transform: uppercase;
            letter-spacing: 0.04em;
            color: #64748b;
        }
        .table-elegant td { padding: 0.65rem 0.8rem; border-top: 1px solid #f1f5f9; }
        .badge { display: inline-block; padding: 0.15rem 0.6rem; border-radius: 999px; font-size: 0.7rem; font-weight: 700; }
        .animate-fade-in { animation: fadeIn 0.3s ease-in; }
        @keyframes fadeIn { from { opacity: 0; transform: translateY(-6px); } to { opacity: 1; transform: none; } }
        @media print { .no-print { display: none !important; } }
    </style>
</head>
<body class="bg-gray-50 min-h-screen flex flex-col">
    <nav class="bg-white border-b border-gray-200 sticky top-0 z-30 no-print">
        <div class="max-w-7xl mx-auto px-4">
            <div class="flex justify-between items-center h-16">
                <a href="{{ url_for('beranda_page') }}" class="flex items-center space-x-3">
                    <div class="w-10 h-10 bg-emerald-600 rounded-xl flex items-center justify-center">
                        <i class="fas fa-hand-holding-usd text-white"></i>
                    </div>
                    <div>
                        <span class="text-gray-900 font-bold text-lg">KOPSSI</span>
                        <p class="text-gray-500 text-xs hidden sm:block">Koperasi Simpan Pinjam Swadharma</p>
                    </div>
                </a>

                <div class="flex items-center space-x-1">
                {% if session.user and session.user.role == 'ADMIN' %}
                    <a href="{{ url_for('admin_dashboard_page') }}" class="nav-btn-elegant"><i class="fas fa-chart-pie"></i> Dashboard</a>
                    <div class="relative group">
                        <button class="nav-btn-elegant">
                            <i class="fas fa-users"></i> Anggota
                            <span id="badge-pending" class="badge bg-red-500 text-white hidden"></span>
                        </button>
                        <div class="dropdown-elegant absolute top-full left-0 w-56 hidden group-hover:block">
                            <a href="{{ url_for('pengajuan_anggota_page') }}" class="dropdown-item-elegant">Pengajuan Anggota</a>
                            <a href="{{ url_for('data_anggota_page') }}" class="dropdown-item-elegant">Data Anggota</a>
                            <a href="{{ url_for('tambah_anggota_page') }}" class="dropdown-item-elegant">Tambah Anggota</a>
                        </div>
                    </div>
                    <div class="relative group">
                        <button class="nav-btn-elegant"><i class="fas fa-hand-holding-usd"></i> Pinjaman</button>
                        <div class="dropdown-elegant absolute top-full left-0 w-56 hidden group-hover:block">
                            <a href="{{ url_for('assesment_page') }}" class="dropdown-item-elegant">Assesment</a>
                            <a href="{{ url_for('pencairan_page') }}" class="dropdown-item-elegant">Pencairan</a>
                            <a href="{{ url_for('realisasi_pinjaman_page') }}" class="dropdown-item-elegant">Realisasi Pinjaman</a>
                        </div>
                    </div>
                    <div class="relative group">
                        <button class="nav-btn-elegant"><i class="fas fa-desktop"></i> Monitoring</button>
                        <div class="dropdown-elegant absolute top-full left-0 w-56 hidden group-hover:block">
                            <a href="{{ url_for('monitor_simpanan_page') }}" class="dropdown-item-elegant">Simpanan</a>
                            <a href="{{ url_for('monitor_pinjaman_page') }}" class="dropdown-item-elegant">Pinjaman</a>
                            <a href="{{ url_for('monitor_angsuran_page') }}" class="dropdown-item-elegant">Angsuran</a>
                            <a href="{{ url_for('transaksi_page') }}" class="dropdown-item-elegant">Transaksi</a>
                        </div>
                    </div>
                    <div class="relative group">
                        <button class="nav-btn-elegant"><i class="fas fa-file-upload"></i> Upload</button>
                        <div class="dropdown-elegant absolute top-full left-0 w-56 hidden group-hover:block">
                            <a href="{{ url_for('upload_simpanan_page') }}" class="dropdown-item-elegant">Upload Simpanan</a>
                            <a href="{{ url_for('upload_angsuran_page') }}" class="dropdown-item-elegant">Upload Angsuran</a>
                        </div>
                    </div>
                    <a href="{{ url_for('realisasi_karyawan_page') }}" class="nav-btn-elegant"><i class="fas fa-user-minus"></i> Realisasi Karyawan</a>
                    <a href="{{ url_for('laporan_page') }}" class="nav-btn-elegant"><i class="fas fa-file-alt"></i> Laporan</a>
                    <a href="{{ url_for('master_data_page') }}" class="nav-btn-elegant"><i class="fas fa-database"></i> Master</a>
                {% elif session.user %}
                    <a href="{{ url_for('member_dashboard_page') }}" class="nav-btn-elegant"><i class="fas fa-home"></i> Beranda</a>
                    <a href="{{ url_for('member_simpanan_page') }}" class="nav-btn-elegant"><i class="fas fa-piggy-bank"></i> Simpanan</a>
                    <a href="{{ url_for('member_pinjaman_page') }}" class="nav-btn-elegant"><i class="fas fa-hand-holding-usd"></i> Pinjaman</a>
                    <a href="{{ url_for('member_angsuran_page') }}" class="nav-btn-elegant"><i class="fas fa-calendar-check"></i> Angsuran</a>
                    <a href="{{ url_for('member_pengajuan_page') }}" class="nav-btn-elegant"><i class="fas fa-plus-circle"></i> Ajukan</a>
                    <a href="{{ url_for('member_riwayat_page') }}" class="nav-btn-elegant"><i class="fas fa-history"></i> Riwayat</a>
                {% endif %}

                {% if session.user %}
                    <div class="relative group ml-2">
                        <button class="btn-consistent btn-secondary">
                            <i class="fas fa-user-circle text-lg mr-2"></i>
                            <span class="hidden sm:inline">{{ (session.user.name or '')[:14] }}{% if (session.user.name or '')|length > 14 %}...{% endif %}</span>
                        </button>
                        <div class="dropdown-elegant absolute top-full right-0 w-52 hidden group-hover:block">
                            <div class="px-4 py-3 border-b border-gray-100">
                                <p class="font-semibold text-gray-900">{{ session.user.name }}</p>
                                <p class="text-xs text-gray-500">NPP {{ session.user.no_npp }} &middot; {{ session.user.role }}</p>
                            </div>
                            {% if session.user.role != 'ADMIN' %}
                            <a href="{{ url_for('member_profil_page') }}" class="dropdown-item-elegant">
                                <i class="fas fa-user-cog text-gray-500 w-6 mr-2"></i> Profil
                            </a>
                            {% endif %}
                            <a href="{{ url_for('logout_page') }}" class="dropdown-item-elegant text-red-600">
                                <i class="fas fa-sign-out-alt w-6 mr-2"></i> Logout
                            </a>
                        </div>
                    </div>
                {% else %}
                    <a href="{{ url_for('cek_keanggotaan_page') }}" class="nav-btn-elegant">Cek Keanggotaan</a>
                    <a href="{{ url_for('login_page') }}" class="btn-consistent btn-primary">
                        <i class="fas fa-sign-in-alt mr-2"></i><span>Login</span>
                    </a>
                {% endif %}
                </div>
            </div>
        </div>
    </nav>

    <main class="flex-1 bg-gray-50">
        <div class="max-w-7xl mx-auto px-4 py-8">
            {% with messages = get_flashed_messages(with_categories=true) %}
              {% if messages %}
                {% for category, message in messages %}
                  <div class="flash-message mb-6 p-4 rounded-xl border-l-4 flex items-center gap-4 animate-fade-in {% if category == 'success' %}bg-green-50 border-green-500 text-green-800{% else %}bg-red-50 border-red-500 text-red-800{% endif %}">
                    <i class="fas {% if category == 'success' %}fa-check-circle text-green-500{% else %}fa-exclamation-triangle text-red-500{% endif %} text-xl"></i>
                    <div class="flex-1">
                      <span class="font-semibold">{{ message }}</span>
                    </div>
                    <button onclick="this.parentElement.remove()" class="text-gray-500 hover:text-gray-700">
                      <i class="fas fa-times"></i>
                    </button>
                  </div>
                {% endfor %}
              {% endif %}
            {% endwith %}

            {% block content %}{% endblock %}
        </div>
    </main>

    <footer class="bg-white border-t border-gray-200 py-6 no-print">
        <div class="max-w-7xl mx-auto px-4 text-center">
            <p class="text-gray-400 text-sm">&copy; KOPSSI - Koperasi Simpan Pinjam Swadharma</p>
        </div>
    </footer>

    <script>
        // Format Rupiah saat input
        function formatRupiah(e){
            let v = e.value.replace(/[^,\\d]/g,'').toString(),
                s = v.split(','),
                r = s[0].substr(0, s[0].length % 3),
                rib = s[0].substr(s[0].length % 3).match(/\\d{3}/gi);
            if(rib){
                let sep = s[0].length % 3 ? '.' : '';
                r += sep + rib.join('.');
            }
            r = s[1] != undefined ? r + ',' + s[1] : r;
            e.value = r;
        }

        function pilihSemua(sumber, nama){
            document.querySelectorAll('input[name="' + nama + '"]').forEach(cb => cb.checked = sumber.checked);
        }

        document.addEventListener('DOMContentLoaded', function() {
            document.querySelectorAll('.flash-message').forEach(message => {
                setTimeout(() => {
                    message.style.opacity = '0';
                    setTimeout(() => message.remove(), 300);
                }, 5000);
            });
        });

        {% if session.user and session.user.role == 'ADMIN' %}
        // Jumlah anggota yang menunggu persetujuan, diperbarui tiap 30 detik
        let pendingTerakhir = null;
        function cekPending(){
            fetch("{{ url_for('api_pending_count') }}")
                .then(r => r.json())
                .then(data => {
                    const badge = document.getElementById('badge-pending');
                    if (!badge) return;
                    if (data.count > 0) {
                        badge.textContent = data.count;
                        badge.classList.remove('hidden');
                    } else {
                        badge.classList.add('hidden');
                    }
                    if (pendingTerakhir !== null && data.count > pendingTerakhir) {
                        alert('Ada anggota baru yang selesai verifikasi dan menunggu persetujuan.');
                    }
                    pendingTerakhir = data.count;
                })
                .catch(() => {});
        }
        cekPending();
        setInterval(cekPending, 30000);
        {% endif %}
    </script>
</body>
</html>
"""

# ---------------- Halaman Publik ----------------
HTML_BERANDA = """
<div class="card-white p-10 mb-8 bg-gradient-to-br from-emerald-50 to-white">
    <div class="max-w-3xl">
        <span class="badge bg-emerald-100 text-emerald-700 mb-4">Berdiri sejak 20 September 2002</span>
        <h1 class="text-4xl font-bold text-gray-900 mb-4">Koperasi Simpan Pinjam Swadharma</h1>
        <p class="text-gray-600 text-lg mb-6">
            Wadah kesejahteraan bersama bagi pegawai. Kelola simpanan, ajukan pinjaman,
            dan pantau angsuran Anda secara online.
        </p>
        <div class="flex flex-wrap gap-3">
            <a href="{{ url_for('login_page') }}" class="btn-consistent btn-primary"><i class="fas fa-sign-in-alt mr-2"></i>Masuk</a>
            <a href="{{ url_for('cek_keanggotaan_page') }}" class="btn-consistent btn-secondary"><i class="fas fa-id-card mr-2"></i>Cek Keanggotaan</a>
        </div>
    </div>
</div>

<div class="grid grid-cols-1 md:grid-cols-3 gap-6 mb-8">
    <div class="card-white p-6">
        <i class="fas fa-piggy-bank text-emerald-600 text-2xl mb-3"></i>
        <h3 class="font-bold text-gray-900 mb-2">Simpanan</h3>
        <p class="text-gray-500 text-sm">Simpanan pokok, wajib, dan sukarela tercatat rapi setiap bulan.</p>
    </div>
    <div class="card-white p-6">
        <i class="fas fa-hand-holding-usd text-emerald-600 text-2xl mb-3"></i>
        <h3 class="font-bold text-gray-900 mb-2">Pinjaman</h3>
        <p class="text-gray-500 text-sm">Pengajuan pinjaman uang maupun barang dengan proses yang transparan.</p>
    </div>
    <div class="card-white p-6">
        <i class="fas fa-calendar-check text-emerald-600 text-2xl mb-3"></i>
        <h3 class="font-bold text-gray-900 mb-2">Angsuran</h3>
        <p class="text-gray-500 text-sm">Jadwal dan status angsuran dapat dipantau kapan saja.</p>
    </div>
</div>

<div class="card-white p-6 grid grid-cols-1 md:grid-cols-2 gap-6 text-sm text-gray-600">
    <div>
        <h4 class="font-bold text-gray-900 mb-2">Legalitas</h4>
        <p>Badan Hukum No. 295/BH/MENEG.I/VIII/2003</p>
    </div>
    <div>
        <h4 class="font-bold text-gray-900 mb-2">Alamat</h4>
        <p>Gedung Hanglekir Raya No 30, Jakarta Selatan</p>
    </div>
</div>
"""

HTML_LOGIN = """
<div class="max-w-md mx-auto card-white p-8">
    <div class="text-center mb-6">
        <div class="w-14 h-14 bg-emerald-600 rounded-2xl flex items-center justify-center mx-auto mb-3">
            <i class="fas fa-lock text-white text-xl"></i>
        </div>
        <h2 class="text-2xl font-bold text-gray-900">Masuk ke KOPSSI</h2>
        <p class="text-gray-500 text-sm">Gunakan NPP dan password Anda</p>
    </div>
    <form method="POST" class="space-y-4">
        <div>
            <label class="block text-sm font-medium text-gray-700 mb-1">NPP</label>
            <input type="text" name="no_npp" value="{{ no_npp or '' }}" class="input-elegant" required autofocus>
        </div>
        <div>
            <label class="block text-sm font-medium text-gray-700 mb-1">Password</label>
            <input type="password" name="password" class="input-elegant" required>
        </div>
        <button type="submit" class="btn-consistent btn-primary w-full">Masuk</button>
    </form>
    <p class="text-center text-sm text-gray-500 mt-6">
        Belum punya password? <a href="{{ url_for('cek_keanggotaan_page') }}" class="text-emerald-600 font-semibold">Verifikasi keanggotaan</a>
    </p>
</div>
"""

HTML_CEK_KEANGGOTAAN = """
<div class="max-w-2xl mx-auto">
    <div class="card-white p-8 mb-6">
        <h2 class="text-2xl font-bold text-gray-900 mb-2">Cek Keanggotaan</h2>
        <p class="text-gray-500 text-sm mb-6">Masukkan NPP untuk melihat status keanggotaan Anda.</p>
        <form method="GET" class="flex gap-3">
            <input type="text" name="no_npp" value="{{ no_npp or '' }}" placeholder="Nomor NPP" class="input-elegant" required>
            <button type="submit" class="btn-consistent btn-primary"><i class="fas fa-search mr-2"></i>Cek</button>
        </form>
    </div>

    {% if anggota %}
        {% if tampilan == 'done' %}
        <div class="card-white p-8 text-center">
            <i class="fas fa-hourglass-half text-amber-500 text-4xl mb-3"></i>
            <h3 class="text-xl font-bold text-gray-900 mb-2">Verifikasi Terkirim</h3>
            <p class="text-gray-500">Data {{ anggota.full_name }} sedang menunggu persetujuan admin.</p>
        </div>
        {% elif tampilan == 'active' %}
        <div class="card-white p-8 text-center">
            <i class="fas fa-check-circle text-emerald-500 text-4xl mb-3"></i>
            <h3 class="text-xl font-bold text-gray-900 mb-2">Anggota Aktif</h3>
            <p class="text-gray-500 mb-4">{{ anggota.full_name }} sudah terdaftar sebagai anggota aktif.</p>
            <a href="{{ url_for('login_page') }}" class="btn-consistent btn-primary">Login</a>
        </div>
        {% else %}
        <div class="card-white p-8">
            <h3 class="text-xl font-bold text-gray-900 mb-1">Verifikasi Data</h3>
            <p class="text-gray-500 text-sm mb-6">Periksa data Anda, lalu lengkapi tanda tangan, foto 3x4, dan password.</p>
            <div class="grid grid-cols-2 gap-4 text-sm mb-6">
                <div><span class="text-gray-500">Nama</span><p class="font-semibold">{{ anggota.full_name }}</p></div>
                <div><span class="text-gray-500">NPP</span><p class="font-semibold">{{ anggota.no_npp }}</p></div>
                <div><span class="text-gray-500">No. Anggota</span><p class="font-semibold">{{ anggota.no_anggota or '-' }}</p></div>
                <div><span class="text-gray-500">Unit Kerja</span><p class="font-semibold">{{ anggota.work_unit or '-' }}</p></div>
            </div>
            <form method="POST" action="{{ url_for('verifikasi_page') }}" enctype="multipart/form-data" id="form-verifikasi" class="space-y-4">
                <input type="hidden" name="no_npp" value="{{ anggota.no_npp }}">
                <input type="hidden" name="tanda_tangan" id="tanda_tangan">
                <div>
                    <label class="block text-sm font-medium text-gray-700 mb-1">Tanda Tangan</label>
                    <canvas id="kanvas-ttd" width="500" height="180" class="border border-dashed border-gray-400 rounded-xl bg-white w-full touch-none"></canvas>
                    <button type="button" onclick="hapusTtd()" class="text-sm text-red-600 mt-1">Hapus tanda tangan</button>
                </div>
                <div>
                    <label class="block text-sm font-medium text-gray-700 mb-1">Foto 3x4</label>
                    <input type="file" name="foto" accept="image/*" class="input-elegant" required>
                </div>
                <div>
                    <label class="block text-sm font-medium text-gray-700 mb-1">Password Baru</label>
                    <input type="password" name="password" minlength="6" class="input-elegant" required>
                </div>
                <button type="submit" class="btn-consistent btn-primary w-full">Kirim Verifikasi</button>
            </form>
        </div>
        <script>
            const kanvas = document.getElementById('kanvas-ttd');
            const ctx = kanvas.getContext('2d');
            let menggambar = false, adaCoretan = false;
            ctx.lineWidth = 2; ctx.lineCap = 'round'; ctx.strokeStyle = '#111827';
            function posisi(e){
                const r = kanvas.getBoundingClientRect();
                const t = e.touches ? e.touches[0] : e;
                return {x: (t.clientX - r.left) * kanvas.width / r.width, y: (t.clientY - r.top) * kanvas.height / r.height};
            }
            function mulai(e){ menggambar = true; const p = posisi(e); ctx.beginPath(); ctx.moveTo(p.x, p.y); e.preventDefault(); }
            function gerak(e){ if(!menggambar) return; const p = posisi(e); ctx.lineTo(p.x, p.y); ctx.stroke(); adaCoretan = true; e.preventDefault(); }
            function selesai(){ menggambar = false; }
            ['mousedown', 'touchstart'].forEach(ev => kanvas.addEventListener(ev, mulai));
            ['mousemove', 'touchmove'].forEach(ev => kanvas.addEventListener(ev, gerak));
            ['mouseup', 'mouseleave', 'touchend'].forEach(ev => kanvas.addEventListener(ev, selesai));
            function hapusTtd(){ ctx.clearRect(0, 0, kanvas.width, kanvas.height); adaCoretan = false; }
            document.getElementById('form-verifikasi').addEventListener('submit', function(e){
                if(!adaCoretan){ e.preventDefault(); alert('Tanda tangan wajib diisi.'); return; }
                document.getElementById('tanda_tangan').value = kanvas.toDataURL('image/png');
            });
        </script>
        {% endif %}
    {% endif %}
</div>
"""

HTML_ERROR = """
<div class="max-w-xl mx-auto card-white p-10 text-center">
    <i class="fas {{ ikon or 'fa-exclamation-triangle' }} text-red-500 text-5xl mb-4"></i>
    <h2 class="text-2xl font-bold text-gray-900 mb-2">{{ judul }}</h2>
    <p class="text-gray-500 mb-6">{{ pesan }}</p>
    <a href="{{ url_for('beranda_page') }}" class="btn-consistent btn-primary">Kembali ke Beranda</a>
</div>
"""

# ---------------- Halaman Anggota ----------------
HTML_MEMBER_DASHBOARD = """
<h1 class="text-2xl font-bold text-gray-900 mb-1">Halo, {{ data.anggota.full_name }}</h1>
<p class="text-gray-500 mb-6">No. Anggota {{ data.anggota.no_anggota or '-' }} &middot; {{ data.anggota.company or '-' }}</p>

<div class="grid grid-cols-1 md:grid-cols-3 gap-6 mb-8">
    <div class="card-white p-6">
        <p class="text-gray-500 text-sm">Total Simpanan</p>
        <p class="text-2xl font-bold text-emerald-600">{{ data.saldo.total|rupiah }}</p>
    </div>
    <div class="card-white p-6">
        <p class="text-gray-500 text-sm">Pinjaman Aktif</p>
        <p class="text-2xl font-bold text-gray-900">{{ data.total_pinjaman_aktif|rupiah }}</p>
    </div>
    <div class="card-white p-6">
        <p class="text-gray-500 text-sm">Angsuran Berikutnya</p>
        {% if data.angsuran_berikutnya %}
        <p class="text-2xl font-bold text-gray-900">{{ data.angsuran_berikutnya.amount|rupiah }}</p>
        <p class="text-xs text-gray-500">Jatuh tempo {{ data.angsuran_berikutnya.tanggal_bayar|tanggal }}</p>
        {% else %}
        <p class="text-2xl font-bold text-gray-400">-</p>
        {% endif %}
    </div>
</div>

<div class="card-white p-6">
    <h3 class="font-bold text-gray-900 mb-4">Simpanan per Jenis</h3>
    <div class="grid grid-cols-3 gap-4 text-center">
        <div><p class="text-gray-500 text-sm">Pokok</p><p class="font-bold">{{ data.saldo.POKOK|rupiah }}</p></div>
        <div><p class="text-gray-500 text-sm">Wajib</p><p class="font-bold">{{ data.saldo.WAJIB|rupiah }}</p></div>
        <div><p class="text-gray-500 text-sm">Sukarela</p><p class="font-bold">{{ data.saldo.SUKARELA|rupiah }}</p></div>
    </div>
</div>
"""

HTML_MEMBER_SIMPANAN = """
<h1 class="text-2xl font-bold text-gray-900 mb-6">Simpanan Saya</h1>
<div class="grid grid-cols-2 md:grid-cols-4 gap-4 mb-6">
    {% for jenis in ['POKOK', 'WAJIB', 'SUKARELA'] %}
    <div class="card-white p-5"><p class="text-gray-500 text-sm">{{ jenis|title }}</p><p class="font-bold text-lg">{{ data.saldo[jenis]|rupiah }}</p></div>
    {% endfor %}
    <div class="card-white p-5 bg-emerald-50"><p class="text-gray-500 text-sm">Total</p><p class="font-bold text-lg text-emerald-700">{{ data.saldo.total|rupiah }}</p></div>
</div>
<div class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr><th>Tanggal</th><th>Jenis</th><th>Transaksi</th><th>Status</th><th class="text-right">Jumlah</th></tr></thead>
        <tbody>
        {% for s in data.simpanan %}
            <tr>
                <td>{{ s.created_at|tanggal }}</td>
                <td>{{ s.type }}</td>
                <td>{{ s.transaction_type }}</td>
                <td>{{ s.status }}</td>
                <td class="text-right {% if s.transaction_type == 'TARIK' %}text-red-600{% endif %}">{{ s.amount|rupiah }}</td>
            </tr>
        {% else %}
            <tr><td colspan="5" class="text-center text-gray-400 py-8">Belum ada transaksi simpanan.</td></tr>
        {% endfor %}
        </tbody>
    </table>
</div>
"""

HTML_MEMBER_PINJAMAN = """
<div class="flex justify-between items-center mb-6">
    <h1 class="text-2xl font-bold text-gray-900">Pinjaman Saya</h1>
    <a href="{{ url_for('member_pengajuan_page') }}" class="btn-consistent btn-primary"><i class="fas fa-plus mr-2"></i>Ajukan Pinjaman</a>
</div>
<div class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr><th>No Pinjaman</th><th>Tanggal</th><th>Kategori</th><th>Tenor</th><th class="text-right">Jumlah</th><th>Status</th></tr></thead>
        <tbody>
        {% for p in data.pinjaman %}
            <tr>
                <td class="font-semibold">{{ p.no_pinjaman }}</td>
                <td>{{ p.created_at|tanggal }}</td>
                <td>{{ p.kategori or '-' }}</td>
                <td>{{ p.tenor_bulan }} bulan</td>
                <td class="text-right">{{ p.jumlah_pinjaman|rupiah }}</td>
                <td><span class="badge bg-gray-100 text-gray-700">{{ p.status }}</span></td>
            </tr>
        {% else %}
            <tr><td colspan="6" class="text-center text-gray-400 py-8">Belum ada pinjaman.</td></tr>
        {% endfor %}
        </tbody>
    </table>
</div>
"""

HTML_MEMBER_ANGSURAN = """
<h1 class="text-2xl font-bold text-gray-900 mb-6">Jadwal Angsuran</h1>
<div class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr><th>No Pinjaman</th><th>Angsuran Ke</th><th>Jatuh Tempo</th><th class="text-right">Nominal</th><th>Status</th></tr></thead>
        <tbody>
        {% for a in data.angsuran %}
            <tr>
                <td>{{ a.no_pinjaman }}</td>
                <td>{{ a.bulan_ke }}</td>
                <td>{{ a.tanggal_bayar|tanggal }}</td>
                <td class="text-right">{{ a.amount|rupiah }}</td>
                <td><span class="badge {% if a.status == 'PAID' %}bg-green-100 text-green-700{% else %}bg-amber-100 text-amber-700{% endif %}">{{ a.status }}</span></td>
            </tr>
        {% else %}
            <tr><td colspan="5" class="text-center text-gray-400 py-8">Belum ada angsuran.</td></tr>
        {% endfor %}
        </tbody>
    </table>
</div>
"""

HTML_MEMBER_PENGAJUAN = """
<div class="max-w-2xl mx-auto card-white p-8">
    <h1 class="text-2xl font-bold text-gray-900 mb-6">Ajukan Pinjaman</h1>
    <form method="POST" class="space-y-4">
        <div>
            <label class="block text-sm font-medium text-gray-700 mb-1">Kategori</label>
            <select name="kategori" class="input-elegant">
                <option value="UANG">Pinjaman Uang</option>
                <option value="BARANG">Pinjaman Barang</option>
            </select>
        </div>
        <div>
            <label class="block text-sm font-medium text-gray-700 mb-1">Jumlah Pinjaman (Rp)</label>
            <input type="text" name="jumlah" onkeyup="formatRupiah(this)" class="input-elegant" required>
        </div>
        <div>
            <label class="block text-sm font-medium text-gray-700 mb-1">Tenor (bulan)</label>
            <input type="number" name="tenor" min="1" value="12" class="input-elegant" required>
        </div>
        <div>
            <label class="block text-sm font-medium text-gray-700 mb-1">Keperluan</label>
            <textarea name="keperluan" rows="3" class="input-elegant"></textarea>
        </div>
        <button type="submit" class="btn-consistent btn-primary w-full">Kirim Pengajuan</button>
    </form>
</div>
"""

HTML_MEMBER_RIWAYAT = """
<h1 class="text-2xl font-bold text-gray-900 mb-6">Riwayat Pengajuan</h1>
<div class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr><th>No Pinjaman</th><th>Tanggal</th><th class="text-right">Jumlah</th><th>Tenor</th><th>Status</th><th></th></tr></thead>
        <tbody>
        {% for p in riwayat %}
            <tr>
                <td class="font-semibold">{{ p.no_pinjaman }}</td>
                <td>{{ p.created_at|tanggal }}</td>
                <td class="text-right">{{ p.jumlah_pinjaman|rupiah }}</td>
                <td>{{ p.tenor_bulan }} bulan</td>
                <td><span class="badge bg-gray-100 text-gray-700">{{ p.status }}</span></td>
                <td><a href="{{ url_for('member_detail_pengajuan_page', pinjaman_id=p.id) }}" class="text-emerald-600 font-semibold">Detail</a></td>
            </tr>
        {% else %}
            <tr><td colspan="6" class="text-center text-gray-400 py-8">Belum ada pengajuan.</td></tr>
        {% endfor %}
        </tbody>
    </table>
</div>
"""

HTML_MEMBER_DETAIL_PENGAJUAN = """
<a href="{{ url_for('member_riwayat_page') }}" class="text-sm text-gray-500"><i class="fas fa-arrow-left mr-1"></i>Kembali</a>
<div class="card-white p-8 mt-4">
    <h1 class="text-2xl font-bold text-gray-900 mb-6">Pinjaman {{ pinjaman.no_pinjaman }}</h1>
    <div class="grid grid-cols-2 md:grid-cols-3 gap-4 text-sm mb-6">
        <div><span class="text-gray-500">Status</span><p class="font-semibold">{{ pinjaman.status }}</p></div>
        <div><span class="text-gray-500">Jumlah Pengajuan</span><p class="font-semibold">{{ (pinjaman.jumlah_pengajuan or pinjaman.jumlah_pinjaman)|rupiah }}</p></div>
        <div><span class="text-gray-500">Jumlah Disetujui</span><p class="font-semibold">{{ pinjaman.jumlah_pinjaman|rupiah }}</p></div>
        <div><span class="text-gray-500">Tenor</span><p class="font-semibold">{{ pinjaman.tenor_bulan }} bulan</p></div>
        <div><span class="text-gray-500">Keperluan</span><p class="font-semibold">{{ pinjaman.keperluan or '-' }}</p></div>
        <div><span class="text-gray-500">Tanggal</span><p class="font-semibold">{{ pinjaman.created_at|tanggal }}</p></div>
    </div>
    {% if pinjaman.status in ['DISETUJUI', 'DICAIRKAN', 'LUNAS'] %}
    <div class="border-t pt-6">
        <h3 class="font-bold text-gray-900 mb-3">Surat Perjanjian Kredit</h3>
        <div class="flex flex-wrap gap-3 mb-4">
            <a href="{{ url_for('member_spk_pdf', pinjaman_id=pinjaman.id, preview=1) }}" target="_blank" class="btn-consistent btn-secondary"><i class="fas fa-eye mr-2"></i>Lihat SPK</a>
            <a href="{{ url_for('member_spk_pdf', pinjaman_id=pinjaman.id) }}" class="btn-consistent btn-secondary"><i class="fas fa-download mr-2"></i>Unduh SPK</a>
            {% if pinjaman.link_spk_signed %}
            <a href="{{ pinjaman.link_spk_signed }}" target="_blank" class="btn-consistent btn-secondary"><i class="fas fa-file-signature mr-2"></i>SPK Bertanda Tangan</a>
            {% endif %}
        </div>
        <form method="POST" enctype="multipart/form-data" class="flex gap-3">
            <input type="file" name="spk" accept=".pdf,image/*" class="input-elegant" required>
            <button type="submit" class="btn-consistent btn-primary">Upload SPK</button>
        </form>
    </div>
    {% endif %}
</div>
"""

HTML_MEMBER_PROFIL = """
<div class="grid grid-cols-1 md:grid-cols-2 gap-6">
    <div class="card-white p-8">
        <h2 class="text-xl font-bold text-gray-900 mb-4">Profil</h2>
        <div class="space-y-3 text-sm">
            <div><span class="text-gray-500">Nama</span><p class="font-semibold">{{ anggota.full_name }}</p></div>
            <div><span class="text-gray-500">NPP</span><p class="font-semibold">{{ anggota.no_npp }}</p></div>
            <div><span class="text-gray-500">No. Anggota</span><p class="font-semibold">{{ anggota.no_anggota or '-' }}</p></div>
            <div><span class="text-gray-500">NIK</span><p class="font-semibold">{{ anggota.nik or '-' }}</p></div>
            <div><span class="text-gray-500">Perusahaan / Unit</span><p class="font-semibold">{{ anggota.company or '-' }} / {{ anggota.work_unit or '-' }}</p></div>
            <div><span class="text-gray-500">Rekening Gaji</span><p class="font-semibold">{{ anggota.rek_gaji or '-' }} ({{ anggota.bank_gaji or '-' }})</p></div>
        </div>
    </div>
    <div class="card-white p-8">
        <h2 class="text-xl font-bold text-gray-900 mb-4">Ubah Password</h2>
        <form method="POST" class="space-y-4">
            <input type="password" name="password_lama" placeholder="Password lama" class="input-elegant" required>
            <input type="password" name="password_baru" placeholder="Password baru (min. 6 karakter)" minlength="6" class="input-elegant" required>
            <button type="submit" class="btn-consistent btn-primary w-full">Simpan Password</button>
        </form>
    </div>
</div>
"""

# ---------------- Admin: Dashboard & Anggota ----------------
HTML_ADMIN_DASHBOARD = """
<h1 class="text-2xl font-bold text-gray-900 mb-6">Dashboard Admin</h1>
<div class="grid grid-cols-2 md:grid-cols-5 gap-4">
    <a href="{{ url_for('data_anggota_page') }}" class="card-white p-5 block">
        <p class="text-gray-500 text-sm">Total Anggota</p><p class="text-2xl font-bold">{{ stats.total_anggota }}</p>
    </a>
    <a href="{{ url_for('monitor_pinjaman_page', status='DICAIRKAN') }}" class="card-white p-5 block">
        <p class="text-gray-500 text-sm">Pinjaman Aktif</p><p class="text-2xl font-bold">{{ stats.pinjaman_aktif }}</p>
    </a>
    <a href="{{ url_for('assesment_page') }}" class="card-white p-5 block">
        <p class="text-gray-500 text-sm">Pengajuan Pinjaman</p><p class="text-2xl font-bold">{{ stats.pengajuan_pinjaman }}</p>
    </a>
    <a href="{{ url_for('monitor_angsuran_page', status='UNPAID') }}" class="card-white p-5 block">
        <p class="text-gray-500 text-sm">Angsuran Belum Lunas</p><p class="text-2xl font-bold">{{ stats.angsuran_bermasalah }}</p>
    </a>
    <a href="{{ url_for('pengajuan_anggota_page') }}" class="card-white p-5 block bg-amber-50">
        <p class="text-gray-500 text-sm">Menunggu Persetujuan</p><p class="text-2xl font-bold text-amber-600">{{ stats.menunggu_persetujuan }}</p>
    </a>
</div>
"""

HTML_FILTER_ANGGOTA = """
<form method="GET" class="card-white p-4 mb-6 flex flex-wrap gap-3">
    <input type="text" name="cari" value="{{ cari or '' }}" placeholder="Cari nama / NPP / NIK" class="input-elegant md:w-72">
    <select name="company" class="input-elegant md:w-56">
        <option value="">Semua Perusahaan</option>
        {% for c in opsi.company %}<option value="{{ c }}" {% if c == company %}selected{% endif %}>{{ c }}</option>{% endfor %}
    </select>
    <button type="submit" class="btn-consistent btn-secondary"><i class="fas fa-filter mr-2"></i>Filter</button>
</form>
"""

HTML_PENGAJUAN_ANGGOTA = """
<h1 class="text-2xl font-bold text-gray-900 mb-6">Pengajuan Anggota</h1>
""" + HTML_FILTER_ANGGOTA + """
<div class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr><th>Nama</th><th>NPP</th><th>NIK</th><th>Perusahaan</th><th>Tanggal</th><th>Status</th><th></th></tr></thead>
        <tbody>
        {% for a in anggota %}
            <tr>
                <td class="font-semibold">{{ a.full_name }}</td>
                <td>{{ a.no_npp }}</td>
                <td>{{ a.nik or '-' }}</td>
                <td>{{ a.company or '-' }}</td>
                <td>{{ a.created_at|tanggal }}</td>
                <td><span class="badge {% if a.status == 'DONE VERIFIKASI' %}bg-amber-100 text-amber-700{% else %}bg-gray-100 text-gray-600{% endif %}">{{ a.status_label }}</span></td>
                <td><a href="{{ url_for('detail_anggota_page', anggota_id=a.id) }}" class="text-emerald-600 font-semibold">Detail</a></td>
            </tr>
        {% else %}
            <tr><td colspan="7" class="text-center text-gray-400 py-8">Tidak ada pengajuan anggota.</td></tr>
        {% endfor %}
        </tbody>
    </table>
</div>
"""

HTML_DETAIL_ANGGOTA = """
<a href="{{ request.referrer or url_for('data_anggota_page') }}" class="text-sm text-gray-500"><i class="fas fa-arrow-left mr-1"></i>Kembali</a>
<div class="card-white p-8 mt-4">
    <div class="flex flex-wrap justify-between items-start gap-4 mb-6">
        <div class="flex items-center gap-4">
            {% if anggota.photo_34_file_path %}
            <img src="{{ anggota.photo_34_file_path }}" alt="Foto" class="w-20 h-24 object-cover rounded-lg border">
            {% endif %}
            <div>
                <h1 class="text-2xl font-bold text-gray-900">{{ anggota.full_name }}</h1>
                <p class="text-gray-500">{{ anggota.no_anggota or '-' }} &middot; NPP {{ anggota.no_npp }}</p>
                <span class="badge bg-gray-100 text-gray-700 mt-1">{{ anggota.status_label }}</span>
            </div>
        </div>
        <div class="flex flex-wrap gap-2">
            <a href="{{ url_for('formulir_anggota_pdf', anggota_id=anggota.id, preview=1) }}" target="_blank" class="btn-consistent btn-secondary"><i class="fas fa-eye mr-2"></i>Preview PDF</a>
            <a href="{{ url_for('formulir_anggota_pdf', anggota_id=anggota.id) }}" class="btn-consistent btn-secondary"><i class="fas fa-download mr-2"></i>Unduh PDF</a>
            {% if anggota.status == 'DONE VERIFIKASI' %}
            <form method="POST" action="{{ url_for('aktifkan_anggota_action', anggota_id=anggota.id) }}" onsubmit="return confirm('Setujui anggota ini?')">
                <button type="submit" class="btn-consistent btn-primary"><i class="fas fa-check mr-2"></i>Setujui</button>
            </form>
            {% endif %}
        </div>
    </div>
    <div class="grid grid-cols-1 md:grid-cols-3 gap-4 text-sm">
        {% for label, nilai in [
            ('NIK', anggota.nik), ('Jenis Kelamin', anggota.jenis_kelamin),
            ('Tempat, Tgl Lahir', (anggota.tempat_lahir or '-') ~ ', ' ~ (anggota.tanggal_lahir|tanggal)),
            ('Alamat KTP', anggota.address), ('Alamat Tinggal', anggota.alamat_tinggal), ('Email', anggota.email),
            ('HP', anggota.hp_1 or anggota.phone), ('Perusahaan', anggota.company), ('Unit Kerja', anggota.work_unit),
            ('Jabatan', anggota.employment_status), ('Lokasi', anggota.lokasi), ('OPS', anggota.ops),
            ('Rekening Gaji', (anggota.rek_gaji or '-') ~ ' (' ~ (anggota.bank_gaji or '-') ~ ')'),
            ('Rekening Pribadi', anggota.rek_pribadi), ('Tanggal Daftar', anggota.created_at|tanggal),
        ] %}
        <div><span class="text-gray-500">{{ label }}</span><p class="font-semibold">{{ nilai or '-' }}</p></div>
        {% endfor %}
    </div>
    {% if anggota.signature_image %}
    <div class="mt-6">
        <span class="text-gray-500 text-sm">Tanda Tangan</span>
        <img src="{{ anggota.signature_image }}" alt="Tanda tangan" class="h-20 border rounded-lg mt-1">
    </div>
    {% endif %}
</div>
"""

HTML_DATA_ANGGOTA = """
<div class="flex justify-between items-center mb-6">
    <h1 class="text-2xl font-bold text-gray-900">Data Anggota</h1>
    <a href="{{ url_for('tambah_anggota_page') }}" class="btn-consistent btn-primary"><i class="fas fa-user-plus mr-2"></i>Tambah Anggota</a>
</div>
""" + HTML_FILTER_ANGGOTA + """
<div class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr><th>No Anggota</th><th>Nama</th><th>NPP</th><th>Perusahaan</th><th>Status</th><th>Aksi</th></tr></thead>
        <tbody>
        {% for a in anggota %}
            <tr>
                <td>{{ a.no_anggota or '-' }}</td>
                <td class="font-semibold"><a href="{{ url_for('detail_anggota_page', anggota_id=a.id) }}">{{ a.full_name }}</a></td>
                <td>{{ a.no_npp }}</td>
                <td>{{ a.company or '-' }}</td>
                <td><span class="badge bg-gray-100 text-gray-700">{{ a.status_label }}</span></td>
                <td class="flex gap-2">
                    {% if a.status not in ['PASIF', 'NON_ACTIVE'] %}
                    <form method="POST" action="{{ url_for('pasifkan_anggota_action', anggota_id=a.id) }}" onsubmit="return confirm('Pasifkan anggota ini?')">
                        <button class="text-amber-600 text-xs font-semibold">Pasifkan</button>
                    </form>
                    {% endif %}
                    {% if a.status != 'NON_ACTIVE' %}
                    <form method="POST" action="{{ url_for('nonaktifkan_anggota_action', anggota_id=a.id) }}" onsubmit="return confirm('Nonaktifkan anggota ini? Anggota akan masuk antrian realisasi.')">
                        <button class="text-red-600 text-xs font-semibold">Nonaktifkan</button>
                    </form>
                    {% endif %}
                </td>
            </tr>
        {% else %}
            <tr><td colspan="6" class="text-center text-gray-400 py-8">Belum ada data anggota.</td></tr>
        {% endfor %}
        </tbody>
    </table>
</div>
"""

HTML_TAMBAH_ANGGOTA = """
<h1 class="text-2xl font-bold text-gray-900 mb-6">Tambah Anggota</h1>

<div class="card-white p-6 mb-6">
    <h3 class="font-bold text-gray-900 mb-3">Upload Excel</h3>
    <div class="flex flex-wrap gap-3 items-center">
        <a href="{{ url_for('template_anggota_download') }}" class="btn-consistent btn-secondary"><i class="fas fa-file-excel mr-2"></i>Unduh Template</a>
        <form method="POST" action="{{ url_for('upload_anggota_excel') }}" enctype="multipart/form-data" class="flex gap-3">
            <input type="file" name="file" accept=".xlsx" class="input-elegant" required>
            <button type="submit" class="btn-consistent btn-primary">Preview</button>
        </form>
    </div>

    {% if preview %}
    <div class="mt-6">
        <p class="text-sm text-gray-600 mb-2">{{ preview|length }} baris siap disimpan.</p>
        <div class="overflow-x-auto max-h-80 border rounded-lg">
            <table class="table-elegant">
                <thead><tr><th>Nama</th><th>NPP</th><th>NIK</th><th>Perusahaan</th><th>Unit Kerja</th></tr></thead>
                <tbody>
                {% for b in preview %}
                    <tr><td>{{ b.full_name or '-' }}</td><td>{{ b.no_npp or '-' }}</td><td>{{ b.no_ktp or '-' }}</td><td>{{ b.company or '-' }}</td><td>{{ b.work_unit or '-' }}</td></tr>
                {% endfor %}
                </tbody>
            </table>
        </div>
        <form method="POST" action="{{ url_for('simpan_anggota_excel') }}" class="mt-4">
            <input type="hidden" name="items" value="{{ preview_json }}">
            <button type="submit" class="btn-consistent btn-primary"><i class="fas fa-save mr-2"></i>Simpan Semua</button>
        </form>
    </div>
    {% endif %}
</div>

<div class="card-white p-6">
    <div class="flex justify-between items-center mb-4">
        <h3 class="font-bold text-gray-900">Input Manual</h3>
        <span class="text-sm text-gray-500">No. Anggota: <b>{{ no_anggota }}</b></span>
    </div>
    <form method="POST" class="grid grid-cols-1 md:grid-cols-3 gap-4 text-sm">
        {% for name, label, wajib in [
            ('full_name', 'Nama Lengkap', True), ('no_npp', 'NPP', True), ('no_ktp', 'No. KTP', False),
            ('tempat_lahir', 'Tempat Lahir', False), ('email', 'Email', False), ('hp_1', 'HP 1', False),
            ('hp_2', 'HP 2', False), ('telp_rumah_1', 'Telp Rumah', False), ('rek_gaji', 'Rekening Gaji', False),
            ('rek_pribadi', 'Rekening Pribadi', False),
        ] %}
        <div>
            <label class="block font-medium text-gray-700 mb-1">{{ label }}</label>
            <input type="text" name="{{ name }}" value="{{ form.get(name, '') }}" class="input-elegant" {% if wajib %}required{% endif %}>
        </div>
        {% endfor %}
        <div>
            <label class="block font-medium text-gray-700 mb-1">Tanggal Lahir</label>
            <input type="date" name="tanggal_lahir" value="{{ form.get('tanggal_lahir', '') }}" class="input-elegant">
        </div>
        {% for name, label, pilihan in [
            ('jenis_kelamin', 'Jenis Kelamin', opsi_jenis_kelamin), ('company', 'Perusahaan', opsi.company),
            ('work_unit', 'Unit Kerja', opsi.work_unit), ('lokasi', 'Lokasi', opsi.lokasi),
            ('jabatan', 'Jabatan', opsi_jabatan), ('ops', 'OPS', opsi_ops), ('bank_gaji', 'Bank Gaji', opsi_bank),
        ] %}
        <div>
            <label class="block font-medium text-gray-700 mb-1">{{ label }}</label>
            <select name="{{ name }}" class="input-elegant">
                <option value="">- Pilih -</option>
                {% for p in pilihan %}<option value="{{ p }}" {% if form.get(name) == p %}selected{% endif %}>{{ p }}</option>{% endfor %}
            </select>
        </div>
        {% endfor %}
        <div>
            <label class="block font-medium text-gray-700 mb-1">Tagihan Parkir</label>
            <select name="tagihan_parkir" class="input-elegant">
                <option value="N" {% if form.get('tagihan_parkir') != 'Y' %}selected{% endif %}>Tidak</option>
                <option value="Y" {% if form.get('tagihan_parkir') == 'Y' %}selected{% endif %}>Ya</option>
            </select>
        </div>
        <div class="md:col-span-3">
            <label class="block font-medium text-gray-700 mb-1">Alamat KTP</label>
            <textarea name="address" rows="2" class="input-elegant">{{ form.get('address', '') }}</textarea>
        </div>
        <div class="md:col-span-3">
            <label class="block font-medium text-gray-700 mb-1">Alamat Tinggal</label>
            <textarea name="alamat_tinggal" rows="2" class="input-elegant">{{ form.get('alamat_tinggal', '') }}</textarea>
        </div>
        <div class="md:col-span-3">
            <button type="submit" class="btn-consistent btn-primary"><i class="fas fa-save mr-2"></i>Simpan Anggota</button>
        </div>
    </form>
</div>
"""

# ---------------- Admin: Pinjaman ----------------
HTML_FILTER_PINJAMAN = """
<form method="GET" class="card-white p-4 mb-6 flex flex-wrap gap-3 items-end">
    <input type="text" name="cari" value="{{ cari or '' }}" placeholder="Cari nama / NIK / NPP / No Pinjaman" class="input-elegant md:w-72">
    <input type="date" name="awal" value="{{ awal or '' }}" class="input-elegant md:w-44">
    <input type="date" name="akhir" value="{{ akhir or '' }}" class="input-elegant md:w-44">
    <button type="submit" class="btn-consistent btn-secondary"><i class="fas fa-filter mr-2"></i>Filter</button>
</form>
"""

HTML_ASSESMENT = """
<h1 class="text-2xl font-bold text-gray-900 mb-6">Assesment Pinjaman</h1>
""" + HTML_FILTER_PINJAMAN + """
<div class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr><th>No Pinjaman</th><th>Nama</th><th>NIK</th><th>Tanggal</th><th class="text-right">Jumlah</th><th>Tenor</th><th></th></tr></thead>
        <tbody>
        {% for p in pinjaman %}
            <tr>
                <td class="font-semibold">{{ p.no_pinjaman }}</td>
                <td>{{ p.personal_data.full_name or '-' }}</td>
                <td>{{ p.personal_data.nik or '-' }}</td>
                <td>{{ p.created_at|tanggal }}</td>
                <td class="text-right">{{ p.jumlah_pinjaman|rupiah }}</td>
                <td>{{ p.tenor_bulan }} bln</td>
                <td><a href="{{ url_for('assesment_detail_page', pinjaman_id=p.id) }}" class="text-emerald-600 font-semibold">Nilai</a></td>
            </tr>
        {% else %}
            <tr><td colspan="7" class="text-center text-gray-400 py-8">Tidak ada pengajuan pinjaman.</td></tr>
        {% endfor %}
        </tbody>
    </table>
</div>
"""

HTML_ASSESMENT_DETAIL = """
<a href="{{ url_for('assesment_page') }}" class="text-sm text-gray-500"><i class="fas fa-arrow-left mr-1"></i>Kembali</a>
<div class="grid grid-cols-1 lg:grid-cols-3 gap-6 mt-4">
    <div class="card-white p-6 lg:col-span-2">
        <h1 class="text-xl font-bold text-gray-900 mb-1">Pinjaman {{ pinjaman.no_pinjaman }}</h1>
        <p class="text-gray-500 text-sm mb-4">{{ pinjaman.personal_data.full_name }} &middot; NPP {{ pinjaman.personal_data.no_npp }} &middot; {{ pinjaman.status }}</p>
        <div class="grid grid-cols-2 md:grid-cols-4 gap-4 text-sm mb-6">
            <div><span class="text-gray-500">Pengajuan</span><p class="font-semibold">{{ (pinjaman.jumlah_pengajuan or pinjaman.jumlah_pinjaman)|rupiah }}</p></div>
            <div><span class="text-gray-500">Tenor</span><p class="font-semibold">{{ pinjaman.tenor_bulan }} bulan</p></div>
            <div><span class="text-gray-500">Kategori</span><p class="font-semibold">{{ pinjaman.kategori or '-' }}</p></div>
            <div><span class="text-gray-500">Keperluan</span><p class="font-semibold">{{ pinjaman.keperluan or '-' }}</p></div>
        </div>

        <h3 class="font-bold text-gray-900 mb-2">Saldo Simpanan</h3>
        <div class="grid grid-cols-4 gap-4 text-sm mb-6">
            <div>Pokok<p class="font-semibold">{{ analisa.saldo.POKOK|rupiah }}</p></div>
            <div>Wajib<p class="font-semibold">{{ analisa.saldo.WAJIB|rupiah }}</p></div>
            <div>Sukarela<p class="font-semibold">{{ analisa.saldo.SUKARELA|rupiah }}</p></div>
            <div>Total<p class="font-semibold text-emerald-700">{{ analisa.saldo.total|rupiah }}</p></div>
        </div>

        <h3 class="font-bold text-gray-900 mb-2">Pinjaman Berjalan</h3>
        <table class="table-elegant mb-2">
            <thead><tr><th>No Pinjaman</th><th>Jenis</th><th>Terbayar</th><th class="text-right">Outstanding</th><th class="text-right">Bunga</th><th class="text-right">Angsuran/Bln</th></tr></thead>
            <tbody>
            {% for o in analisa.outstanding %}
                <tr><td>{{ o.no_pinjaman }}</td><td>{{ o.jenis_pinjaman }}</td><td>{{ o.terbayar }}</td>
                    <td class="text-right">{{ o.outstanding|rupiah }}</td><td class="text-right">{{ o.bunga_outstanding|rupiah }}</td><td class="text-right">{{ o.angsuran_bulanan|rupiah }}</td></tr>
            {% else %}
                <tr><td colspan="6" class="text-center text-gray-400 py-4">Tidak ada pinjaman berjalan.</td></tr>
            {% endfor %}
            </tbody>
        </table>
    </div>

    <div class="card-white p-6">
        <h3 class="font-bold text-gray-900 mb-4">Keputusan</h3>
        <form method="POST" class="space-y-4 text-sm">
            <div>
                <label class="block font-medium text-gray-700 mb-1">Jumlah Disetujui</label>
                <input type="text" name="jumlah" value="{{ syarat.jumlah|angka }}" onkeyup="formatRupiah(this)" class="input-elegant">
            </div>
            <label class="flex items-center gap-2"><input type="checkbox" name="pakai_bunga" value="1" {% if syarat.pakai_bunga %}checked{% endif %}> Kenakan bunga</label>
            <div class="grid grid-cols-2 gap-3">
                <select name="tipe_bunga" class="input-elegant">
                    <option value="PERSENAN" {% if syarat.tipe_bunga == 'PERSENAN' %}selected{% endif %}>Persen / bulan</option>
                    <option value="NOMINAL" {% if syarat.tipe_bunga == 'NOMINAL' %}selected{% endif %}>Nominal total</option>
                </select>
                <input type="text" name="nilai_bunga" value="{{ syarat.nilai_bunga or '' }}" placeholder="Nilai" class="input-elegant">
            </div>
            <div class="bg-gray-50 rounded-lg p-3 space-y-1">
                <div class="flex justify-between"><span>Total Bunga</span><b>{{ simulasi.total_bunga|rupiah }}</b></div>
                <div class="flex justify-between"><span>Total Bayar</span><b>{{ simulasi.total_bayar|rupiah }}</b></div>
                <div class="flex justify-between"><span>Cicilan / Bulan</span><b>{{ simulasi.cicilan|rupiah }}</b></div>
            </div>
            {% if pinjaman.status == 'PENGAJUAN' %}
            <div class="grid grid-cols-2 gap-2">
                <button name="aksi" value="hitung" class="btn-consistent btn-secondary">Hitung</button>
                <button name="aksi" value="draft" class="btn-consistent btn-secondary">Simpan Draft</button>
                <button name="aksi" value="tolak" class="btn-consistent btn-danger" onclick="return confirm('Tolak pengajuan ini?')">Tolak</button>
                <button name="aksi" value="setujui" class="btn-consistent btn-primary" onclick="return confirm('Setujui pinjaman ini?')">Setujui</button>
            </div>
            {% endif %}
            <button name="aksi" value="pdf" formtarget="_blank" class="btn-consistent btn-secondary w-full"><i class="fas fa-file-pdf mr-2"></i>Preview Analisa PDF</button>
        </form>
    </div>
</div>
"""

HTML_PENCAIRAN = """
<h1 class="text-2xl font-bold text-gray-900 mb-6">Pencairan Pinjaman</h1>
""" + HTML_FILTER_PINJAMAN + """
<div class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr><th>No Pinjaman</th><th>Nama</th><th>NPP</th><th class="text-right">Jumlah</th><th>Tenor</th><th>Status</th><th></th></tr></thead>
        <tbody>
        {% for p in pinjaman %}
            <tr>
                <td class="font-semibold">{{ p.no_pinjaman }}</td>
                <td>{{ p.personal_data.full_name or '-' }}</td>
                <td>{{ p.personal_data.no_npp or '-' }}</td>
                <td class="text-right">{{ p.jumlah_pinjaman|rupiah }}</td>
                <td>{{ p.tenor_bulan }} bln</td>
                <td><span class="badge {% if p.status == 'DICAIRKAN' %}bg-green-100 text-green-700{% else %}bg-blue-100 text-blue-700{% endif %}">{{ p.status }}</span></td>
                <td><a href="{{ url_for('pencairan_detail_page', pinjaman_id=p.id) }}" class="text-emerald-600 font-semibold">Detail</a></td>
            </tr>
        {% else %}
            <tr><td colspan="7" class="text-center text-gray-400 py-8">Tidak ada pinjaman untuk dicairkan.</td></tr>
        {% endfor %}
        </tbody>
    </table>
</div>
"""

HTML_PENCAIRAN_DETAIL = """
<a href="{{ url_for('pencairan_page') }}" class="text-sm text-gray-500"><i class="fas fa-arrow-left mr-1"></i>Kembali</a>
<div class="card-white p-6 mt-4 mb-6">
    <div class="flex flex-wrap justify-between gap-4">
        <div>
            <h1 class="text-xl font-bold text-gray-900">Pinjaman {{ pinjaman.no_pinjaman }}</h1>
            <p class="text-gray-500 text-sm">{{ pinjaman.personal_data.full_name }} &middot; {{ pinjaman.status }}</p>
        </div>
        <div class="flex flex-wrap gap-2">
            <a href="{{ url_for('spk_pdf', pinjaman_id=pinjaman.id, preview=1) }}" target="_blank" class="btn-consistent btn-secondary"><i class="fas fa-eye mr-2"></i>Preview SPK</a>
            <a href="{{ url_for('spk_pdf', pinjaman_id=pinjaman.id) }}" class="btn-consistent btn-secondary"><i class="fas fa-download mr-2"></i>Unduh SPK</a>
            {% if pinjaman.link_spk_signed %}
            <a href="{{ pinjaman.link_spk_signed }}" target="_blank" class="btn-consistent btn-secondary"><i class="fas fa-file-signature mr-2"></i>SPK Bertanda Tangan</a>
            {% endif %}
        </div>
    </div>
    <div class="grid grid-cols-2 md:grid-cols-4 gap-4 text-sm mt-4">
        <div><span class="text-gray-500">Jumlah</span><p class="font-semibold">{{ pinjaman.jumlah_pinjaman|rupiah }}</p></div>
        <div><span class="text-gray-500">Tenor</span><p class="font-semibold">{{ pinjaman.tenor_bulan }} bulan</p></div>
        <div><span class="text-gray-500">Bunga</span><p class="font-semibold">{{ pinjaman.tipe_bunga or 'NONE' }} {{ pinjaman.nilai_bunga or 0 }}</p></div>
        <div><span class="text-gray-500">Rekening</span><p class="font-semibold">{{ pinjaman.personal_data.rek_gaji or '-' }} ({{ pinjaman.personal_data.bank_gaji or '-' }})</p></div>
    </div>
    <form method="POST" action="{{ url_for('upload_spk_action', pinjaman_id=pinjaman.id) }}" enctype="multipart/form-data" class="flex gap-3 mt-4">
        <input type="file" name="spk" accept=".pdf,image/*" class="input-elegant" required>
        <button type="submit" class="btn-consistent btn-secondary">Upload SPK Bertanda Tangan</button>
    </form>
</div>

{% if pinjaman.status == 'DISETUJUI' %}
<form method="POST" class="card-white p-6" onsubmit="return confirm('Cairkan pinjaman ini?')">
    <h3 class="font-bold text-gray-900 mb-2">Potong Angsuran Pinjaman Lain</h3>
    <p class="text-sm text-gray-500 mb-4">Pilih angsuran pinjaman berjalan yang dilunasi dari dana pencairan.</p>
    {% for c in calon %}
    <div class="border rounded-lg p-4 mb-4">
        <div class="flex justify-between text-sm mb-2">
            <span class="font-semibold">{{ c.pinjaman.no_pinjaman }} &middot; terbayar {{ c.terbayar }}/{{ c.pinjaman.tenor_bulan }}</span>
            <span>Sisa pokok {{ c.sisa.pokok|rupiah }} &middot; bunga {{ c.sisa.bunga|rupiah }}</span>
        </div>
        <table class="table-elegant">
            <thead><tr><th><input type="checkbox" onclick="pilihSemua(this, 'angsuran_ids')"></th><th>Ke</th><th>Jatuh Tempo</th><th class="text-right">Nominal</th></tr></thead>
            <tbody>
            {% for a in c.angsuran %}
                <tr><td><input type="checkbox" name="angsuran_ids" value="{{ a.id }}"></td><td>{{ a.bulan_ke }}</td><td>{{ a.tanggal_bayar|tanggal }}</td><td class="text-right">{{ a.amount|rupiah }}</td></tr>
            {% endfor %}
            </tbody>
        </table>
    </div>
    {% else %}
    <p class="text-sm text-gray-400 mb-4">Tidak ada pinjaman berjalan lain.</p>
    {% endfor %}
    <button type="submit" class="btn-consistent btn-primary"><i class="fas fa-money-bill-wave mr-2"></i>Cairkan Pinjaman</button>
</form>
{% endif %}
"""

HTML_REALISASI_PINJAMAN = """
<div class="flex justify-between items-center mb-6">
    <h1 class="text-2xl font-bold text-gray-900">Realisasi Pinjaman</h1>
    <a href="{{ url_for('realisasi_pinjaman_export', awal=awal, akhir=akhir, status=status) }}" class="btn-consistent btn-secondary"><i class="fas fa-file-excel mr-2"></i>Export Excel</a>
</div>
<form method="GET" class="card-white p-4 mb-6 flex flex-wrap gap-3">
    <input type="date" name="awal" value="{{ awal or '' }}" class="input-elegant md:w-44">
    <input type="date" name="akhir" value="{{ akhir or '' }}" class="input-elegant md:w-44">
    <select name="status" class="input-elegant md:w-44">
        {% for s, label in [('ALL', 'Semua'), ('BELUM', 'Belum Disalurkan'), ('SUDAH', 'Sudah Disalurkan')] %}
        <option value="{{ s }}" {% if s == status %}selected{% endif %}>{{ label }}</option>
        {% endfor %}
    </select>
    <button type="submit" class="btn-consistent btn-secondary"><i class="fas fa-filter mr-2"></i>Filter</button>
</form>
<form method="POST" class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr><th><input type="checkbox" onclick="pilihSemua(this, 'ids')"></th><th>No Pinjaman</th><th>Nama</th><th>Tgl Cair</th>
            <th class="text-right">Plafon</th><th class="text-right">Outs Pokok</th><th class="text-right">Outs Bunga</th><th class="text-right">Biaya</th><th class="text-right">Diterima</th><th>No Rek</th><th>Status</th></tr></thead>
        <tbody>
        {% for r in data %}
            <tr>
                <td>{% if r.delivery_status != 'SENT' %}<input type="checkbox" name="ids" value="{{ r.id }}">{% endif %}</td>
                <td class="font-semibold">{{ r.no_pinjaman }}</td>
                <td>{{ r.nama or '-' }}</td>
                <td>{{ r.disbursed_at|tanggal }}</td>
                <td class="text-right">{{ r.plafon|rupiah }}</td>
                <td class="text-right">{{ r.outs_pokok|rupiah }}</td>
                <td class="text-right">{{ r.outs_bunga|rupiah }}</td>
                <td class="text-right">{{ r.biaya|rupiah }}</td>
                <td class="text-right font-semibold">{{ r.diterima|rupiah }}</td>
                <td>{{ r.no_rek }}</td>
                <td><span class="badge {% if r.delivery_status == 'SENT' %}bg-green-100 text-green-700{% else %}bg-amber-100 text-amber-700{% endif %}">{{ r.delivery_status }}</span></td>
            </tr>
        {% else %}
            <tr><td colspan="11" class="text-center text-gray-400 py-8">Tidak ada data realisasi.</td></tr>
        {% endfor %}
        </tbody>
    </table>
    <div class="p-4"><button type="submit" class="btn-consistent btn-primary"><i class="fas fa-paper-plane mr-2"></i>Konfirmasi Penyaluran</button></div>
</form>
"""

# ---------------- Admin: Monitoring ----------------
HTML_MONITOR_SIMPANAN = """
<div class="flex flex-wrap justify-between items-center gap-3 mb-6">
    <h1 class="text-2xl font-bold text-gray-900">Monitoring Simpanan</h1>
    <div class="flex gap-2">
        <a href="{{ url_for('template_simpanan_download') }}" class="btn-consistent btn-secondary"><i class="fas fa-file-download mr-2"></i>Template</a>
        <a href="{{ url_for('monitor_simpanan_export', bulan_awal=bulan_awal, bulan_akhir=bulan_akhir, cari=cari) }}" class="btn-consistent btn-secondary"><i class="fas fa-file-excel mr-2"></i>Export</a>
    </div>
</div>
<form method="GET" class="card-white p-4 mb-6 flex flex-wrap gap-3">
    <input type="month" name="bulan_awal" value="{{ bulan_awal }}" class="input-elegant md:w-44">
    <input type="month" name="bulan_akhir" value="{{ bulan_akhir }}" class="input-elegant md:w-44">
    <input type="text" name="cari" value="{{ cari or '' }}" placeholder="Cari nama / NIK / NPP" class="input-elegant md:w-64">
    <button type="submit" class="btn-consistent btn-secondary"><i class="fas fa-filter mr-2"></i>Filter</button>
</form>
<div class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr><th>Nama</th><th>NIK</th><th>Bulan Ke</th><th>Jatuh Tempo</th><th class="text-right">Pokok</th><th class="text-right">Wajib</th><th class="text-right">Sukarela</th><th class="text-right">Total</th><th>Status</th></tr></thead>
        <tbody>
        {% for t in tagihan %}
            <tr>
                <td class="font-semibold"><a href="{{ url_for('detail_simpanan_page', anggota_id=t.personal_data_id) }}">{{ t.nama }}</a></td>
                <td>{{ t.nik }}</td>
                <td>{{ t.bulan_ke or '-' }}</td>
                <td>{{ t.jatuh_tempo|tanggal }}</td>
                <td class="text-right">{{ t.amount_pokok|rupiah }}</td>
                <td class="text-right">{{ t.amount_wajib|rupiah }}</td>
                <td class="text-right">{{ t.amount_sukarela|rupiah }}</td>
                <td class="text-right font-semibold">{{ t.total|rupiah }}</td>
                <td><span class="badge {% if t.status == 'PAID' %}bg-green-100 text-green-700{% else %}bg-amber-100 text-amber-700{% endif %}">{{ t.status }}</span></td>
            </tr>
        {% else %}
            <tr><td colspan="9" class="text-center text-gray-400 py-8">Tidak ada tagihan simpanan pada periode ini.</td></tr>
        {% endfor %}
        </tbody>
    </table>
</div>
"""

HTML_DETAIL_SIMPANAN = """
<a href="{{ url_for('monitor_simpanan_page') }}" class="text-sm text-gray-500"><i class="fas fa-arrow-left mr-1"></i>Kembali</a>
<h1 class="text-2xl font-bold text-gray-900 mt-4 mb-1">{{ data.anggota.full_name }}</h1>
<p class="text-gray-500 mb-6">NIK {{ data.anggota.nik or '-' }} &middot; NPP {{ data.anggota.no_npp }}</p>
<div class="grid grid-cols-2 md:grid-cols-4 gap-4 mb-6">
    {% for jenis in ['POKOK', 'WAJIB', 'SUKARELA'] %}
    <div class="card-white p-5"><p class="text-gray-500 text-sm">{{ jenis|title }}</p><p class="font-bold text-lg">{{ data.saldo[jenis]|rupiah }}</p></div>
    {% endfor %}
    <div class="card-white p-5 bg-emerald-50"><p class="text-gray-500 text-sm">Total</p><p class="font-bold text-lg text-emerald-700">{{ data.saldo.total|rupiah }}</p></div>
</div>
<div class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr><th>Tanggal</th><th>Jenis</th><th>Transaksi</th><th>Bulan Ke</th><th>Status</th><th class="text-right">Jumlah</th></tr></thead>
        <tbody>
        {% for s in data.riwayat %}
            <tr><td>{{ s.created_at|tanggal }}</td><td>{{ s.type }}</td><td>{{ s.transaction_type }}</td><td>{{ s.bulan_ke or '-' }}</td><td>{{ s.status }}</td><td class="text-right">{{ s.amount|rupiah }}</td></tr>
        {% else %}
            <tr><td colspan="6" class="text-center text-gray-400 py-8">Belum ada riwayat simpanan.</td></tr>
        {% endfor %}
        </tbody>
    </table>
</div>
"""

HTML_MONITOR_PINJAMAN = """
<div class="flex justify-between items-center mb-6">
    <h1 class="text-2xl font-bold text-gray-900">Monitoring Pinjaman</h1>
    <a href="{{ url_for('monitor_pinjaman_export', status=status, cari=cari, awal=awal, akhir=akhir) }}" class="btn-consistent btn-secondary"><i class="fas fa-file-excel mr-2"></i>Export</a>
</div>
<form method="GET" class="card-white p-4 mb-6 flex flex-wrap gap-3">
    <select name="status" class="input-elegant md:w-44">
        {% for s in ['ALL', 'PENGAJUAN', 'DISETUJUI', 'DICAIRKAN', 'LUNAS', 'DITOLAK'] %}
        <option value="{{ s }}" {% if s == status %}selected{% endif %}>{{ 'Semua Status' if s == 'ALL' else s }}</option>
        {% endfor %}
    </select>
    <input type="text" name="cari" value="{{ cari or '' }}" placeholder="Cari nama / NIK / No Pinjaman" class="input-elegant md:w-64">
    <input type="date" name="awal" value="{{ awal or '' }}" class="input-elegant md:w-44">
    <input type="date" name="akhir" value="{{ akhir or '' }}" class="input-elegant md:w-44">
    <button type="submit" class="btn-consistent btn-secondary"><i class="fas fa-filter mr-2"></i>Filter</button>
</form>
<div class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr><th>No Pinjaman</th><th>Nama</th><th>NIK</th><th>Tanggal</th><th class="text-right">Plafon</th><th>Tenor</th><th>Status</th></tr></thead>
        <tbody>
        {% for p in pinjaman %}
            <tr>
                <td class="font-semibold">{{ p.no_pinjaman }}</td>
                <td>{{ p.personal_data.full_name or '-' }}</td>
                <td>{{ p.personal_data.nik or '-' }}</td>
                <td>{{ p.created_at|tanggal }}</td>
                <td class="text-right">{{ p.jumlah_pinjaman|rupiah }}</td>
                <td>{{ p.tenor_bulan }} bln</td>
                <td><span class="badge bg-gray-100 text-gray-700">{{ p.status }}</span></td>
            </tr>
        {% else %}
            <tr><td colspan="7" class="text-center text-gray-400 py-8">Tidak ada data pinjaman.</td></tr>
        {% endfor %}
        </tbody>
    </table>
</div>
"""

HTML_MONITOR_ANGSURAN = """
<div class="flex justify-between items-center mb-6">
    <h1 class="text-2xl font-bold text-gray-900">Monitoring Angsuran</h1>
    <a href="{{ url_for('monitor_angsuran_export', status=status, cari=cari, company=company, awal=awal, akhir=akhir) }}" class="btn-consistent btn-secondary"><i class="fas fa-file-excel mr-2"></i>Export</a>
</div>
<form method="GET" class="card-white p-4 mb-6 flex flex-wrap gap-3">
    <select name="status" class="input-elegant md:w-40">
        {% for s in ['ALL', 'UNPAID', 'PAID'] %}
        <option value="{{ s }}" {% if s == status %}selected{% endif %}>{{ 'Semua Status' if s == 'ALL' else s }}</option>
        {% endfor %}
    </select>
    <select name="company" class="input-elegant md:w-48">
        <option value="">Semua Perusahaan</option>
        {% for c in opsi.company %}<option value="{{ c }}" {% if c == company %}selected{% endif %}>{{ c }}</option>{% endfor %}
    </select>
    <input type="text" name="cari" value="{{ cari or '' }}" placeholder="Cari nama / NIK / No Pinjaman" class="input-elegant md:w-64">
    <input type="date" name="awal" value="{{ awal or '' }}" class="input-elegant md:w-40">
    <input type="date" name="akhir" value="{{ akhir or '' }}" class="input-elegant md:w-40">
    <button type="submit" class="btn-consistent btn-secondary"><i class="fas fa-filter mr-2"></i>Filter</button>
</form>
<div class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr><th>No Pinjaman</th><th>Nama</th><th>NIK</th><th>Ke</th><th>Tanggal</th><th class="text-right">Nominal</th><th>Status</th><th></th></tr></thead>
        <tbody>
        {% for a in angsuran %}
            <tr>
                <td class="font-semibold">{{ a.pinjaman.no_pinjaman or '-' }}</td>
                <td>{{ a.pinjaman.personal_data.full_name or '-' }}</td>
                <td>{{ a.pinjaman.personal_data.nik or '-' }}</td>
                <td>{{ a.bulan_ke }}</td>
                <td>{{ a.tanggal_bayar|tanggal }}</td>
                <td class="text-right">{{ a.amount|rupiah }}</td>
                <td><span class="badge {% if a.status == 'PAID' %}bg-green-100 text-green-700{% else %}bg-amber-100 text-amber-700{% endif %}">{{ a.status }}</span></td>
                <td>
                    {% if a.status != 'PAID' %}
                    <form method="POST" action="{{ url_for('bayar_angsuran_action', angsuran_id=a.id) }}" onsubmit="return confirm('Tandai angsuran ini sudah dibayar?')">
                        <button class="text-emerald-600 text-xs font-semibold">Bayar</button>
                    </form>
                    {% endif %}
                </td>
            </tr>
        {% else %}
            <tr><td colspan="8" class="text-center text-gray-400 py-8">Tidak ada data angsuran.</td></tr>
        {% endfor %}
        </tbody>
    </table>
</div>
"""

HTML_TRANSAKSI = """
<h1 class="text-2xl font-bold text-gray-900 mb-6">Transaksi</h1>
<form method="GET" class="card-white p-4 mb-6 flex flex-wrap gap-3">
    <input type="month" name="bulan" value="{{ bulan or '' }}" class="input-elegant md:w-44">
    <select name="status" class="input-elegant md:w-40">
        {% for s in ['ALL', 'PAID', 'UNPAID'] %}
        <option value="{{ s }}" {% if s == status %}selected{% endif %}>{{ 'Semua Status' if s == 'ALL' else s }}</option>
        {% endfor %}
    </select>
    <select name="company" class="input-elegant md:w-48">
        <option value="">Semua Perusahaan</option>
        {% for c in opsi.company %}<option value="{{ c }}" {% if c == company %}selected{% endif %}>{{ c }}</option>{% endfor %}
    </select>
    <input type="text" name="cari" value="{{ cari or '' }}" placeholder="Cari nama / NIK / referensi" class="input-elegant md:w-64">
    <button type="submit" class="btn-consistent btn-secondary"><i class="fas fa-filter mr-2"></i>Filter</button>
</form>
<div class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr><th>Tanggal</th><th>Anggota</th><th>Jenis</th><th>Kategori</th><th>Referensi</th><th class="text-right">Jumlah</th><th>Status</th></tr></thead>
        <tbody>
        {% for t in transaksi %}
            <tr>
                <td>{{ t.date|tanggal }}</td>
                <td>{{ t.member }}<p class="text-xs text-gray-400">{{ t.nik }}</p></td>
                <td>{{ t.type }}</td>
                <td>{{ t.category }}</td>
                <td>{{ t.reference }}</td>
                <td class="text-right">{{ t.amount|rupiah }}</td>
                <td><span class="badge {% if t.status == 'PAID' %}bg-green-100 text-green-700{% else %}bg-amber-100 text-amber-700{% endif %}">{{ t.status }}</span></td>
            </tr>
        {% else %}
            <tr><td colspan="7" class="text-center text-gray-400 py-8">Tidak ada transaksi.</td></tr>
        {% endfor %}
        </tbody>
    </table>
</div>
"""

# ---------------- Admin: Upload ----------------
HTML_UPLOAD_SIMPANAN = """
<h1 class="text-2xl font-bold text-gray-900 mb-6">Upload Simpanan</h1>
<div class="card-white p-6 mb-6">
    <form method="POST" enctype="multipart/form-data" class="flex flex-wrap gap-3 items-center">
        <input type="file" name="file" accept=".xlsx" class="input-elegant md:w-80" required>
        <button type="submit" class="btn-consistent btn-primary">Preview</button>
        <a href="{{ url_for('template_simpanan_download') }}" class="btn-consistent btn-secondary"><i class="fas fa-file-download mr-2"></i>Template</a>
    </form>
</div>
{% if items %}
<div class="card-white p-6">
    <p class="text-sm text-gray-600 mb-3">{{ jumlah_valid }} dari {{ items|length }} baris valid.</p>
    <div class="overflow-x-auto max-h-96 border rounded-lg mb-4">
        <table class="table-elegant">
            <thead><tr><th>NIK</th><th>Nama</th><th class="text-right">Pokok</th><th class="text-right">Wajib</th><th class="text-right">Sukarela</th><th>Status</th></tr></thead>
            <tbody>
            {% for i in items %}
                <tr class="{% if i.status != 'VALID' %}bg-red-50{% endif %}">
                    <td>{{ i.nik }}</td><td>{{ i.nama or '-' }}</td>
                    <td class="text-right">{{ i.pokok|rupiah }}</td><td class="text-right">{{ i.wajib|rupiah }}</td><td class="text-right">{{ i.sukarela|rupiah }}</td>
                    <td>{{ i.status }}{% if i.keterangan %}<p class="text-xs text-red-500">{{ i.keterangan }}</p>{% endif %}</td>
                </tr>
            {% endfor %}
            </tbody>
        </table>
    </div>
    <form method="POST" action="{{ url_for('proses_upload_simpanan_action') }}" class="flex gap-3 items-center">
        <input type="hidden" name="items" value="{{ items_json }}">
        <label class="text-sm text-gray-700">Periode</label>
        <input type="month" name="periode" value="{{ periode }}" class="input-elegant md:w-44" required>
        <button type="submit" class="btn-consistent btn-primary"><i class="fas fa-save mr-2"></i>Proses</button>
    </form>
</div>
{% endif %}
"""

HTML_UPLOAD_ANGSURAN = """
<h1 class="text-2xl font-bold text-gray-900 mb-6">Upload Angsuran</h1>
<div class="card-white p-6 mb-6">
    <p class="text-sm text-gray-500 mb-3">Gunakan file export Monitoring Angsuran. Baris berstatus PAID atau LUNAS akan dicocokkan dengan angsuran yang belum dibayar.</p>
    <form method="POST" enctype="multipart/form-data" class="flex flex-wrap gap-3 items-center">
        <input type="file" name="file" accept=".xlsx" class="input-elegant md:w-80" required>
        <button type="submit" class="btn-consistent btn-primary">Preview</button>
    </form>
</div>
{% if items %}
<div class="card-white p-6">
    <p class="text-sm text-gray-600 mb-3">{{ angsuran_ids|length }} angsuran cocok dari {{ items|length }} baris.</p>
    <div class="overflow-x-auto max-h-96 border rounded-lg mb-4">
        <table class="table-elegant">
            <thead><tr><th>NIK</th><th>Nama</th><th>No Pinjaman</th><th>Ke</th><th class="text-right">Nominal</th><th>Status Excel</th><th>Hasil</th></tr></thead>
            <tbody>
            {% for i in items %}
                <tr class="{% if i.status == 'UNMATCHED' %}bg-red-50{% elif i.status == 'SKIPPED' %}bg-gray-50{% endif %}">
                    <td>{{ i.nik }}</td><td>{{ i.nama }}</td><td>{{ i.no_pinjaman }}</td><td>{{ i.angsuran_ke or '-' }}</td>
                    <td class="text-right">{{ i.amount|rupiah }}</td><td>{{ i.status_excel }}</td><td>{{ i.status }}</td>
                </tr>
            {% endfor %}
            </tbody>
        </table>
    </div>
    <form method="POST" action="{{ url_for('proses_upload_angsuran_action') }}">
        <input type="hidden" name="angsuran_ids" value="{{ angsuran_ids_json }}">
        <button type="submit" class="btn-consistent btn-primary" {% if not angsuran_ids %}disabled{% endif %}><i class="fas fa-save mr-2"></i>Proses Pembayaran</button>
    </form>
</div>
{% endif %}
"""

# ---------------- Admin: Realisasi Karyawan ----------------
HTML_REALISASI_KARYAWAN = """
<div class="flex justify-between items-center mb-6">
    <h1 class="text-2xl font-bold text-gray-900">Realisasi Karyawan</h1>
    <a href="{{ url_for('realisasi_karyawan_export', tab=tab, awal=awal, akhir=akhir) }}" class="btn-consistent btn-secondary"><i class="fas fa-file-excel mr-2"></i>Export Excel</a>
</div>
<div class="flex gap-2 mb-4">
    <a href="{{ url_for('realisasi_karyawan_page', tab='BELUM') }}" class="btn-consistent {% if tab == 'BELUM' %}btn-primary{% else %}btn-secondary{% endif %}">Belum Direalisasi</a>
    <a href="{{ url_for('realisasi_karyawan_page', tab='SUDAH') }}" class="btn-consistent {% if tab == 'SUDAH' %}btn-primary{% else %}btn-secondary{% endif %}">Sudah Direalisasi</a>
</div>
<form method="GET" class="card-white p-4 mb-6 flex flex-wrap gap-3">
    <input type="hidden" name="tab" value="{{ tab }}">
    <input type="date" name="awal" value="{{ awal or '' }}" class="input-elegant md:w-44">
    <input type="date" name="akhir" value="{{ akhir or '' }}" class="input-elegant md:w-44">
    <button type="submit" class="btn-consistent btn-secondary"><i class="fas fa-filter mr-2"></i>Filter</button>
</form>
<form method="POST" class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr>
            {% if tab == 'BELUM' %}<th><input type="checkbox" onclick="pilihSemua(this, 'ids')"></th>{% endif %}
            <th>Nama</th><th>NPP</th><th>Unit Kerja</th><th>Tgl Keluar</th>
            <th class="text-right">Pokok</th><th class="text-right">Wajib</th><th class="text-right">Sukarela</th><th class="text-right">Jumlah</th>
            <th class="text-right">Outs Pokok</th><th class="text-right">Outs Bunga</th><th class="text-right">Admin</th><th class="text-right">Diterima</th><th>No Rek</th>
        </tr></thead>
        <tbody>
        {% for r in data %}
            <tr>
                {% if tab == 'BELUM' %}<td><input type="checkbox" name="ids" value="{{ r.id }}"></td>{% endif %}
                <td class="font-semibold">{{ r.nama }}</td>
                <td>{{ r.no_ref }}</td>
                <td>{{ r.unit_kerja }}</td>
                <td>{{ r.tgl_keluar|tanggal }}</td>
                <td class="text-right">{{ r.simp_pokok|rupiah }}</td>
                <td class="text-right">{{ r.simp_wajib|rupiah }}</td>
                <td class="text-right">{{ r.simp_sukarela|rupiah }}</td>
                <td class="text-right">{{ r.jumlah|rupiah }}</td>
                <td class="text-right">{{ r.outs_pokok|rupiah }}</td>
                <td class="text-right">{{ r.outs_bunga|rupiah }}</td>
                <td class="text-right">{{ r.admin|rupiah }}</td>
                <td class="text-right font-semibold {% if r.diterima < 0 %}text-red-600{% endif %}">{{ r.diterima|rupiah }}</td>
                <td>{{ r.no_rek }}</td>
            </tr>
        {% else %}
            <tr><td colspan="14" class="text-center text-gray-400 py-8">Tidak ada data realisasi.</td></tr>
        {% endfor %}
        </tbody>
    </table>
    {% if tab == 'BELUM' %}
    <div class="p-4"><button type="submit" class="btn-consistent btn-primary"><i class="fas fa-paper-plane mr-2"></i>Konfirmasi Realisasi</button></div>
    {% endif %}
</form>
"""

# ---------------- Admin: Laporan & Master Data ----------------
HTML_LAPORAN = """
<h1 class="text-2xl font-bold text-gray-900 mb-6">Laporan &middot; {{ stats.periode|bulan_tahun }}</h1>
<div class="grid grid-cols-1 md:grid-cols-3 gap-6 mb-6">
    <div class="card-white p-6">
        <p class="text-gray-500 text-sm">Pendapatan</p>
        <p class="text-2xl font-bold text-emerald-600">{{ stats.pendapatan|rupiah }}</p>
        <p class="text-xs text-gray-500 mt-2">Simpanan masuk {{ stats.simpanan_setor|rupiah }} &middot; Angsuran {{ stats.total_angsuran|rupiah }}</p>
    </div>
    <div class="card-white p-6">
        <p class="text-gray-500 text-sm">Pengeluaran</p>
        <p class="text-2xl font-bold text-red-600">{{ stats.pengeluaran|rupiah }}</p>
        <p class="text-xs text-gray-500 mt-2">Penarikan {{ stats.simpanan_tarik|rupiah }} &middot; Pencairan {{ stats.total_pencairan|rupiah }}</p>
    </div>
    <div class="card-white p-6">
        <p class="text-gray-500 text-sm">Arus Kas Bersih</p>
        <p class="text-2xl font-bold {% if stats.cashflow >= 0 %}text-emerald-600{% else %}text-red-600{% endif %}">{{ stats.cashflow|rupiah }}</p>
    </div>
</div>
<div class="grid grid-cols-1 md:grid-cols-3 gap-6 mb-6">
    <div class="card-white p-6">
        <h3 class="font-bold text-gray-900 mb-2">Laporan Keuangan Bulanan</h3>
        <div class="flex gap-2">
            <a href="{{ url_for('laporan_download', jenis='keuangan', ekstensi='pdf') }}" class="btn-consistent btn-secondary"><i class="fas fa-file-pdf mr-2"></i>PDF</a>
            <a href="{{ url_for('laporan_download', jenis='keuangan', ekstensi='xlsx') }}" class="btn-consistent btn-secondary"><i class="fas fa-file-excel mr-2"></i>Excel</a>
        </div>
    </div>
    <div class="card-white p-6">
        <h3 class="font-bold text-gray-900 mb-2">Portofolio Anggota</h3>
        <p class="text-xs text-gray-500 mb-2">Total pinjaman aktif {{ stats.total_pinjaman_aktif|rupiah }} &middot; simpanan {{ stats.total_saldo_simpanan|rupiah }}</p>
        <div class="flex gap-2">
            <a href="{{ url_for('laporan_download', jenis='portofolio', ekstensi='pdf') }}" class="btn-consistent btn-secondary"><i class="fas fa-file-pdf mr-2"></i>PDF</a>
            <a href="{{ url_for('laporan_download', jenis='portofolio', ekstensi='xlsx') }}" class="btn-consistent btn-secondary"><i class="fas fa-file-excel mr-2"></i>Excel</a>
        </div>
    </div>
    <div class="card-white p-6">
        <h3 class="font-bold text-gray-900 mb-2">Anggota Baru (30 hari)</h3>
        <p class="text-xs text-gray-500 mb-2">{{ stats.jumlah_anggota_baru }} anggota</p>
        <a href="{{ url_for('laporan_download', jenis='anggota-baru', ekstensi='xlsx') }}" class="btn-consistent btn-secondary"><i class="fas fa-file-excel mr-2"></i>Excel</a>
    </div>
</div>
<div class="card-white overflow-x-auto">
    <table class="table-elegant">
        <thead><tr><th>Nama</th><th>NIK</th><th>Unit Kerja</th><th>Tanggal Daftar</th></tr></thead>
        <tbody>
        {% for a in stats.anggota_baru %}
            <tr><td>{{ a.full_name }}</td><td>{{ a.nik or '-' }}</td><td>{{ a.work_unit or '-' }}</td><td>{{ a.created_at|tanggal }}</td></tr>
        {% else %}
            <tr><td colspan="4" class="text-center text-gray-400 py-8">Belum ada anggota baru.</td></tr>
        {% endfor %}
        </tbody>
    </table>
</div>
"""

HTML_MASTER_DATA = """
<h1 class="text-2xl font-bold text-gray-900 mb-6">Master Data</h1>
<div class="grid grid-cols-1 md:grid-cols-2 gap-6">
    {% for kategori, label in kategori_master.items() %}
    <div class="card-white p-6">
        <h3 class="font-bold text-gray-900 mb-3">{{ label }}</h3>
        <form method="POST" class="flex gap-2 mb-4">
            <input type="hidden" name="kategori" value="{{ kategori }}">
            <input type="text" name="nilai" placeholder="Tambah {{ label|lower }}" class="input-elegant" required>
            <button type="submit" class="btn-consistent btn-primary"><i class="fas fa-plus"></i></button>
        </form>
        <ul class="divide-y text-sm">
            {% for item in master.get(kategori, []) %}
            <li class="flex justify-between items-center py-2">
                <span>{{ item.value }}</span>
                <form method="POST" action="{{ url_for('hapus_master_data_action', master_id=item.id) }}" onsubmit="return confirm('Hapus {{ item.value }}?')">
                    <button class="text-red-500"><i class="fas fa-trash"></i></button>
                </form>
            </li>
            {% else %}
            <li class="py-2 text-gray-400">Belum ada data.</li>
            {% endfor %}
        </ul>
    </div>
    {% endfor %}
</div>
"""
