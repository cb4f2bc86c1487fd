"""Inline Jinja templates, served through a DictLoader"""

BASE_HTML = """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{{ title or app_title }}</title>
  <link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css" rel="stylesheet">
  <style>
    body { padding-top: 4.5rem; }
    .brand { font-weight: 700; }
    .card { border-radius: 1rem; }
    .spot-grid { display: grid; grid-template-columns: repeat(5, 1fr); gap: .75rem; }
    .parking-spot { border: 2px solid #adb5bd; border-radius: .75rem; min-height: 6rem; display: flex; flex-direction: column; overflow: hidden; }
    .parking-spot.selected { border-color: #0d6efd; box-shadow: 0 0 0 .2rem rgba(13,110,253,.35); }
    .parking-spot.taken { background: #f8d7da; }
    .parking-spot form { flex: 1; display: flex; }
    .parking-spot button { flex: 1; border: 0; border-radius: 0; }
    .parking-spot.shared form + form button { border-top: 1px dashed #adb5bd; }
    @media print {
      nav, .no-print, .alert-dismissible { display: none !important; }
      body { padding-top: 0; }
    }
  </style>
</head>
<body>
<nav class="navbar navbar-expand-lg navbar-dark bg-dark fixed-top">
  <div class="container-fluid">
    <a class="navbar-brand brand" href="{{ url_for('index') }}">{{ app_title }}</a>
    <button class="navbar-toggler" type="button" data-bs-toggle="collapse" data-bs-target="#portalNav" aria-controls="portalNav" aria-expanded="false" aria-label="Toggle navigation">
      <span class="navbar-toggler-icon"></span>
    </button>
    <div class="collapse navbar-collapse" id="portalNav">
      <ul class="navbar-nav me-auto mb-2 mb-lg-0">
        <li class="nav-item"><a class="nav-link" href="{{ url_for('index') }}">Find a Spot</a></li>
        <li class="nav-item"><a class="nav-link" href="{{ url_for('register') }}">Registration Form</a></li>
        <li class="nav-item"><a class="nav-link" href="{{ url_for('confirmation') }}">Confirmation</a></li>
      </ul>
      <ul class="navbar-nav">
        <li class="nav-item"><a class="btn btn-outline-light btn-sm" href="{{ url_for('admin') }}">Admin</a></li>
      </ul>
    </div>
  </div>
</nav>

<main class="container">
  {% with messages = get_flashed_messages(with_categories=true) %}
    {% if messages %}
      {% for category, message in messages %}
        <div class="alert alert-{{ category }} alert-dismissible fade show" role="alert">{{ message }}
          <button type="button" class="btn-close" data-bs-dismiss="alert" aria-label="Close"></button>
        </div>
      {% endfor %}
    {% endif %}
  {% endwith %}

  {% block content %}{% endblock %}
</main>
<script src="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/js/bootstrap.bundle.min.js"></script>
<script>
  function fallbackCopy(text) {
    const textarea = document.createElement('textarea');
    textarea.value = text;
    document.body.appendChild(textarea);
    textarea.select();
    try {
      document.execCommand('copy');
    } catch (err) {
      console.error('Fallback copy failed:', err);
    }
    document.body.removeChild(textarea);
  }
  function copySummary(text) {
    if (navigator.clipboard && navigator.clipboard.writeText) {
      navigator.clipboard.writeText(text).catch(function () { fallbackCopy(text); });
    } else {
      fallbackCopy(text);
    }
  }
</script>
{% block scripts %}{% endblock %}
</body>
</html>
"""

PARKING_HTML = """
{% extends 'base.html' %}
{% block content %}
<div class="card p-4 shadow-sm">
  <h3 class="mb-3">Choose Your Parking Spot</h3>
  <div class="d-flex gap-2 mb-3">
    {% for name in inventory.lot_names() %}
      <a class="btn lot-btn {% if lot and lot.name == name %}btn-dark active{% else %}btn-outline-dark{% endif %}" href="{{ url_for('index', lot=name) }}">{{ name }}</a>
    {% endfor %}
  </div>

  {% if selection %}
  <div class="alert alert-info d-flex justify-content-between align-items-center" id="selectedSpotAlert">
    <span>Selected: <strong id="selectedSpotText">{{ selection.label(short=True) }}</strong></span>
    <form method="post" action="{{ url_for('clear_selection') }}" class="no-print">
      <input type="hidden" name="lot" value="{{ lot.name if lot else '' }}">
      <button class="btn btn-sm btn-outline-secondary">Clear</button>
    </form>
  </div>
  {% endif %}

  {% if lot %}
    <p class="text-muted">{{ lot.name }}: {{ stats.available }}/{{ stats.total }} available ({{ stats.percent_available }}%)</p>
    <div class="spot-grid" id="parkingLot">
      {% for spot in lot.spots %}
        {% set is_selected = selection and selection.lot == lot.name and selection.id == spot.id %}
        <div class="parking-spot {{ spot.status }} {{ spot.type }}{% if is_selected %} selected{% endif %}" id="spot-{{ spot.id }}">
          {% for half in (halves if spot.type == 'shared' else [none]) %}
            <form method="post" action="{{ url_for('select_spot') }}">
              <input type="hidden" name="lot" value="{{ lot.name }}">
              <input type="hidden" name="spot_id" value="{{ spot.id }}">
              {% if half %}<input type="hidden" name="half" value="{{ half }}">{% endif %}
              <button class="btn {% if spot.is_taken %}btn-light{% elif is_selected and (not half or selection.half == half) %}btn-primary{% else %}btn-outline-success{% endif %}"
                      {% if spot.is_taken %}disabled{% endif %}>
                {{ spot.id }}{% if half %} {{ half }}<br><small>{{ half.short_schedule }}</small>{% endif %}
              </button>
            </form>
          {% endfor %}
        </div>
      {% endfor %}
    </div>
  {% endif %}

  <div class="mt-4">
    {% if selection %}
      <a class="btn btn-primary" id="continueBtn" href="{{ url_for('register') }}">Continue to Registration</a>
    {% else %}
      <button class="btn btn-primary" id="continueBtn" disabled>Continue to Registration</button>
    {% endif %}
  </div>
</div>
{% endblock %}
"""

FORM_HTML = """
{% extends 'base.html' %}
{% block content %}
<div class="card p-4 shadow-sm">
  <h3 class="mb-3">Student Parking Registration</h3>
  {% if blocking_error %}
    <div class="alert alert-danger" id="formErrors">{{ blocking_error }}</div>
    <a class="btn btn-outline-secondary" href="{{ url_for('index') }}">Back to Spot Selection</a>
  {% else %}
    {% if errors %}
      <div class="alert alert-danger" id="formErrors">
        <strong>Please fix the following errors:</strong>
        <ul>{% for error in errors %}<li>{{ error }}</li>{% endfor %}</ul>
      </div>
    {% endif %}
    <p>Selected spot: <span class="badge bg-success fs-6" id="selectedSpotDisplay">{{ selection.label() }}</span></p>
    <form method="post" id="registrationForm" novalidate>
      <div class="row g-3">
        <div class="col-md-6">
          <label class="form-label" for="fullName">Full Name</label>
          <input class="form-control{% if 'fullName' in invalid %} is-invalid{% endif %}" id="fullName" name="fullName" value="{{ form.get('fullName', '') }}" required>
        </div>
        <div class="col-md-6">
          <label class="form-label" for="studentId">Student ID</label>
          <input class="form-control{% if 'studentId' in invalid %} is-invalid{% endif %}" id="studentId" name="studentId" value="{{ form.get('studentId', '') }}" required>
        </div>
        <div class="col-md-6">
          <label class="form-label" for="email">Email</label>
          <input type="email" class="form-control{% if 'email' in invalid %} is-invalid{% endif %}" id="email" name="email" value="{{ form.get('email', '') }}" required>
        </div>
        <div class="col-md-6">
          <label class="form-label" for="phone">Phone</label>
          <input type="tel" class="form-control" id="phone" name="phone" value="{{ form.get('phone', '') }}">
        </div>
        <div class="col-md-6">
          <label class="form-label" for="gradeLevel">Grade Level</label>
          <select class="form-select{% if 'gradeLevel' in invalid %} is-invalid{% endif %}" id="gradeLevel" name="gradeLevel" required>
            <option value="">Choose...</option>
            {% for grade in grades %}
              <option value="{{ grade }}"{% if form.get('gradeLevel') == grade %} selected{% endif %}>{{ grade.label }}</option>
            {% endfor %}
          </select>
        </div>
        <div class="col-md-6">
          <label class="form-label" for="spotType">Spot Type</label>
          <input class="form-control" id="spotType" value="{{ selection.type | capitalize }}" readonly>
        </div>
        {% if selection.type == 'shared' %}
        <div class="col-md-6" id="partnerSection">
          <label class="form-label" for="partnerName">Partner Name</label>
          <input class="form-control{% if 'partnerName' in invalid %} is-invalid{% endif %}" id="partnerName" name="partnerName" value="{{ form.get('partnerName', '') }}" required>
        </div>
        <div class="col-md-6" id="partnerDaysSection">
          <label class="form-label" for="partnerDays">Partner Days</label>
          <select class="form-select{% if 'partnerDays' in invalid %} is-invalid{% endif %}" id="partnerDays" name="partnerDays" required>
            <option value="">Choose...</option>
            {% for schedule in schedules %}
              <option value="{{ schedule }}"{% if form.get('partnerDays') == schedule %} selected{% endif %}>{{ schedule }}</option>
            {% endfor %}
          </select>
          <div class="form-text">Your schedule: {{ selection.schedule }}</div>
        </div>
        {% endif %}
        <div class="col-12 form-check ms-2">
          <input class="form-check-input{% if 'terms' in invalid %} is-invalid{% endif %}" type="checkbox" id="terms" name="terms" value="yes"{% if form.get('terms') %} checked{% endif %}>
          <label class="form-check-label" for="terms">I agree to the parking rules</label>
        </div>
      </div>
      <button class="btn btn-primary mt-4">Submit Registration</button>
    </form>
  {% endif %}
</div>
{% endblock %}
{% block scripts %}
<script>
  document.querySelectorAll('#registrationForm .form-control, #registrationForm .form-select').forEach(function (input) {
    ['change', 'blur'].forEach(function (eventName) {
      input.addEventListener(eventName, function () {
        if (!input.name) return;
        fetch('{{ url_for('api_validate') }}', {
          method: 'POST',
          headers: {'Content-Type': 'application/json'},
          body: JSON.stringify({field: input.name, value: input.value})
        }).then(function (response) { return response.json(); })
          .then(function (result) { input.classList.toggle('is-invalid', !result.valid); })
          .catch(function (error) { console.error('Validation request failed:', error); });
      });
    });
  });
</script>
{% endblock %}
"""

CONFIRMATION_HTML = """
{% extends 'base.html' %}
{% block content %}
<div class="card p-4 shadow-sm">
  <h3 class="mb-3">Registration Confirmation</h3>
  {% if not registration %}
    <div class="alert alert-danger">No registration found. Please complete the registration form first.</div>
    <a class="btn btn-outline-secondary no-print" href="{{ url_for('register') }}">Go to Registration Form</a>
  {% else %}
    <div class="alert alert-success">Your parking registration has been submitted.</div>
    <h5>Parking Assignment</h5>
    <p id="assignment"><strong>{{ registration.parking_lot }}</strong> &middot; Spot <strong>{{ registration.parking_spot }}</strong> ({{ registration.spot_type | capitalize }})</p>
    <h5>Student</h5>
    <ul class="list-group mb-3">
      <li class="list-group-item d-flex justify-content-between"><span>Name</span><span>{{ registration.full_name }}</span></li>
      <li class="list-group-item d-flex justify-content-between"><span>Student ID</span><span>{{ registration.student_id }}</span></li>
      <li class="list-group-item d-flex justify-content-between"><span>Email</span><span>{{ registration.email }}</span></li>
      <li class="list-group-item d-flex justify-content-between"><span>Phone</span><span>{{ registration.phone or 'N/A' }}</span></li>
      <li class="list-group-item d-flex justify-content-between"><span>Grade</span><span>{{ registration.grade_level }}</span></li>
      {% if registration.is_shared %}
      <li class="list-group-item d-flex justify-content-between"><span>Partner</span><span id="partnerName">{{ registration.parking_partner }}</span></li>
      <li class="list-group-item d-flex justify-content-between"><span>Your Schedule</span><span id="userSchedule">{{ registration.user_schedule }}</span></li>
      {% endif %}
    </ul>
    <p>Reference: <span class="badge bg-dark fs-6" id="referenceId">{{ registration.reference_id }}</span></p>
    <p class="text-muted">Submitted {{ registration.submitted_at }}</p>
    <div class="d-flex gap-2 no-print">
      <button class="btn btn-outline-primary" id="copyBtn" data-summary="{{ registration.summary() }}" onclick="copySummary(this.dataset.summary)">Copy Summary</button>
      <button class="btn btn-outline-secondary" id="printBtn" onclick="window.print()">Print</button>
    </div>
  {% endif %}
</div>
{% endblock %}
"""

ADMIN_LOGIN_HTML = """
{% extends 'base.html' %}
{% block content %}
<div class="row justify-content-center" id="loginScreen">
  <div class="col-md-6">
    <div class="card p-4 shadow-sm">
      <h3 class="mb-3">Admin Login</h3>
      {% if login_error %}<div class="alert alert-danger" id="loginError">{{ login_error }}</div>{% endif %}
      <form method="post" action="{{ url_for('admin_login') }}" id="adminLoginForm">
        <div class="mb-3">
          <label class="form-label" for="adminPassword">Password</label>
          <input type="password" id="adminPassword" name="password" class="form-control" value="" autofocus>
        </div>
        <button class="btn btn-primary w-100">Log in</button>
      </form>
    </div>
  </div>
</div>
{% endblock %}
"""

ADMIN_DASHBOARD_HTML = """
{% extends 'base.html' %}
{% block content %}
<div id="dashboardScreen">
<div class="d-flex justify-content-between align-items-center mb-3">
  <h3>Admin Dashboard</h3>
  <div class="d-flex gap-2 no-print">
    <form method="post" action="{{ url_for('admin_refresh') }}"><button class="btn btn-outline-primary btn-sm" id="refreshBtn">Refresh</button></form>
    <a class="btn btn-outline-success btn-sm" id="exportBtn" href="{{ url_for('admin_export') }}">Export JSON</a>
    <form method="post" action="{{ url_for('admin_reset') }}" onsubmit="return confirm('WARNING: This will delete ALL student registrations and reset all parking spots. This action cannot be undone. Are you sure?')">
      <input type="hidden" name="step" value="1"><input type="hidden" name="confirmed" value="yes">
      <button class="btn btn-outline-danger btn-sm" id="resetAllBtn">Reset All</button>
    </form>
    <form method="post" action="{{ url_for('admin_logout') }}" onsubmit="return confirm('Are you sure you want to logout?')">
      <input type="hidden" name="confirmed" value="yes">
      <button class="btn btn-dark btn-sm" id="logoutBtn">Logout</button>
    </form>
  </div>
</div>

<div class="row g-3 mb-4">
  <div class="col-md-3"><div class="card p-3 shadow-sm"><span>Total Spots</span><span class="badge bg-dark fs-5" id="totalSpots">{{ stats.total }}</span></div></div>
  <div class="col-md-3"><div class="card p-3 shadow-sm"><span>Available</span><span class="badge bg-success fs-5" id="availableSpots">{{ stats.available }}</span></div></div>
  <div class="col-md-3"><div class="card p-3 shadow-sm"><span>Taken</span><span class="badge bg-danger fs-5" id="takenSpots">{{ stats.taken }}</span></div></div>
  <div class="col-md-3"><div class="card p-3 shadow-sm"><span>Registrations</span><span class="badge bg-primary fs-5" id="totalRegistrations">{{ registrations|length }}</span></div></div>
</div>

<div class="card p-4 shadow-sm mb-4">
  <h4 class="mb-3">Student Registrations</h4>
  {% if not registrations %}
    <p class="text-muted" id="noStudentsMsg">No student registrations yet.</p>
  {% else %}
  <div class="table-responsive">
    <table class="table table-striped align-middle">
      <thead><tr><th>Name</th><th>Student ID</th><th>Email</th><th>Spot</th><th>Partner</th><th>Type</th><th></th></tr></thead>
      <tbody id="studentTableBody">
        {% for index, registration in registrations %}
        <tr data-index="{{ index }}">
          <td><strong>{{ registration.full_name }}</strong></td>
          <td>{{ registration.student_id }}</td>
          <td><small>{{ registration.email }}</small></td>
          <td>{{ registration.parking_lot }}-{{ registration.parking_spot }}</td>
          <td>{{ registration.parking_partner or '-' }}</td>
          <td><span class="badge {% if registration.is_shared %}bg-info{% else %}bg-success{% endif %}">{{ registration.spot_type }}</span></td>
          <td class="d-flex gap-1 no-print">
            <button class="btn btn-sm btn-info btn-copy" title="Copy student info" data-summary="{{ registration.summary() }}" onclick="copySummary(this.dataset.summary)">Copy</button>
            <form method="post" action="{{ url_for('admin_remove_registration', index=index) }}" onsubmit='return confirm("Remove registration for " + {{ registration.full_name|tojson }} + "?")'>
              <input type="hidden" name="confirmed" value="yes">
              <input type="hidden" name="reference_id" value="{{ registration.reference_id }}">
              <button class="btn btn-sm btn-danger btn-remove" title="Remove student">Remove</button>
            </form>
          </td>
        </tr>
        {% endfor %}
      </tbody>
    </table>
  </div>
  {% endif %}
</div>

<div class="card p-4 shadow-sm">
  <div class="d-flex justify-content-between align-items-center mb-3">
    <h4>Parking Spots</h4>
    <form method="get" action="{{ url_for('admin') }}" class="no-print">
      <select class="form-select form-select-sm" id="spotLotFilter" name="lot" onchange="this.form.submit()">
        <option value="">All Lots</option>
        {% for name in inventory.lot_names() %}
          <option value="{{ name }}"{% if lot_filter == name %} selected{% endif %}>{{ name }}</option>
        {% endfor %}
      </select>
    </form>
  </div>
  <div class="table-responsive">
    <table class="table table-striped align-middle">
      <thead><tr><th>Spot</th><th>Lot</th><th>Status</th><th>Assigned To</th><th>Type</th><th></th></tr></thead>
      <tbody id="spotTableBody">
        {% for lot, spot in spot_rows %}
        <tr data-lot-key="{{ lot.key }}" data-spot-id="{{ spot.id }}">
          <td><strong>{{ spot.id }}</strong></td>
          <td>{{ lot.name }}</td>
          <td><span class="badge {% if spot.is_taken %}bg-danger{% else %}bg-success{% endif %}">{{ spot.status }}</span></td>
          <td>{{ spot.assigned_to or '-' }}</td>
          <td><span class="badge {% if spot.type == 'shared' %}bg-info{% else %}bg-success{% endif %}">{{ spot.type }}</span></td>
          <td class="no-print">
            <form method="post" action="{{ url_for('admin_clear_spot', lot_key=lot.key, spot_id=spot.id) }}" onsubmit='return confirm("Clear parking spot " + {{ spot.id|tojson }} + "?")'>
              <input type="hidden" name="confirmed" value="yes">
              <input type="hidden" name="lot" value="{{ lot_filter }}">
              <button class="btn btn-sm btn-warning btn-clear" title="Clear spot">Clear</button>
            </form>
          </td>
        </tr>
        {% endfor %}
      </tbody>
    </table>
  </div>
</div>
</div>
{% endblock %}
"""

ADMIN_RESET_HTML = """
{% extends 'base.html' %}
{% block content %}
<div class="row justify-content-center">
  <div class="col-md-6">
    <div class="card p-4 shadow-sm border-danger">
      <h3 class="mb-3 text-danger">Reset All Data</h3>
      <p>Are you REALLY sure? All {{ registration_count }} registration(s) will be permanently deleted and every spot will be marked available.</p>
      <div class="d-flex gap-2">
        <form method="post" action="{{ url_for('admin_reset') }}">
          <input type="hidden" name="step" value="2">
          <input type="hidden" name="confirmed" value="yes">
          <input type="hidden" name="confirmed_again" value="yes">
          <button class="btn btn-danger" id="finalResetBtn">Yes, delete everything</button>
        </form>
        <a class="btn btn-outline-secondary" href="{{ url_for('admin') }}">Cancel</a>
      </div>
    </div>
  </div>
</div>
{% endblock %}
"""
