"""Page shell wrapped around the serialized dashboard document."""

from __future__ import annotations

# Elements the browser re-pulls on every poll interval
LIVE_FRAGMENTS = (
    "kpi-calls",
    "kpi-users",
    "kpi-status",
    "kpi-version",
    "call-count",
    "call-tbody",
    "sub-count",
    "sub-tbody",
    "activity-log",
)

PAGE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>XSIP Carrier Platform</title>
<style>
  body { font-family: system-ui, sans-serif; margin: 0; background: #f6f3ee; color: #3a342b; }
  .app { display: flex; min-height: 100vh; }
  #sidebar { width: 200px; padding: 1rem; background: #efe9df; }
  .nav-item { display: block; padding: 0.5rem; cursor: pointer; border-radius: 6px; }
  .nav-item.active { background: #b8a786; color: #fff; }
  main { flex: 1; padding: 1.5rem; }
  .page { display: none; }
  .page.active { display: block; animation: enter 0.25s ease-out; }
  @keyframes enter { from { opacity: 0; transform: translateY(4px); } to { opacity: 1; } }
  .kpi { display: inline-block; margin: 0 1rem 1rem 0; }
  .kpi-value { display: block; font-size: 1.4rem; font-weight: 600; }
  .data-table { width: 100%; border-collapse: collapse; }
  .data-table td, .data-table th { padding: 0.4rem; border-bottom: 1px solid #e4ddd0; text-align: left; }
  .empty-state { color: #a89a85; text-align: center; }
  .mono { font-family: monospace; font-size: 0.78rem; }
  .balance-positive { color: #4f8a4b; font-weight: 600; }
  .balance-negative { color: #b0483f; font-weight: 600; }
  .overlay { display: none; position: fixed; inset: 0; background: rgba(0,0,0,0.35); }
  .overlay.open { display: flex; align-items: center; justify-content: center; }
  .modal { background: #fff; padding: 1.5rem; border-radius: 8px; min-width: 320px; }
  .modal label { display: block; margin-bottom: 0.6rem; }
</style>
</head>
<body>
{{BODY}}
<script>
const POLL_MS = {{POLL_MS}};
const LIVE = {{LIVE}};

async function post(url, body) {
  const r = await fetch(url, {
    method: 'POST',
    headers: { 'Content-Type': 'application/json' },
    body: JSON.stringify(body || {}),
  });
  return r;
}

async function pullFragments(ids) {
  for (const id of ids) {
    const el = document.getElementById(id);
    if (!el) continue;
    const r = await fetch('/fragment/' + id);
    if (r.ok) el.innerHTML = await r.text();
  }
}

async function reloadView() {
  const r = await fetch('/view');
  if (!r.ok) return;
  const doc = new DOMParser().parseFromString(await r.text(), 'text/html');
  document.getElementById('app').replaceWith(doc.getElementById('app'));
}

document.addEventListener('click', async (e) => {
  const nav = e.target.closest('[data-page]');
  if (nav) { await post('/navigate/' + nav.dataset.page); return reloadView(); }

  const opener = e.target.closest('[data-modal-open]');
  if (opener) { await post('/modals/' + opener.dataset.modalOpen + '/open'); return reloadView(); }

  const closer = e.target.closest('[data-modal-close]');
  if (closer) { await post('/modals/' + closer.dataset.modalClose + '/close'); return reloadView(); }

  const row = e.target.closest('[data-action]');
  if (row) {
    const id = row.dataset.subscriberId;
    const body = { action: row.dataset.action, subscriber_id: id };
    if (row.dataset.action === 'delete') body.confirmed = confirm('Delete subscriber ' + id + '?');
    if (row.dataset.action === 'balance') body.balance = parseFloat(row.dataset.balance);
    await post('/actions', body);
    return reloadView();
  }

  const overlay = e.target.closest('.overlay');
  if (overlay && e.target === overlay) {
    await post('/modals/' + overlay.dataset.modal + '/backdrop', { target_id: overlay.id });
    return reloadView();
  }
});

document.addEventListener('submit', async (e) => {
  const form = e.target;
  if (!form.dataset.submit) return;
  e.preventDefault();
  const v = (id) => (document.getElementById(id) || {}).value;
  const body = form.id === 'form-add-sub'
    ? { id: v('f-id'), username: v('f-name'), password: v('f-pass'), balance: v('f-bal') }
    : { subscriber_id: v('eb-id'), amount: v('eb-amount') };
  const r = await post(form.dataset.submit, body);
  // Leave the live form alone when the server kept the dialog open
  if (!r.ok) return;
  const result = await r.json();
  if (result.created === false) return;
  reloadView();
});

setInterval(() => pullFragments(LIVE), POLL_MS);
</script>
</body>
</html>
"""


def render_page(body: str, poll_interval_seconds: float) -> str:
    """Wrap serialized document markup in the page shell."""
    live = "[" + ", ".join(f"'{element_id}'" for element_id in LIVE_FRAGMENTS) + "]"
    return (
        PAGE_HTML.replace("{{POLL_MS}}", str(int(poll_interval_seconds * 1000)))
        .replace("{{LIVE}}", live)
        .replace("{{BODY}}", body)
    )
