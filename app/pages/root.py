"""Root landing page with the API entry points."""

from html import escape

_RESOURCES = (
    ("/api/v1/sites", "Sites with their room and capacity totals"),
    ("/api/v1/rooms", "Rooms with occupants, by site and dormitory"),
    ("/api/v1/workers", "Workers; /export downloads the spreadsheet"),
    ("/api/v1/statistics/dashboard", "Dashboard counters"),
    ("/api/v1/statistics/integrity", "Occupancy and assignment mismatches"),
    ("/api/v1/ws/{collection}", "Live snapshots of sites, rooms or workers"),
)


def render_root_page(app_name: str, version: str = "") -> str:
    """Return HTML for the root landing page."""
    rows = "\n".join(
        f"                <li><code>{escape(path)}</code> <span>{escape(text)}</span></li>"
        for path, text in _RESOURCES
    )
    name = escape(app_name)
    return f"""
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{name}</title>
    <style>
        body {{
            font-family: system-ui, sans-serif;
            margin: 0;
            background: #0b0b0b;
            color: #ddd;
            padding: 2rem 1rem;
        }}
        .wrap {{ max-width: 640px; margin: 0 auto; }}
        h1 {{ color: #fff; font-weight: 600; margin-bottom: 0.25rem; }}
        .version {{ color: #777; font-size: 0.875rem; }}
        ul {{ list-style: none; padding: 0; }}
        li {{ padding: 0.5rem 0; border-bottom: 1px solid #1c1c1c; }}
        code {{ font-family: ui-monospace, monospace; color: #9cf; }}
        li span {{ display: block; color: #999; font-size: 0.875rem; }}
        a.btn {{
            display: inline-block;
            margin: 1.5rem 0.75rem 0 0;
            padding: 0.6rem 1.2rem;
            border: 1px solid #444;
            color: #eee;
            text-decoration: none;
        }}
    </style>
</head>
<body>
    <div class="wrap">
        <h1>{name}</h1>
        <div class="version">{escape(version)}</div>
        <p>Worker housing API: sites, dormitory rooms and the workers housed in them.
        Site-bound admins send their site id in the <code>X-Site-ID</code> header.</p>
        <ul>
{rows}
        </ul>
        <a href="/docs" class="btn">Open API docs (Swagger)</a>
        <a href="/redoc" class="btn">ReDoc</a>
    </div>
</body>
</html>
""".strip()
