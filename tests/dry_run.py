"""Dry-run smoke test: imports, config, and pipeline wiring."""

import sys

print(f"Python: {sys.version}")
print()

# ── Test imports ──────────────────────────────────────────────────────────
print("Testing imports...")
errors = []

try:
    from src.config import check_settings, get_settings
    print("  config OK")
except Exception as e:
    print(f"  config FAIL: {e}")
    errors.append(("config", e))

try:
    from src.services.classifier import classify_url, unescape_url
    print("  classifier OK")
except Exception as e:
    print(f"  classifier FAIL: {e}")
    errors.append(("classifier", e))

try:
    from src.services.notion_client import NotionClient
    print("  notion_client OK")
except Exception as e:
    print(f"  notion_client FAIL: {e}")
    errors.append(("notion_client", e))

try:
    from src.services.slack import LinkSharedListener
    print("  slack OK")
except Exception as e:
    print(f"  slack FAIL: {e}")
    errors.append(("slack", e))

try:
    from src.main import app, build_listener
    print("  main OK")
except Exception as e:
    print(f"  main FAIL: {e}")
    errors.append(("main", e))

# ── Test config ───────────────────────────────────────────────────────────
print()
print("Settings:")
try:
    s = get_settings()
    print(f"  notion_workspace:     {s.notion_workspace or '(missing)'}")
    print(f"  notion_domain:        {s.notion_domain}")
    print(f"  summary lines/chars:  {s.summary_number_of_lines}/{s.summary_number_of_characters}")
    print(f"  notion_api_token:     {s.notion_api_token[:8]}...")
    print(f"  slack_app_token set:  {bool(s.slack_app_token)}")
    for problem in check_settings(s):
        print(f"  WARNING: {problem}")
except Exception as e:
    print(f"  Settings FAIL: {e}")
    errors.append(("settings", e))

# ── Test classification and wiring ────────────────────────────────────────
print()
print("Pipeline:")
try:
    s = get_settings()
    sample = f"https://www.notion.so/{s.notion_workspace}/Sample-0123456789abcdef?v=1&amp;p=42"
    print(f"  classify_url -> {classify_url(unescape_url(sample), s.notion_workspace)}")

    from slack_sdk.web.async_client import AsyncWebClient

    listener = build_listener(s, AsyncWebClient(token=s.slack_bot_token))
    print(f"  {type(listener).__name__} OK")
except Exception as e:
    print(f"  Pipeline FAIL: {e}")
    errors.append(("pipeline", e))

# ── Summary ───────────────────────────────────────────────────────────────
print()
if errors:
    print(f"FAILED: {len(errors)} error(s)")
    for name, err in errors:
        print(f"  {name}: {err}")
    sys.exit(1)
else:
    print("All checks passed!")
    sys.exit(0)
