#!/usr/bin/env python3
"""
Send a signed test delivery to a running repoguard service.

Start the service first:
    GITHUB_WEBHOOK_SECRET=dev-secret uvicorn repoguard.app:app_from_env --factory

Then run:
    GITHUB_WEBHOOK_SECRET=dev-secret python examples/send_test_event.py widgets
"""

import json
import os
import sys
import uuid

import httpx

from repoguard.signing import sign_request_body, verify_signature

url = os.environ.get("REPOGUARD_URL", "http://127.0.0.1:8000/webhook")
secret = os.environ.get("GITHUB_WEBHOOK_SECRET", "dev-secret")
repository = sys.argv[1] if len(sys.argv) > 1 else "widgets"

print("=== repoguard test delivery ===\n")

payload = {
    "action": "created",
    "repository": {"name": repository, "private": False},
}
body = json.dumps(payload).encode("utf-8")
signature = sign_request_body(secret, body)
assert verify_signature(body, signature, secret)
print(f"1. Signed {len(body)} byte payload for {repository!r}")

headers = {
    "Content-Type": "application/json",
    "X-Hub-Signature": signature,
    "X-GitHub-Event": "repository",
    "X-GitHub-Delivery": str(uuid.uuid4()),
}

print(f"2. Posting to {url}")
response = httpx.post(url, content=body, headers=headers, timeout=10.0)
print(f"   Status: {response.status_code}")
if response.status_code == 200:
    echoed = response.json()["input"]
    print(f"   Echoed event: {echoed['headers'].get('x-github-event')}")
else:
    print(f"   Rejected: {response.text}")

# A tampered body must be rejected with 401
print("\n3. Posting a tampered body")
response = httpx.post(url, content=body + b" ", headers=headers, timeout=10.0)
print(f"   Status: {response.status_code} ({response.text})")
