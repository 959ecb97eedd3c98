#!/usr/bin/env python3
"""
Smoke check against a running tutor API.

Usage: python smoke_check_api.py  (API_BASE_URL defaults to http://localhost:8000)
"""

import os
import sys
import time
from datetime import datetime, timezone
from typing import Any, List, Optional

import httpx

API_BASE = os.getenv("API_BASE_URL", "http://localhost:8000")

TINY_JPEG = (
    "data:image/jpeg;base64,/9j/4AAQSkZJRgABAQAAAQABAAD/2wBDAAMCAgICAgMCAgIDAwMDBAYEBAQEBAgGBgUGCQgKCgkICQkKDA8M"
    "CgsOCwkJDRENDg8QEBEQCgwSExIQEw8QEBD/wAALCAABAAEBAREA/8QAFAABAAAAAAAAAAAAAAAAAAAAA//EABQQAQAAAAAAAAAAAAAAAAAA"
    "AAD/2gAIAQEAAD8AH//Z"
)

results: List[dict] = []


def log_result(endpoint: str, method: str, status: str, message: Optional[str] = None, duration: Optional[int] = None):
    emoji = {"PASS": "✅", "FAIL": "❌", "SKIP": "⏭️"}[status]
    suffix = f" ({duration}ms)" if duration is not None else ""
    print(f"{emoji} {method} {endpoint} - {status}{suffix}")
    if message:
        print(f"   {message}")
    results.append({"endpoint": endpoint, "method": method, "status": status})


def check(client: httpx.Client, method: str, endpoint: str, body: Any = None, expected: int = 200) -> Optional[dict]:
    started = time.time()
    try:
        response = client.request(method, endpoint, json=body)
    except httpx.HTTPError as e:
        log_result(endpoint, method, "FAIL", str(e))
        return None

    duration = int((time.time() - started) * 1000)
    try:
        data = response.json()
    except ValueError:
        data = {}

    if response.status_code == expected:
        log_result(endpoint, method, "PASS", duration=duration)
    else:
        message = (data.get("error") or {}).get("message", "Unknown error") if isinstance(data, dict) else "Unknown error"
        log_result(endpoint, method, "FAIL", f"Expected {expected}, got {response.status_code}: {message}", duration)
    return data


def run() -> int:
    print("🚀 Starting API smoke check\n")
    print(f"Testing against: {API_BASE}\n")
    has_key = bool(os.getenv("ANTHROPIC_API_KEY"))
    print(f"Anthropic API Key: {'✅ Set' if has_key else '❌ Not set'}\n")

    with httpx.Client(base_url=API_BASE, timeout=60.0) as client:
        print("📚 AI Tutor API\n")
        if has_key:
            check(client, "POST", "/api/ai/tutor", {"message": "What is 2 + 2?", "mode": "socratic"})
            check(client, "POST", "/api/ai/tutor", {
                "message": "How do I factor this?",
                "mode": "explanation",
                "context": {"extractedProblem": "x^2 + 5x + 6", "messageHistory": []},
            })
        else:
            log_result("/api/ai/tutor", "POST", "SKIP", "no API key")
        check(client, "POST", "/api/ai/tutor", {"message": "Test", "mode": "invalid"}, 400)
        check(client, "POST", "/api/ai/tutor", {"message": "", "mode": "socratic"}, 400)
        check(client, "POST", "/api/ai/tutor", {"message": "a" * 6000, "mode": "socratic"}, 400)

        print("\n🖼️  OCR API\n")
        check(client, "POST", "/api/ocr", {"image": ""}, 400)
        check(client, "POST", "/api/ocr", {"image": "not-a-valid-base64"}, 400)
        if has_key:
            check(client, "POST", "/api/ocr", {"image": TINY_JPEG, "options": {"validateLatex": True}})
        else:
            log_result("/api/ocr", "POST", "SKIP", "no API key")

        print("\n📊 Sessions API\n")
        check(client, "GET", "/api/sessions")
        check(client, "GET", "/api/sessions?page=1&limit=10")
        check(client, "GET", "/api/sessions?mode=socratic&completed=true&includeStats=true")
        created = check(client, "POST", "/api/sessions", {
            "extractedProblem": "Test problem: x^2 + 5x + 6 = 0",
            "originalProblemText": "Solve the quadratic equation",
            "mode": "socratic",
            "messages": [{
                "role": "user",
                "content": "Help me solve this",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }],
            "duration": 120,
            "questionsAsked": 3,
            "hintsGiven": 1,
            "completed": True,
            "tags": ["quadratic", "test"],
            "unit": "Unit 2",
        }, 201)
        session_id = ((created or {}).get("data") or {}).get("id")
        if session_id:
            check(client, "DELETE", f"/api/sessions?id={session_id}")
            check(client, "DELETE", f"/api/sessions?id={session_id}", expected=404)
        check(client, "DELETE", "/api/sessions", expected=400)
        check(client, "DELETE", "/api/sessions?id=invalid-id", expected=400)

        print("\n🩺 Health\n")
        check(client, "GET", "/api/health", expected=200 if has_key else 503)
        check(client, "GET", "/api/metrics")

    passed = sum(1 for r in results if r["status"] == "PASS")
    failed = sum(1 for r in results if r["status"] == "FAIL")
    skipped = sum(1 for r in results if r["status"] == "SKIP")
    print("\n" + "=" * 50)
    print(f"📈 Results: {passed} passed, {failed} failed, {skipped} skipped")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(run())
