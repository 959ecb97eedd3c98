def test_latex_clean(client):
    response = client.post("/api/latex/clean", json={"content": r"$x · y$ and \(a+b\)"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["cleaned"] == r"$x \cdot y$ and $a+b$"
    assert data["changed"] is True
    assert len(data["issues"]) == 2
    assert data["report"].startswith("WARNINGS (2):")


def test_latex_validate(client):
    response = client.post("/api/latex/validate", json={"expressions": [r"\frac{1}{2}", r"\href{x}{y}", "x · y"]})

    data = response.json()["data"]
    assert data["allValid"] is False
    ok, bad, unicode = data["results"]
    assert ok["valid"] is True and ok["issues"] == []
    assert bad["errors"] == [r"Forbidden command detected: \href"]
    assert "sanitized" not in bad
    assert unicode["valid"] is True
    assert "middle dot" in unicode["issues"][0]["message"]


def test_latex_validate_requires_expressions(client):
    assert client.post("/api/latex/validate", json={"expressions": []}).status_code == 400


def test_read_default_settings(client):
    data = client.get("/api/settings").json()["data"]

    assert data["theme"] == "dark"
    assert data["adhd"]["breakIntervalMinutes"] == 25
    assert data["defaultTutoringMode"] == "socratic"


def test_patch_settings_merges_nested_adhd(client):
    response = client.patch("/api/settings", json={"theme": "light", "adhd": {"breakIntervalMinutes": 30}})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["theme"] == "light"
    assert data["adhd"]["breakIntervalMinutes"] == 30
    assert data["adhd"]["focusTimerEnabled"] is True
    assert client.get("/api/settings").json()["data"]["theme"] == "light"


def test_patch_rejects_unknown_setting(client):
    response = client.patch("/api/settings", json={"bogus": 1})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Unknown setting: bogus"


def test_patch_rejects_invalid_value(client):
    response = client.patch("/api/settings", json={"soundVolume": 2})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["message"] == "Invalid settings"
    assert error["details"]["errors"][0]["field"] in ("sound_volume", "soundVolume")


def test_presets_and_styles(client):
    data = client.post("/api/settings/presets/dyslexia").json()["data"]
    assert data["dyslexiaMode"] is True
    assert data["dyslexiaColorOverlay"] == "cream"

    styles = client.get("/api/settings/styles").json()["data"]
    assert styles["cssVariables"]["--font-family-base"] == "OpenDyslexic, sans-serif"
    assert styles["cssVariables"]["--base-font-size"] == "18px"
    assert styles["rootClasses"] == ["dyslexia-mode", "dyslexia-overlay", "reduce-motion"]


def test_unknown_preset_is_404(client):
    response = client.post("/api/settings/presets/sparkly")

    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Preset not found"


def test_reset_settings(client):
    client.patch("/api/settings", json={"theme": "system"})
    data = client.post("/api/settings/reset").json()["data"]
    assert data["theme"] == "dark"
