def test_notation_search(client):
    data = client.get("/api/reference/notation", params={"q": "log"}).json()["data"]

    assert data["total"] == 2
    assert [n["id"] for n in data["notations"]] == ["logarithm-base", "natural-log"]
    assert "confusedWith" in data["notations"][0]
    assert "apUnit" in data["notations"][0]


def test_notation_without_query_returns_everything(client):
    assert client.get("/api/reference/notation").json()["data"]["total"] == 14


def test_notation_category_filter(client):
    data = client.get("/api/reference/notation", params={"category": "polar"}).json()["data"]
    assert [n["id"] for n in data["notations"]] == ["polar-coordinates"]


def test_notation_categories(client):
    categories = client.get("/api/reference/notation/categories").json()["data"]["categories"]
    assert categories[0] == "functions"
    assert len(categories) == 8


def test_notation_by_id(client):
    assert client.get("/api/reference/notation/natural-log").json()["data"]["notation"] == r"\ln(x)"

    missing = client.get("/api/reference/notation/unknown")
    assert missing.status_code == 404
    assert missing.json()["error"]["message"] == "Notation not found"


def test_vocabulary_search(client):
    data = client.get("/api/reference/vocabulary", params={"q": "ratio", "category": "sequences"}).json()["data"]

    assert [w["term"] for w in data["words"]] == ["Common difference", "Common ratio"]
    assert data["words"][1]["categoryName"] == "Sequences"
    assert data["total"] == 2


def test_vocabulary_categories(client):
    categories = client.get("/api/reference/vocabulary/categories").json()["data"]["categories"]
    assert categories[0] == {"key": "functions", "name": "Functions"}
