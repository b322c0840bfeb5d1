import pytest


def _create(client, headers, base="USD", target="EUR", rate=0.85):
    return client.post(
        "/api/currency",
        json={"baseCurrency": base, "targetCurrency": target, "rate": rate},
        headers=headers,
    )


def test_list_requires_token(client):
    assert client.get("/api/currency").status_code == 401


def test_admin_creates_pair_and_it_is_listed(client, admin_headers, user_headers):
    res = _create(client, admin_headers, base="usd", target="eur")

    assert res.status_code == 201, res.text
    pair = res.json()["data"]
    assert pair["baseCurrency"] == "USD"
    assert pair["targetCurrency"] == "EUR"
    assert pair["rate"] == 0.85
    assert {"id", "lastUpdated", "createdAt", "updatedAt"} <= pair.keys()

    listed = client.get("/api/currency", headers=user_headers).json()
    assert listed["success"] is True
    assert [p["id"] for p in listed["data"]] == [pair["id"]]


def test_create_duplicate_pair(client, admin_headers):
    _create(client, admin_headers)
    res = _create(client, admin_headers, rate=0.9)
    assert res.status_code == 400
    assert res.json()["message"] == "Currency pair already exists"


def test_create_invalid_rate(client, admin_headers):
    res = _create(client, admin_headers, rate=-1)
    assert res.status_code == 400
    assert res.json()["success"] is False


BROKEN_JSON = "{not json"


@pytest.mark.parametrize(
    "method,path,body",
    [
        ("post", "/api/currency", {"json": {"baseCurrency": "US", "rate": -5}}),
        ("post", "/api/currency", {"json": {"baseCurrency": "USD", "targetCurrency": "EUR", "rate": 1}}),
        ("post", "/api/currency", {"content": BROKEN_JSON}),
        ("put", "/api/currency/some-id", {"json": {"rate": 2}}),
        ("put", "/api/currency/some-id", {"content": BROKEN_JSON}),
        ("delete", "/api/currency/some-id", {}),
    ],
)
def test_non_admin_cannot_mutate(client, user_headers, method, path, body):
    headers = dict(user_headers)
    if "content" in body:
        headers["Content-Type"] = "application/json"
    res = getattr(client, method)(path, headers=headers, **body)

    assert res.status_code == 403
    assert res.json() == {"success": False, "message": "Not authorized as an admin"}


def test_update_pair(client, admin_headers):
    pair = _create(client, admin_headers).json()["data"]

    res = client.put(
        f"/api/currency/{pair['id']}",
        json={"rate": 0.9, "targetCurrency": "gbp"},
        headers=admin_headers,
    )

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["rate"] == 0.9
    assert data["targetCurrency"] == "GBP"


def test_update_with_zero_rate_is_ignored(client, admin_headers):
    pair = _create(client, admin_headers).json()["data"]

    res = client.put(f"/api/currency/{pair['id']}", json={"rate": 0}, headers=admin_headers)

    assert res.status_code == 200
    assert res.json()["data"]["rate"] == 0.85
    assert res.json()["data"]["lastUpdated"] == pair["lastUpdated"]


def test_update_unknown_pair(client, admin_headers):
    res = client.put("/api/currency/missing", json={"rate": 1.0}, headers=admin_headers)
    assert res.status_code == 404
    assert res.json()["message"] == "Currency pair not found"


def test_delete_pair(client, admin_headers):
    pair = _create(client, admin_headers).json()["data"]

    res = client.delete(f"/api/currency/{pair['id']}", headers=admin_headers)
    assert res.status_code == 200
    assert res.json() == {"success": True, "message": "Currency pair removed"}

    again = client.delete(f"/api/currency/{pair['id']}", headers=admin_headers)
    assert again.status_code == 404


def test_convert_scenario(client, admin_headers, user_headers):
    _create(client, admin_headers, rate=0.85)

    res = client.post(
        "/api/currency/convert",
        json={"baseCurrency": "usd", "targetCurrency": "eur", "amount": 100},
        headers=user_headers,
    )

    assert res.status_code == 200, res.text
    assert res.json() == {
        "success": True,
        "data": {
            "baseCurrency": "USD",
            "targetCurrency": "EUR",
            "amount": 100,
            "convertedAmount": 85.0,
            "rate": 0.85,
        },
    }


@pytest.mark.parametrize("amount", [0, -10])
def test_convert_rejects_non_positive_amount(client, admin_headers, user_headers, amount):
    _create(client, admin_headers)
    res = client.post(
        "/api/currency/convert",
        json={"baseCurrency": "USD", "targetCurrency": "EUR", "amount": amount},
        headers=user_headers,
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Please provide a valid amount"


def test_convert_missing_pair(client, admin_headers, user_headers):
    _create(client, admin_headers, base="EUR", target="USD", rate=1.18)
    res = client.post(
        "/api/currency/convert",
        json={"baseCurrency": "USD", "targetCurrency": "EUR", "amount": 100},
        headers=user_headers,
    )
    assert res.status_code == 404


def test_convert_requires_token(client):
    res = client.post(
        "/api/currency/convert",
        json={"baseCurrency": "USD", "targetCurrency": "EUR", "amount": 100},
    )
    assert res.status_code == 401


def test_admin_malformed_body(client, admin_headers):
    headers = dict(admin_headers, **{"Content-Type": "application/json"})
    res = client.post("/api/currency", content=BROKEN_JSON, headers=headers)

    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "Request body must be valid JSON"}


def test_create_rejects_boolean_rate(client, admin_headers):
    res = _create(client, admin_headers, rate=True)

    assert res.status_code == 400
    assert res.json()["message"] == "Rate must be a positive number"
    assert client.get("/api/currency", headers=admin_headers).json()["data"] == []


def test_update_rejects_boolean_rate(client, admin_headers):
    pair = _create(client, admin_headers).json()["data"]

    res = client.put(f"/api/currency/{pair['id']}", json={"rate": True}, headers=admin_headers)

    assert res.status_code == 400
    assert res.json()["message"] == "Rate must be a positive number"


@pytest.mark.parametrize("amount", [True, False, "abc", [100]])
def test_convert_rejects_non_numeric_amount(client, admin_headers, user_headers, amount):
    _create(client, admin_headers)
    res = client.post(
        "/api/currency/convert",
        json={"baseCurrency": "USD", "targetCurrency": "EUR", "amount": amount},
        headers=user_headers,
    )
    assert res.status_code == 400
    assert res.json()["success"] is False


def test_convert_boolean_amount_message(client, admin_headers, user_headers):
    _create(client, admin_headers)
    res = client.post(
        "/api/currency/convert",
        json={"baseCurrency": "USD", "targetCurrency": "EUR", "amount": True},
        headers=user_headers,
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Please provide a valid amount"


def test_convert_numeric_string_amount(client, admin_headers, user_headers):
    _create(client, admin_headers, rate=0.85)
    res = client.post(
        "/api/currency/convert",
        json={"baseCurrency": "USD", "targetCurrency": "EUR", "amount": "100"},
        headers=user_headers,
    )
    assert res.status_code == 200
    assert res.json()["data"]["convertedAmount"] == 85.0


def test_convert_huge_amount(client, admin_headers, user_headers):
    _create(client, admin_headers, rate=1.5)
    res = client.post(
        "/api/currency/convert",
        json={"baseCurrency": "USD", "targetCurrency": "EUR", "amount": 1e27},
        headers=user_headers,
    )
    assert res.status_code == 200, res.text
    assert res.json()["data"]["convertedAmount"] == 1.5e27
