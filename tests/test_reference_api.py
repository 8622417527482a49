async def test_admin_creates_airport(client, admin_headers):
    resp = await client.post(
        "/api/airports",
        headers=admin_headers,
        json={"icao_code": "kbfi", "name": "Boeing Field", "latitude": 47.53, "longitude": -122.30},
    )

    assert resp.status_code == 201
    assert resp.json() == {"icao_code": "KBFI", "name": "Boeing Field", "latitude": 47.53, "longitude": -122.30}


async def test_airport_creation_rules(client, admin_headers, auth_headers):
    resp = await client.post("/api/airports", headers=auth_headers, json={"icao_code": "KBFI", "name": "Boeing Field"})
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Access denied. Admins only."

    resp = await client.post("/api/airports", headers=admin_headers, json={"icao_code": "KBFI"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "ICAO code and Name are required"

    resp = await client.post("/api/airports", headers=admin_headers, json={"icao_code": "ksea", "name": "Again"})
    assert resp.status_code == 409


async def test_airports_without_query_fall_back_to_name_order(client, auth_headers):
    resp = await client.get("/api/airports", headers=auth_headers)

    assert resp.status_code == 200
    assert [a["icao_code"] for a in resp.json()] == ["EDDF", "KJFK", "EGLL", "KLAX", "KSFO"]


async def test_airports_without_query_prefer_recently_used(client, auth_headers, jpeg_bytes):
    for code in ("KSFO", "EGLL"):
        resp = await client.post(
            "/api/photos",
            headers=auth_headers,
            files={"image": ("plane.jpg", jpeg_bytes, "image/jpeg")},
            data={
                "registration": "N1",
                "aircraft_type_id": "C172",
                "airport_code": code,
                "taken_at": "2024-01-01T00:00:00+00:00" if code == "KSFO" else "2024-06-01T00:00:00+00:00",
            },
        )
        assert resp.status_code == 201

    resp = await client.get("/api/airports", headers=auth_headers)
    assert [a["icao_code"] for a in resp.json()] == ["EGLL", "KSFO"]


async def test_airport_search(client, auth_headers):
    resp = await client.get("/api/airports", headers=auth_headers, params={"q": "KSEA"})
    assert [a["icao_code"] for a in resp.json()] == ["KSEA"]

    resp = await client.get("/api/airports", headers=auth_headers, params={"q": "heathrow"})
    assert [a["icao_code"] for a in resp.json()] == ["EGLL"]

    resp = await client.get("/api/airports", headers=auth_headers, params={"q": "International"})
    assert len(resp.json()) == 4


async def test_aircraft_types(client, auth_headers, admin_headers):
    resp = await client.get("/api/aircraft-types", headers=auth_headers)
    icao_types = [t["icao_type"] for t in resp.json()]
    assert icao_types[0] == "A320"
    assert icao_types[-1] == "E75L"
    assert len(icao_types) == 8

    payload = {"icao_type": "a20n", "manufacturer": "Airbus", "type": "A320", "variant": "A320neo"}
    resp = await client.post("/api/aircraft-types", headers=auth_headers, json=payload)
    assert resp.status_code == 403

    resp = await client.post("/api/aircraft-types", headers=admin_headers, json=payload)
    assert resp.status_code == 201
    assert resp.json()["icao_type"] == "A20N"

    resp = await client.post("/api/aircraft-types", headers=admin_headers, json=payload)
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Aircraft Type with this ICAO Type already exists."

    resp = await client.post("/api/aircraft-types", headers=admin_headers, json={"icao_type": "B744"})
    assert resp.status_code == 400


async def test_airlines_listed_by_name(client, auth_headers):
    resp = await client.get("/api/airlines", headers=auth_headers)

    assert resp.status_code == 200
    assert [a["name"] for a in resp.json()] == [
        "American Airlines",
        "British Airways",
        "Delta Air Lines",
        "Lufthansa",
        "Southwest Airlines",
        "United Airlines",
    ]


async def test_aircraft_search(client, auth_headers, jpeg_bytes):
    resp = await client.post(
        "/api/photos",
        headers=auth_headers,
        files={"image": ("plane.jpg", jpeg_bytes, "image/jpeg")},
        data={"registration": "N12345", "aircraft_type_id": "C172", "manufactured_date": "1979-04-02"},
    )
    assert resp.status_code == 201

    resp = await client.get("/api/aircraft/search", headers=auth_headers, params={"q": "N"})
    assert resp.json() == []

    resp = await client.get("/api/aircraft/search", headers=auth_headers, params={"q": "n12"})
    results = resp.json()
    assert len(results) == 1
    assert results[0]["registration"] == "N12345"
    assert results[0]["icao_type"] == "C172"
    assert results[0]["manufacturer"] == "Cessna"
    assert results[0]["manufactured_date"] == "1979-04-02"

    resp = await client.get("/api/aircraft/search", headers=auth_headers, params={"q": "345"})
    assert resp.json() == []


async def test_reference_endpoints_require_a_token(client):
    for path in ("/api/airports", "/api/airlines", "/api/aircraft-types", "/api/aircraft/search"):
        resp = await client.get(path)
        assert resp.status_code == 401
