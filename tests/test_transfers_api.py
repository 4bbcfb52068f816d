# tests/test_transfers_api.py
API = "/api/v1/transfers"


def create_via_api(client, payload):
    response = client.post(f"{API}/", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


def test_health(client):
    response = client.get(f"{API}/health")

    assert response.status_code == 200
    assert response.json()["service"] == "transfers"


def test_create_and_get_transfer(client, seed, transfer_payload):
    created = create_via_api(client, transfer_payload())

    assert created["success"] is True
    assert created["status"] == "pending"

    response = client.get(f"{API}/id/{created['transfer_id']}")
    assert response.status_code == 200

    body = response.json()
    assert body["from"] == "Supply Office"
    assert body["to"] == "Rizal Elementary School - Division of Manila"
    assert body["transfer_no"] == created["transfer_no"]
    assert [item["stock_id"] for item in body["item_stocks"]] == [seed["laptop_1"].id, seed["laptop_2"].id]
    assert body["item_stocks"][0]["stock_number"] == "SEP-LT-001"
    assert body["item_stocks"][0]["reference"] is None


def test_create_with_unknown_division_returns_404(client, seed, transfer_payload):
    response = client.post(f"{API}/", json=transfer_payload(division_id=999))

    assert response.status_code == 404
    assert response.json()["detail"] == "Division not found."


def test_create_with_insufficient_stock_returns_400(client, seed, transfer_payload):
    response = client.post(f"{API}/", json=transfer_payload(item_stocks=[{"stock_id": seed["chair_1"].id}]))

    assert response.status_code == 400


def test_create_requires_items(client, seed, transfer_payload):
    response = client.post(f"{API}/", json=transfer_payload(item_stocks=[]))

    assert response.status_code == 422


def test_get_unknown_transfer_returns_404(client, seed):
    response = client.get(f"{API}/id/999")

    assert response.status_code == 404
    assert response.json()["detail"] == "Transfer not found."


def test_list_transfers_by_type_with_search(client, seed, transfer_payload):
    create_via_api(client, transfer_payload())
    create_via_api(client, transfer_payload(school=""))
    create_via_api(client, transfer_payload(type="inventory-transfer-report"))

    response = client.get(f"{API}/property-transfer-report")
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert body["page"] == 1
    assert body["limit"] == 10
    assert body["pages"] == 1

    response = client.get(f"{API}/property-transfer-report", params={"search": "rizal"})
    body = response.json()
    assert body["total"] == 1
    assert body["items"][0]["to"] == "Rizal Elementary School - Division of Manila"


def test_list_rejects_unknown_type_and_bad_limit(client, seed):
    assert client.get(f"{API}/unknown-report").status_code == 422
    assert client.get(f"{API}/property-transfer-report", params={"limit": 5}).status_code == 422
    assert client.get(f"{API}/property-transfer-report", params={"limit": 51}).status_code == 422


def test_approve_and_complete_flow(client, seed, transfer_payload):
    created = create_via_api(client, transfer_payload())
    transfer_id = created["transfer_id"]

    response = client.put(f"{API}/id/{transfer_id}/approved", json={"approved_by": seed["approver"].id})
    assert response.status_code == 200
    assert response.json()["transfer"]["status"] == "approved"

    response = client.put(f"{API}/id/{transfer_id}/completed", json={
        "issued_by": seed["issuer"].id,
        "received_by_name": "Carla Reyes",
        "received_by_designation": "School Property Custodian"
    })
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Transfer is set to completed successfully"
    assert body["transfer"]["status"] == "completed"

    response = client.put(f"{API}/id/{transfer_id}/approved", json={"approved_by": seed["approver"].id})
    assert response.status_code == 400


def test_approve_unknown_transfer_returns_404(client, seed):
    response = client.put(f"{API}/id/999/approved", json={"approved_by": seed["approver"].id})

    assert response.status_code == 404


def test_patch_transfer(client, seed, transfer_payload):
    created = create_via_api(client, transfer_payload())

    response = client.patch(f"{API}/id/{created['transfer_id']}", json={
        "item_stocks": [{"stock_id": seed["laptop_2"].id}, {"stock_id": seed["laptop_1"].id}]
    })

    assert response.status_code == 200
    assert [item["stock_id"] for item in response.json()["item_stocks"]] == [seed["laptop_2"].id, seed["laptop_1"].id]


def test_app_root_and_health(client):
    assert client.get("/").status_code == 200
    assert client.get("/health").json()["status"] == "healthy"
