"""
Integration tests for purchase list endpoints
"""
PURCHASES = "/api/v1/purchase-list"


class TestPurchaseList:
    def test_add_entry(self, client, filament):
        response = client.post(PURCHASES, json={"filament_id": filament["id"], "quantity": 2, "notes": "sale"})

        assert response.status_code == 201
        data = response.json()
        assert data["purchased"] is False
        assert data["name"] == "Basic Black"
        assert data["material"] == "PLA"
        assert data["manufacturer"] == "Bambu"

    def test_unknown_filament(self, client):
        response = client.post(PURCHASES, json={"filament_id": 999, "quantity": 1})

        assert response.status_code == 404

    def test_quantity_must_be_positive(self, client, filament):
        response = client.post(PURCHASES, json={"filament_id": filament["id"], "quantity": 0})

        assert response.status_code == 422

    def test_mark_purchased(self, client, filament):
        entry = client.post(PURCHASES, json={"filament_id": filament["id"], "quantity": 2}).json()

        response = client.put(f"{PURCHASES}/{entry['id']}", json={"purchased": True})

        assert response.status_code == 200
        assert response.json()["purchased"] is True
        assert response.json()["quantity"] == 2

    def test_empty_update_rejected(self, client, filament):
        entry = client.post(PURCHASES, json={"filament_id": filament["id"], "quantity": 2}).json()

        assert client.put(f"{PURCHASES}/{entry['id']}", json={}).status_code == 400

    def test_delete_entry(self, client, filament):
        entry = client.post(PURCHASES, json={"filament_id": filament["id"], "quantity": 2}).json()

        assert client.delete(f"{PURCHASES}/{entry['id']}").status_code == 204
        assert client.get(PURCHASES).json() == []
