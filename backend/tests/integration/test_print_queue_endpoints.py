"""
Integration tests for print queue endpoints

Covers appending, ordering and the all-or-nothing reorder.
"""
import pytest

QUEUE = "/api/v1/print-queue"


@pytest.fixture
def queue(client):
    """Three queued jobs: Benchy, Vase, Hook (in that order)"""
    items = []
    for name in ("Benchy", "Vase", "Hook"):
        response = client.post(QUEUE, json={"item_name": name})
        assert response.status_code == 201
        items.append(response.json())
    return items


def _names(response):
    return [item["item_name"] for item in response.json()]


class TestQueueCreation:
    """Adding jobs"""

    def test_first_job_at_position_zero(self, client):
        response = client.post(QUEUE, json={"item_name": "Benchy", "color": "Orange"})

        assert response.status_code == 201
        data = response.json()
        assert data["position"] == 0
        assert data["status"] == "pending"
        assert data["color"] == "Orange"
        assert data["printer"] is None

    def test_new_jobs_go_to_the_end(self, client, queue):
        positions = [item["position"] for item in queue]
        assert positions == [0, 1, 2]

        response = client.post(QUEUE, json={"item_name": "Clip"})
        assert response.json()["position"] == 3

    def test_job_with_printer_includes_printer(self, client, printer):
        response = client.post(QUEUE, json={"item_name": "Benchy", "printer_id": printer["id"]})

        assert response.status_code == 201
        assert response.json()["printer"] == {"id": printer["id"], "name": "Bambu X1C"}

    def test_unknown_printer_rejected(self, client):
        response = client.post(QUEUE, json={"item_name": "Benchy", "printer_id": 999})

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    def test_blank_name_rejected(self, client):
        response = client.post(QUEUE, json={"item_name": "   "})

        assert response.status_code == 422
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_invalid_status_rejected(self, client):
        response = client.post(QUEUE, json={"item_name": "Benchy", "status": "lost"})

        assert response.status_code == 422


class TestQueueListing:
    def test_list_ordered_by_position(self, client, queue):
        response = client.get(QUEUE)

        assert response.status_code == 200
        assert _names(response) == ["Benchy", "Vase", "Hook"]

    def test_empty_queue(self, client):
        response = client.get(QUEUE)

        assert response.status_code == 200
        assert response.json() == []

    def test_get_single_job(self, client, queue):
        response = client.get(f"{QUEUE}/{queue[1]['id']}")

        assert response.status_code == 200
        assert response.json()["item_name"] == "Vase"

    def test_get_missing_job(self, client):
        response = client.get(f"{QUEUE}/42")

        assert response.status_code == 404


class TestQueueReorder:
    """Reordering the queue"""

    def test_reorder_sets_positions(self, client, queue):
        order = [queue[2]["id"], queue[0]["id"], queue[1]["id"]]

        response = client.post(f"{QUEUE}/reorder", json={"items": [{"id": i} for i in order]})

        assert response.status_code == 200
        assert _names(response) == ["Hook", "Benchy", "Vase"]
        assert [item["position"] for item in response.json()] == [0, 1, 2]
        assert _names(client.get(QUEUE)) == ["Hook", "Benchy", "Vase"]

    def test_reorder_ignores_extra_item_fields(self, client, queue):
        """Clients may send whole queue items back"""
        items = list(reversed(queue))

        response = client.post(f"{QUEUE}/reorder", json={"items": items})

        assert response.status_code == 200
        assert _names(response) == ["Hook", "Vase", "Benchy"]

    def test_reorder_is_idempotent(self, client, queue):
        payload = {"items": [{"id": queue[1]["id"]}, {"id": queue[0]["id"]}, {"id": queue[2]["id"]}]}

        first = client.post(f"{QUEUE}/reorder", json=payload)
        second = client.post(f"{QUEUE}/reorder", json=payload)

        assert [(i["id"], i["position"]) for i in first.json()] == [(i["id"], i["position"]) for i in second.json()]

    def test_unknown_id_changes_nothing(self, client, queue):
        payload = {"items": [{"id": queue[2]["id"]}, {"id": 999}, {"id": queue[0]["id"]}]}

        response = client.post(f"{QUEUE}/reorder", json=payload)

        assert response.status_code == 404
        assert response.json()["details"]["id"] == 999
        listing = client.get(QUEUE).json()
        assert [item["item_name"] for item in listing] == ["Benchy", "Vase", "Hook"]
        assert [item["position"] for item in listing] == [0, 1, 2]

    def test_duplicate_ids_rejected(self, client, queue):
        payload = {"items": [{"id": queue[0]["id"]}, {"id": queue[0]["id"]}]}

        response = client.post(f"{QUEUE}/reorder", json=payload)

        assert response.status_code == 400
        assert response.json()["details"]["duplicate_ids"] == [queue[0]["id"]]

    def test_partial_reorder_keeps_other_positions(self, client, queue):
        payload = {"items": [{"id": queue[2]["id"]}, {"id": queue[1]["id"]}]}

        response = client.post(f"{QUEUE}/reorder", json=payload)

        positions = {item["item_name"]: item["position"] for item in response.json()}
        assert positions == {"Hook": 0, "Vase": 1, "Benchy": 0}

    def test_empty_reorder_is_a_no_op(self, client, queue):
        response = client.post(f"{QUEUE}/reorder", json={"items": []})

        assert response.status_code == 200
        assert _names(response) == ["Benchy", "Vase", "Hook"]


class TestQueueUpdateDelete:
    def test_update_keeps_position(self, client, queue, printer):
        job = queue[1]

        response = client.put(
            f"{QUEUE}/{job['id']}",
            json={"item_name": "Tall Vase", "printer_id": printer["id"], "status": "printing"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["item_name"] == "Tall Vase"
        assert data["status"] == "printing"
        assert data["position"] == 1
        assert data["printer"]["name"] == "Bambu X1C"

    def test_delete_job(self, client, queue):
        response = client.delete(f"{QUEUE}/{queue[0]['id']}")

        assert response.status_code == 204
        assert _names(client.get(QUEUE)) == ["Vase", "Hook"]

    def test_new_job_after_delete_still_goes_last(self, client, queue):
        client.delete(f"{QUEUE}/{queue[2]['id']}")

        response = client.post(QUEUE, json={"item_name": "Clip"})

        assert response.json()["position"] == 2
        assert _names(client.get(QUEUE)) == ["Benchy", "Vase", "Clip"]

    def test_deleting_printer_unassigns_jobs(self, client, printer):
        job = client.post(QUEUE, json={"item_name": "Benchy", "printer_id": printer["id"]}).json()

        assert client.delete(f"/api/v1/printers/{printer['id']}").status_code == 204

        response = client.get(f"{QUEUE}/{job['id']}")
        assert response.status_code == 200
        assert response.json()["printer_id"] is None
        assert response.json()["printer"] is None
