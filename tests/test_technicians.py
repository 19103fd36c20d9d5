"""
Unit tests for the technicians page.

Tests:
- Active-only toggle
- Creating, editing and deleting technicians
- Failure alerts
"""

from hvac_console.api.endpoints.technicians import build_technician_form


class TestTechnicianList:
    """Test the technicians list"""

    def test_active_only_by_default(self, auth_client, backend, seeded_ids):
        response = auth_client.get("/technicians")

        assert backend.calls("GET", "/api/v1/technicians")[0]["params"] == {"active_only": "true"}
        assert f'id="technician-{seeded_ids["Mike Tech"]}"' in response.text
        assert f'id="technician-{seeded_ids["Retired Ray"]}"' not in response.text

    def test_show_all(self, auth_client, backend, seeded_ids):
        """Test unticking the toggle lists inactive technicians too"""
        response = auth_client.get("/technicians?active_only=false")

        assert backend.calls("GET", "/api/v1/technicians")[0]["params"] == {"active_only": "false"}
        assert f'id="technician-{seeded_ids["Retired Ray"]}"' in response.text
        assert "Inactive" in response.text

    def test_toggle_form_values(self, auth_client, backend, seeded_ids):
        """Test the ticked checkbox wins over the hidden fallback value"""
        response = auth_client.get("/technicians?active_only=false&active_only=true")

        assert response.status_code == 200
        assert f'id="technician-{seeded_ids["Retired Ray"]}"' not in response.text

    def test_edit_modal_prefilled(self, auth_client, seeded_ids):
        technician_id = seeded_ids["Mike Tech"]

        response = auth_client.get(f"/technicians?edit={technician_id}")

        assert "Edit Technician" in response.text
        assert f'action="/technicians/{technician_id}"' in response.text
        assert 'value="Mike Tech"' in response.text
        assert 'value="555-1000"' in response.text
        assert 'name="is_active" value="true" checked' in response.text

    def test_edit_modal_inactive_unchecked(self, auth_client, seeded_ids):
        """Test an inactive technician opens with the Active box cleared"""
        technician_id = seeded_ids["Retired Ray"]

        response = auth_client.get(f"/technicians?active_only=false&edit={technician_id}")

        assert "Edit Technician" in response.text
        assert f'action="/technicians/{technician_id}?active_only=false"' in response.text
        assert 'value="Retired Ray"' in response.text
        assert 'name="is_active" value="true">' in response.text
        assert 'name="is_active" value="true" checked' not in response.text

    def test_load_failure_shows_error(self, auth_client, backend):
        backend.fail.add(("GET", "technicians"))

        response = auth_client.get("/technicians")

        assert "Failed to load technicians" in response.text
        assert "No technicians found" in response.text


class TestTechnicianMutations:
    """Test creating, editing and deleting technicians"""

    def test_create_technician(self, auth_client, backend):
        response = auth_client.post(
            "/technicians",
            data={"name": "Sara Volt", "phone": "555-3000", "email": "sara@coolair.com", "is_active": "true"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/technicians"
        assert backend.calls("POST", "/api/v1/technicians")[0]["json"] == {
            "name": "Sara Volt",
            "phone": "555-3000",
            "email": "sara@coolair.com",
            "is_active": True,
        }

    def test_unchecked_active_box(self, auth_client, backend, seeded_ids):
        """Test an unticked box deactivates the technician"""
        technician_id = seeded_ids["Mike Tech"]

        response = auth_client.post(
            f"/technicians/{technician_id}?active_only=false",
            data={"name": "Mike Tech", "phone": "555-1000"},
            follow_redirects=False,
        )

        assert response.headers["location"] == "/technicians?active_only=false"
        assert backend.technicians[technician_id]["is_active"] is False

    def test_create_failure_alerts(self, auth_client, backend):
        backend.fail.add(("POST", "technicians"))

        response = auth_client.post(
            "/technicians",
            data={"name": "Sara Volt", "phone": "555-3000", "is_active": "true"},
        )

        assert "Failed to create technician" in response.text

    def test_delete_technician(self, auth_client, backend, seeded_ids):
        technician_id = seeded_ids["Mike Tech"]

        response = auth_client.post(f"/technicians/{technician_id}/delete")

        assert technician_id not in backend.technicians
        assert f'id="technician-{technician_id}"' not in response.text

    def test_delete_asks_for_confirmation(self, auth_client):
        response = auth_client.get("/technicians")

        assert "confirm('Are you sure you want to delete this technician?')" in response.text

    def test_update_failure_alerts(self, auth_client, backend, seeded_ids):
        backend.fail.add(("PUT", "technicians"))

        response = auth_client.post(
            f"/technicians/{seeded_ids['Mike Tech']}",
            data={"name": "Mike Tech", "phone": "555-1000", "is_active": "true"},
        )

        assert "Failed to update technician" in response.text


class TestTechnicianForm:
    def test_blank_email_dropped(self):
        form = build_technician_form(" Sara ", "555", "  ", "true")

        assert form.name == "Sara"
        assert form.email is None
        assert form.is_active is True

    def test_missing_checkbox_is_inactive(self):
        assert build_technician_form("Sara", "555", None, None).is_active is False
