WINDOWS = [
    {"day_of_week": 3, "start_time": "14:00", "end_time": "16:00", "slot_duration_minutes": 60},
    {"day_of_week": 1, "start_time": "13:00", "end_time": "15:00", "slot_duration_minutes": 30},
    {"day_of_week": 1, "start_time": "09:00", "end_time": "12:00"},
]


async def test_replace_and_list_sorted(client, signup):
    nutritionist_id, headers = await signup("nina@example.com", role="nutritionist")

    resp = await client.put("/api/v1/availability", json={"windows": WINDOWS}, headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert [(w["day_of_week"], w["start_time"]) for w in body] == [(1, "09:00"), (1, "13:00"), (3, "14:00")]
    # duration falls back to the configured default
    assert body[0]["slot_duration_minutes"] == 30
    assert all(w["nutritionist_id"] == nutritionist_id for w in body)

    listed = await client.get("/api/v1/availability", params={"nutritionist_id": nutritionist_id})
    assert listed.json() == body


async def test_replace_drops_previous_windows(client, signup):
    nutritionist_id, headers = await signup("nina@example.com", role="nutritionist")
    await client.put("/api/v1/availability", json={"windows": WINDOWS}, headers=headers)

    resp = await client.put("/api/v1/availability", json={"windows": WINDOWS[:1]}, headers=headers)
    assert [w["day_of_week"] for w in resp.json()] == [3]

    cleared = await client.put("/api/v1/availability", json={"windows": []}, headers=headers)
    assert cleared.json() == []


async def test_patients_cannot_edit_availability(client, signup):
    _, headers = await signup("pat@example.com")
    resp = await client.put("/api/v1/availability", json={"windows": WINDOWS}, headers=headers)
    assert resp.status_code == 403


async def test_invalid_windows_are_rejected(client, signup):
    _, headers = await signup("nina@example.com", role="nutritionist")
    bad_windows = [
        {"day_of_week": 7, "start_time": "09:00", "end_time": "10:00"},
        {"day_of_week": 1, "start_time": "9:00", "end_time": "10:00"},
        {"day_of_week": 1, "start_time": "09:00\n", "end_time": "10:00"},
        {"day_of_week": 1, "start_time": "10:00", "end_time": "10:00"},
        {"day_of_week": 1, "start_time": "09:00", "end_time": "10:00", "slot_duration_minutes": 0},
    ]
    for w in bad_windows:
        resp = await client.put("/api/v1/availability", json={"windows": [w]}, headers=headers)
        assert resp.status_code == 422, w


async def test_delete_window(client, signup):
    nutritionist_id, headers = await signup("nina@example.com", role="nutritionist")
    other_id, other_headers = await signup("omar@example.com", role="nutritionist")
    windows = (await client.put("/api/v1/availability", json={"windows": WINDOWS}, headers=headers)).json()
    target = windows[0]["id"]

    # someone else's window looks missing
    assert (await client.delete(f"/api/v1/availability/{target}", headers=other_headers)).status_code == 404

    assert (await client.delete(f"/api/v1/availability/{target}", headers=headers)).status_code == 204
    remaining = await client.get("/api/v1/availability", params={"nutritionist_id": nutritionist_id})
    assert target not in [w["id"] for w in remaining.json()]
    assert (await client.delete(f"/api/v1/availability/{target}", headers=headers)).status_code == 404
