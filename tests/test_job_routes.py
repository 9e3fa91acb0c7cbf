from bson import ObjectId


def create(api, headers, **overrides):
    payload = {"company": "Acme", "title": "Backend Engineer"}
    payload.update(overrides)
    return api.post("/api/jobs", json=payload, headers=headers)


def test_create_with_defaults(api, headers):
    response = create(api, headers, company="  Acme  ", notes="Referral from Sam")

    assert response.status_code == 201
    job = response.json()
    assert job["company"] == "Acme"
    assert job["status"] == "Applied"
    assert job["ownerId"] == "user-1"
    assert job["notes"] == "Referral from Sam"
    assert job["statusChangedAt"] is None
    assert job["date"] is not None


def test_create_requires_company_and_title(api, headers):
    assert api.post("/api/jobs", json={"title": "Engineer"}, headers=headers).status_code == 400
    assert create(api, headers, title="   ").status_code == 400
    assert create(api, headers, status="Ghosted").status_code == 400


def test_list_sorted_by_date_and_filtered(api, headers):
    create(api, headers, company="Old", date="2024-01-01T00:00:00Z")
    create(api, headers, company="New", date="2024-03-01T00:00:00Z", status="Interview")
    create(api, headers, company="Mid", date="2024-02-01T00:00:00Z")

    jobs = api.get("/api/jobs", headers=headers).json()
    assert [j["company"] for j in jobs] == ["New", "Mid", "Old"]

    interviews = api.get("/api/jobs", params={"status": "Interview"}, headers=headers).json()
    assert [j["company"] for j in interviews] == ["New"]


def test_update_stamps_status_change(api, headers):
    job = create(api, headers).json()

    notes_only = api.patch(f"/api/jobs/{job['id']}", json={"notes": "Called back"}, headers=headers).json()
    assert notes_only["notes"] == "Called back"
    assert notes_only["statusChangedAt"] is None

    moved = api.patch(f"/api/jobs/{job['id']}", json={"status": "Offer"}, headers=headers).json()
    assert moved["status"] == "Offer"
    assert moved["statusChangedAt"] is not None
    assert moved["notes"] == "Called back"


def test_get_and_delete(api, headers):
    job = create(api, headers).json()

    assert api.get(f"/api/jobs/{job['id']}", headers=headers).json()["title"] == "Backend Engineer"
    assert api.delete(f"/api/jobs/{job['id']}", headers=headers).json() == {"message": "Job deleted"}
    assert api.get(f"/api/jobs/{job['id']}", headers=headers).status_code == 404


def test_jobs_are_private(api, headers, other_headers):
    job = create(api, headers).json()

    assert api.get("/api/jobs", headers=other_headers).json() == []
    assert api.get(f"/api/jobs/{job['id']}", headers=other_headers).status_code == 404
    assert api.patch(f"/api/jobs/{job['id']}", json={"notes": "x"}, headers=other_headers).status_code == 404
    assert api.delete(f"/api/jobs/{job['id']}", headers=other_headers).status_code == 404


def test_unknown_and_malformed_ids(api, headers):
    assert api.get(f"/api/jobs/{ObjectId()}", headers=headers).status_code == 404
    assert api.get("/api/jobs/not-an-id", headers=headers).status_code == 404


def test_stats(api, headers, other_headers):
    create(api, headers)
    create(api, headers, status="Interview")
    create(api, headers, status="Interview")
    create(api, other_headers, status="Offer")

    stats = api.get("/api/jobs/stats", headers=headers).json()

    assert stats["total"] == 3
    assert stats["counts"] == {"Applied": 1, "Interview": 2, "Offer": 0, "Rejected": 0, "Saved": 0}
