"""End-to-end collaboration flow through the HTTP API."""


async def test_create_join_accept_flow(test_client, profile_factory, auth_headers):
    ada = await profile_factory("Ada")
    bob = await profile_factory("Bob")
    as_ada = auth_headers(ada.id)
    as_bob = auth_headers(bob.id)

    created = await test_client.post(
        "/api/v1/projects", headers=as_ada, json={"name": "Compiler"}
    )
    assert created.status_code == 201
    project_id = created.json()["projectId"]

    opened = await test_client.put(
        f"/api/v1/projects/{project_id}",
        headers=as_ada,
        json={"isOpen": True, "roles": ["backend"], "technologies": ["rust"]},
    )
    assert opened.status_code == 200

    search = await test_client.get("/api/v1/projects", params={"roles": "backend"})
    assert [p["id"] for p in search.json()] == [project_id]

    joined = await test_client.post(
        f"/api/v1/collaboration/{project_id}",
        headers=as_bob,
        json={"requestMessage": "let me in"},
    )
    assert joined.status_code == 201

    overview = await test_client.get(
        "/api/v1/collaboration/creator-requests", headers=as_ada
    )
    assert overview.json() == [
        {"projectId": project_id, "projectName": "Compiler", "numberOfRequests": 1}
    ]

    managed = await test_client.put(
        f"/api/v1/collaboration/{project_id}",
        headers=as_ada,
        json={"requestsAccepted": [bob.id]},
    )
    assert managed.status_code == 200

    overview = await test_client.get(
        "/api/v1/collaboration/creator-requests", headers=as_ada
    )
    assert overview.json()[0]["numberOfRequests"] == 0

    details = (
        await test_client.get(f"/api/v1/projects/{project_id}", headers=as_ada)
    ).json()
    assert [c["id"] for c in details["collaborators"]] == [bob.id]
    assert details["collaborationRequests"] == []

    profile = (await test_client.get(f"/api/v1/profiles/{bob.id}")).json()
    assert [p["id"] for p in profile["collaborationProjects"]] == [project_id]
