"""Collaboration endpoint tests."""

from sqlalchemy import select

from collabhive.models import Collaboration, CollaborationRelationship

Relation = CollaborationRelationship


async def test_request_to_join(test_client, profile_factory, project_factory, auth_headers):
    ada = await profile_factory("Ada")
    bob = await profile_factory("Bob")
    project = await project_factory(ada)

    resp = await test_client.post(
        f"/api/v1/collaboration/{project.id}",
        headers=auth_headers(bob.id),
        json={"requestMessage": "let me in"},
    )

    assert resp.status_code == 201
    assert resp.json()["message"] == "Request sent"


async def test_duplicate_request_is_400(
    test_client, profile_factory, project_factory, auth_headers
):
    ada = await profile_factory("Ada")
    bob = await profile_factory("Bob")
    project = await project_factory(ada)
    url = f"/api/v1/collaboration/{project.id}"

    await test_client.post(url, headers=auth_headers(bob.id), json={"requestMessage": "hi"})
    resp = await test_client.post(
        url, headers=auth_headers(bob.id), json={"requestMessage": "hi again"}
    )

    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "You have already requested to join this project"
    assert body["errors"] == ["duplicate_request"]


async def test_declined_request_cannot_be_repeated(
    test_client, profile_factory, project_factory, collaboration_factory, auth_headers
):
    ada = await profile_factory("Ada")
    bob = await profile_factory("Bob")
    project = await project_factory(ada)
    await collaboration_factory(project, bob, Relation.COLLABORATOR_DECLINED)

    resp = await test_client.post(
        f"/api/v1/collaboration/{project.id}",
        headers=auth_headers(bob.id),
        json={"requestMessage": "please?"},
    )

    assert resp.status_code == 400
    assert resp.json()["errors"] == ["previously_declined"]


async def test_request_requires_message(
    test_client, profile_factory, project_factory, auth_headers
):
    ada = await profile_factory("Ada")
    bob = await profile_factory("Bob")
    project = await project_factory(ada)

    resp = await test_client.post(
        f"/api/v1/collaboration/{project.id}", headers=auth_headers(bob.id), json={}
    )

    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid request"


async def test_request_to_missing_project(test_client, profile_factory, auth_headers):
    bob = await profile_factory("Bob")

    resp = await test_client.post(
        "/api/v1/collaboration/missing",
        headers=auth_headers(bob.id),
        json={"requestMessage": "hi"},
    )

    assert resp.status_code == 404


async def test_manage_requires_creator(
    test_client, db_session, profile_factory, project_factory, collaboration_factory, auth_headers
):
    ada = await profile_factory("Ada")
    bob = await profile_factory("Bob")
    eve = await profile_factory("Eve")
    project = await project_factory(ada)
    await collaboration_factory(project, bob, Relation.COLLABORATOR_PENDING)

    resp = await test_client.put(
        f"/api/v1/collaboration/{project.id}",
        headers=auth_headers(eve.id),
        json={"requestsAccepted": [bob.id]},
    )

    assert resp.status_code == 403
    relation = await db_session.scalar(
        select(Collaboration.relation).where(Collaboration.profile_id == bob.id)
    )
    assert relation == Relation.COLLABORATOR_PENDING


async def test_manage_batches(
    test_client, db_session, profile_factory, project_factory, collaboration_factory, auth_headers
):
    ada = await profile_factory("Ada")
    bob = await profile_factory("Bob")
    cat = await profile_factory("Cat")
    dan = await profile_factory("Dan")
    project = await project_factory(ada)
    await collaboration_factory(project, bob, Relation.COLLABORATOR_PENDING)
    await collaboration_factory(project, cat, Relation.COLLABORATOR_PENDING)
    await collaboration_factory(project, dan, Relation.COLLABORATOR_ACCEPTED)

    resp = await test_client.put(
        f"/api/v1/collaboration/{project.id}",
        headers=auth_headers(ada.id),
        json={
            "requestsAccepted": [bob.id],
            "requestsDeclined": [cat.id],
            "collaboratorsRemoved": [dan.id],
        },
    )

    assert resp.status_code == 200
    rows = dict(
        (
            await db_session.execute(
                select(Collaboration.profile_id, Collaboration.relation).where(
                    Collaboration.project_id == project.id
                )
            )
        ).all()
    )
    assert rows == {
        ada.id: Relation.CREATOR,
        bob.id: Relation.COLLABORATOR_ACCEPTED,
        cat.id: Relation.COLLABORATOR_DECLINED,
    }


async def test_leave_project(
    test_client, profile_factory, project_factory, collaboration_factory, auth_headers
):
    ada = await profile_factory("Ada")
    bob = await profile_factory("Bob")
    project = await project_factory(ada)
    await collaboration_factory(project, bob, Relation.COLLABORATOR_ACCEPTED)

    resp = await test_client.delete(
        f"/api/v1/collaboration/{project.id}", headers=auth_headers(bob.id)
    )

    assert resp.status_code == 204
    details = (await test_client.get(f"/api/v1/projects/{project.id}")).json()
    assert details["collaborators"] == []


async def test_creator_cannot_leave(
    test_client, profile_factory, project_factory, auth_headers
):
    ada = await profile_factory("Ada")
    project = await project_factory(ada)

    resp = await test_client.delete(
        f"/api/v1/collaboration/{project.id}", headers=auth_headers(ada.id)
    )

    assert resp.status_code == 400
    assert resp.json()["errors"] == ["creator_cannot_leave"]


async def test_creator_views(
    test_client, profile_factory, project_factory, collaboration_factory, auth_headers
):
    ada = await profile_factory("Ada")
    bob = await profile_factory("Bob")
    cat = await profile_factory("Cat")
    project = await project_factory(ada, name="Engine", technologies=["rust"])
    await collaboration_factory(project, bob, Relation.COLLABORATOR_ACCEPTED)
    await collaboration_factory(project, cat, Relation.COLLABORATOR_PENDING)

    requests = await test_client.get(
        "/api/v1/collaboration/creator-requests", headers=auth_headers(ada.id)
    )
    cards = await test_client.get(
        "/api/v1/collaboration/creator-projects", headers=auth_headers(ada.id)
    )
    joined = await test_client.get(
        "/api/v1/collaboration/collaborator-projects", headers=auth_headers(bob.id)
    )
    nothing = await test_client.get(
        "/api/v1/collaboration/collaborator-projects", headers=auth_headers(cat.id)
    )

    assert requests.json() == [
        {"projectId": project.id, "projectName": "Engine", "numberOfRequests": 1}
    ]
    assert cards.json() == [
        {
            "id": project.id,
            "name": "Engine",
            "technologyStackText": "Rust",
            "collaboratorsText": "With Bob",
            "isOpen": True,
        }
    ]
    assert joined.json()[0]["creatorName"] == "Ada"
    assert joined.json()[0]["collaboratorsText"] == "Ada and Bob"
    assert nothing.status_code == 404


async def test_collaboration_routes_require_auth(test_client, db_session):
    for method, url in (
        ("get", "/api/v1/collaboration/creator-requests"),
        ("get", "/api/v1/collaboration/creator-projects"),
        ("get", "/api/v1/collaboration/collaborator-projects"),
        ("delete", "/api/v1/collaboration/some-project"),
    ):
        resp = await getattr(test_client, method)(url)
        assert resp.status_code == 401, url
