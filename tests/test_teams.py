from __future__ import annotations

import unittest

from tests.helpers import make_app, register


class TestTeamsApi(unittest.TestCase):
    def setUp(self) -> None:
        self.app = make_app()
        self.client = self.app.test_client()
        self.user = register(self.client).get_json()

    def create_team(self, name: str = "Core") -> dict:
        response = self.client.post("/api/teams", json={"name": name, "description": "core team"})
        self.assertEqual(201, response.status_code)
        return response.get_json()

    def test_creator_becomes_admin_member(self) -> None:
        team = self.create_team()
        self.assertEqual(self.user["id"], team["createdById"])

        members = self.client.get(f"/api/teams/{team['id']}/members").get_json()
        self.assertEqual(1, len(members))
        self.assertEqual(self.user["id"], members[0]["userId"])
        self.assertEqual("admin", members[0]["role"])

        teams = self.client.get(f"/api/users/{self.user['id']}/teams").get_json()
        self.assertEqual([team["id"]], [item["id"] for item in teams])

    def test_members_roles_and_removal(self) -> None:
        team = self.create_team()
        member = self.client.post(f"/api/teams/{team['id']}/members", json={"userId": 77}).get_json()
        self.assertEqual("member", member["role"])

        updated = self.client.put(f"/api/team-members/{member['id']}/role", json={"role": "guest"})
        self.assertEqual("guest", updated.get_json()["role"])
        self.assertEqual(400, self.client.put(f"/api/team-members/{member['id']}/role", json={"role": "boss"}).status_code)

        self.assertEqual(204, self.client.delete(f"/api/team-members/{member['id']}").status_code)
        self.assertEqual(404, self.client.delete(f"/api/team-members/{member['id']}").status_code)
        self.assertEqual(404, self.client.post("/api/teams/999/members", json={"userId": 1}).status_code)

    def test_share_project_and_assign_task(self) -> None:
        team = self.create_team()
        project = self.client.post("/api/projects", json={"name": "Launch"}).get_json()
        task = self.client.post("/api/tasks", json={"title": "Write copy", "projectId": project["id"]}).get_json()

        shared = self.client.post(f"/api/teams/{team['id']}/projects", json={"projectId": project["id"]})
        self.assertEqual(201, shared.status_code)
        self.assertEqual(self.user["id"], shared.get_json()["sharedById"])
        self.assertEqual("edit", shared.get_json()["permissions"])
        projects = self.client.get(f"/api/teams/{team['id']}/projects").get_json()
        self.assertEqual(["Launch"], [item["name"] for item in projects])

        assignment = self.client.post(f"/api/tasks/{task['id']}/assign", json={"userId": self.user["id"]})
        self.assertEqual(201, assignment.status_code)
        assignment = assignment.get_json()
        self.assertEqual("pending", assignment["status"])
        self.assertEqual(self.user["id"], assignment["assignedById"])

        accepted = self.client.put(f"/api/task-assignments/{assignment['id']}/status", json={"status": "accepted"})
        self.assertEqual("accepted", accepted.get_json()["status"])

        assigned = self.client.get(f"/api/users/{self.user['id']}/tasks").get_json()
        self.assertEqual(["Write copy"], [item["title"] for item in assigned])
        self.assertEqual(1, len(self.client.get(f"/api/tasks/{task['id']}/assignments").get_json()))

        self.assertEqual(204, self.client.delete(f"/api/task-assignments/{assignment['id']}").status_code)
        self.assertEqual([], self.client.get(f"/api/users/{self.user['id']}/tasks").get_json())
        self.assertEqual(204, self.client.delete(f"/api/collaborative-projects/{shared.get_json()['id']}").status_code)
        self.assertEqual([], self.client.get(f"/api/teams/{team['id']}/projects").get_json())

    def test_share_missing_project_is_404(self) -> None:
        team = self.create_team()
        response = self.client.post(f"/api/teams/{team['id']}/projects", json={"projectId": 41})
        self.assertEqual(404, response.status_code)
        self.assertEqual(404, self.client.post("/api/tasks/41/assign", json={"userId": 1}).status_code)

    def test_delete_team_cascades(self) -> None:
        team = self.create_team()
        project = self.client.post("/api/projects", json={"name": "Launch"}).get_json()
        self.client.post(f"/api/teams/{team['id']}/members", json={"userId": 2})
        self.client.post(f"/api/teams/{team['id']}/projects", json={"projectId": project["id"]})

        self.assertEqual(204, self.client.delete(f"/api/teams/{team['id']}").status_code)
        self.assertEqual(404, self.client.get(f"/api/teams/{team['id']}").status_code)
        self.assertEqual([], self.client.get(f"/api/teams/{team['id']}/members").get_json())
        self.assertEqual([], self.client.get(f"/api/teams/{team['id']}/projects").get_json())
        self.assertEqual([], self.client.get(f"/api/users/{self.user['id']}/teams").get_json())
        # Сам проект остается
        self.assertEqual(200, self.client.get(f"/api/projects/{project['id']}").status_code)
        self.assertEqual(404, self.client.delete(f"/api/teams/{team['id']}").status_code)

    def test_activity_is_recorded_newest_first(self) -> None:
        team = self.create_team()
        project = self.client.post("/api/projects", json={"name": "Launch"}).get_json()
        task = self.client.post("/api/tasks", json={"title": "Ship"}).get_json()
        self.client.post(f"/api/teams/{team['id']}/projects", json={"projectId": project["id"]})
        self.client.post(f"/api/tasks/{task['id']}/assign", json={"userId": self.user["id"]})
        manual = self.client.post("/api/activity-logs", json={"teamId": team["id"], "action": "commented",
                                                              "details": {"text": "hi"}})
        self.assertEqual(201, manual.status_code)
        self.assertEqual(self.user["id"], manual.get_json()["userId"])

        logs = self.client.get("/api/activity-logs").get_json()
        self.assertEqual(["commented", "assigned_task", "shared_project", "created_team"],
                         [log["action"] for log in logs])

        team_logs = self.client.get(f"/api/activity-logs?teamId={team['id']}").get_json()
        self.assertEqual(["commented", "shared_project", "created_team"], [log["action"] for log in team_logs])
        self.assertEqual(["shared_project"],
                         [log["action"] for log in self.client.get(f"/api/projects/{project['id']}/activity").get_json()])
        self.assertEqual(["assigned_task"],
                         [log["action"] for log in self.client.get(f"/api/tasks/{task['id']}/activity").get_json()])
        self.assertEqual(4, len(self.client.get(f"/api/users/{self.user['id']}/activity").get_json()))
        self.assertEqual(400, self.client.get("/api/activity-logs?teamId=abc").status_code)


if __name__ == "__main__":
    unittest.main()
