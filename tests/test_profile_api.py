import pytest


PROFILE = {
    "status": "Developer",
    "skills": "python, sql ,, go ",
    "company": "Acme",
    "twitter": "https://twitter.com/a",
}

EXPERIENCE = {"title": "Engineer", "company": "Acme", "from": "2020-01-01", "description": "APIs"}
EDUCATION = {"school": "MIT", "degree": "BSc", "fieldofstudy": "CS", "from": "2014-09-01", "to": "2018-06-01"}


@pytest.fixture
def token(register):
    return register()


@pytest.fixture
def with_profile(client, token, headers):
    r = client.post("/api/profile", json=PROFILE, headers=headers(token))
    assert r.status_code == 200, r.text
    return r.json()


def test_me_without_profile(client, token, headers):
    r = client.get("/api/profile/me", headers=headers(token))
    assert r.status_code == 400
    assert r.json() == {"msg": "There is no profile for this user"}


def test_create_profile(with_profile):
    p = with_profile
    assert p["status"] == "Developer"
    assert p["company"] == "Acme"
    assert p["skills"] == ["python", "sql", "go"]
    assert p["social"] == {"twitter": "https://twitter.com/a"}
    assert p["experience"] == [] and p["education"] == []
    assert p["user"]["name"] == "A"
    assert set(p["user"]) == {"id", "name", "avatar"}


def test_update_profile_merges_only_supplied_fields(client, token, headers, with_profile):
    r = client.post(
        "/api/profile",
        json={"status": "Senior Developer", "skills": ["rust"], "linkedin": "https://linkedin.com/in/a"},
        headers=headers(token),
    )
    assert r.status_code == 200
    p = r.json()
    assert p["id"] == with_profile["id"]
    assert p["status"] == "Senior Developer"
    assert p["skills"] == ["rust"]
    assert p["company"] == "Acme"
    assert p["social"] == {"twitter": "https://twitter.com/a", "linkedin": "https://linkedin.com/in/a"}

    me = client.get("/api/profile/me", headers=headers(token)).json()
    assert me == p


def test_profile_requires_status_and_skills(client, token, headers):
    r = client.post("/api/profile", json={"skills": " , "}, headers=headers(token))
    assert r.status_code == 400
    assert [e["msg"] for e in r.json()["errors"]] == ["Status is required", "Skills is required"]


def test_profile_requires_token(client):
    r = client.post("/api/profile", json=PROFILE)
    assert r.status_code == 401


def test_list_and_get_by_user(client, register, headers):
    t1 = register(name="A", email="a@x.com")
    t2 = register(name="B", email="b@x.com")
    client.post("/api/profile", json=PROFILE, headers=headers(t1))
    client.post("/api/profile", json={**PROFILE, "status": "Student"}, headers=headers(t2))

    profiles = client.get("/api/profile").json()
    assert [p["user"]["name"] for p in profiles] == ["A", "B"]

    b_id = profiles[1]["user"]["id"]
    r = client.get(f"/api/profile/user/{b_id}")
    assert r.status_code == 200
    assert r.json()["status"] == "Student"


def test_get_by_unknown_user(client):
    r = client.get("/api/profile/user/does-not-exist")
    assert r.status_code == 400
    assert r.json() == {"msg": "Profile not found"}


def test_add_experience_goes_to_front(client, token, headers, with_profile):
    first = client.put("/api/profile/experience", json=EXPERIENCE, headers=headers(token)).json()
    second = client.put(
        "/api/profile/experience",
        json={**EXPERIENCE, "title": "Lead", "current": True},
        headers=headers(token),
    ).json()

    titles = [e["title"] for e in second["experience"]]
    assert titles == ["Lead", "Engineer"]
    assert second["experience"][0]["current"] is True
    assert second["experience"][1]["from"] == "2020-01-01"
    ids = [e["id"] for e in second["experience"]]
    assert len(set(ids)) == 2
    assert first["experience"][0]["id"] == ids[1]


def test_experience_validation(client, token, headers, with_profile):
    r = client.put("/api/profile/experience", json={"title": "x"}, headers=headers(token))
    assert r.status_code == 400
    assert [e["param"] for e in r.json()["errors"]] == ["company", "from"]


def test_experience_without_profile(client, token, headers):
    r = client.put("/api/profile/experience", json=EXPERIENCE, headers=headers(token))
    assert r.status_code == 400
    assert r.json() == {"msg": "There is no profile for this user"}


def test_delete_experience_then_repeat_is_not_found(client, token, headers, with_profile):
    client.put("/api/profile/experience", json={**EXPERIENCE, "title": "Old"}, headers=headers(token))
    p = client.put("/api/profile/experience", json=EXPERIENCE, headers=headers(token)).json()
    target = p["experience"][0]["id"]

    r = client.delete(f"/api/profile/experience/{target}", headers=headers(token))
    assert r.status_code == 200
    remaining = r.json()["experience"]
    assert [e["title"] for e in remaining] == ["Old"]
    assert target not in [e["id"] for e in remaining]

    again = client.delete(f"/api/profile/experience/{target}", headers=headers(token))
    assert again.status_code == 404
    assert again.json() == {"msg": "Experience not found"}

    # The unrelated entry is untouched.
    me = client.get("/api/profile/me", headers=headers(token)).json()
    assert [e["title"] for e in me["experience"]] == ["Old"]


def test_education_add_and_delete(client, token, headers, with_profile):
    p = client.put("/api/profile/education", json=EDUCATION, headers=headers(token)).json()
    assert p["education"][0]["school"] == "MIT"
    assert p["education"][0]["fieldofstudy"] == "CS"
    edu_id = p["education"][0]["id"]

    r = client.delete(f"/api/profile/education/{edu_id}", headers=headers(token))
    assert r.status_code == 200
    assert r.json()["education"] == []

    r = client.delete(f"/api/profile/education/{edu_id}", headers=headers(token))
    assert r.status_code == 404
    assert r.json() == {"msg": "Education not found"}


def test_education_validation(client, token, headers, with_profile):
    r = client.put("/api/profile/education", json={}, headers=headers(token))
    assert r.status_code == 400
    assert [e["msg"] for e in r.json()["errors"]] == [
        "School is required",
        "Degree is required",
        "Field of study is required",
        "From date is required",
    ]


def test_delete_account_cascades_profile_but_keeps_posts(client, token, headers, with_profile):
    post = client.post("/api/posts", json={"text": "hello"}, headers=headers(token)).json()

    r = client.delete("/api/profile", headers=headers(token))
    assert r.status_code == 200
    assert r.json() == {"msg": "User deleted"}

    assert client.get("/api/profile").json() == []
    login = client.post("/api/auth", json={"email": "a@x.com", "password": "secret1"})
    assert login.status_code == 400

    # Tokens are not revocable: the old token still passes the gate.
    other = client.post("/api/users", json={"name": "B", "email": "b@x.com", "password": "secret1"}).json()["token"]
    posts = client.get("/api/posts", headers=headers(other)).json()
    assert [p["id"] for p in posts] == [post["id"]]
    assert client.get("/api/posts", headers=headers(token)).status_code == 200
    assert client.get("/api/auth", headers=headers(token)).status_code == 404


def test_profile_upsert_with_deleted_accounts_token(client, token, headers):
    assert client.delete("/api/profile", headers=headers(token)).status_code == 200

    r = client.post("/api/profile", json={"status": "Dev", "skills": "py"}, headers=headers(token))
    assert r.status_code == 404
    assert r.json() == {"msg": "User not found"}
    assert client.get("/api/profile").json() == []
