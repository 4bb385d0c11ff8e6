from concurrent.futures import ThreadPoolExecutor

from englishpractice.settings import settings


def test_health_and_info(client, monkeypatch):
	monkeypatch.setattr(settings, "gemini_api_key", None)
	assert client.get("/api/health").json() == {"status": "ok"}
	info = client.get("/info").json()
	assert info["gemini_configured"] is False


def test_progress_starts_empty(client):
	r = client.get("/api/progress")
	assert r.status_code == 200
	assert r.json() == {
		"totalCompleted": 0,
		"totalTime": 0,
		"overallProgress": 0,
		"achievements": 0,
		"skills": {"reading": 0, "writing": 0, "listening": 0, "speaking": 0},
	}


def test_skill_update_is_clamped_and_persisted(client):
	r = client.put("/api/progress/skills/listening", json={"value": 140})
	assert r.status_code == 200
	assert r.json()["skills"]["listening"] == 100
	assert r.json()["overallProgress"] == 25

	again = client.get("/api/progress").json()
	assert again["skills"]["listening"] == 100


def test_unknown_skill_is_a_400(client):
	r = client.put("/api/progress/skills/grammar", json={"value": 50})
	assert r.status_code == 400
	assert "grammar" in r.json()["error"]


def test_time_and_completion(client):
	assert client.post("/api/progress/time", json={"minutes": 12}).json()["totalTime"] == 12
	r = client.post("/api/progress/time", json={"minutes": -3})
	assert r.status_code == 400
	assert "error" in r.json()

	for _ in range(5):
		state = client.post("/api/progress/complete").json()
	assert state["totalCompleted"] == 5
	assert state["achievements"] == 5
	assert state["totalTime"] == 12


def test_practice_quiz(client):
	r = client.post("/api/practice/quiz", json={"skill": "listening", "correct": 3, "total": 3, "minutes": 1})
	assert r.status_code == 200
	body = r.json()
	assert body["score"] == 100
	assert body["progress"]["skills"]["listening"] == 100
	assert body["progress"]["totalCompleted"] == 1


def test_practice_writing_requires_target_words(client):
	r = client.post("/api/practice/writing", json={"content": "only three words", "targetWords": 100})
	assert r.status_code == 400
	assert "100" in r.json()["error"]

	text = " ".join(["word"] * 100)
	r = client.post("/api/practice/writing", json={"content": text, "targetWords": 100, "minutes": 8})
	assert r.status_code == 200
	assert r.json()["wordCount"] == 100
	assert r.json()["progress"]["skills"]["writing"] == 75


def test_practice_speaking_and_evaluated(client):
	r = client.post("/api/practice/speaking", json={"elapsedSeconds": 60, "durationSeconds": 60})
	assert r.json()["progress"]["skills"]["speaking"] == 75

	r = client.post("/api/practice/evaluated", json={"type": "speaking", "score": 40, "minutes": 3})
	progress = r.json()["progress"]
	assert progress["skills"]["speaking"] == 40
	assert progress["totalCompleted"] == 2
	assert progress["totalTime"] == 4


def test_concurrent_completions_through_the_api(client):
	with ThreadPoolExecutor(max_workers=4) as pool:
		responses = list(pool.map(lambda _: client.post("/api/progress/complete"), range(8)))

	assert all(r.status_code == 200 for r in responses)
	assert sorted(r.json()["totalCompleted"] for r in responses) == list(range(1, 9))
	assert client.get("/api/progress").json()["totalCompleted"] == 8
