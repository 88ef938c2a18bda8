def _submit(client, auth, answer="hola", is_valid=True):
	return client.post("/user/submit", json={"answer": answer, "isValid": is_valid}, headers=auth)


def _badge_ids(stats):
	return {b["id"] for b in stats["badges"]}


def test_profile_returns_user_with_stats(client, auth) -> None:
	response = client.get("/user/profile", headers=auth)

	assert response.status_code == 200
	user = response.json()["user"]
	assert user["email"] == "ana@example.com"
	assert user["answers"] == []
	assert user["googleId"] is None
	assert user["stats"]["totalAnswers"] == 0
	assert user["stats"]["accuracy"] == 0
	assert user["stats"]["badges"] == []


def test_submit_correct_answer_adds_ten_points(client, auth) -> None:
	response = _submit(client, auth)

	assert response.status_code == 200
	assert response.json() == {
		"error": False,
		"message": "Correct! +10 points",
		"score": 10,
		"totalAnswers": 1,
	}


def test_submit_wrong_answer_keeps_score(client, auth) -> None:
	_submit(client, auth)

	response = _submit(client, auth, answer="adios", is_valid=False)

	assert response.json()["score"] == 10
	assert response.json()["totalAnswers"] == 2
	assert response.json()["message"] == "Not quite right. Keep trying!"


def test_ten_correct_answers_earn_streak_badges(client, auth) -> None:
	for _ in range(10):
		_submit(client, auth)

	stats = client.get("/user/stats", headers=auth).json()["stats"]

	assert stats["score"] == 100
	assert stats["streak"] == 10
	assert stats["accuracy"] == 100.0
	assert {"first_answer", "perfect_streak", "century"} <= _badge_ids(stats)
	assert "dedicated" not in _badge_ids(stats)


def test_duplicate_submissions_are_both_recorded(client, auth) -> None:
	_submit(client, auth, answer="rojo")
	response = _submit(client, auth, answer="rojo")

	assert response.json()["score"] == 20
	assert response.json()["totalAnswers"] == 2


def test_answers_are_returned_in_submission_order(client, auth) -> None:
	_submit(client, auth, answer="uno", is_valid=True)
	_submit(client, auth, answer="dos", is_valid=False)
	_submit(client, auth, answer="  tres  ", is_valid=True)

	body = client.get("/user/answers", headers=auth).json()

	assert body["message"] == "Answers found"
	assert [a["answer"] for a in body["answers"]] == ["uno", "dos", "tres"]
	assert [a["isValid"] for a in body["answers"]] == [True, False, True]
	assert body["stats"]["streak"] == 1
	assert body["stats"]["accuracy"] == 66.67


def test_answers_empty_message(client, auth) -> None:
	body = client.get("/user/answers", headers=auth).json()

	assert body["message"] == "No answers yet"
	assert body["answers"] == []


def test_submit_requires_answer_text(client, auth) -> None:
	response = client.post("/user/submit", json={"answer": "   ", "isValid": True}, headers=auth)

	assert response.status_code == 400
	assert response.json()["details"][0]["msg"] == "Answer is required"


def test_edit_profile_updates_fields(client, auth) -> None:
	response = client.put("/user/editProfile", json={"name": "  Ana Maria ", "difficulty": "hard"}, headers=auth)

	assert response.status_code == 200
	assert response.json()["user"]["name"] == "Ana Maria"
	assert response.json()["user"]["difficulty"] == "hard"


def test_edit_profile_rejects_unknown_difficulty(client, auth) -> None:
	response = client.put("/user/editProfile", json={"difficulty": "impossible"}, headers=auth)

	assert response.status_code == 400
	assert response.json()["details"][0]["field"] == "difficulty"


def test_edit_profile_password_is_rehashed(client, auth) -> None:
	client.put("/user/editProfile", json={"password": "NewSecret9"}, headers=auth)

	old = client.put("/user/login", json={"email": "ana@example.com", "password": "Secret123"})
	new = client.put("/user/login", json={"email": "ana@example.com", "password": "NewSecret9"})

	assert old.status_code == 401
	assert new.status_code == 200


def test_verify_password(client, auth) -> None:
	ok = client.put("/user/verifyPassword", json={"password": "Secret123"}, headers=auth)
	wrong = client.put("/user/verifyPassword", json={"password": "Nope12345"}, headers=auth)
	missing = client.put("/user/verifyPassword", json={}, headers=auth)

	assert ok.status_code == 200
	assert ok.json()["message"] == "Password verified"
	assert wrong.status_code == 401
	assert wrong.json()["message"] == "Incorrect password"
	assert missing.status_code == 400


def test_stats_include_member_since_and_difficulty(client, auth) -> None:
	stats = client.get("/user/stats", headers=auth).json()["stats"]

	assert stats["difficulty"] == "easy"
	assert stats["memberSince"]


def test_dashboard_and_leaderboard_are_public(client, auth) -> None:
	_submit(client, auth)

	dashboard = client.get("/user/dashboard").json()
	board = client.get("/user/leaderboard", params={"limit": 5}).json()

	assert dashboard["count"] == 1
	assert dashboard["users"] == [{"name": "Ana Lopez", "score": 10, "difficulty": "easy"}]
	assert board["leaderboard"] == [
		{"rank": 1, "name": "Ana Lopez", "score": 10, "difficulty": "easy", "accuracy": 100.0}
	]


def test_leaderboard_rejects_out_of_range_limit(client) -> None:
	response = client.get("/user/leaderboard", params={"limit": 0})

	assert response.status_code == 400
	assert response.json()["details"][0]["field"] == "limit"
