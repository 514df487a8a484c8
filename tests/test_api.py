import os

from fastapi.testclient import TestClient

from debatecoach.config import Settings
from debatecoach.main import create_app


def test_health(client):
    rv = client.get("/health")
    assert rv.status_code == 200
    assert rv.json() == {"ok": True}


# ---------- /topics ----------
def test_topics_json(client, llm):
    llm.reply = '["A", "B", ""]'
    rv = client.get("/topics")
    assert rv.status_code == 200
    assert rv.json() == {"topics": ["A", "B"]}
    assert llm.calls[0]["temperature"] == 0.6


def test_topics_line_fallback(client, llm):
    llm.reply = "1. Ban phones in class\n- Lower the voting age\n\n"
    rv = client.get("/topics")
    assert rv.json()["topics"] == ["Ban phones in class", "Lower the voting age"]


def test_topics_upstream_failure(client, llm, upstream_error):
    llm.fail_with = upstream_error
    rv = client.get("/topics")
    assert rv.status_code == 500
    assert rv.json() == {"error": "Failed to generate topics", "details": "429 Too Many Requests"}


# ---------- /prep ----------
def test_prep_with_user_text(client, llm):
    rv = client.post("/prep", json={"topic": "School uniforms", "stance": "con", "difficulty": "Hard",
                                    "userText": "  help me open  "})
    assert rv.status_code == 200
    assert rv.json() == {"reply": "stub reply"}
    call = llm.calls[0]
    assert call["messages"] == [{"role": "user", "content": "help me open"}]
    assert 'Topic: "School uniforms"' in call["system"]
    assert "Student stance: CON" in call["system"]
    assert "deeper reasoning" in call["system"]


def test_prep_with_history(client, llm):
    history = [{"role": "system", "content": f"m{i}"} for i in range(14)]
    history.append({"role": "assistant", "content": "last"})
    history.append({"content": "no role"})
    rv = client.post("/prep", json={"messages": history})
    assert rv.status_code == 200
    sent = llm.calls[0]["messages"]
    assert len(sent) == 12
    assert sent[-1] == {"role": "assistant", "content": "last"}
    assert sent[0] == {"role": "user", "content": "m3"}


def test_prep_missing_input(client, llm):
    rv = client.post("/prep", json={"topic": "x", "userText": "   "})
    assert rv.status_code == 400
    assert rv.json() == {"error": "Missing messages or userText"}
    assert llm.calls == []


def test_prep_upstream_failure(client, llm, upstream_error):
    llm.fail_with = upstream_error
    rv = client.post("/prep", json={"userText": "hi"})
    assert rv.status_code == 500
    assert rv.json()["error"] == "Prep failed"


# ---------- /ask ----------
def test_ask(client, llm):
    rv = client.post("/ask", json={"topic": "Homework", "userText": "Homework builds habits."})
    assert rv.status_code == 200
    call = llm.calls[0]
    assert call["messages"] == [{"role": "user", "content": "My argument:\nHomework builds habits."}]
    assert "Student stance: PRO (so you argue the opposite)." in call["system"]
    assert "Reply in clear English with solid reasoning." in call["system"]


def test_ask_missing_text(client, llm):
    rv = client.post("/ask", json={"topic": "Homework", "userText": 12})
    assert rv.status_code == 400
    assert rv.json() == {"error": "Missing userText"}


def test_ask_message_is_clipped(client, llm):
    client.post("/ask", json={"userText": "x" * 7000})
    assert len(llm.calls[0]["messages"][0]["content"]) == 6000


# ---------- /feedback ----------
def test_feedback(client, llm):
    body = {
        "topic": "Uniforms",
        "studentSide": "con",
        "stance": "PRO",
        "mode": "DETAILED",
        "turns": [
            {"studentTranscript": "one two three four five six", "recordingMs": 60000, "aiReply": "no"},
            "garbage",
        ],
    }
    rv = client.post("/feedback", json=body)
    assert rv.status_code == 200
    data = rv.json()
    assert data["reply"] == "stub reply"
    assert data["meta"] == {"totalWpm": 6, "totalWords": 6, "totalMs": 60000, "turns": 1, "mode": "detailed"}
    call = llm.calls[0]
    assert call["temperature"] == 0.4
    assert "Student side: CON." in call["system"]
    assert "detailed teacher-style feedback" in call["system"]
    assert call["messages"][0]["content"].startswith("Here is the full session data.\nOverall estimated WPM: 6")


def test_feedback_unknown_wpm(client, llm):
    rv = client.post("/feedback", json={"turns": [{"studentTranscript": "hi"}]})
    meta = rv.json()["meta"]
    assert meta["totalWpm"] is None
    assert meta["mode"] == "short"


def test_feedback_without_turns(client, llm):
    for body in ({}, {"turns": []}, {"turns": "nope"}, {"turns": [1, 2]}):
        rv = client.post("/feedback", json=body)
        assert rv.status_code == 400
        assert rv.json() == {"error": "No turns provided"}
    assert llm.calls == []


def test_feedback_upstream_failure(client, llm, upstream_error):
    llm.fail_with = upstream_error
    rv = client.post("/feedback", json={"turns": [{"studentTranscript": "hi", "recordingMs": 1000}]})
    assert rv.status_code == 500
    assert rv.json()["error"] == "Feedback failed"


# ---------- /stt ----------
def test_stt(client, llm, settings):
    rv = client.post("/stt", files={"audio": ("speech.webm", b"\1" * 3000, "audio/webm")})
    assert rv.status_code == 200
    assert rv.json() == {"text": "hello world"}
    assert llm.transcribed[0]["path"].endswith(".webm")
    assert os.listdir(settings.tmp_dir) == []


def test_stt_missing_file(client, llm):
    rv = client.post("/stt")
    assert rv.status_code == 400
    assert rv.json() == {"error": "Missing audio file"}


def test_stt_too_small(client, llm, settings):
    rv = client.post("/stt", files={"audio": ("blob", b"\1" * 100, "audio/ogg")})
    assert rv.status_code == 400
    assert rv.json()["error"].startswith("Audio too small")
    assert os.listdir(settings.tmp_dir) == []


def test_stt_upstream_status(client, llm, settings, upstream_error):
    llm.fail_with = upstream_error
    rv = client.post("/stt", files={"audio": ("clip.mp4", b"\1" * 3000, "audio/mp4")})
    assert rv.status_code == 429
    assert rv.json() == {"error": "STT failed", "details": "429 Too Many Requests"}
    assert os.listdir(settings.tmp_dir) == []


# ---------- boundary ----------
def test_invalid_body_envelope(client):
    rv = client.post("/ask", json=["not", "an", "object"])
    assert rv.status_code == 400
    assert rv.json()["error"] == "Invalid request body"


def test_body_too_large(settings, llm):
    settings.max_body_bytes = 100
    client = TestClient(create_app(settings, llm=llm))
    rv = client.post("/ask", json={"userText": "x" * 500})
    assert rv.status_code == 413
    assert llm.calls == []


def test_missing_api_key(tmp_path):
    client = TestClient(create_app(Settings(openai_api_key=None, tmp_dir=str(tmp_path))))
    rv = client.post("/ask", json={"userText": "hi"})
    assert rv.status_code == 500
    assert rv.json() == {"error": "Service not configured", "details": "Missing OPENAI_API_KEY"}


def test_spa_fallback(client, settings):
    os.makedirs(settings.public_dir)
    with open(os.path.join(settings.public_dir, "index.html"), "w") as f:
        f.write("<html>app</html>")
    with open(os.path.join(settings.public_dir, "app.js"), "w") as f:
        f.write("console.log(1)")

    assert client.get("/practice/session").text == "<html>app</html>"
    assert client.get("/app.js").text == "console.log(1)"
    assert client.get("/").text == "<html>app</html>"


def test_unknown_path_without_frontend(client):
    rv = client.get("/nothing-here")
    assert rv.status_code == 404
    assert rv.json() == {"error": "Not found"}


# ---------- error envelope ----------
def test_stt_unexpected_error_is_enveloped(client, llm, settings):
    llm.fail_with = RuntimeError("decoder crashed")
    rv = client.post("/stt", files={"audio": ("clip.wav", b"\1" * 3000, "audio/wav")})
    assert rv.status_code == 500
    assert rv.json() == {"error": "STT failed", "details": "decoder crashed"}
    assert os.listdir(settings.tmp_dir) == []


def test_topics_unexpected_error_is_enveloped(client, llm):
    llm.fail_with = ValueError("bad payload")
    rv = client.get("/topics")
    assert rv.status_code == 500
    assert rv.json() == {"error": "Failed to generate topics", "details": "bad payload"}


def test_ask_unexpected_error_is_enveloped(client, llm):
    llm.fail_with = KeyError("choices")
    rv = client.post("/ask", json={"userText": "hi"})
    assert rv.status_code == 500
    assert rv.json()["error"] == "Ask failed"


def test_validation_runs_before_missing_key(tmp_path):
    client = TestClient(create_app(Settings(openai_api_key=None, tmp_dir=str(tmp_path))))
    assert client.post("/ask", json={"userText": ""}).json() == {"error": "Missing userText"}
    assert client.post("/feedback", json={"turns": []}).status_code == 400
    assert client.post("/prep", json={}).status_code == 400
    rv = client.post("/stt")
    assert rv.status_code == 400
    assert rv.json() == {"error": "Missing audio file"}


def test_chunked_body_too_large(settings, llm):
    settings.max_body_bytes = 100
    client = TestClient(create_app(settings, llm=llm))
    chunks = (part for part in [b'{"userText": "', b"x" * 500, b'"}'])
    rv = client.post("/ask", content=chunks, headers={"content-type": "application/json"})
    assert rv.status_code == 413
    assert rv.json() == {"error": "Request body too large"}
    assert llm.calls == []


def test_small_body_passes_limit(settings, llm):
    settings.max_body_bytes = 100
    client = TestClient(create_app(settings, llm=llm))
    assert client.post("/ask", json={"userText": "hi"}).status_code == 200


def test_method_not_allowed_is_enveloped(client):
    rv = client.post("/no-such-route")
    assert rv.status_code == 405
    assert rv.json() == {"error": "Method Not Allowed"}
