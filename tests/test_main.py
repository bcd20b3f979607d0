import config


def test_demo_app_routes(monkeypatch):
    monkeypatch.setattr(config, "GITHUB_TOKEN", None)
    monkeypatch.setattr(config, "GITHUB_REPO", None)
    from app.main import create_app

    client = create_app().test_client()

    assert client.get("/health").get_json() == {"status": "ok"}
    assert client.get("/boom").status_code == 500
