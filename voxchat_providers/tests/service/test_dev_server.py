from voxchat_providers.service import dev_server


def test_dev_server_reads_environment(monkeypatch):
    seen = {}
    monkeypatch.setattr(dev_server.uvicorn, "run", lambda app, **kw: seen.update(app=app, **kw))
    monkeypatch.delenv("VOXCHAT_SERVICE_HOST", raising=False)
    monkeypatch.setenv("VOXCHAT_SERVICE_PORT", "9100")
    monkeypatch.setenv("VOXCHAT_SERVICE_RELOAD", "TRUE")
    dev_server.main()
    assert seen == {
        "app": "voxchat_providers.service.app:create_app",
        "factory": True,
        "host": "127.0.0.1",
        "port": 9100,
        "reload": True,
    }


def test_dev_server_defaults(monkeypatch):
    seen = {}
    monkeypatch.setattr(dev_server.uvicorn, "run", lambda app, **kw: seen.update(kw))
    monkeypatch.setenv("VOXCHAT_SERVICE_PORT", "not-a-port")
    monkeypatch.delenv("VOXCHAT_SERVICE_RELOAD", raising=False)
    monkeypatch.delenv("VOXCHAT_SERVICE_HOST", raising=False)
    dev_server.main()
    assert seen["port"] == 8092
    assert seen["reload"] is False


def test_importing_the_bridge_builds_no_gateway():
    import voxchat_providers.service.app as bridge

    assert not hasattr(bridge, "app")
    assert bridge.create_app().state.gateway is not bridge.create_app().state.gateway
