from voxchat_providers.base.http import close_all_clients, get_httpx_client


def test_clients_pooled_by_purpose():
    chat = get_httpx_client("chat")
    assert get_httpx_client("chat") is chat
    stream = get_httpx_client("stream")
    assert stream is not chat


def test_close_all_clients():
    chat = get_httpx_client("chat")
    close_all_clients()
    assert chat.is_closed
    fresh = get_httpx_client("chat")
    assert fresh is not chat
    assert not fresh.is_closed
