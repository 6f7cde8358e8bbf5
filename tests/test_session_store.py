import json

from domainfinder.core.session_store import load_cookies, save_cookies


def test_load_cookies_json(tmp_path):
    d = tmp_path / "cookies.json"
    cookies_data = [{"name": "sp_dc", "value": "val", "domain": ".spotify.com", "path": "/"}]
    d.write_text(json.dumps(cookies_data))

    parsed = load_cookies(str(d))
    assert len(parsed) == 1
    assert parsed[0]["name"] == "sp_dc"


def test_load_cookies_json_wrapped(tmp_path):
    d = tmp_path / "cookies.json"
    d.write_text(json.dumps({"cookies": [{"name": "a", "value": "1", "domain": "x.com", "path": "/"}]}))
    assert load_cookies(str(d))[0]["name"] == "a"


def test_load_cookies_txt(tmp_path):
    d = tmp_path / "cookies.txt"
    # Formato Netscape: domain, flag, path, secure, expiration, name, value
    d.write_text("# Netscape HTTP Cookie File\n.spotify.com\tTRUE\t/\tTRUE\t1700000000\tsp_t\tvalue\n")

    parsed = load_cookies(str(d))
    assert len(parsed) == 1
    assert parsed[0]["name"] == "sp_t"
    assert parsed[0]["value"] == "value"
    assert parsed[0]["domain"] == ".spotify.com"
    assert parsed[0]["path"] == "/"
    assert parsed[0]["secure"] is True
    assert parsed[0]["expires"] == 1700000000
    # A segunda coluna é include_subdomains, não HttpOnly
    assert parsed[0]["httpOnly"] is False


def test_load_cookies_txt_httponly_and_session(tmp_path):
    d = tmp_path / "cookies.txt"
    d.write_text(
        "# Netscape HTTP Cookie File\n"
        ".spotify.com\tTRUE\t/\tFALSE\t0\tsp_dc\tabc\n"
        "#HttpOnly_.spotify.com\tTRUE\t/\tTRUE\t1700000000\tsp_key\tk\n"
    )

    parsed = {c["name"]: c for c in load_cookies(str(d))}
    assert set(parsed) == {"sp_dc", "sp_key"}
    # Expiração 0 é cookie de sessão
    assert parsed["sp_dc"]["expires"] == -1
    assert parsed["sp_dc"]["httpOnly"] is False
    assert parsed["sp_key"]["httpOnly"] is True
    assert parsed["sp_key"]["domain"] == ".spotify.com"
    assert parsed["sp_key"]["secure"] is True


def test_load_cookies_cleans_fields(tmp_path):
    d = tmp_path / "cookies.json"
    d.write_text(json.dumps([
        {"name": "a", "value": "1", "domain": "x.com", "path": "/", "sameSite": "unspecified", "secure": "true"},
    ]))
    parsed = load_cookies(str(d))
    assert "sameSite" not in parsed[0]
    assert parsed[0]["secure"] is True


def test_load_cookies_missing_or_corrupt(tmp_path):
    assert load_cookies(str(tmp_path / "nao_existe.json")) == []
    assert load_cookies("") == []
    d = tmp_path / "cookies.json"
    d.write_text("{corrompido")
    assert load_cookies(str(d)) == []


def test_save_then_load(tmp_path):
    path = tmp_path / ".config" / "cookies.json"
    cookies = [{"name": "sp_dc", "value": "v", "domain": ".spotify.com", "path": "/", "sameSite": "Lax"}]
    assert save_cookies(str(path), cookies) is True
    assert load_cookies(str(path)) == cookies
