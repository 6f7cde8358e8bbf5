"""
session_store.py
================
Leitura e gravação de cookies para reaproveitar a sessão do navegador entre
execuções (o usuário faz login manualmente uma vez; as próximas execuções
já abrem logadas).

Formatos aceitos na leitura: JSON (lista ou {"cookies": [...]}, como exportado
pelo Playwright) e cookies.txt no formato Netscape.
"""

import json
import logging
import os
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

VALID_SAMESITE = ["Strict", "Lax", "None"]


HTTPONLY_PREFIX = "#HttpOnly_"


def _parse_netscape(lines: List[str]) -> List[Dict[str, Any]]:
    """
    Formato Netscape: domain, include_subdomains, path, secure, expiration,
    name, value. Linhas com prefixo #HttpOnly_ são cookies HttpOnly, não
    comentários; expiração 0 indica cookie de sessão.
    """
    cookies = []
    for line in lines:
        line = line.strip()
        http_only = line.startswith(HTTPONLY_PREFIX)
        if http_only:
            line = line[len(HTTPONLY_PREFIX):]
        elif line.startswith("#") or not line:
            continue
        parts = line.split("\t")
        if len(parts) >= 7:
            expires = int(parts[4]) if parts[4].isdigit() else -1
            cookies.append({
                "name": parts[5],
                "value": parts[6],
                "domain": parts[0],
                "path": parts[2],
                "expires": expires if expires > 0 else -1,
                "httpOnly": http_only,
                "secure": parts[3].upper() == "TRUE",
            })
    return cookies


def _clean(cookies: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Remove sameSite inválido e normaliza campos booleanos."""
    cleaned: List[Dict[str, Any]] = []
    for cookie in cookies:
        if not isinstance(cookie, dict) or "name" not in cookie:
            continue
        if "sameSite" in cookie and cookie["sameSite"] not in VALID_SAMESITE:
            del cookie["sameSite"]
        for bool_field in ["httpOnly", "secure", "session"]:
            if bool_field in cookie:
                cookie[bool_field] = str(cookie[bool_field]).lower() == "true"
        cleaned.append(cookie)
    return cleaned


def load_cookies(path: str) -> List[Dict[str, Any]]:
    """Lê cookies de um arquivo .json ou .txt. Retorna [] se ausente/inválido."""
    if not path or not os.path.exists(path):
        return []
    cookies: List[Dict[str, Any]] = []
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.endswith(".json"):
                data = json.load(f)
                if isinstance(data, list):
                    cookies = data
                elif isinstance(data, dict) and "cookies" in data:
                    cookies = data["cookies"]
            else:
                cookies = _parse_netscape(f.readlines())
    except (OSError, ValueError) as e:
        logger.error("Erro ao ler arquivo de cookies %s: %s", path, e)
        return []
    return _clean(cookies)


def save_cookies(path: str, cookies: List[Dict[str, Any]]) -> bool:
    """Grava os cookies da sessão em JSON. Retorna False em caso de erro."""
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(cookies, f, indent=2)
        return True
    except (OSError, TypeError) as e:
        logger.error("Erro ao gravar cookies em %s: %s", path, e)
        return False
