# app/services/oauth_service.py
# OAuth 공급자(google, github) 연동
# - 로그인 URL 생성
# - callback 의 code 를 access token 으로 교환 후 프로필 조회
# 반환 프로필 형식은 공급자와 상관없이 {"email", "first_name", "last_name"}
import logging
from typing import Dict, Optional
from urllib.parse import urlencode

import httpx

from app.config import settings
from app.errors import NotFound, Unauthorized

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"

GITHUB_AUTH_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_USER_URL = "https://api.github.com/user"
GITHUB_EMAILS_URL = "https://api.github.com/user/emails"

PROVIDERS = ("google", "github")


def _client_config(provider: str) -> Dict[str, Optional[str]]:
    if provider == "google":
        return {
            "client_id": settings.google_client_id,
            "client_secret": settings.google_client_secret,
            "redirect_uri": settings.google_callback_url,
        }
    if provider == "github":
        return {
            "client_id": settings.github_client_id,
            "client_secret": settings.github_client_secret,
            "redirect_uri": settings.github_callback_url,
        }
    raise NotFound(f"Unknown OAuth provider: {provider}", code="provider_not_found")


def authorization_url(provider: str) -> str:
    cfg = _client_config(provider)
    if provider == "google":
        params = {
            "client_id": cfg["client_id"],
            "redirect_uri": cfg["redirect_uri"],
            "response_type": "code",
            "scope": "openid email profile",
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    params = {
        "client_id": cfg["client_id"],
        "redirect_uri": cfg["redirect_uri"],
        "scope": "user:email",
    }
    return f"{GITHUB_AUTH_URL}?{urlencode(params)}"


def _google_profile(client: httpx.Client, code: str) -> Dict[str, Optional[str]]:
    cfg = _client_config("google")
    res = client.post(GOOGLE_TOKEN_URL, data={**cfg, "code": code, "grant_type": "authorization_code"})
    res.raise_for_status()
    access_token = res.json()["access_token"]

    res = client.get(GOOGLE_USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"})
    res.raise_for_status()
    info = res.json()
    return {
        "email": info.get("email"),
        "first_name": info.get("given_name"),
        "last_name": info.get("family_name"),
    }


def _github_profile(client: httpx.Client, code: str) -> Dict[str, Optional[str]]:
    cfg = _client_config("github")
    res = client.post(GITHUB_TOKEN_URL, data={**cfg, "code": code}, headers={"Accept": "application/json"})
    res.raise_for_status()
    access_token = res.json().get("access_token")
    if not access_token:
        raise Unauthorized("GitHub rejected the authorization code", code="oauth_failed")

    headers = {"Authorization": f"Bearer {access_token}", "Accept": "application/vnd.github+json"}
    info = client.get(GITHUB_USER_URL, headers=headers)
    info.raise_for_status()
    user = info.json()

    # 공개 이메일이 없으면 primary 이메일 조회
    email = user.get("email")
    if not email:
        emails = client.get(GITHUB_EMAILS_URL, headers=headers)
        emails.raise_for_status()
        primary = next((e for e in emails.json() if e.get("primary") and e.get("verified")), None)
        email = primary["email"] if primary else None

    # github 는 이름이 한 필드라 공백 기준으로 분리
    first_name, _, last_name = (user.get("name") or user.get("login") or "").partition(" ")
    return {
        "email": email,
        "first_name": first_name or None,
        "last_name": last_name or None,
    }


def fetch_profile(provider: str, code: str) -> Dict[str, Optional[str]]:
    """callback 으로 받은 code -> 공급자 프로필"""
    _client_config(provider)
    try:
        with httpx.Client(timeout=10) as client:
            if provider == "google":
                return _google_profile(client, code)
            return _github_profile(client, code)
    except httpx.HTTPError as e:
        logger.warning("[OAUTH] %s exchange failed: %s", provider, e)
        raise Unauthorized(f"{provider} authentication failed", code="oauth_failed") from e
