"""
HTTP client for the KFA match portal (www.joinkfa.com).

Two request shapes:
- JSON POSTs against /portal/mat/*.do listing endpoints
- Nexacro XML POST against SEARCH00.do for match detail (session auth required)

Every transport or parse failure is logged and returned as None so a single
bad item never aborts a crawl.
"""
from __future__ import annotations

import base64
import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, Optional

import httpx

from kfa_crawler.protocol import nexacro
from kfa_crawler.protocol.nexacro import Tables

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.joinkfa.com"
DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

MATCH_LIST_PATH = "/portal/mat/getMatchList.do"
MATCH_SINGLE_LIST_PATH = "/portal/mat/getMatchSingleList.do"
APPLY_TEAM_LIST_PATH = "/portal/mat/getApplyTeamList.do"
APPLY_PLAYER_LIST_PATH = "/portal/mat/getApplyPlayerList.do"
MATCH_INFO_PATH = "/portal/mat/getMatchInfo.do"
MATCH_DETAIL_PATH = f"{nexacro.SEARCH00_PATH}?CALL_TYPE=NEXACRO"


class KfaApiClient:
    """Async portal client; one instance (and one connection pool) per crawl run."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        nexacro_user: Optional[str] = None,
        nexacro_secret: Optional[str] = None,
        jsessionid: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.nexacro_user = nexacro_user
        self.nexacro_secret = nexacro_secret

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
            headers={
                "User-Agent": DEFAULT_USER_AGENT,
                "Accept": "application/json, text/html, */*",
                "Accept-Language": "ko-KR,ko;q=0.9",
                "Referer": f"{self.base_url}/service/portal/matchPortal.jsp",
            },
        )
        self._set_auth_cookies(jsessionid)

    @property
    def has_nexacro_auth(self) -> bool:
        return bool(self.nexacro_user) and bool(self.nexacro_secret)

    def _set_auth_cookies(self, jsessionid: Optional[str]) -> None:
        if not self.nexacro_secret:
            return
        self._client.cookies.set("state", nexacro.encode_state(self.nexacro_secret))
        if jsessionid:
            self._client.cookies.set("JSESSIONID", jsessionid)

    async def __aenter__(self) -> "KfaApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    # -- portal endpoints -------------------------------------------------

    async def get_match_list(
        self,
        year: str,
        mgc_idx: str = "",
        page: int = 1,
        page_size: int = 10,
        style: str = "",
    ) -> Optional[Any]:
        """Competition listing for one year / grade code (paged)."""
        return await self.post_json(
            MATCH_LIST_PATH,
            {
                "v_CURPAGENUM": str(page),
                "v_ROWCOUNTPERPAGE": str(page_size),
                "v_YEAR": year,
                "v_STYLE": style,
                "v_MGC_IDX": mgc_idx,
                "v_AREACODE": "",
                "v_SIGUNGU_CODE": "",
                "v_ITEM_CD": "",
                "v_TITLE": "",
                "v_TEAMID": "",
                "v_USER_ID": "",
                "v_ORDERBY": "",
            },
        )

    async def get_match_single_list(self, match_idx: str, year_month: str = "") -> Optional[Any]:
        return await self.post_json(
            MATCH_SINGLE_LIST_PATH,
            {
                "v_CURPAGENUM": "1",
                "v_ROWCOUNTPERPAGE": "1000",
                "v_MATCH_IDX": match_idx,
                "v_YEAR_MONTH": year_month,
                "v_TEAMID": "",
                "v_USER_ID": "",
                "v_ORDERBY": "",
            },
        )

    async def get_apply_team_list(self, match_idx: str) -> Optional[Any]:
        return await self.post_json(APPLY_TEAM_LIST_PATH, {"v_MATCH_IDX": match_idx})

    async def get_apply_player_list(self, match_idx: str, team_id: str, mgc_type: str = "S") -> Optional[Any]:
        return await self.post_json(
            APPLY_PLAYER_LIST_PATH,
            {"v_MATCH_IDX": match_idx, "v_TEAMID": team_id, "v_MGC_TYPE": mgc_type},
        )

    async def get_match_info(self, match_idx: str) -> Optional[Any]:
        return await self.post_json(MATCH_INFO_PATH, {"v_MATCH_IDX": match_idx})

    async def get_match_detail(self, match_idx: str, single_idx: str) -> Optional[Tables]:
        """Nexacro match detail; None without session credentials."""
        if not self.has_nexacro_auth:
            return None
        return await self.post_protocol(match_idx, single_idx)

    # -- transport ----------------------------------------------------------

    async def post_json(self, path: str, params: Dict[str, str]) -> Optional[Any]:
        try:
            response = await self._client.post(path, json=params)
            response.raise_for_status()
            body = response.text.strip()
            if not body or body == "{}":
                return None
            return response.json()
        except httpx.HTTPError as exc:
            logger.warning("[HTTP ERROR] %s: %s", path, exc)
            return None
        except ValueError as exc:
            logger.warning("[JSON ERROR] %s: %s", path, exc)
            return None

    async def post_protocol(self, match_idx: str, single_idx: str) -> Optional[Tables]:
        if not self.has_nexacro_auth:
            return None

        payload = nexacro.build_match_detail_request(
            match_idx, single_idx, self.nexacro_user, self.nexacro_secret
        )
        identity = base64.b64encode(self.nexacro_user.encode("utf-8")).decode("ascii")
        try:
            response = await self._client.post(
                MATCH_DETAIL_PATH,
                content=payload.encode("utf-8"),
                headers={"Content-Type": "text/xml; charset=UTF-8", "Gp_empl_id": identity},
            )
            response.raise_for_status()
            if not response.content.strip():
                return None
            return nexacro.parse_response(response.content)
        except httpx.HTTPError as exc:
            logger.warning("[HTTP ERROR] SEARCH00.do (%s): %s", single_idx, exc)
            return None
        except ET.ParseError as exc:
            logger.warning("[NEXACRO ERROR] SEARCH00.do (%s): %s", single_idx, exc)
            return None
