# backend/cliq_notion/notion/client.py

"""
Notion API との通信を担当するクライアントモジュール。

ユーザーごとの OAuth トークン（または共有接続のトークン）を受け取って呼び出す。
"""

from typing import Any, Dict, List, Optional

import httpx

from .config import NotionConfig, get_notion_config


class NotionClientError(RuntimeError):
    """Notion クライアント全般の例外。"""


class NotionAuthError(NotionClientError):
    """認証・権限関連のエラー。"""


class NotionAPIError(NotionClientError):
    """その他 Notion API 呼び出し時のエラー。"""


class NotionClient:
    """
    Notion API の薄いラッパークライアント。

    - ページ検索（キーワード検索 / 最終更新順の一覧）
    - ページの作成
    - ページのプロパティ更新
    """

    def __init__(
        self,
        access_token: str,
        *,
        config: Optional[NotionConfig] = None,
    ) -> None:
        self.config = config or get_notion_config()
        self._access_token = access_token
        self._timeout = float(self.config.timeout_seconds)

    def _build_headers(self) -> Dict[str, str]:
        """
        Notion API 呼び出しに必要なヘッダーを構築。
        """
        return {
            "Authorization": f"Bearer {self._access_token}",
            "Notion-Version": self.config.api_version,
            "Content-Type": "application/json",
        }

    def _raise_for_status(self, response: httpx.Response) -> None:
        """
        HTTP レスポンスコードに応じて適切な例外を投げる。
        """
        if response.status_code == 401:
            raise NotionAuthError("Unauthorized. The Notion token is invalid or revoked.")
        if response.status_code == 403:
            raise NotionAuthError("Forbidden. Check Notion integration permissions.")
        if response.status_code >= 400:
            raise NotionAPIError(
                f"Notion API error: {response.status_code} {response.text}"
            )

    def _json(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise NotionAPIError("Notion API returned a non-JSON response.") from exc
        if not isinstance(data, dict):
            raise NotionAPIError("Unexpected Notion API response format: not an object.")
        return data

    def search(
        self,
        query: Optional[str] = None,
        *,
        sort_by_last_edited: bool = False,
        page_size: int = 20,
    ) -> List[Dict[str, Any]]:
        """
        ワークスペース内のページを検索する。

        query を省略すると全ページが対象になる。
        sort_by_last_edited=True の場合は最終更新日時の降順で返す。

        返り値は Notion API の生のページオブジェクトのリスト。
        上位レイヤー（service.py）で内部モデルに変換する。
        """
        url = f"{self.config.api_base_url}/search"

        payload: Dict[str, Any] = {
            "filter": {"property": "object", "value": "page"},
            "page_size": page_size,
        }
        if query:
            payload["query"] = query
        if sort_by_last_edited:
            payload["sort"] = {"direction": "descending", "timestamp": "last_edited_time"}

        try:
            response = httpx.post(
                url,
                headers=self._build_headers(),
                json=payload,
                timeout=self._timeout,
            )
        except httpx.RequestError as exc:
            raise NotionClientError(f"Failed to call Notion API: {exc}") from exc

        self._raise_for_status(response)

        results = self._json(response).get("results", [])
        if not isinstance(results, list):
            raise NotionAPIError("Unexpected Notion API response format: 'results' is not a list.")

        return results

    def create_page(
        self,
        title: str,
        *,
        content: Optional[str] = None,
        parent_page_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        タイトルと本文（1 段落）だけのページを作成する。

        parent_page_id を省略した場合はワークスペース直下に作成する。
        """
        url = f"{self.config.api_base_url}/pages"

        body: Dict[str, Any] = {
            "properties": {
                "title": {"title": [{"text": {"content": title}}]},
            },
        }
        if content:
            body["children"] = [
                {
                    "object": "block",
                    "type": "paragraph",
                    "paragraph": {"rich_text": [{"text": {"content": content}}]},
                }
            ]
        if parent_page_id:
            body["parent"] = {"page_id": parent_page_id}
        else:
            body["parent"] = {"type": "workspace", "workspace": True}

        try:
            response = httpx.post(
                url,
                headers=self._build_headers(),
                json=body,
                timeout=self._timeout,
            )
        except httpx.RequestError as exc:
            raise NotionClientError(f"Failed to create Notion page: {exc}") from exc

        self._raise_for_status(response)
        return self._json(response)

    def update_page_properties(self, page_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        """
        ページのプロパティを更新する。
        """
        url = f"{self.config.api_base_url}/pages/{page_id}"

        body = {"properties": properties}

        try:
            response = httpx.patch(
                url,
                headers=self._build_headers(),
                json=body,
                timeout=self._timeout,
            )
        except httpx.RequestError as exc:
            raise NotionClientError(f"Failed to update Notion page: {exc}") from exc

        self._raise_for_status(response)
        return self._json(response)
