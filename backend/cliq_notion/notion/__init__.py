# backend/cliq_notion/notion/__init__.py

"""
Notion 連携用モジュール群。

主な責務:
- ユーザーごとのトークンで Notion API を呼び出す（client）
- API レスポンスをウィジェット向けモデルに変換する（service）
- タスク / ドキュメント / 検索 / Webhook のエンドポイントを公開する（router）
"""
